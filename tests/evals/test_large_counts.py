"""
EVAL: Integer magnitudes far beyond ordinary event counts.

Financial ledgers routinely hold integers in the billions or beyond the
64-bit range. Poisson analysis must stay sparse for the former and fail
with a typed error for the latter, and the integration analyzer must record
the failure and carry on with the other laws.
"""

import numpy as np
import pytest

from lawkit import ComputationError, IntegrationResult, PoissonResult, law


class TestBeyondInt64:
    """EVAL: integer-valued floats that do not fit a 64-bit count."""

    def test_poisson_raises_typed_error(self):
        with pytest.raises(ComputationError) as exc_info:
            law("poisson", [1e300, 1e300, 2.0, 3.0])
        assert exc_info.value.statistic == "counts"

    def test_analyze_records_poisson_failure(self):
        results = law("analyze", [10**19 + i for i in range(30)])
        integration = results[-1]
        assert isinstance(integration, IntegrationResult)
        assert "poisson" in integration.failed_laws
        assert "poisson" not in integration.laws_analyzed
        assert "benf" in integration.laws_analyzed


class TestBillions:
    """EVAL: in-range counts around 1e9 are binned without a dense histogram."""

    def test_poisson_completes(self):
        counts = 1_000_000_000 + np.arange(200)
        [result] = law("poisson", counts)
        assert isinstance(result, PoissonResult)
        assert result.lambda_ == pytest.approx(1_000_000_099.5)
        assert result.dispersion == "under"

    def test_analyze_includes_poisson(self):
        counts = 1_000_000_000 + np.arange(200)
        results = law("analyze", counts, {"laws_to_check": ["benford", "poisson"]})
        integration = results[-1]
        assert integration.laws_analyzed == ("benf", "poisson")
        assert integration.failed_laws == {}
