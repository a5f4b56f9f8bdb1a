"""
EVALs Suite for lawkit - Degenerate and Pathological Inputs

Philosophy:
    These tests push every analyzer toward its failure modes: empty input,
    zeros, constant values, extreme magnitudes and mixed-locale text. A law
    that cannot be evaluated must fail with a typed LawkitError, never with
    a numpy or numba error, and never with a silently wrong result.

Run tests:
    pytest tests/evals/ -v                    # Run all evals
    pytest tests/ --ignore=tests/evals/      # Run regular tests only
"""
