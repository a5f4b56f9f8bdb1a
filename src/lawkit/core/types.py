"""Type aliases for lawkit."""

from typing import TypeAlias

import numpy as np
from numpy.typing import NDArray

# Array types
FloatArray: TypeAlias = NDArray[np.float64]
