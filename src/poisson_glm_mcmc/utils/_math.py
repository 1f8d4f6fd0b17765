"""Platform-agnostic math wrappers shared by the PyMC model and the NumPy post-processing."""

from typing import Optional, Union
from types import ModuleType

import numpy as np

try:
    import pytensor.tensor as pt

    _has_pytensor = True
except ImportError:
    pt: Optional[ModuleType] = None
    _has_pytensor = False


def exp(
    x: Union[np.ndarray, float, int],
) -> Union[np.ndarray, float]:
    """Inverse log link: ``pt.exp`` for symbolic tensors, ``np.exp`` otherwise."""
    if (
        _has_pytensor
        and pt is not None
        and hasattr(pt, "TensorVariable")
        and isinstance(x, pt.TensorVariable)
    ):
        return pt.exp(x)  # type: ignore[attr-defined]
    return np.exp(x)


def linear_predictor(a, b, x_centered):
    """Return ``a + b * x`` with broadcasting over draws (rows) and observations (columns)."""
    a_arr = np.asarray(a, dtype=float)
    b_arr = np.asarray(b, dtype=float)
    x_arr = np.asarray(x_centered, dtype=float)
    if a_arr.ndim == 0 and b_arr.ndim == 0:
        return a_arr + b_arr * x_arr
    return a_arr[:, None] + b_arr[:, None] * x_arr[None, :]
