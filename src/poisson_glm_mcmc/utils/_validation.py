import numpy as np


def check_inputs(y: np.ndarray, x_centered: np.ndarray) -> None:
    _validate_target_shape_is_1d_numpy_array(y)
    _validate_target_is_integer_subtype(y)
    _validate_counts_are_non_negative(y)

    _validate_predictor_is_1d_finite_array(x_centered)

    _validate_input_shape(y, x_centered)


def _validate_input_shape(y, x_centered):
    """Input shapes should be:
    y:           (N,) where N is number of observations
    x_centered:  (N,)"""
    if y.shape[0] == 0:
        raise ValueError("`y` must contain at least one observation.")
    if x_centered.shape[0] != y.shape[0]:
        raise ValueError("`y` and `x_centered` must have the same number of rows.")


def _validate_predictor_is_1d_finite_array(x_centered):
    if not isinstance(x_centered, np.ndarray) or x_centered.ndim != 1:
        raise ValueError("`x_centered` must be a 1-D numpy array.")
    if not np.all(np.isfinite(x_centered)):
        raise ValueError("`x_centered` must contain only finite values.")


def _validate_counts_are_non_negative(y):
    if np.any(y < 0):
        raise ValueError("`y` must contain only non-negative counts.")


def _validate_target_is_integer_subtype(y):
    if not np.issubdtype(y.dtype, np.integer):
        raise ValueError("`y` must be integer dtype (counts).")


def _validate_target_shape_is_1d_numpy_array(y):
    if not isinstance(y, np.ndarray) or y.ndim != 1:
        raise ValueError("`y` must be a 1-D numpy array.")
