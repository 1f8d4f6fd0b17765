import numpy as np
import pytest
from poisson_glm_mcmc.utils import _validation, check_inputs


def test_validate_target_shape_is_1d_numpy_array():
    arr = np.array([0, 1, 3])
    _validation._validate_target_shape_is_1d_numpy_array(arr)
    arr2 = np.array([[0, 1], [1, 0]])
    with pytest.raises(ValueError):
        _validation._validate_target_shape_is_1d_numpy_array(arr2)
    with pytest.raises(ValueError):
        _validation._validate_target_shape_is_1d_numpy_array([0, 1])


def test_validate_target_is_integer_subtype():
    arr = np.array([0, 1, 7], dtype=np.int32)
    _validation._validate_target_is_integer_subtype(arr)
    arr2 = np.array([0.1, 1.2, 1.0])
    with pytest.raises(ValueError):
        _validation._validate_target_is_integer_subtype(arr2)


def test_validate_counts_are_non_negative():
    _validation._validate_counts_are_non_negative(np.array([0, 4, 12]))
    with pytest.raises(ValueError, match="non-negative"):
        _validation._validate_counts_are_non_negative(np.array([0, -1, 2]))


def test_validate_predictor_is_1d_finite_array():
    _validation._validate_predictor_is_1d_finite_array(np.array([-0.5, 0.5]))
    with pytest.raises(ValueError):
        _validation._validate_predictor_is_1d_finite_array(np.zeros((2, 2)))
    with pytest.raises(ValueError, match="finite"):
        _validation._validate_predictor_is_1d_finite_array(np.array([0.0, np.nan]))


def test_check_inputs_rejects_mismatched_lengths():
    with pytest.raises(ValueError, match="same number of rows"):
        check_inputs(np.array([1, 2, 3]), np.array([0.0, 1.0]))


def test_check_inputs_rejects_empty():
    with pytest.raises(ValueError, match="at least one"):
        check_inputs(np.array([], dtype=int), np.array([], dtype=float))


def test_check_inputs_accepts_valid_counts():
    check_inputs(np.array([0, 3, 10]), np.array([-1.0, 0.0, 1.0]))
