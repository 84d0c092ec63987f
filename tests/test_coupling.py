"""
Tests for coupling.py

Run with:
    pytest tests/test_coupling.py -v
"""

import math

import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal

from differential_swerve.coupling import CouplingMatrix, invert_2x2, parse_differential_matrix
from differential_swerve.errors import ConfigurationError


# ============================================================================
# Test: parse_differential_matrix()
# ============================================================================


class TestParseDifferentialMatrix:
    """Structural validation of the configured matrix"""

    def test_accepts_floats(self):
        arr = parse_differential_matrix([[0.5, 0.5], [0.5, -0.5]])
        assert arr.shape == (2, 2)
        assert_array_equal(arr, [[0.5, 0.5], [0.5, -0.5]])

    def test_accepts_ints_and_tuples(self):
        """Integer entries and tuple rows are valid real numbers"""
        arr = parse_differential_matrix(((1, 1), (1, -1)))
        assert arr.dtype == np.float64
        assert_array_equal(arr, [[1.0, 1.0], [1.0, -1.0]])

    def test_rejects_non_list(self):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_differential_matrix("[[1, 1], [1, -1]]")
        assert exc_info.value.constraint == "not-a-list"

    def test_rejects_none(self):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_differential_matrix(None)
        assert exc_info.value.constraint == "not-a-list"

    def test_rejects_wrong_height(self):
        """A 3x2 matrix fails on height"""
        with pytest.raises(ConfigurationError) as exc_info:
            parse_differential_matrix([[1, 1], [1, -1], [0, 0]])
        assert exc_info.value.constraint == "height"
        assert "height 2" in str(exc_info.value)

    def test_rejects_row_not_a_list(self):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_differential_matrix([[1, 1], 5])
        assert exc_info.value.constraint == "not-a-list"
        assert "list of lists" in str(exc_info.value)

    def test_rejects_wrong_width(self):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_differential_matrix([[1, 1, 0], [1, -1, 0]])
        assert exc_info.value.constraint == "width"

    def test_rejects_string_element(self):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_differential_matrix([[1, "1"], [1, -1]])
        assert exc_info.value.constraint == "non-numeric"
        assert "[0][1]" in str(exc_info.value)

    def test_rejects_bool_element(self):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_differential_matrix([[True, 1], [1, -1]])
        assert exc_info.value.constraint == "non-numeric"

    @pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
    def test_rejects_non_finite_element(self, bad):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_differential_matrix([[1, 1], [1, bad]])
        assert exc_info.value.constraint == "non-numeric"

    def test_shape_checked_before_type(self):
        """A 3x2 matrix of strings reports the shape problem first"""
        with pytest.raises(ConfigurationError) as exc_info:
            parse_differential_matrix([["a", "b"], ["c", "d"], ["e", "f"]])
        assert exc_info.value.constraint == "height"

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_differential_matrix([])


# ============================================================================
# Test: invert_2x2()
# ============================================================================


class TestInvert2x2:
    """Closed-form inverse and singularity detection"""

    def test_sum_difference_inverse(self):
        inverse = invert_2x2(np.array([[1.0, 1.0], [1.0, -1.0]]))
        assert_allclose(inverse, [[0.5, 0.5], [0.5, -0.5]])

    def test_singular_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            invert_2x2(np.array([[1.0, 1.0], [2.0, 2.0]]))
        assert exc_info.value.constraint == "singular"

    def test_zero_matrix_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            invert_2x2(np.zeros((2, 2)))
        assert exc_info.value.constraint == "singular"

    def test_round_trip_random_matrices(self):
        """F @ F^-1 is the identity for random non-singular matrices"""
        rng = np.random.default_rng(88)
        checked = 0
        while checked < 200:
            forward = rng.uniform(-10.0, 10.0, size=(2, 2))
            if abs(np.linalg.det(forward)) < 1e-3:
                continue
            inverse = invert_2x2(forward)
            assert_allclose(forward @ inverse, np.eye(2), atol=1e-9)
            assert_allclose(inverse @ forward, np.eye(2), atol=1e-9)
            checked += 1


# ============================================================================
# Test: CouplingMatrix
# ============================================================================


class TestCouplingMatrix:
    """Derived forward/inverse pair"""

    def test_from_config_keeps_both_matrices(self):
        coupling = CouplingMatrix.from_config([[1, 1], [1, -1]])
        assert_array_equal(coupling.forward, [[1.0, 1.0], [1.0, -1.0]])
        assert_allclose(coupling.inverse, [[0.5, 0.5], [0.5, -0.5]])

    def test_singular_config_never_produces_inverse(self):
        with pytest.raises(ConfigurationError) as exc_info:
            CouplingMatrix.from_config([[1, 1], [2, 2]])
        assert exc_info.value.constraint == "singular"

    def test_malformed_config_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            CouplingMatrix.from_config([[1, 1], [1, -1], [1, 0]])
        assert exc_info.value.constraint == "height"

    def test_rederivation_is_deterministic(self):
        config = [[0.3, 0.7], [-1.2, 0.4]]
        first = CouplingMatrix.from_config(config)
        second = CouplingMatrix.from_config(config)
        assert_array_equal(first.forward, second.forward)
        assert_array_equal(first.inverse, second.inverse)

    def test_matrices_are_read_only(self):
        coupling = CouplingMatrix.from_config([[1, 1], [1, -1]])
        with pytest.raises(ValueError):
            coupling.forward[0, 0] = 2.0
        with pytest.raises(ValueError):
            coupling.inverse[0, 0] = 2.0

    def test_config_list_not_aliased(self):
        """Mutating the source list after construction has no effect"""
        config = [[1.0, 1.0], [1.0, -1.0]]
        coupling = CouplingMatrix.from_config(config)
        config[0][0] = 5.0
        assert coupling.forward[0, 0] == 1.0

    def test_row(self):
        coupling = CouplingMatrix.from_config([[1, 2], [3, 4]])
        assert coupling.row(0) == (1.0, 2.0)
        assert coupling.row(1) == (3.0, 4.0)

    def test_to_logical(self):
        coupling = CouplingMatrix.from_config([[1, 1], [1, -1]])
        assert coupling.to_logical((3.0, 1.0)) == (4.0, 2.0)

    def test_to_physical(self):
        coupling = CouplingMatrix.from_config([[1, 1], [1, -1]])
        assert coupling.to_physical((5.0, 1.0)) == pytest.approx((3.0, 2.0))

    def test_to_physical_inverts_to_logical(self):
        coupling = CouplingMatrix.from_config([[0.25, 0.75], [1.5, -0.5]])
        logical = coupling.to_logical(coupling.to_physical((2.0, -7.0)))
        assert logical == pytest.approx((2.0, -7.0), abs=1e-9)
