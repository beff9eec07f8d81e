# Copyright 2025-2026 Dimensional Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Tests for the Path base class: extraction, time parameterization, checks."""

import numpy as np
from numpy.testing import assert_allclose, assert_array_equal
import pytest

from conpath.path import ExtractedPath, HermitePath, Polynomial, Shift
from conpath.spec import PathKind, ProjectionError, UnsupportedOperationError


@pytest.fixture
def curve(plane):
    """Unconstrained S-shaped Hermite curve over [0, 2]."""
    path = HermitePath(plane, np.array([0.0, 0.0]), np.array([2.0, 1.0]), time_range=(0.0, 2.0))
    path.v0 = np.array([0.0, 2.0])
    path.v1 = np.array([0.0, 2.0])
    return path


# =============================================================================
# Construction
# =============================================================================


class TestConstruction:
    def test_constraints_are_copied(self, plane, circle_constraints, quarter_circle):
        path = HermitePath(plane, *quarter_circle, circle_constraints)

        assert path.constraints is not circle_constraints
        assert path.constraints.config_projector is not circle_constraints.config_projector

    def test_copy_owns_its_constraints(self, plane, circle_constraints, quarter_circle):
        path = HermitePath(plane, *quarter_circle, circle_constraints)
        copied = path.copy()

        copied.constraints.config_projector.set_right_hand_side([4.0])

        assert_allclose(path.constraints.config_projector.right_hand_side(), [1.0])

    def test_unordered_time_range_rejected(self, plane):
        with pytest.raises(ValueError):
            HermitePath(plane, np.zeros(2), np.ones(2), time_range=(1.0, 0.0))


# =============================================================================
# Extraction without time parameterization
# =============================================================================


class TestExtraction:
    def test_whole_range_is_a_copy(self, curve):
        copied = curve.extract(curve.time_range)

        assert copied is not curve
        assert copied.time_range == curve.time_range
        assert_array_equal(copied.initial(), curve.initial())

    def test_reverse_swaps_endpoints(self, curve):
        reversed_ = curve.reverse()

        assert_array_equal(reversed_.initial(), curve.end())
        assert_array_equal(reversed_.end(), curve.initial())
        assert reversed_.length() == pytest.approx(curve.length())

    def test_double_reverse_restores_path(self, curve):
        twice = curve.reverse().reverse()

        assert_array_equal(twice.initial(), curve.initial())
        assert_array_equal(twice.end(), curve.end())
        for t in np.linspace(0.0, 2.0, 7):
            assert_allclose(twice.eval(t)[0], curve.eval(t)[0], atol=1e-12)

    def test_reversed_evaluation(self, curve):
        reversed_ = curve.reverse()
        t0, t1 = curve.time_range

        for t in np.linspace(t0, t1, 9):
            assert_allclose(reversed_.eval(t0 + t1 - t)[0], curve.eval(t)[0], atol=1e-12)

    def test_extract_then_reverse_commute(self, curve):
        a = curve.extract((1.5, 0.5))
        b = curve.extract((0.5, 1.5)).reverse()

        assert_allclose(a.initial(), b.initial(), atol=1e-12)
        assert_allclose(a.end(), b.end(), atol=1e-12)


# =============================================================================
# Generic extracted path
# =============================================================================


class TestExtractedPath:
    def test_parameter_restarts_at_zero(self, curve):
        extracted = ExtractedPath(curve, (0.5, 1.5))

        assert extracted.kind == PathKind.EXTRACTED
        assert extracted.time_range == (0.0, 1.0)
        assert_allclose(extracted.eval(0.25)[0], curve.eval(0.75)[0])

    def test_reversed_interval(self, curve):
        extracted = ExtractedPath(curve, (1.5, 0.5))

        assert_allclose(extracted.initial(), curve.eval(1.5)[0])
        assert_allclose(extracted.eval(0.25)[0], curve.eval(1.25)[0])
        assert_allclose(extracted.derivative(0.25, 1), -curve.derivative(1.25, 1))

    def test_endpoints_of_original_are_exact(self, curve):
        extracted = ExtractedPath(curve, (2.0, 0.0))

        assert_array_equal(extracted.initial(), curve.end())
        assert_array_equal(extracted.end(), curve.initial())

    def test_extraction_does_not_nest(self, curve):
        extracted = ExtractedPath(curve, (0.0, 2.0)).extract((0.5, 1.0))

        assert isinstance(extracted, ExtractedPath)
        assert extracted.original is curve
        assert_allclose(extracted.initial(), curve.eval(0.5)[0])


# =============================================================================
# Time parameterization
# =============================================================================


class TestTimeParameterization:
    def test_param_range_follows_time_parameterization(self, curve):
        curve.set_time_parameterization(Polynomial([0.0, 2.0]), (0.0, 1.0))

        assert curve.time_range == (0.0, 1.0)
        assert curve.param_range == pytest.approx((0.0, 2.0))
        assert_allclose(curve.eval(0.25)[0], curve.impl_compute(0.5)[0])

    def test_chain_rule(self, curve):
        reference = curve.copy()
        curve.set_time_parameterization(Polynomial([0.0, 0.0, 2.0]), (0.0, 1.0))
        t = 0.6
        s = 2 * t**2

        assert_allclose(curve.derivative(t, 1), reference.derivative(s, 1) * 4 * t)
        assert_allclose(
            curve.derivative(t, 2),
            reference.derivative(s, 2) * (4 * t) ** 2 + reference.derivative(s, 1) * 4.0,
        )

    def test_third_order_through_time_parameterization_unsupported(self, curve):
        curve.set_time_parameterization(Polynomial([0.0, 2.0]), (0.0, 1.0))

        with pytest.raises(UnsupportedOperationError):
            curve.derivative(0.5, 3)

    def test_extract_keeps_absolute_parameter(self, curve):
        curve.set_time_parameterization(Polynomial([0.0, 2.0]), (0.0, 1.0))
        sub = curve.extract((0.25, 0.75))

        assert sub.time_range == (0.25, 0.75)
        assert sub.param_range == pytest.approx((0.5, 1.5))
        assert isinstance(sub.time_parameterization, Polynomial)
        assert_allclose(sub.eval(0.5)[0], curve.eval(0.5)[0])

    def test_extract_shifts_restarted_parameter(self, curve):
        extracted = ExtractedPath(curve, (0.0, 2.0))
        extracted.set_time_parameterization(Polynomial([0.0, 2.0]), (0.0, 1.0))
        sub = extracted.extract((0.25, 0.75))

        tp = sub.time_parameterization
        assert isinstance(tp, Shift)
        assert tp.t_offset == pytest.approx(0.25)
        assert tp.s_offset == pytest.approx(-0.5)
        assert sub.time_range == (0.0, 0.5)
        assert sub.param_range == pytest.approx((0.0, 1.0))
        assert_allclose(sub.eval(0.1)[0], extracted.eval(0.35)[0])

    def test_repeated_extraction_keeps_single_shift(self, curve):
        extracted = ExtractedPath(curve, (0.0, 2.0))
        extracted.set_time_parameterization(Polynomial([0.0, 2.0]), (0.0, 1.0))
        sub = extracted.extract((0.25, 0.75)).extract((0.1, 0.4))

        tp = sub.time_parameterization
        assert isinstance(tp, Shift)
        assert isinstance(tp.inner, Polynomial)
        assert tp.t_offset == pytest.approx(0.35)
        assert_allclose(sub.eval(0.0)[0], extracted.eval(0.35)[0], atol=1e-12)
        assert_allclose(sub.eval(0.3)[0], extracted.eval(0.65)[0], atol=1e-12)

    def test_extract_through_decreasing_parameterization(self, plane):
        path = HermitePath(plane, np.zeros(2), np.array([1.0, 0.0]))
        path.set_time_parameterization(Polynomial([1.0, -1.0]), (0.0, 1.0))

        sub = path.extract((0.25, 0.75))

        assert sub.time_range == (0.0, 0.5)
        assert sub.param_range == pytest.approx((0.25, 0.75))
        assert_allclose(sub.initial(), path.eval(0.25)[0], atol=1e-12)
        assert_allclose(sub.end(), path.eval(0.75)[0], atol=1e-12)
        for t in (0.0, 0.2, 0.5):
            assert_allclose(sub.eval(t)[0], path.eval(0.25 + t)[0], atol=1e-12)

    def test_reverse_through_decreasing_parameterization(self, plane):
        path = HermitePath(plane, np.zeros(2), np.array([1.0, 0.0]))
        path.set_time_parameterization(Polynomial([1.0, -1.0]), (0.0, 1.0))

        reversed_ = path.reverse()

        assert reversed_.time_range == (0.0, 1.0)
        for t in (0.0, 0.3, 1.0):
            assert_allclose(reversed_.eval(t)[0], path.eval(1.0 - t)[0], atol=1e-12)

    def test_reverse_through_nonlinear_parameterization(self, curve):
        curve.set_time_parameterization(Polynomial([0.0, 0.0, 2.0]), (0.0, 1.0))

        reversed_ = curve.reverse()

        assert reversed_.param_range == pytest.approx((0.0, 2.0))
        for t in (0.0, 0.3, 0.7, 1.0):
            assert_allclose(reversed_.eval(t)[0], curve.eval(1.0 - t)[0], atol=1e-12)

    def test_serialization_with_time_parameterization_unsupported(self, curve):
        curve.set_time_parameterization(Polynomial([0.0, 2.0]), (0.0, 1.0))

        with pytest.raises(UnsupportedOperationError):
            curve.to_dict()


# =============================================================================
# Evaluation and checks
# =============================================================================


class TestConstraints:
    def test_eval_projects_on_constraints(self, plane, circle_constraints, quarter_circle):
        path = HermitePath(plane, *quarter_circle, circle_constraints)
        q, success = path.eval(0.5)

        assert success
        assert path.constraints.is_satisfied(q)

    def test_call_raises_on_projection_failure(self, plane, circle_constraints):
        # The chord midpoint is the circle center, where the Jacobian vanishes
        path = HermitePath(plane, np.array([1.0, 0.0]), np.array([-1.0, 0.0]), circle_constraints)

        with pytest.raises(ProjectionError):
            path(0.5)

    def test_check_path_accepts_satisfied_endpoints(self, plane, circle_constraints, quarter_circle):
        HermitePath(plane, *quarter_circle, circle_constraints).check_path()

    def test_check_path_reports_violation(self, plane, circle_constraints):
        end = np.array([0.0, 0.5])
        path = HermitePath(plane, np.array([1.0, 0.0]), end, circle_constraints)

        with pytest.raises(ProjectionError) as info:
            path.check_path()

        assert_array_equal(info.value.configuration, end)
        assert info.value.error is not None
        assert info.value.error[0] == pytest.approx(-0.75)

    def test_right_hand_side_follows_parameter(self, plane, circle_constraints):
        implicit = circle_constraints.config_projector.numerical_constraints[0]
        implicit._rhs_function = lambda s: np.array([(1.0 + s) ** 2])
        path = HermitePath(plane, np.array([1.0, 0.0]), np.array([2.0, 0.0]), circle_constraints)

        path.check_path()
        q, success = path.eval(0.5)

        assert success
        assert np.linalg.norm(q) == pytest.approx(1.5, abs=1e-2)
