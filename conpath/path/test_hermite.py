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

"""Tests for HermitePath."""

import numpy as np
from numpy.testing import assert_allclose, assert_array_equal
import pytest

from conpath.device import Device
from conpath.path import HermitePath
from conpath.spec import JointModel, JointType, PathKind, PathTypeError


class TestDefaultVelocities:
    def test_unconstrained_is_straight(self, plane):
        path = HermitePath(plane, np.array([0.0, 0.0]), np.array([3.0, 4.0]), time_range=(0.0, 2.0))

        assert_allclose(path.v0, [1.5, 2.0])
        assert_allclose(path.v1, [1.5, 2.0])
        assert path.hermite_length == pytest.approx(5.0)

    def test_velocities_projected_on_constraint_kernel(self, plane, circle_constraints, quarter_circle):
        path = HermitePath(plane, *quarter_circle, circle_constraints)

        assert_allclose(path.v0, [0.0, 1.0], atol=1e-12)
        assert_allclose(path.v1, [-1.0, 0.0], atol=1e-12)

    def test_velocity_matches_boundary_velocities(self, plane, circle_constraints, quarter_circle):
        path = HermitePath(plane, *quarter_circle, circle_constraints, time_range=(1.0, 3.0))

        assert_allclose(path.velocity(1.0), path.v0)
        assert_allclose(path.velocity(3.0), path.v1)

    def test_as_hermite(self, plane):
        path = HermitePath(plane, np.zeros(2), np.ones(2))

        assert path.kind == PathKind.HERMITE
        assert path.as_hermite() is path
        assert path.as_path_vector() is None


class TestHermiteLength:
    def test_control_polygon_length(self, plane, circle_constraints, quarter_circle):
        path = HermitePath(plane, *quarter_circle, circle_constraints)

        # |P1 - P0| = 1/3, |P2 - P1| = sqrt(8)/3, |P3 - P2| = 1/3
        assert path.compute_hermite_length() == pytest.approx((2.0 + np.sqrt(8.0)) / 3.0)

    def test_velocity_update_invalidates_length(self, plane):
        path = HermitePath(plane, np.zeros(2), np.array([1.0, 0.0]))
        assert path.compute_hermite_length() == pytest.approx(1.0)

        path.v0 = np.array([0.0, 3.0])

        assert path._hermite_length == -1
        assert path.hermite_length == pytest.approx(1.0 + np.sqrt(13.0) / 3.0 + 1.0 / 3.0)

    def test_upper_bound_of_arc_length(self, plane, circle_constraints, quarter_circle):
        path = HermitePath(plane, *quarter_circle, circle_constraints)
        points = np.array([path.impl_compute(t)[0] for t in np.linspace(0.0, 1.0, 200)])
        arc_length = np.sum(np.linalg.norm(np.diff(points, axis=0), axis=1))

        assert arc_length <= path.hermite_length


class TestGeometry:
    def test_endpoints(self, plane):
        init, end = np.array([0.5, -1.0]), np.array([2.0, 3.0])
        path = HermitePath(plane, init, end, time_range=(0.0, 4.0))

        assert_array_equal(path.eval(0.0)[0], init)
        assert_allclose(path.eval(4.0)[0], end)

    def test_exact_sub_curve(self, plane):
        path = HermitePath(plane, np.zeros(2), np.array([1.0, 1.0]), time_range=(0.0, 2.0))
        path.v0 = np.array([2.0, -1.0])
        path.v1 = np.array([0.0, 3.0])
        sub = path.extract((0.5, 1.25))

        assert sub.as_hermite() is not None
        assert sub.time_range == (0.5, 1.25)
        for t in np.linspace(0.5, 1.25, 6):
            assert_allclose(sub.eval(t)[0], path.eval(t)[0], atol=1e-12)
            assert_allclose(sub.velocity(t), path.velocity(t), atol=1e-12)

    def test_reversal_reverses_control_points(self, plane):
        path = HermitePath(plane, np.zeros(2), np.array([1.0, 1.0]))
        path.v0 = np.array([2.0, -1.0])
        reversed_ = path.reverse().as_hermite()

        assert_allclose(reversed_.control_points, path.control_points[::-1], atol=1e-12)
        assert_allclose(reversed_.v0, -path.v1, atol=1e-12)
        assert_allclose(reversed_.v1, -path.v0, atol=1e-12)
        assert reversed_.hermite_length == pytest.approx(path.hermite_length)

    def test_zero_length_extraction(self, plane):
        path = HermitePath(plane, np.zeros(2), np.array([1.0, 1.0]))
        point = path.extract((0.0, 0.0))

        assert point.length() == 0.0
        assert_array_equal(point.initial(), path.initial())
        assert_array_equal(point.end(), path.initial())

    def test_rotation_joint(self):
        device = Device("wheel", [JointModel("theta", JointType.SO2)])
        init = np.array([1.0, 0.0])
        end = np.array([0.0, 1.0])
        path = HermitePath(device, init, end)
        q, success = path.eval(0.5)

        assert success
        assert_allclose(q, [np.cos(np.pi / 4), np.sin(np.pi / 4)])
        assert_allclose(path.velocity(0.5), [np.pi / 2])


class TestSerialization:
    def test_round_trip(self, plane):
        path = HermitePath(plane, np.zeros(2), np.array([1.0, 2.0]), time_range=(0.0, 3.0))
        path.v1 = np.array([0.0, 1.0])

        data = path.to_dict()
        restored = HermitePath.from_dict(plane, data)

        assert data["kind"] == "hermite"
        assert restored.time_range == path.time_range
        assert_allclose(restored.control_points, path.control_points)
        assert_allclose(restored.eval(1.2)[0], path.eval(1.2)[0])

    def test_wrong_kind_rejected(self, plane):
        with pytest.raises(PathTypeError):
            HermitePath.from_dict(plane, {"kind": "vector"})
