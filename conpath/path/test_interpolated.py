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

"""Tests for InterpolatedPath."""

import numpy as np
from numpy.testing import assert_allclose, assert_array_equal
import pytest

from conpath.path import InterpolatedPath


@pytest.fixture
def zigzag(plane):
    return InterpolatedPath(
        plane,
        [
            (0.0, np.array([0.0, 0.0])),
            (1.0, np.array([1.0, 1.0])),
            (3.0, np.array([3.0, -1.0])),
        ],
    )


def test_time_range_and_endpoints(zigzag):
    assert zigzag.time_range == (0.0, 3.0)
    assert_array_equal(zigzag.initial(), [0.0, 0.0])
    assert_array_equal(zigzag.end(), [3.0, -1.0])


def test_interpolates_between_waypoints(zigzag):
    assert_allclose(zigzag.eval(0.5)[0], [0.5, 0.5])
    assert_allclose(zigzag.eval(2.0)[0], [2.0, 0.0])
    assert_array_equal(zigzag.eval(1.0)[0], [1.0, 1.0])


def test_derivative_is_piecewise_constant(zigzag):
    assert_allclose(zigzag.derivative(0.5, 1), [1.0, 1.0])
    assert_allclose(zigzag.derivative(2.5, 1), [1.0, -1.0])
    assert_allclose(zigzag.derivative(2.5, 2), [0.0, 0.0])


def test_extract_keeps_inner_waypoints(zigzag):
    sub = zigzag.extract((0.5, 2.0))

    assert isinstance(sub, InterpolatedPath)
    assert [t for t, _ in sub.interpolation_points] == [0.5, 1.0, 2.0]
    assert_allclose(sub.initial(), [0.5, 0.5])


def test_reverse(zigzag):
    reversed_ = zigzag.reverse()

    assert reversed_.time_range == (0.0, 3.0)
    assert_array_equal(reversed_.initial(), zigzag.end())
    assert_array_equal(reversed_.end(), zigzag.initial())
    for t in np.linspace(0.0, 3.0, 7):
        assert_allclose(reversed_.eval(3.0 - t)[0], zigzag.eval(t)[0], atol=1e-12)


def test_needs_two_waypoints(plane):
    with pytest.raises(ValueError):
        InterpolatedPath(plane, [(0.0, np.zeros(2))])


def test_times_must_not_decrease(plane):
    with pytest.raises(ValueError):
        InterpolatedPath(plane, [(1.0, np.zeros(2)), (0.0, np.ones(2))])
