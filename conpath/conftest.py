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

"""Shared fixtures: a planar device with circle and line constraints."""

import numpy as np
import pytest

from conpath.constraints import (
    AffineFunction,
    ConfigProjector,
    ConstraintSet,
    Implicit,
    SquaredDistance,
)
from conpath.device import Device
from conpath.distance import WeighedDistance
from conpath.spec import ComparisonType
from conpath.steering import HermiteSteeringMethod


def make_circle_constraints(device, error_threshold=1e-2, radius=1.0):
    """Constraint set keeping (x, y) on a circle centered at the origin."""
    projector = ConfigProjector(device, "on_circle", error_threshold, max_iterations=40)
    projector.add(
        Implicit(
            SquaredDistance(device.config_size, [0.0, 0.0], indices=[0, 1], name="circle"),
            [ComparisonType.EQUALITY],
            [radius**2],
        )
    )
    return ConstraintSet(device, "circle", projector)


@pytest.fixture
def plane():
    """Euclidean plane, joints joint1 (x) and joint2 (y)."""
    return Device.euclidean("plane", 2)


@pytest.fixture
def circle_constraints(plane):
    return make_circle_constraints(plane)


@pytest.fixture
def line_constraints(plane):
    """y = 0, with a loose threshold (accept threshold 1 for M = 2)."""
    projector = ConfigProjector(plane, "on_line", error_threshold=1.0, max_iterations=20)
    projector.add(Implicit(AffineFunction([[0.0, 1.0]], name="line"), [ComparisonType.EQUALITY]))
    return ConstraintSet(plane, "line", projector)


@pytest.fixture
def hermite_steering(plane):
    return HermiteSteeringMethod(plane)


@pytest.fixture
def distance(plane):
    return WeighedDistance(plane)


@pytest.fixture
def quarter_circle():
    """Endpoints of a quarter of the unit circle."""
    return np.array([1.0, 0.0]), np.array([0.0, 1.0])
