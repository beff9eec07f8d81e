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

"""Protocol definitions for the collaborators of the projection engine.

The projectors only rely on these Protocol types (not concrete classes).
Use factory functions from conpath.factory to create instances.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from conpath.constraints.constraint_set import ConstraintSet
    from conpath.path.path import Path
    from conpath.spec.enums import PathKind
    from conpath.spec.types import Configuration, Interval, ProjectionResult, Velocity


@runtime_checkable
class DeviceSpec(Protocol):
    """Protocol for the robot model.

    The device describes the configuration space:
    - Configuration and tangent-space dimensions
    - difference/integrate pair of the (possibly non-Euclidean) space

    Implementations:
        - Device: product of Euclidean and SO(2) joints
    """

    @property
    def config_size(self) -> int:
        """Size of a configuration vector."""
        ...

    @property
    def nv(self) -> int:
        """Size of a tangent vector."""
        ...

    def difference(self, q1: Configuration, q0: Configuration) -> Velocity:
        """Tangent vector v such that integrate(q0, v) == q1."""
        ...

    def integrate(self, q: Configuration, v: Velocity) -> Configuration:
        """Configuration reached from q along v in unit time."""
        ...


@runtime_checkable
class DistanceSpec(Protocol):
    """Protocol for a distance between configurations."""

    def __call__(self, q1: Configuration, q2: Configuration) -> float:
        """Distance between two configurations."""
        ...


@runtime_checkable
class SteeringMethodSpec(Protocol):
    """Protocol for a steering method.

    Steering methods build a path between two configurations. They hold no
    per-call state: the constraints of the produced path are passed with each
    call, so one instance can be used from anywhere in the recursion.

    Implementations:
        - HermiteSteeringMethod: cubic Hermite paths
        - StraightSteeringMethod: two-point interpolated paths
    """

    @property
    def device(self) -> DeviceSpec:
        """Device the produced paths live on."""
        ...

    @property
    def path_kind(self) -> PathKind:
        """Kind of path produced by steer()."""
        ...

    def steer(
        self,
        q1: Configuration,
        q2: Configuration,
        time_range: Interval | None = None,
        constraints: ConstraintSet | None = None,
    ) -> Path:
        """Build a path from q1 to q2, optionally over a given time range."""
        ...


@runtime_checkable
class PathProjectorSpec(Protocol):
    """Protocol for path projectors.

    Path projectors turn a path whose interior may leave the constraint
    manifold into a path that stays on it.

    Implementations:
        - RecursiveHermite: recursive bisection of Hermite pieces
    """

    def apply(self, path: Path) -> ProjectionResult:
        """Project a path onto its constraints."""
        ...

    def get_name(self) -> str:
        """Get projector name."""
        ...
