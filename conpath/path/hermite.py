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

"""Cubic Hermite path.

The path is a cubic Bernstein curve in the tangent space at a base
configuration::

    q(t) = integrate(base, sum_i B_i(u) P_i),   u = (t - t0) / T

with ``T`` the length of the geometric range. ``P0`` and ``P3`` locate the
endpoints, ``P1`` and ``P2`` encode the boundary velocities::

    v0 = 3 (P1 - P0) / T        v1 = 3 (P3 - P2) / T
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import numpy as np

from conpath.path.path import Path
from conpath.path.time_parameterization import sorted_interval
from conpath.spec.enums import PathKind
from conpath.spec.errors import PathTypeError
from conpath.utils.kinematics_utils import bernstein_basis

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from conpath.constraints.constraint_set import ConstraintSet
    from conpath.device import Device
    from conpath.spec.types import Configuration, Interval, Velocity


class HermitePath(Path):
    """Cubic Hermite path between two configurations.

    By default the boundary velocities are ``difference(end, init) / T``
    projected onto the kernel of the constraint Jacobian at each endpoint,
    so that the path leaves and reaches the endpoints tangent to the
    constraint manifold.

    Example:
        path = HermitePath(device, q_init, q_end, constraints, time_range=(0.0, 1.0))
        path.v0 = np.zeros(device.nv)   # invalidates hermite_length
        q_mid, ok = path.eval(0.5)
    """

    kind = PathKind.HERMITE

    def __init__(
        self,
        device: Device,
        init: Configuration,
        end: Configuration,
        constraints: ConstraintSet | None = None,
        time_range: Interval = (0.0, 1.0),
        *,
        control_points: NDArray[np.float64] | None = None,
        base: Configuration | None = None,
    ):
        """Create a Hermite path.

        Args:
            device: Configuration space of the path
            init: Initial configuration
            end: Final configuration
            constraints: Constraints applied when evaluating (copied)
            time_range: Time range, also the geometric range of the curve
            control_points: 4 x nv Bernstein control points relative to base.
                When omitted, they are computed from init, end and the
                projected default velocities.
            base: Configuration the control points are expressed at
                (defaults to init)
        """
        super().__init__(time_range, device.config_size, device.nv, constraints)
        self._device = device
        self._init = np.array(init, dtype=np.float64)
        self._end = np.array(end, dtype=np.float64)
        self._base = self._init.copy() if base is None else np.array(base, dtype=np.float64)
        self._geometry = self._time_range
        self._hermite_length = -1.0

        if control_points is None:
            self._control_points = np.zeros((4, device.nv))
            self._control_points[3] = device.difference(self._end, self._base)
            self.project_velocities(self._init, self._end)
        else:
            control_points = np.array(control_points, dtype=np.float64)
            if control_points.shape != (4, device.nv):
                raise ValueError(
                    f"control points must have shape (4, {device.nv}), got {control_points.shape}"
                )
            self._control_points = control_points

    @property
    def device(self) -> Device:
        return self._device

    @property
    def base(self) -> Configuration:
        return self._base.copy()

    @property
    def control_points(self) -> NDArray[np.float64]:
        return self._control_points.copy()

    def initial(self) -> Configuration:
        return self._init.copy()

    def end(self) -> Configuration:
        return self._end.copy()

    def as_hermite(self) -> HermitePath:
        return self

    def _duration(self) -> float:
        return self._geometry[1] - self._geometry[0]

    def _normalized(self, param: float) -> float:
        duration = self._duration()
        if duration == 0:
            return 0.0
        return (param - self._geometry[0]) / duration

    # ============= Boundary velocities =============

    @property
    def v0(self) -> Velocity:
        duration = self._duration()
        if duration == 0:
            return np.zeros(self._device.nv)
        return 3.0 * (self._control_points[1] - self._control_points[0]) / duration

    @v0.setter
    def v0(self, speed: Velocity) -> None:
        self._control_points[1] = self._control_points[0] + np.asarray(speed) * self._duration() / 3.0
        self._hermite_length = -1.0

    @property
    def v1(self) -> Velocity:
        duration = self._duration()
        if duration == 0:
            return np.zeros(self._device.nv)
        return 3.0 * (self._control_points[3] - self._control_points[2]) / duration

    @v1.setter
    def v1(self, speed: Velocity) -> None:
        self._control_points[2] = self._control_points[3] - np.asarray(speed) * self._duration() / 3.0
        self._hermite_length = -1.0

    def project_velocities(self, init: Configuration, end: Configuration) -> None:
        """Set v0 and v1 to the chord velocity projected on the constraint kernel."""
        duration = self._duration()
        if duration == 0:
            velocity = np.zeros(self._device.nv)
        else:
            velocity = self._device.difference(end, init) / duration
        projector = None if self._constraints is None else self._constraints.config_projector
        if projector is None:
            self.v0 = velocity
            self.v1 = velocity
        else:
            self.v0 = projector.project_vector_on_kernel(init, velocity)
            self.v1 = projector.project_vector_on_kernel(end, velocity)

    def velocity(self, t: float) -> Velocity:
        """First time derivative at time t."""
        return self.derivative(t, 1)

    # ============= Length =============

    @property
    def hermite_length(self) -> float:
        """Length of the control polygon, recomputed after velocity changes."""
        if self._hermite_length < 0:
            self.compute_hermite_length()
        return self._hermite_length

    def compute_hermite_length(self) -> float:
        self._hermite_length = float(
            np.sum(np.linalg.norm(np.diff(self._control_points, axis=0), axis=1))
        )
        return self._hermite_length

    # ============= Geometry =============

    def _tangent_value(self, u: float, order: int = 0) -> Velocity:
        result: Velocity = bernstein_basis(u, order) @ self._control_points
        return result

    def impl_compute(self, param: float) -> tuple[Configuration, bool]:
        u = self._normalized(param)
        return self._device.integrate(self._base, self._tangent_value(u)), True

    def impl_derivative(self, param: float, order: int) -> Velocity:
        if order < 1:
            raise ValueError(f"Derivative order must be positive, got {order}")
        duration = self._duration()
        if duration == 0:
            return np.zeros(self._device.nv)
        return self._tangent_value(self._normalized(param), order) / duration**order

    def _configuration_at(self, param: float) -> Configuration:
        if param == self._geometry[0]:
            return self._init.copy()
        if param == self._geometry[1]:
            return self._end.copy()
        q, _ = self.impl_compute(param)
        return q

    def impl_extract(self, param_interval: Interval) -> Path:
        """Exact sub-curve over a parameter interval.

        A cubic is determined by its endpoint values and derivatives, so the
        control points of the reparameterized curve follow from the curve
        evaluated at both ends. A reversed interval gives the reversed curve.
        """
        if param_interval == self._param_range:
            return self.copy()
        ua = self._normalized(param_interval[0])
        ub = self._normalized(param_interval[1])
        scale = (ub - ua) / 3.0
        xa, xb = self._tangent_value(ua), self._tangent_value(ub)
        control_points = np.array(
            [
                xa,
                xa + scale * self._tangent_value(ua, 1),
                xb - scale * self._tangent_value(ub, 1),
                xb,
            ]
        )
        return HermitePath(
            self._device,
            self._configuration_at(param_interval[0]),
            self._configuration_at(param_interval[1]),
            self._constraints,
            sorted_interval(param_interval),
            control_points=control_points,
            base=self._base,
        )

    def _after_copy(self) -> None:
        self._init = self._init.copy()
        self._end = self._end.copy()
        self._base = self._base.copy()
        self._control_points = self._control_points.copy()

    # ============= Serialization =============

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(
            init=self._init.tolist(),
            end=self._end.tolist(),
            base=self._base.tolist(),
            control_points=self._control_points.tolist(),
        )
        return data

    @classmethod
    def from_dict(
        cls,
        device: Device,
        data: dict[str, Any],
        constraints: ConstraintSet | None = None,
    ) -> HermitePath:
        """Rebuild a path serialized with to_dict(). Constraints are not serialized."""
        if data.get("kind") != PathKind.HERMITE.name.lower():
            raise PathTypeError(f"Cannot build a HermitePath from a {data.get('kind')!r} path")
        return cls(
            device,
            np.asarray(data["init"]),
            np.asarray(data["end"]),
            constraints,
            tuple(data["time_range"]),
            control_points=np.asarray(data["control_points"]),
            base=np.asarray(data["base"]),
        )

    def __repr__(self) -> str:
        return (
            f"HermitePath(time in [{self._time_range[0]}, {self._time_range[1]}], "
            f"init={self._init.tolist()}, end={self._end.tolist()}, "
            f"hermite_length={self._hermite_length})"
        )
