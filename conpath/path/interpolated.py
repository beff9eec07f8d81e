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

"""Piecewise geodesic path through timed waypoints."""

from __future__ import annotations

import bisect
from typing import TYPE_CHECKING

import numpy as np

from conpath.path.path import Path
from conpath.path.time_parameterization import is_reversed
from conpath.spec.enums import PathKind

if TYPE_CHECKING:
    from collections.abc import Sequence

    from conpath.constraints.constraint_set import ConstraintSet
    from conpath.device import Device
    from conpath.spec.types import Configuration, Interval, Velocity


class InterpolatedPath(Path):
    """Path linearly interpolating (on the device) between timed waypoints.

    Example:
        path = InterpolatedPath(device, [(0.0, q0), (0.5, q1), (1.0, q2)], constraints)
        for t, q in path.interpolation_points:
            ...
    """

    kind = PathKind.INTERPOLATED

    def __init__(
        self,
        device: Device,
        points: Sequence[tuple[float, Configuration]],
        constraints: ConstraintSet | None = None,
    ):
        if len(points) < 2:
            raise ValueError(f"InterpolatedPath needs at least 2 waypoints, got {len(points)}")
        times = [float(t) for t, _ in points]
        if any(b < a for a, b in zip(times, times[1:], strict=False)):
            raise ValueError(f"Waypoint times must be non-decreasing, got {times}")
        super().__init__((times[0], times[-1]), device.config_size, device.nv, constraints)
        self._device = device
        self._times = times
        self._configs = [np.array(q, dtype=np.float64) for _, q in points]

    @classmethod
    def create(
        cls,
        device: Device,
        init: Configuration,
        end: Configuration,
        time_range: Interval = (0.0, 1.0),
        constraints: ConstraintSet | None = None,
    ) -> InterpolatedPath:
        """Two-waypoint path from init to end."""
        return cls(device, [(time_range[0], init), (time_range[1], end)], constraints)

    @property
    def device(self) -> Device:
        return self._device

    @property
    def interpolation_points(self) -> list[tuple[float, Configuration]]:
        return [(t, q.copy()) for t, q in zip(self._times, self._configs, strict=True)]

    def initial(self) -> Configuration:
        return self._configs[0].copy()

    def end(self) -> Configuration:
        return self._configs[-1].copy()

    def _segment(self, param: float) -> int:
        """Index i such that param lies in [times[i], times[i + 1]]."""
        index = bisect.bisect_right(self._times, param) - 1
        return min(max(index, 0), len(self._times) - 2)

    def _at(self, param: float) -> Configuration:
        i = self._segment(param)
        t0, t1 = self._times[i], self._times[i + 1]
        if param == t0:
            return self._configs[i].copy()
        if param == t1:
            return self._configs[i + 1].copy()
        u = (param - t0) / (t1 - t0)
        return self._device.interpolate(self._configs[i], self._configs[i + 1], u)

    def impl_compute(self, param: float) -> tuple[Configuration, bool]:
        return self._at(param), True

    def impl_derivative(self, param: float, order: int) -> Velocity:
        if order != 1:
            return np.zeros(self._device.nv)
        i = self._segment(param)
        duration = self._times[i + 1] - self._times[i]
        if duration == 0:
            return np.zeros(self._device.nv)
        return self._device.difference(self._configs[i + 1], self._configs[i]) / duration

    def impl_extract(self, param_interval: Interval) -> Path:
        if param_interval == self._param_range:
            return self.copy()
        low, high = min(param_interval), max(param_interval)
        points = [(low, self._at(low))]
        points.extend(
            (t, q.copy()) for t, q in zip(self._times, self._configs, strict=True) if low < t < high
        )
        points.append((high, self._at(high)))
        if is_reversed(param_interval):
            points = [(low + high - t, q) for t, q in reversed(points)]
        return InterpolatedPath(self._device, points, self._constraints)

    def _after_copy(self) -> None:
        self._times = list(self._times)
        self._configs = [q.copy() for q in self._configs]
