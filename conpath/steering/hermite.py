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

"""Steering method producing cubic Hermite paths."""

from __future__ import annotations

from typing import TYPE_CHECKING

from conpath.path.hermite import HermitePath
from conpath.spec.enums import PathKind

if TYPE_CHECKING:
    from conpath.constraints.constraint_set import ConstraintSet
    from conpath.device import Device
    from conpath.spec.types import Configuration, Interval


class HermiteSteeringMethod:
    """Build a HermitePath between two configurations.

    The steering method keeps no state between calls: constraints are given
    with each call and copied into the produced path.
    """

    path_kind = PathKind.HERMITE

    def __init__(self, device: Device, default_time_range: Interval = (0.0, 1.0)):
        self._device = device
        self._default_time_range = default_time_range

    @property
    def device(self) -> Device:
        return self._device

    def steer(
        self,
        q1: Configuration,
        q2: Configuration,
        time_range: Interval | None = None,
        constraints: ConstraintSet | None = None,
    ) -> HermitePath:
        if time_range is None:
            time_range = self._default_time_range
        return HermitePath(self._device, q1, q2, constraints, time_range)

    def __call__(
        self,
        q1: Configuration,
        q2: Configuration,
        time_range: Interval | None = None,
        constraints: ConstraintSet | None = None,
    ) -> HermitePath:
        return self.steer(q1, q2, time_range, constraints)

    def __repr__(self) -> str:
        return f"HermiteSteeringMethod({self._device.name!r})"
