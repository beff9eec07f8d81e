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

"""Explicit constraint fixing the value of one joint."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from collections.abc import Sequence

    from numpy.typing import NDArray

    from conpath.device import Device
    from conpath.spec.types import Configuration


class LockedJoint:
    """Lock a joint of a device at a given value.

    The locked degrees of freedom are solved explicitly: their value is written
    into the configuration and their columns are removed from the reduced
    Jacobian of the ConfigProjector.
    """

    def __init__(
        self,
        device: Device,
        joint_name: str,
        value: NDArray[np.float64] | Sequence[float],
    ):
        joint = device.joint(joint_name)
        value = np.atleast_1d(np.asarray(value, dtype=np.float64))
        if value.shape != (joint.nq,):
            raise ValueError(
                f"Locked joint {joint_name}: value must have shape ({joint.nq},), got {value.shape}"
            )
        self._device = device
        self._joint_name = joint_name
        self._iq, self._iv = device.joint_index(joint_name)
        self._nq = joint.nq
        self._nv = joint.nv
        self._value = value

    @property
    def name(self) -> str:
        return f"locked_joint/{self._joint_name}"

    @property
    def joint_name(self) -> str:
        return self._joint_name

    @property
    def value(self) -> NDArray[np.float64]:
        return self._value.copy()

    @property
    def velocity_indices(self) -> list[int]:
        """Tangent-space indices of the locked degrees of freedom."""
        return list(range(self._iv, self._iv + self._nv))

    def apply(self, q: Configuration) -> Configuration:
        result = np.array(q, dtype=np.float64)
        result[self._iq : self._iq + self._nq] = self._value
        return result

    def error(self, q: Configuration) -> NDArray[np.float64]:
        target = self.apply(q)
        return self._device.difference(q, target)[self._iv : self._iv + self._nv]

    def right_hand_side_from_config(self, q: Configuration) -> NDArray[np.float64]:
        self._value = np.array(q[self._iq : self._iq + self._nq], dtype=np.float64)
        return self._value.copy()

    def copy(self) -> LockedJoint:
        return LockedJoint(self._device, self._joint_name, self._value)

    def __repr__(self) -> str:
        return f"LockedJoint({self._joint_name!r}, {self._value.tolist()})"
