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

"""Robot configuration space.

A Device is a product of joints, each either Euclidean (``R^n``) or an
unbounded rotation (``SO(2)``, stored as ``(cos, sin)``). Every joint group is
abelian, so the time derivative of ``integrate(base, x(t))`` is ``dx/dt``;
the Hermite paths rely on that.

The joints are mirrored in a Pinocchio model, one prismatic joint per
Euclidean axis and one unbounded revolute joint per rotation, and the Lie
group operations are delegated to it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import pinocchio  # type: ignore[import-untyped]

from conpath.spec.config import JointModel, JointType
from conpath.spec.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from conpath.spec.types import Configuration, Velocity


class Device:
    """Configuration space of a robot made of Euclidean and SO(2) joints.

    Example:
        device = Device("planar", [JointModel("xy", size=2), JointModel("theta", JointType.SO2)])
        q = device.neutral_configuration()          # [0, 0, 1, 0]
        v = device.difference(q1, q0)               # size device.nv
    """

    def __init__(self, name: str, joints: Sequence[JointModel]):
        names = [joint.name for joint in joints]
        if len(set(names)) != len(names):
            raise ConfigurationError(f"Duplicate joint names in device {name}: {names}")

        self.name = name
        self._joints = list(joints)
        self._idx_q: list[int] = []
        self._idx_v: list[int] = []
        iq = iv = 0
        for joint in self._joints:
            self._idx_q.append(iq)
            self._idx_v.append(iv)
            iq += joint.nq
            iv += joint.nv
        self._config_size = iq
        self._nv = iv
        self._model = _build_model(name, self._joints)

    @classmethod
    def euclidean(cls, name: str, size: int) -> Device:
        """Device whose configuration space is R^size, one joint per axis."""
        return cls(name, [JointModel(f"joint{i + 1}") for i in range(size)])

    @property
    def model(self) -> pinocchio.Model:
        return self._model

    @property
    def joints(self) -> list[JointModel]:
        return list(self._joints)

    @property
    def config_size(self) -> int:
        return self._config_size

    @property
    def nv(self) -> int:
        return self._nv

    def joint_index(self, name: str) -> tuple[int, int]:
        """Return (configuration index, tangent index) of a joint."""
        for joint, iq, iv in zip(self._joints, self._idx_q, self._idx_v, strict=True):
            if joint.name == name:
                return iq, iv
        raise KeyError(f"Device {self.name} has no joint named {name!r}")

    def joint(self, name: str) -> JointModel:
        for joint in self._joints:
            if joint.name == name:
                return joint
        raise KeyError(f"Device {self.name} has no joint named {name!r}")

    def neutral_configuration(self) -> Configuration:
        return np.asarray(pinocchio.neutral(self._model), dtype=np.float64)

    def difference(self, q1: Configuration, q0: Configuration) -> Velocity:
        """Tangent vector v such that integrate(q0, v) == q1."""
        return np.asarray(pinocchio.difference(self._model, _vector(q0), _vector(q1)))

    def integrate(self, q: Configuration, v: Velocity) -> Configuration:
        return np.asarray(pinocchio.integrate(self._model, _vector(q), _vector(v)))

    def interpolate(self, q0: Configuration, q1: Configuration, u: float) -> Configuration:
        """Point at fraction u of the geodesic from q0 to q1."""
        return np.asarray(
            pinocchio.interpolate(self._model, _vector(q0), _vector(q1), float(u))
        )

    def normalize(self, q: Configuration) -> Configuration:
        """Project SO(2) components back on the unit circle."""
        return np.asarray(pinocchio.normalize(self._model, _vector(q)))

    def __repr__(self) -> str:
        return f"Device({self.name!r}, config_size={self._config_size}, nv={self._nv})"


def _vector(x: Configuration | Velocity) -> Configuration:
    return np.ascontiguousarray(x, dtype=np.float64)


def _build_model(name: str, joints: Sequence[JointModel]) -> pinocchio.Model:
    """Serial chain with the joints in the configuration order of the device."""
    model = pinocchio.Model()
    model.name = name
    parent = 0
    for joint in joints:
        if joint.joint_type == JointType.SO2:
            parent = model.addJoint(
                parent, pinocchio.JointModelRUBZ(), pinocchio.SE3.Identity(), joint.name
            )
            continue
        for axis in range(joint.size):
            axis_name = joint.name if joint.size == 1 else f"{joint.name}_{axis}"
            parent = model.addJoint(
                parent, pinocchio.JointModelPX(), pinocchio.SE3.Identity(), axis_name
            )
    return model
