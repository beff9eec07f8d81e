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

"""Robot model configuration for the projection engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class JointType(str, Enum):
    """Configuration space of a single joint."""

    EUCLIDEAN = "euclidean"
    SO2 = "so2"


@dataclass(frozen=True)
class JointModel:
    """One joint of a Device.

    Attributes:
        name: Joint name, unique within the device
        joint_type: EUCLIDEAN (R^size) or SO2 (unbounded rotation)
        size: Dimension of a EUCLIDEAN joint. Ignored for SO2 joints, which
            are stored as (cos, sin) and move along one tangent direction.
        lower: Lower bounds (EUCLIDEAN only, informative)
        upper: Upper bounds (EUCLIDEAN only, informative)
    """

    name: str
    joint_type: JointType = JointType.EUCLIDEAN
    size: int = 1
    lower: tuple[float, ...] | None = None
    upper: tuple[float, ...] | None = None

    @property
    def nq(self) -> int:
        """Number of configuration variables."""
        return 2 if self.joint_type == JointType.SO2 else self.size

    @property
    def nv(self) -> int:
        """Number of tangent variables."""
        return 1 if self.joint_type == JointType.SO2 else self.size
