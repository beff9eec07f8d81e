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

"""Projection Engine Specifications."""

from conpath.spec.config import JointModel, JointType
from conpath.spec.enums import (
    ComparisonType,
    LineSearchType,
    PathKind,
    ProjectionStatus,
    SolverStatus,
)
from conpath.spec.errors import (
    ConfigurationError,
    ConpathError,
    PathTypeError,
    ProjectionError,
    SubdivisionLimitError,
    UnsupportedOperationError,
)
from conpath.spec.protocols import (
    DeviceSpec,
    DistanceSpec,
    PathProjectorSpec,
    SteeringMethodSpec,
)
from conpath.spec.types import (
    Configuration,
    Interval,
    Jacobian,
    ProjectionResult,
    ProjectorStatistics,
    Velocity,
)

__all__ = [
    "ComparisonType",
    "ConfigurationError",
    "Configuration",
    "ConpathError",
    "DeviceSpec",
    "DistanceSpec",
    "Interval",
    "Jacobian",
    "JointModel",
    "JointType",
    "LineSearchType",
    "PathKind",
    "PathProjectorSpec",
    "PathTypeError",
    "ProjectionError",
    "ProjectionResult",
    "ProjectionStatus",
    "ProjectorStatistics",
    "SolverStatus",
    "SteeringMethodSpec",
    "SubdivisionLimitError",
    "UnsupportedOperationError",
    "Velocity",
]
