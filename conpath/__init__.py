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

"""
Constrained Path Projection

Projects robot paths onto manifolds defined by implicit numerical
constraints, by recursive subdivision of cubic Hermite curves.

## Architecture

- Device: configuration space (Euclidean and SO(2) joints)
- ConfigProjector: Newton-Raphson projection of configurations
- Path: HermitePath, InterpolatedPath, PathVector, ExtractedPath
- SteeringMethodSpec: builds paths between configurations
  - HermiteSteeringMethod, StraightSteeringMethod
- PathProjectorSpec: projects whole paths
  - RecursiveHermite

## Factory Functions

```python
from conpath.factory import (
    create_config_projector,
    create_distance,
    create_path_projector,
    create_steering_method,
)

projector = create_config_projector(device, "on_circle")
projector.add(Implicit(SquaredDistance(2, [0.0, 0.0]), [ComparisonType.EQUALITY], [1.0]))
constraints = ConstraintSet(device, "circle", projector)

steering = create_steering_method(device, name="hermite")
path_projector = create_path_projector(create_distance(device), steering)
result = path_projector.apply(steering.steer(q_init, q_goal, constraints=constraints))
```
"""

from conpath.constraints import (
    ConfigProjector,
    ConstraintSet,
    Implicit,
    LockedJoint,
)
from conpath.device import Device
from conpath.distance import WeighedDistance
from conpath.factory import (
    create_config_projector,
    create_distance,
    create_path_projector,
    create_steering_method,
)
from conpath.path import (
    ExtractedPath,
    HermitePath,
    InterpolatedPath,
    Path,
    PathVector,
)
from conpath.projection import PathProjector, RecursiveHermite
from conpath.spec import (
    ComparisonType,
    JointModel,
    JointType,
    LineSearchType,
    ProjectionResult,
    ProjectionStatus,
)
from conpath.steering import HermiteSteeringMethod, StraightSteeringMethod

__all__ = [
    "ComparisonType",
    "ConfigProjector",
    "ConstraintSet",
    "Device",
    "ExtractedPath",
    "HermitePath",
    "Implicit",
    "InterpolatedPath",
    "JointModel",
    "JointType",
    "LineSearchType",
    "LockedJoint",
    "Path",
    "PathProjector",
    "PathVector",
    "ProjectionResult",
    "ProjectionStatus",
    "RecursiveHermite",
    "StraightSteeringMethod",
    "HermiteSteeringMethod",
    "WeighedDistance",
    "create_config_projector",
    "create_distance",
    "create_path_projector",
    "create_steering_method",
]
