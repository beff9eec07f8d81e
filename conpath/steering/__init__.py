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
Steering Methods

Build paths between two configurations. Constraints of the produced path are
passed with each call, so steering methods can be shared freely.

## Implementations

- HermiteSteeringMethod: cubic Hermite paths (required by RecursiveHermite)
- StraightSteeringMethod: two-waypoint interpolated paths
"""

from conpath.steering.hermite import HermiteSteeringMethod
from conpath.steering.straight import StraightSteeringMethod

__all__ = ["HermiteSteeringMethod", "StraightSteeringMethod"]
