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
Constraints Module

Numerical constraints and the Newton-Raphson projector that enforces them.

## Contents

- DifferentiableFunction: value + tangent-space Jacobian (AffineFunction,
  SquaredDistance, CallableFunction)
- Implicit: function compared to a right-hand side row by row
- LockedJoint: explicit constraint fixing a joint value
- ConfigProjector: Newton-Raphson solver on the reduced Jacobian
- ConstraintSet: what a path carries
"""

from conpath.constraints.config_projector import ConfigProjector
from conpath.constraints.constraint_set import ConstraintSet
from conpath.constraints.functions import (
    AffineFunction,
    CallableFunction,
    DifferentiableFunction,
    SquaredDistance,
)
from conpath.constraints.implicit import Implicit
from conpath.constraints.locked_joint import LockedJoint

__all__ = [
    "AffineFunction",
    "CallableFunction",
    "ConfigProjector",
    "ConstraintSet",
    "DifferentiableFunction",
    "Implicit",
    "LockedJoint",
    "SquaredDistance",
]
