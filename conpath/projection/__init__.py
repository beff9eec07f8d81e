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
Path Projection Module

Projectors turning paths into paths that stay on their constraints.

## Implementations

- PathProjector: base class (distance, steering, endpoint checks)
- RecursiveHermite: recursive bisection of Hermite pieces
"""

from conpath.projection.path_projector import PathProjector
from conpath.projection.recursive_hermite import RecursiveHermite

__all__ = ["PathProjector", "RecursiveHermite"]
