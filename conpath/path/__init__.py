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
Path Module

Paths map a time interval to configurations, optionally through a time
parameterization, and apply their constraints on evaluation.

## Contents

- Path: abstract base (evaluation, chain-rule derivatives, extraction)
- ExtractedPath: part of another path, possibly reversed
- HermitePath: cubic Bernstein curve with editable boundary velocities
- InterpolatedPath: piecewise geodesic through timed waypoints
- PathVector: concatenation of paths
- Polynomial, Shift, shift(): time parameterizations
"""

from conpath.path.hermite import HermitePath
from conpath.path.interpolated import InterpolatedPath
from conpath.path.path import ExtractedPath, Path
from conpath.path.path_vector import PathVector
from conpath.path.time_parameterization import (
    Polynomial,
    Shift,
    TimeParameterization,
    compose,
    shift,
)

__all__ = [
    "ExtractedPath",
    "HermitePath",
    "InterpolatedPath",
    "Path",
    "PathVector",
    "Polynomial",
    "Shift",
    "TimeParameterization",
    "compose",
    "shift",
]
