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

"""Data types for constrained path projection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypeAlias

from conpath.spec.enums import ProjectionStatus, SolverStatus

if TYPE_CHECKING:
    import numpy as np
    from numpy.typing import NDArray

    from conpath.path.path import Path

# =============================================================================
# Numeric Types
# =============================================================================

Configuration: TypeAlias = "NDArray[np.float64]"
"""Point of the configuration space (size ``Device.config_size``)"""

Velocity: TypeAlias = "NDArray[np.float64]"
"""Tangent vector (size ``Device.nv``)"""

Jacobian: TypeAlias = "NDArray[np.float64]"
"""m x nv Jacobian of stacked constraint functions"""

Interval: TypeAlias = "tuple[float, float]"
"""Closed interval (start, end); start > end requests a reversed path"""


# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class ProjectorStatistics:
    """Outcome counters of a ConfigProjector."""

    counts: dict[SolverStatus, int] = field(default_factory=dict)

    def add(self, status: SolverStatus) -> None:
        self.counts[status] = self.counts.get(status, 0) + 1

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    @property
    def successes(self) -> int:
        return self.counts.get(SolverStatus.SUCCESS, 0)

    def success_rate(self) -> float:
        if self.total == 0:
            return 0.0
        return self.successes / self.total


@dataclass
class ProjectionResult:
    """Result of a path projection.

    Attributes:
        status: Projection status
        path: Projected path. On failure, the longest valid prefix that
            could be built (possibly a zero-length path at the start time).
        num_pieces: Number of pieces in the projected path
        message: Human-readable status message
        configuration: End configuration that violates the constraints
            (END_NOT_SATISFIED only)
        error: Residual of the constraints at that configuration
    """

    status: ProjectionStatus
    path: Path
    num_pieces: int = 0
    message: str = ""
    configuration: Configuration | None = None
    error: NDArray[np.float64] | None = None

    def is_success(self) -> bool:
        """Check if the projection was successful."""
        return self.status == ProjectionStatus.SUCCESS
