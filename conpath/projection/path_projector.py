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

"""Base class of path projectors.

A path projector turns a path whose interior may leave the constraint
manifold into one that stays on it. Subclasses implement impl_apply();
apply() wraps it into a ProjectionResult and checks that the projected path
starts where the input did (and ends there too on success).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import numpy as np

from conpath.spec.enums import ProjectionStatus
from conpath.spec.errors import PathTypeError, ProjectionError
from conpath.spec.types import ProjectionResult
from conpath.utils.logging_config import setup_logger

if TYPE_CHECKING:
    from conpath.constraints.constraint_set import ConstraintSet
    from conpath.path.hermite import HermitePath
    from conpath.path.path import Path
    from conpath.spec.protocols import DistanceSpec, SteeringMethodSpec
    from conpath.spec.types import Configuration, Interval

logger = setup_logger()

_STATUS_MESSAGES = {
    ProjectionStatus.SUCCESS: "Path projected",
    ProjectionStatus.END_NOT_SATISFIED: "End configuration does not satisfy the path constraints",
    ProjectionStatus.PROJECTION_FAILED: "Could not project a configuration on the constraints",
    ProjectionStatus.NOT_CONTRACTING: "Subdivision stopped: Hermite length does not contract",
}


class PathProjector(ABC):
    """Holds the distance and steering method shared by path projectors."""

    def __init__(self, distance: DistanceSpec, steering_method: SteeringMethodSpec):
        self._distance = distance
        self._steering_method = steering_method

    @property
    def distance(self) -> DistanceSpec:
        return self._distance

    @property
    def steering_method(self) -> SteeringMethodSpec:
        return self._steering_method

    def d(self, q1: Configuration, q2: Configuration) -> float:
        return self._distance(q1, q2)

    def steer(
        self,
        q1: Configuration,
        q2: Configuration,
        time_range: Interval | None = None,
        constraints: ConstraintSet | None = None,
    ) -> Path:
        return self._steering_method.steer(q1, q2, time_range, constraints)

    def steer_hermite(
        self,
        q1: Configuration,
        q2: Configuration,
        time_range: Interval | None = None,
        constraints: ConstraintSet | None = None,
    ) -> HermitePath:
        path = self.steer(q1, q2, time_range, constraints)
        hermite = path.as_hermite()
        if hermite is None:
            raise PathTypeError(f"Steering method returned a {path.kind.name} path, expected HERMITE")
        return hermite

    def apply(self, path: Path) -> ProjectionResult:
        """Project path onto its constraints.

        Returns:
            ProjectionResult. On failure, result.path is the longest prefix
            that could be projected (zero length at the start time if none).
            When an end configuration violates the constraints, the result
            also holds that configuration and its residual.
        """
        status, projected, failure = self.impl_apply(path)
        if projected is None:
            t0 = path.time_range[0]
            projected = path.extract((t0, t0))
        self._check_endpoints(path, projected, status)

        vector = projected.as_path_vector()
        num_pieces = 1 if vector is None else vector.number_paths()
        return ProjectionResult(
            status=status,
            path=projected,
            num_pieces=num_pieces,
            message=_STATUS_MESSAGES[status],
            configuration=None if failure is None else failure.configuration,
            error=None if failure is None else failure.error,
        )

    @abstractmethod
    def impl_apply(
        self, path: Path
    ) -> tuple[ProjectionStatus, Path | None, ProjectionError | None]:
        """Return (status, projected path or None, failure details or None)."""
        ...

    @abstractmethod
    def get_name(self) -> str: ...

    def _check_endpoints(self, path: Path, projected: Path, status: ProjectionStatus) -> None:
        if not np.array_equal(projected.initial(), path.initial()):
            logger.warning("Projected path does not start at the initial configuration")
            raise ProjectionError(
                "Projected path does not start at the initial configuration",
                projected.initial(),
            )
        if status == ProjectionStatus.SUCCESS and not np.array_equal(projected.end(), path.end()):
            logger.warning("Projected path does not end at the end configuration")
            raise ProjectionError(
                "Projected path does not end at the end configuration",
                projected.end(),
            )
