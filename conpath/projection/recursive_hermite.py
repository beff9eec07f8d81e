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

"""Path projection by recursive subdivision of Hermite curves.

The projector approximates a constrained path by a sequence of cubic Hermite
pieces. A piece whose Hermite length (the length of its control polygon) is
below 2 * error_threshold / M is close enough to the constraint manifold
to be accepted. Otherwise its midpoint is projected on the constraints and
the piece is split there into two Hermite pieces whose boundary velocities
are inherited from the parent.

Subdivision stops with a failure when a child is not shorter than beta
times its parent: the Hermite length must contract at every step for the
result to converge to a continuous constrained path.

Reference: Hauser, "Fast interpolation and time-optimization with contact",
IJRR 2014 (the contraction test is applied with the sense used in practice,
child > beta * parent stops).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from conpath.path.interpolated import InterpolatedPath
from conpath.path.path_vector import PathVector
from conpath.projection.path_projector import PathProjector
from conpath.spec.enums import PathKind, ProjectionStatus
from conpath.spec.errors import ConfigurationError, ProjectionError, SubdivisionLimitError
from conpath.utils.logging_config import setup_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from conpath.constraints.constraint_set import ConstraintSet
    from conpath.path.hermite import HermitePath
    from conpath.path.path import Path
    from conpath.spec.protocols import DistanceSpec, SteeringMethodSpec

logger = setup_logger()

# Pushed in place of a right child that failed the contraction test, so that
# the failure is reported only after the left subtree has been emitted.
_STOP = None


class RecursiveHermite(PathProjector):
    """Project paths by recursively splitting Hermite curves.

    Example:
        projector = RecursiveHermite(WeighedDistance(device), HermiteSteeringMethod(device), M=2.0, beta=0.9)
        result = projector.apply(path)
        if result.is_success():
            projected = result.path
    """

    def __init__(
        self,
        distance: DistanceSpec,
        steering_method: SteeringMethodSpec,
        M: float,
        beta: float = 0.9,
        *,
        interpolation_times: Sequence[float] | None = None,
        max_depth: int = 64,
        max_nodes: int = 100_000,
    ):
        """Create a recursive Hermite projector.

        Args:
            distance: Distance used for piece statistics
            steering_method: Must produce HermitePath (path_kind HERMITE)
            M: Step parameter. Pieces are accepted below 2 * error_threshold / M.
            beta: Contraction ratio, in [0.5, 1]
            interpolation_times: Overrides the time ranges of the Hermite
                pieces built from the waypoints of an InterpolatedPath
            max_depth: Maximum subdivision depth
            max_nodes: Maximum number of pieces examined per candidate
        """
        super().__init__(distance, steering_method)
        if not 0.5 <= beta <= 1:
            raise ConfigurationError(f"Beta should be between 0.5 and 1, got {beta}")
        path_kind = getattr(steering_method, "path_kind", None)
        if path_kind != PathKind.HERMITE:
            raise ConfigurationError(
                "Steering method should produce HERMITE paths, got "
                f"{getattr(path_kind, 'name', path_kind)}"
            )
        if M <= 0:
            raise ConfigurationError(f"M must be positive, got {M}")
        self._M = float(M)
        self._beta = float(beta)
        self._interpolation_times = (
            None if interpolation_times is None else [float(t) for t in interpolation_times]
        )
        self._max_depth = max_depth
        self._max_nodes = max_nodes

    @property
    def M(self) -> float:
        return self._M

    @property
    def beta(self) -> float:
        return self._beta

    @property
    def interpolation_times(self) -> list[float] | None:
        return None if self._interpolation_times is None else list(self._interpolation_times)

    def get_name(self) -> str:
        return "RecursiveHermite"

    # ============= Projection =============

    def impl_apply(
        self, path: Path
    ) -> tuple[ProjectionStatus, Path | None, ProjectionError | None]:
        vector = path.as_path_vector()
        if vector is None:
            constraints = path.constraints
            if constraints is None or constraints.config_projector is None:
                return ProjectionStatus.SUCCESS, path, None
            return self.project(path)

        result = PathVector(vector.output_size, vector.output_derivative_size)
        for i in range(vector.number_paths()):
            status, part, failure = self.impl_apply(vector.path_at_rank(i))
            if status != ProjectionStatus.SUCCESS:
                # Keep the partial piece unless it is empty and not the first one
                if part is not None and (part.length() > 0 or i == 0):
                    result.append_path(part)
                if result.number_paths() == 0:
                    return status, None, failure
                return status, result, failure
            assert part is not None
            result.append_path(part)
        return ProjectionStatus.SUCCESS, result, None

    def project(
        self, path: Path
    ) -> tuple[ProjectionStatus, Path | None, ProjectionError | None]:
        """Project a single (non vector) path.

        Returns:
            Tuple of (status, projected path, failure). On failure the path
            holds the pieces accepted before the failure, or is None when the
            end configuration itself violates the constraints. In that case
            failure carries the end configuration and its residual.
        """
        constraints = path.constraints
        if constraints is None:
            return ProjectionStatus.SUCCESS, path, None
        projector = constraints.config_projector
        if projector is not None:
            projector.right_hand_side_at(path.param_range[1])
        end = path.end()
        if not constraints.is_satisfied(end):
            error = constraints.residual(end)
            logger.warning(
                "End configuration does not satisfy the path constraints",
                residual=float(np.linalg.norm(error)),
            )
            failure = ProjectionError(
                "End configuration does not satisfy the path constraints", end, error
            )
            return ProjectionStatus.END_NOT_SATISFIED, None, failure
        if projector is None or projector.dimension() == 0:
            return ProjectionStatus.SUCCESS, path, None

        threshold = 2 * projector.error_threshold / self._M
        result = PathVector(path.output_size, path.output_derivative_size)
        status = ProjectionStatus.SUCCESS
        for candidate in self._hermite_candidates(path, constraints):
            if candidate.compute_hermite_length() < threshold:
                result.append_path(candidate)
                continue
            pieces = PathVector(path.output_size, path.output_derivative_size)
            status = self._subdivide(candidate, threshold, pieces)
            result.concatenate(pieces)
            if status != ProjectionStatus.SUCCESS:
                break

        self._log_statistics(result)
        if status == ProjectionStatus.SUCCESS:
            return status, result, None

        t_min = path.time_range[0]
        if result.number_paths() == 0:
            return status, path.extract((t_min, t_min)), None
        if result.number_paths() == 1:
            return status, result.path_at_rank(0), None
        return status, result, None

    def recurse(self, path: HermitePath, accept_threshold: float, out: PathVector) -> bool:
        """Subdivide path until every piece is below accept_threshold.

        Accepted pieces are appended to out from left to right, including the
        ones accepted before a failure.
        """
        return self._subdivide(path, accept_threshold, out) == ProjectionStatus.SUCCESS

    # ============= Internals =============

    def _hermite_candidates(self, path: Path, constraints: ConstraintSet) -> list[HermitePath]:
        hermite = path.as_hermite()
        if hermite is not None:
            return [hermite]

        if isinstance(path, InterpolatedPath):
            points = path.interpolation_points
            times = self._interpolation_times
            if times is None:
                times = [t for t, _ in points]
            elif len(times) != len(points):
                raise ConfigurationError(
                    f"{len(times)} interpolation times given for {len(points)} waypoints"
                )
            return [
                self.steer_hermite(q0, q1, (t0, t1), constraints)
                for (_, q0), (_, q1), t0, t1 in zip(
                    points, points[1:], times, times[1:], strict=False
                )
            ]

        return [self.steer_hermite(path.initial(), path.end(), path.param_range, constraints)]

    def _subdivide(
        self, path: HermitePath, accept_threshold: float, out: PathVector
    ) -> ProjectionStatus:
        """Depth-first subdivision on an explicit stack, left piece first."""
        stack: list[tuple[HermitePath, int] | None] = [(path, 0)]
        nodes = 0
        while stack:
            item = stack.pop()
            if item is _STOP:
                return ProjectionStatus.NOT_CONTRACTING
            piece, depth = item
            nodes += 1
            if depth > self._max_depth or nodes > self._max_nodes:
                raise SubdivisionLimitError(
                    f"Subdivision exceeded its limits (depth {depth}/{self._max_depth}, "
                    f"nodes {nodes}/{self._max_nodes})",
                    depth,
                    nodes,
                )

            if piece.hermite_length < accept_threshold:
                out.append_path(piece)
                continue

            t0, t1 = piece.time_range
            t = t0 + piece.length() / 2
            q1, success = piece.eval(t)
            if not success:
                logger.info("Subdivision stopped: could not project a configuration", time=t)
                return ProjectionStatus.PROJECTION_FAILED

            velocity = piece.velocity(t)
            left = self.steer_hermite(piece.initial(), q1, (t0, t), piece.constraints)
            left.v0 = piece.v0
            left.v1 = velocity
            left.compute_hermite_length()

            right = self.steer_hermite(q1, piece.end(), (t, t1), piece.constraints)
            right.v0 = velocity
            right.v1 = piece.v1
            right.compute_hermite_length()

            stop_threshold = self._beta * piece.hermite_length
            left_stop = left.hermite_length > stop_threshold
            right_stop = right.hermite_length > stop_threshold
            if left_stop or right_stop:
                logger.info(
                    "Subdivision stopped: Hermite length does not contract",
                    parent=piece.hermite_length,
                    beta=self._beta,
                    left=left.hermite_length,
                    right=right.hermite_length,
                )
            if left_stop:
                return ProjectionStatus.NOT_CONTRACTING
            stack.append(_STOP if right_stop else (right, depth + 1))
            stack.append((left, depth + 1))
        return ProjectionStatus.SUCCESS

    def _log_statistics(self, result: PathVector) -> None:
        if result.number_paths() == 0:
            return
        lengths = [self.d(piece.initial(), piece.end()) for piece in result.paths]
        logger.debug(
            "Hermite path",
            pieces=len(lengths),
            min=min(lengths),
            mean=sum(lengths) / len(lengths),
            max=max(lengths),
        )

    def __repr__(self) -> str:
        return f"RecursiveHermite(M={self._M}, beta={self._beta})"
