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

"""Newton-Raphson projection of configurations onto implicit constraints.

The ConfigProjector stacks implicit numerical constraints

    f_1(q) = or <= f_1^0
    ...
    f_m(q) = or <= f_m^0

and explicit locked joints. Configurations are projected with a
Newton-Raphson method on the *reduced* system: columns of locked degrees of
freedom are removed from the Jacobian and columns of passive degrees of
freedom are set to zero. Steps use the SVD pseudo-inverse, so redundant or
singular constraints are handled in the least-squares sense.

Constraints are grouped by priority level. Each Newton step solves level 0
first and every following level in the kernel of the levels before it. The
last level may be declared optional: it is then ignored by apply() and
only reduced by optimize(), which moves along the required constraints.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from conpath.constraints.implicit import Implicit
from conpath.constraints.line_search import create_line_search
from conpath.constraints.locked_joint import LockedJoint
from conpath.spec.enums import LineSearchType, SolverStatus
from conpath.spec.types import ProjectorStatistics
from conpath.utils.kinematics_utils import (
    kernel_projector,
    matrix_rank,
    svd_pseudoinverse,
)
from conpath.utils.logging_config import setup_logger

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from numpy.typing import NDArray

    from conpath.device import Device
    from conpath.spec.types import Configuration, Jacobian, Velocity

logger = setup_logger()


class ConfigProjector:
    """Project configurations onto a stack of numerical constraints.

    The solve succeeds when the norm of the stacked residual drops below
    ``error_threshold``; it fails (returns False, never raises) after
    ``max_iterations`` Newton steps.

    Example:
        projector = ConfigProjector(device, "on_circle", error_threshold=1e-6, max_iterations=20)
        projector.add(Implicit(SquaredDistance(2, [0.0, 0.0]), [ComparisonType.EQUALITY], [1.0]))
        q_proj, success = projector.apply(np.array([1.2, 0.1]))
    """

    def __init__(
        self,
        device: Device,
        name: str,
        error_threshold: float,
        max_iterations: int,
        line_search: LineSearchType = LineSearchType.FIXED_SEQUENCE,
    ):
        """Create a config projector.

        Args:
            device: Robot whose configurations are projected
            name: Name of the projector
            error_threshold: Norm of the residual under which a configuration
                satisfies the constraints
            max_iterations: Maximum number of Newton-Raphson steps per solve
            line_search: Step policy (default FIXED_SEQUENCE)
        """
        if error_threshold <= 0:
            raise ValueError(f"error_threshold must be positive, got {error_threshold}")
        self._device = device
        self.name = name
        self._error_threshold = float(error_threshold)
        self._max_iterations = int(max_iterations)
        self._line_search = LineSearchType(line_search)
        self._implicits: list[Implicit] = []
        self._priorities: list[int] = []
        self._last_is_optional = False
        self._locked: list[LockedJoint] = []
        self._passive_dofs: set[int] = set()
        self._free_mask = np.ones(device.nv, dtype=bool)
        self._statistics = ProjectorStatistics()
        self._residual_error = 0.0
        self._sigma = float("inf")
        self._last_iterations = 0

    # ============= Constraints =============

    @property
    def device(self) -> Device:
        return self._device

    @property
    def numerical_constraints(self) -> list[Implicit]:
        return list(self._implicits)

    @property
    def locked_joints(self) -> list[LockedJoint]:
        return list(self._locked)

    def contains(self, constraint: Implicit | LockedJoint) -> bool:
        """Whether a constraint with the same name is already in the projector."""
        return any(c.name == constraint.name for c in (*self._implicits, *self._locked))

    def add(self, constraint: Implicit | LockedJoint, priority: int = 0) -> bool:
        """Add a constraint. Returns False if it was already inserted.

        Args:
            constraint: Implicit constraint or locked joint
            priority: Level of an implicit constraint, 0 being solved first.
                Locked joints are always enforced and ignore it.
        """
        if priority < 0:
            raise ValueError(f"priority must be non-negative, got {priority}")
        if self.contains(constraint):
            return False
        if isinstance(constraint, LockedJoint):
            self._locked.append(constraint)
            self._free_mask[constraint.velocity_indices] = False
        else:
            if constraint.function.input_derivative_size != self._device.nv:
                raise ValueError(
                    f"Constraint {constraint.name} expects {constraint.function.input_derivative_size} "
                    f"velocity variables, device {self._device.name} has {self._device.nv}"
                )
            self._implicits.append(constraint)
            self._priorities.append(int(priority))
        return True

    def priority(self, constraint: Implicit) -> int:
        for implicit, priority in zip(self._implicits, self._priorities):
            if implicit.name == constraint.name:
                return priority
        raise KeyError(f"Constraint {constraint.name} is not in projector {self.name}")

    @property
    def last_is_optional(self) -> bool:
        """Whether the highest priority level is optional."""
        return self._last_is_optional

    @last_is_optional.setter
    def last_is_optional(self, optional: bool) -> None:
        self._last_is_optional = bool(optional)

    def _optional_level(self) -> int | None:
        if not self._last_is_optional or not self._priorities:
            return None
        return max(self._priorities)

    def _levels(self) -> list[list[Implicit]]:
        """Required implicit constraints grouped by increasing priority."""
        optional = self._optional_level()
        levels: dict[int, list[Implicit]] = {}
        for implicit, priority in zip(self._implicits, self._priorities):
            if priority != optional:
                levels.setdefault(priority, []).append(implicit)
        return [levels[p] for p in sorted(levels)]

    def _required(self) -> list[Implicit]:
        return [c for level in self._levels() for c in level]

    def _optional(self) -> list[Implicit]:
        optional = self._optional_level()
        return [c for c, p in zip(self._implicits, self._priorities) if p == optional]

    @property
    def passive_dofs(self) -> list[int]:
        return sorted(self._passive_dofs)

    def set_passive_dofs(self, dofs: Iterable[int]) -> None:
        """Tangent indices the solver must not move (Jacobian columns set to zero)."""
        dofs = set(dofs)
        if any(d < 0 or d >= self._device.nv for d in dofs):
            raise ValueError(f"Passive dofs out of range [0, {self._device.nv}): {sorted(dofs)}")
        self._passive_dofs = dofs

    # ============= Parameters =============

    @property
    def error_threshold(self) -> float:
        return self._error_threshold

    @error_threshold.setter
    def error_threshold(self, threshold: float) -> None:
        self._error_threshold = float(threshold)

    @property
    def max_iterations(self) -> int:
        return self._max_iterations

    @max_iterations.setter
    def max_iterations(self, iterations: int) -> None:
        self._max_iterations = int(iterations)

    @property
    def line_search(self) -> LineSearchType:
        return self._line_search

    @line_search.setter
    def line_search(self, line_search: LineSearchType) -> None:
        self._line_search = LineSearchType(line_search)

    @property
    def residual_error(self) -> float:
        """Residual norm at the end of the last solve."""
        return self._residual_error

    @property
    def sigma(self) -> float:
        """Smallest singular value of the last reduced Jacobian."""
        return self._sigma

    @property
    def iterations(self) -> int:
        """Number of Newton steps taken by the last solve."""
        return self._last_iterations

    @property
    def statistics(self) -> ProjectorStatistics:
        return self._statistics

    def dimension(self) -> int:
        """Number of rows of the implicit system."""
        return sum(c.output_size for c in self._implicits)

    def number_free_variables(self) -> int:
        return int(np.count_nonzero(self._free_mask))

    # ============= Compression of locked degrees of freedom =============

    def compress_vector(self, normal: Velocity) -> Velocity:
        """Remove locked degrees of freedom from a tangent vector."""
        result: Velocity = np.asarray(normal)[self._free_mask]
        return result

    def uncompress_vector(self, small: Velocity) -> Velocity:
        """Expand a compressed tangent vector, locked degrees of freedom set to 0."""
        normal = np.zeros(self._device.nv)
        normal[self._free_mask] = small
        return normal

    def compress_matrix(self, normal: NDArray[np.float64], rows: bool = True) -> NDArray[np.float64]:
        """Remove locked columns (and rows if ``rows``) from a matrix."""
        small = np.asarray(normal)[:, self._free_mask]
        if rows:
            small = small[self._free_mask, :]
        result: NDArray[np.float64] = small
        return result

    def uncompress_matrix(self, small: NDArray[np.float64], rows: bool = True) -> NDArray[np.float64]:
        nv = self._device.nv
        if rows:
            normal = np.zeros((nv, nv))
            normal[np.ix_(self._free_mask, self._free_mask)] = small
        else:
            normal = np.zeros((small.shape[0], nv))
            normal[:, self._free_mask] = small
        return normal

    # ============= Right-hand side =============

    def right_hand_side_from_config(self, q: Configuration) -> NDArray[np.float64]:
        """Set the right-hand side so that q satisfies the constraints.

        Only EQUALITY rows (and locked joint values) are updated. Equality
        constraints define a foliation of the configuration space and this
        records the leaf q lies on; inequality rows have no leaf, so q may
        still violate them.
        """
        for locked in self._locked:
            locked.right_hand_side_from_config(q)
        for constraint in self._implicits:
            constraint.right_hand_side_from_config(q)
        return self.right_hand_side()

    def right_hand_side(self) -> NDArray[np.float64]:
        if not self._implicits:
            return np.zeros(0)
        return np.concatenate([c.right_hand_side for c in self._implicits])

    def set_right_hand_side(self, rhs: NDArray[np.float64] | Sequence[float]) -> None:
        rhs = np.asarray(rhs, dtype=np.float64)
        if rhs.shape != (self.dimension(),):
            raise ValueError(f"right-hand side must have shape ({self.dimension()},), got {rhs.shape}")
        offset = 0
        for constraint in self._implicits:
            constraint.set_right_hand_side(rhs[offset : offset + constraint.output_size])
            offset += constraint.output_size

    def right_hand_side_at(self, s: float) -> None:
        """Update parameter dependent right-hand sides at path parameter s."""
        for constraint in self._implicits:
            constraint.right_hand_side_at(s)

    # ============= Evaluation =============

    def residual(self, q: Configuration) -> NDArray[np.float64]:
        """Stacked violation of required implicit constraints and locked joints."""
        parts = [c.error(q) for c in self._required()]
        parts.extend(locked.error(q) for locked in self._locked)
        if not parts:
            return np.zeros(0)
        return np.concatenate(parts)

    def compute_value_and_jacobian(self, q: Configuration) -> tuple[NDArray[np.float64], Jacobian]:
        """Stacked residual and reduced Jacobian of the required constraints at q.

        The reduced Jacobian has the columns of locked degrees of freedom
        removed and the columns of passive degrees of freedom set to 0.
        Rows of an optional last level are left out.

        Returns:
            Tuple of (value, rows x number_free_variables() Jacobian)
        """
        return self._value_and_jacobian(self._required(), q)

    def _value_and_jacobian(
        self, constraints: list[Implicit], q: Configuration
    ) -> tuple[NDArray[np.float64], Jacobian]:
        if not constraints:
            return np.zeros(0), np.zeros((0, self.number_free_variables()))
        values = []
        jacobians = []
        for constraint in constraints:
            value, J = constraint.error_and_jacobian(q)
            values.append(value)
            jacobians.append(J)
        J = np.vstack(jacobians)
        if self._passive_dofs:
            J[:, sorted(self._passive_dofs)] = 0.0
        return np.concatenate(values), J[:, self._free_mask]

    def is_satisfied(self, q: Configuration, error_threshold: float | None = None) -> bool:
        """Check q against the constraints without modifying the right-hand side."""
        threshold = self._error_threshold if error_threshold is None else error_threshold
        error = self.residual(q)
        return bool(error @ error < threshold * threshold)

    # ============= Projection =============

    def apply(self, q: Configuration) -> tuple[Configuration, bool]:
        """Project q onto the constraints.

        Returns:
            Tuple of (projected configuration, success). On failure the
            configuration reached by the last iteration is returned.
        """
        q_out, status = self.impl_compute(q)
        self._statistics.add(status)
        return q_out, status == SolverStatus.SUCCESS

    def impl_compute(self, q: Configuration) -> tuple[Configuration, SolverStatus]:
        """Newton-Raphson loop on the reduced system, required levels only."""
        q = np.array(q, dtype=np.float64)
        for locked in self._locked:
            q = locked.apply(q)

        levels = self._levels()
        line_search = create_line_search(self._line_search)
        threshold_sq = self._error_threshold**2

        def residual_norm(x: Configuration) -> float:
            value, _ = self.compute_value_and_jacobian(x)
            return float(np.linalg.norm(value))

        status = SolverStatus.MAX_ITERATIONS_REACHED
        iteration = 0
        value, J = self.compute_value_and_jacobian(q)
        while True:
            error_sq = float(value @ value)
            if error_sq < threshold_sq:
                status = SolverStatus.SUCCESS
                break
            if iteration >= self._max_iterations:
                break

            J_pinv, sigmas = svd_pseudoinverse(J)
            self._sigma = float(sigmas[-1]) if sigmas.size else 0.0
            if matrix_rank(sigmas) == 0:
                status = SolverStatus.INFEASIBLE
                break

            if len(levels) > 1:
                dq = self.uncompress_vector(self._hierarchical_step(levels, q))
            else:
                dq = self.uncompress_vector(-J_pinv @ value)
            q = line_search.step(q, dq, float(np.sqrt(error_sq)), self._device.integrate, residual_norm)
            iteration += 1
            value, J = self.compute_value_and_jacobian(q)

        self._residual_error = float(np.linalg.norm(value))
        self._last_iterations = iteration
        if status != SolverStatus.SUCCESS:
            logger.debug(
                "Projection failed",
                projector=self.name,
                status=status.name,
                iterations=iteration,
                residual=self._residual_error,
            )
        return q, status

    def _hierarchical_step(self, levels: list[list[Implicit]], q: Configuration) -> Velocity:
        """Compressed step solving each level in the kernel of the levels before it."""
        n = self.number_free_variables()
        step = np.zeros(n)
        P = np.eye(n)
        for level in levels:
            value, J = self._value_and_jacobian(level, q)
            JP = J @ P
            JP_pinv, _ = svd_pseudoinverse(JP)
            step = step + JP_pinv @ (-value - J @ step)
            P = P - JP_pinv @ JP
        return step

    def optimize(
        self, q: Configuration, max_iterations: int | None = None
    ) -> tuple[Configuration, bool]:
        """Reduce the error of the optional level while keeping q on the required levels.

        q must already satisfy the required constraints. Each step moves in
        the kernel of the required Jacobian and is projected back on the
        required constraints. A step that does not decrease the optional
        error ends the optimization.

        Args:
            q: Configuration satisfying the required constraints
            max_iterations: Maximum number of steps, max_iterations of the
                projector if None or 0

        Returns:
            Tuple of (configuration, optimized). optimized is False, and q is
            returned unchanged, when no step decreased the optional error.
        """
        q = np.array(q, dtype=np.float64)
        optional = self._optional()
        if self._optional_level() is None or not optional:
            return q, False
        if not self.is_satisfied(q):
            logger.warning(
                "Cannot optimize a configuration violating the constraints", projector=self.name
            )
            return q, False

        iterations = max_iterations or self._max_iterations
        value, J_optional = self._value_and_jacobian(optional, q)
        initial_error = error = float(np.linalg.norm(value))
        for _ in range(iterations):
            if error < self._error_threshold:
                break
            _, J = self.compute_value_and_jacobian(q)
            P = kernel_projector(J)
            J_pinv, sigmas = svd_pseudoinverse(J_optional @ P)
            if matrix_rank(sigmas) == 0:
                break
            dq = self.uncompress_vector(P @ (-J_pinv @ value))
            candidate, status = self.impl_compute(self._device.integrate(q, dq))
            if status != SolverStatus.SUCCESS:
                break
            candidate_value, candidate_J = self._value_and_jacobian(optional, candidate)
            candidate_error = float(np.linalg.norm(candidate_value))
            if candidate_error >= error:
                break
            q, value, J_optional, error = candidate, candidate_value, candidate_J, candidate_error
        return q, error < initial_error

    def project_vector_on_kernel(self, q: Configuration, velocity: Velocity) -> Velocity:
        """Project a tangent vector on the kernel of the reduced Jacobian at q.

        result = (I - J⁺J) v, with locked components set to 0.
        """
        velocity = np.asarray(velocity, dtype=np.float64)
        small = self.compress_vector(velocity)
        _, J = self.compute_value_and_jacobian(q)
        if J.shape[0] > 0:
            small = kernel_projector(J) @ small
        return self.uncompress_vector(small)

    def project_on_kernel(self, q_from: Configuration, q_to: Configuration) -> Configuration:
        """q_from + (I - J⁺J(q_from)) (q_to - q_from), on the device."""
        v = self._device.difference(q_to, q_from)
        return self._device.integrate(q_from, self.project_vector_on_kernel(q_from, v))

    # ============= Copy =============

    def copy(self) -> ConfigProjector:
        """Deep copy: constraints get their own right-hand side, statistics start empty."""
        result = ConfigProjector(
            self._device,
            self.name,
            self._error_threshold,
            self._max_iterations,
            self._line_search,
        )
        for constraint, priority in zip(self._implicits, self._priorities):
            result.add(constraint.copy(), priority)
        result.last_is_optional = self._last_is_optional
        for locked in self._locked:
            result.add(locked.copy())
        result.set_passive_dofs(self._passive_dofs)
        return result

    def __repr__(self) -> str:
        return (
            f"ConfigProjector({self.name!r}, constraints={[c.name for c in self._implicits]}, "
            f"locked={[c.joint_name for c in self._locked]}, "
            f"error_threshold={self._error_threshold}, max_iterations={self._max_iterations})"
        )
