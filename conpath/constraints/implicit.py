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

"""Implicit numerical constraints.

An implicit constraint compares each output row of a differentiable function
to a right-hand side:

- EQUAL_TO_ZERO: f_i(q) = 0 (right-hand side fixed to 0)
- EQUALITY:      f_i(q) = rhs_i
- SUPERIOR:      f_i(q) >= 0
- INFERIOR:      f_i(q) <= 0

Right-hand sides of EQUALITY rows select a leaf of the foliation defined by
the constraint. They may follow the path parameter through an optional
right-hand-side function.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from conpath.spec.enums import ComparisonType

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from numpy.typing import NDArray

    from conpath.constraints.functions import DifferentiableFunction
    from conpath.spec.types import Configuration, Jacobian


class Implicit:
    """Differentiable function plus per-row comparison and right-hand side.

    Example:
        fn = AffineFunction([[0.0, 1.0]])
        constraint = Implicit(fn, [ComparisonType.EQUALITY])
        constraint.right_hand_side_from_config(np.array([0.0, 0.5]))  # leaf y = 0.5
    """

    def __init__(
        self,
        function: DifferentiableFunction,
        comparison: Sequence[ComparisonType] | None = None,
        right_hand_side: NDArray[np.float64] | Sequence[float] | None = None,
        right_hand_side_function: Callable[[float], NDArray[np.float64]] | None = None,
    ):
        m = function.output_size
        comparison = (
            [ComparisonType.EQUAL_TO_ZERO] * m if comparison is None else list(comparison)
        )
        if len(comparison) != m:
            raise ValueError(
                f"Constraint {function.name}: expected {m} comparison types, got {len(comparison)}"
            )
        self._function = function
        self._comparison = comparison
        self._equality_mask = np.array([c == ComparisonType.EQUALITY for c in comparison])
        self._rhs = np.zeros(m)
        self._rhs_function = right_hand_side_function
        if right_hand_side is not None:
            self.set_right_hand_side(right_hand_side)

    @property
    def function(self) -> DifferentiableFunction:
        return self._function

    @property
    def name(self) -> str:
        return self._function.name

    @property
    def comparison(self) -> list[ComparisonType]:
        return list(self._comparison)

    @property
    def output_size(self) -> int:
        return self._function.output_size

    @property
    def parameter_size(self) -> int:
        """Number of rows whose right-hand side can be set."""
        return int(np.count_nonzero(self._equality_mask))

    @property
    def right_hand_side(self) -> NDArray[np.float64]:
        return self._rhs.copy()

    def set_right_hand_side(self, rhs: NDArray[np.float64] | Sequence[float]) -> None:
        """Set the right-hand side. Only EQUALITY rows are taken into account."""
        rhs = np.asarray(rhs, dtype=np.float64)
        if rhs.shape != (self.output_size,):
            raise ValueError(
                f"Constraint {self.name}: right-hand side must have shape "
                f"({self.output_size},), got {rhs.shape}"
            )
        self._rhs[self._equality_mask] = rhs[self._equality_mask]

    def right_hand_side_from_config(self, q: Configuration) -> NDArray[np.float64]:
        """Set the right-hand side of EQUALITY rows so that q satisfies them."""
        value = self._function.value(q)
        self._rhs[self._equality_mask] = value[self._equality_mask]
        return self._rhs.copy()

    @property
    def right_hand_side_function(self) -> Callable[[float], NDArray[np.float64]] | None:
        return self._rhs_function

    def right_hand_side_at(self, s: float) -> None:
        """Update the right-hand side from its function of the path parameter."""
        if self._rhs_function is not None:
            self.set_right_hand_side(self._rhs_function(s))

    def error(self, q: Configuration) -> NDArray[np.float64]:
        """Signed violation of each row (zero on satisfied inequality rows)."""
        value = self._function.value(q)
        error = np.empty_like(value)
        for i, comparison in enumerate(self._comparison):
            if comparison == ComparisonType.EQUALITY:
                error[i] = value[i] - self._rhs[i]
            elif comparison == ComparisonType.EQUAL_TO_ZERO:
                error[i] = value[i]
            elif comparison == ComparisonType.SUPERIOR:
                error[i] = min(0.0, value[i])
            else:
                error[i] = max(0.0, value[i])
        return error

    def error_and_jacobian(self, q: Configuration) -> tuple[NDArray[np.float64], Jacobian]:
        """Violation and Jacobian; rows of satisfied inequalities are inactive."""
        error = self.error(q)
        J = np.array(self._function.jacobian(q), dtype=np.float64)
        for i, comparison in enumerate(self._comparison):
            if comparison in (ComparisonType.SUPERIOR, ComparisonType.INFERIOR) and error[i] == 0:
                J[i, :] = 0.0
        return error, J

    def copy(self) -> Implicit:
        """Copy with its own right-hand side. The function is shared (stateless)."""
        return Implicit(
            self._function,
            self._comparison,
            self._rhs.copy(),
            self._rhs_function,
        )

    def __repr__(self) -> str:
        return f"Implicit({self.name!r}, {[c.name for c in self._comparison]})"
