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
Line searches for the Newton-Raphson projector.

A line search receives the current configuration, the full Newton step and
the current residual norm, and returns the next configuration. Instances keep
state across the iterations of a single solve; create a new one per solve
with create_line_search().

## Policies

- Constant: always take the full step
- Backtracking: shrink the step until the residual norm decreases
- ErrorNormBased: step scale from the ratio of consecutive residual norms
- FixedSequence: predetermined increasing sequence of step scales
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import math
from typing import TYPE_CHECKING

from conpath.spec.enums import LineSearchType

if TYPE_CHECKING:
    from collections.abc import Callable

    from conpath.spec.types import Configuration, Velocity

    Integrate = Callable[[Configuration, Velocity], Configuration]
    ResidualNorm = Callable[[Configuration], float]


class LineSearch(ABC):
    @abstractmethod
    def step(
        self,
        q: Configuration,
        dq: Velocity,
        error_norm: float,
        integrate: Integrate,
        residual_norm: ResidualNorm,
    ) -> Configuration: ...


class Constant(LineSearch):
    def step(
        self,
        q: Configuration,
        dq: Velocity,
        error_norm: float,
        integrate: Integrate,
        residual_norm: ResidualNorm,
    ) -> Configuration:
        return integrate(q, dq)


class Backtracking(LineSearch):
    """Shrink the step by ``tau`` while the residual norm does not decrease.

    Stops shrinking below ``alpha_min`` and takes the smallest step tried.
    """

    def __init__(self, tau: float = 0.7, alpha_min: float = 0.2):
        self.tau = tau
        self.alpha_min = alpha_min

    def step(
        self,
        q: Configuration,
        dq: Velocity,
        error_norm: float,
        integrate: Integrate,
        residual_norm: ResidualNorm,
    ) -> Configuration:
        alpha = 1.0
        candidate = integrate(q, dq)
        while residual_norm(candidate) >= error_norm and alpha * self.tau >= self.alpha_min:
            alpha *= self.tau
            candidate = integrate(q, alpha * dq)
        return candidate


class ErrorNormBased(LineSearch):
    """Step scale ``alpha = C - K tanh(a rho + b)`` with rho the residual-norm ratio.

    rho = |r_k| / |r_{k-1}| (0 at the first iteration). Fast convergence
    (rho near 0) gives steps close to ``alpha_max``; stagnation (rho near 1)
    damps the step toward ``alpha_min``.
    """

    def __init__(self, alpha_min: float = 0.2, alpha_max: float = 0.95, alpha_stall: float = 0.25):
        self.C = 0.5 + alpha_min / 2
        self.K = (1.0 - alpha_min) / 2
        self.b = math.atanh((self.C - alpha_max) / self.K)
        self.a = math.atanh((self.C - alpha_stall) / self.K) - self.b
        self._previous: float | None = None

    def alpha(self, error_norm: float) -> float:
        if self._previous is None or self._previous == 0.0:
            rho = 0.0
        else:
            rho = error_norm / self._previous
        self._previous = error_norm
        return self.C - self.K * math.tanh(self.a * rho + self.b)

    def step(
        self,
        q: Configuration,
        dq: Velocity,
        error_norm: float,
        integrate: Integrate,
        residual_norm: ResidualNorm,
    ) -> Configuration:
        return integrate(q, self.alpha(error_norm) * dq)


class FixedSequence(LineSearch):
    """alpha_{k+1} = alpha_max - K (alpha_max - alpha_k), starting from ``alpha_start``."""

    def __init__(self, alpha_start: float = 0.2, alpha_max: float = 0.95, K: float = 0.8):
        self.alpha_max = alpha_max
        self.K = K
        self._alpha = alpha_start

    def next_alpha(self) -> float:
        self._alpha = self.alpha_max - self.K * (self.alpha_max - self._alpha)
        return self._alpha

    def step(
        self,
        q: Configuration,
        dq: Velocity,
        error_norm: float,
        integrate: Integrate,
        residual_norm: ResidualNorm,
    ) -> Configuration:
        return integrate(q, self.next_alpha() * dq)


def create_line_search(line_search: LineSearchType) -> LineSearch:
    """Create a fresh line search state for one solve."""
    if line_search == LineSearchType.CONSTANT:
        return Constant()
    if line_search == LineSearchType.BACKTRACKING:
        return Backtracking()
    if line_search == LineSearchType.ERROR_NORM_BASED:
        return ErrorNormBased()
    if line_search == LineSearchType.FIXED_SEQUENCE:
        return FixedSequence()
    raise ValueError(f"Unknown line search: {line_search}")
