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

"""Time parameterizations and interval helpers.

A time parameterization maps the time seen by the caller of a path onto the
parameter at which the path geometry and its constraints are evaluated.

Shifts are kept in a canonical form: a ``Shift`` never wraps another
``Shift``, so repeated extraction accumulates one set of offsets instead of a
chain of wrappers::

    shift(shift(tp, t1, s1), t2, s2) == shift(tp, t1 + t2, s1 + s2)

A ``Shift`` may also flip the direction of time or of the parameter, which
extraction needs for reversed intervals and decreasing parameterizations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
from numpy.polynomial import polynomial as P

if TYPE_CHECKING:
    from collections.abc import Sequence

    from numpy.typing import NDArray

    from conpath.spec.types import Interval


# =============================================================================
# Intervals
# =============================================================================


def is_reversed(interval: Interval) -> bool:
    return interval[0] > interval[1]


def reverse_interval(interval: Interval) -> Interval:
    return (interval[1], interval[0])


def interval_length(interval: Interval) -> float:
    return abs(interval[1] - interval[0])


def sorted_interval(interval: Interval) -> Interval:
    return (min(interval), max(interval))


# =============================================================================
# Time parameterizations
# =============================================================================


class TimeParameterization(ABC):
    """Scalar function s = f(t) from path time to path parameter."""

    @abstractmethod
    def value(self, t: float) -> float: ...

    @abstractmethod
    def derivative(self, t: float, order: int) -> float: ...

    @abstractmethod
    def derivative_bound(self, low: float, up: float) -> float:
        """Upper bound of |f'(t)| for t in [low, up]."""
        ...

    @abstractmethod
    def copy(self) -> TimeParameterization: ...

    def map_interval(self, interval: Interval) -> Interval:
        return (self.value(interval[0]), self.value(interval[1]))


class Polynomial(TimeParameterization):
    """Polynomial time parameterization f(t) = a0 + a1 t + a2 t^2 + ...

    Example:
        # Affine time scaling: s = 2 t
        tp = Polynomial([0.0, 2.0])
    """

    def __init__(self, coefficients: Sequence[float] | NDArray[np.float64]):
        coefficients = np.array(coefficients, dtype=np.float64)
        if coefficients.ndim != 1 or coefficients.size == 0:
            raise ValueError("Polynomial needs a non-empty 1D coefficient vector")
        self._coefficients = coefficients

    @property
    def coefficients(self) -> NDArray[np.float64]:
        return self._coefficients.copy()

    def value(self, t: float) -> float:
        return float(P.polyval(t, self._coefficients))

    def derivative(self, t: float, order: int) -> float:
        if order == 0:
            return self.value(t)
        return float(P.polyval(t, P.polyder(self._coefficients, order)))

    def derivative_bound(self, low: float, up: float) -> float:
        low, up = min(low, up), max(low, up)
        first = P.polyder(self._coefficients, 1)
        candidates = [low, up]
        if first.size > 1:
            for root in P.polyroots(P.polyder(first, 1)):
                if abs(root.imag) < 1e-12 and low <= root.real <= up:
                    candidates.append(float(root.real))
        return float(np.max(np.abs(P.polyval(np.array(candidates), first))))

    def copy(self) -> Polynomial:
        return Polynomial(self._coefficients)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Polynomial):
            return NotImplemented
        return np.array_equal(self._coefficients, other._coefficients)

    def __repr__(self) -> str:
        return f"Polynomial({self._coefficients.tolist()})"


@dataclass(frozen=True)
class Shift(TimeParameterization):
    """f(t) = s_scale * inner(t_scale * t + t_offset) + s_offset.

    The scales are 1 for a plain shift and -1 to flip time or the parameter.
    Build instances with shift() or compose() so that nested shifts are folded.
    """

    inner: TimeParameterization
    t_offset: float
    s_offset: float
    t_scale: float = 1.0
    s_scale: float = 1.0

    def _inner_time(self, t: float) -> float:
        return self.t_scale * t + self.t_offset

    def value(self, t: float) -> float:
        return self.s_scale * self.inner.value(self._inner_time(t)) + self.s_offset

    def derivative(self, t: float, order: int) -> float:
        if order == 0:
            return self.value(t)
        return (
            self.s_scale
            * self.t_scale**order
            * self.inner.derivative(self._inner_time(t), order)
        )

    def derivative_bound(self, low: float, up: float) -> float:
        bound = self.inner.derivative_bound(self._inner_time(low), self._inner_time(up))
        return abs(self.s_scale * self.t_scale) * bound

    def copy(self) -> Shift:
        return Shift(self.inner.copy(), self.t_offset, self.s_offset, self.t_scale, self.s_scale)


def compose(
    tp: TimeParameterization,
    t: float,
    s: float,
    *,
    t_scale: float = 1.0,
    s_scale: float = 1.0,
) -> TimeParameterization:
    """Return f(time) = s_scale * tp(t_scale * time + t) + s, in canonical form.

    Composing onto a Shift folds into a single Shift, never a nested one.
    """
    if isinstance(tp, Shift):
        return Shift(
            tp.inner,
            tp.t_scale * t + tp.t_offset,
            s_scale * tp.s_offset + s,
            tp.t_scale * t_scale,
            s_scale * tp.s_scale,
        )
    return Shift(tp, t, s, t_scale, s_scale)


def shift(tp: TimeParameterization, t: float, s: float) -> TimeParameterization:
    """Compose a time/parameter offset onto tp, in canonical form.

    The result evaluates to ``tp(time + t) + s``. A zero offset returns tp
    itself and shifting a Shift folds both offsets into a single Shift.
    """
    if t == 0 and s == 0:
        return tp
    return compose(tp, t, s)
