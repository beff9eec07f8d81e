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

"""Abstract path and generic sub-path.

A path maps a time interval to configurations. Internally, geometry is
evaluated at a *parameter*: the parameter equals the time unless a time
parameterization is attached, in which case ``param = tp(time)`` and
``param_range`` is the image of ``time_range``.

Constraints attached to a path are applied on top of the geometry each time
the path is evaluated, after the right-hand side has been updated at the
evaluated parameter.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import copy
from typing import TYPE_CHECKING, Any, ClassVar

import numpy as np

from conpath.path.time_parameterization import (
    compose,
    interval_length,
    is_reversed,
)
from conpath.spec.enums import PathKind
from conpath.spec.errors import ProjectionError, UnsupportedOperationError

if TYPE_CHECKING:
    from conpath.constraints.constraint_set import ConstraintSet
    from conpath.path.hermite import HermitePath
    from conpath.path.path_vector import PathVector
    from conpath.path.time_parameterization import TimeParameterization
    from conpath.spec.types import Configuration, Interval, Velocity


class Path(ABC):
    """Base class of all paths.

    Subclasses implement the geometry (initial, end, impl_compute,
    impl_derivative) and may specialize impl_extract. Everything related to
    time parameterization and constraints is handled here.
    """

    kind: ClassVar[PathKind]

    def __init__(
        self,
        time_range: Interval,
        output_size: int,
        output_derivative_size: int,
        constraints: ConstraintSet | None = None,
    ):
        if time_range[0] > time_range[1]:
            raise ValueError(f"Path time range must be ordered, got {time_range}")
        self._time_range: Interval = (float(time_range[0]), float(time_range[1]))
        self._param_range: Interval = self._time_range
        self._output_size = output_size
        self._output_derivative_size = output_derivative_size
        self._constraints = None if constraints is None else constraints.copy()
        self._time_parameterization: TimeParameterization | None = None

    # ============= Geometry (subclasses) =============

    @abstractmethod
    def initial(self) -> Configuration: ...

    @abstractmethod
    def end(self) -> Configuration: ...

    @abstractmethod
    def impl_compute(self, param: float) -> tuple[Configuration, bool]:
        """Configuration at a parameter, before constraints are applied."""
        ...

    @abstractmethod
    def impl_derivative(self, param: float, order: int) -> Velocity:
        """Derivative with respect to the parameter."""
        ...

    def impl_extract(self, param_interval: Interval) -> Path:
        """Sub-path over a parameter interval, reversed if the interval is."""
        if param_interval == self._param_range:
            return self.copy()
        return ExtractedPath(self, param_interval, self._constraints)

    # ============= Ranges =============

    @property
    def time_range(self) -> Interval:
        return self._time_range

    @property
    def param_range(self) -> Interval:
        return self._param_range

    def length(self) -> float:
        return self._time_range[1] - self._time_range[0]

    @property
    def output_size(self) -> int:
        return self._output_size

    @property
    def output_derivative_size(self) -> int:
        return self._output_derivative_size

    @property
    def constraints(self) -> ConstraintSet | None:
        return self._constraints

    @property
    def time_parameterization(self) -> TimeParameterization | None:
        return self._time_parameterization

    def set_time_parameterization(
        self, tp: TimeParameterization | None, time_range: Interval
    ) -> None:
        """Attach tp (owned by the path) and set the time range it applies to."""
        if time_range[0] > time_range[1]:
            raise ValueError(f"Path time range must be ordered, got {time_range}")
        self._time_parameterization = tp
        self._time_range = (float(time_range[0]), float(time_range[1]))
        if tp is None:
            self._param_range = self._time_range
        else:
            self._param_range = tp.map_interval(self._time_range)

    def param_at_time(self, t: float) -> float:
        if self._time_parameterization is None:
            return t
        return self._time_parameterization.value(t)

    # ============= Evaluation =============

    def eval(self, t: float) -> tuple[Configuration, bool]:
        """Configuration at time t, projected on the path constraints.

        Returns:
            Tuple of (configuration, success). success is False when the
            constraints could not be satisfied.
        """
        s = self.param_at_time(t)
        q, success = self.impl_compute(s)
        if not success:
            return q, False
        return self.apply_constraints(q, s)

    def __call__(self, t: float) -> Configuration:
        """Configuration at time t. Raises ProjectionError on failure."""
        q, success = self.eval(t)
        if not success:
            error = None if self._constraints is None else self._constraints.residual(q)
            raise ProjectionError(f"Failed to apply constraints at t={t}", q, error)
        return q

    def apply_constraints(self, q: Configuration, param: float) -> tuple[Configuration, bool]:
        if self._constraints is None:
            return q, True
        projector = self._constraints.config_projector
        if projector is not None:
            projector.right_hand_side_at(param)
        return self._constraints.apply(q)

    def derivative(self, t: float, order: int) -> Velocity:
        """Derivative with respect to time.

        Through a time parameterization the chain rule is applied, which is
        only supported for orders 1 and 2.
        """
        tp = self._time_parameterization
        if tp is None:
            return self.impl_derivative(t, order)
        s = tp.value(t)
        if order == 1:
            return self.impl_derivative(s, 1) * tp.derivative(t, 1)
        if order == 2:
            d1 = tp.derivative(t, 1)
            return self.impl_derivative(s, 2) * (d1 * d1) + self.impl_derivative(
                s, 1
            ) * tp.derivative(t, 2)
        raise UnsupportedOperationError(
            f"Cannot compute the derivative of order {order} through a time parameterization"
        )

    # ============= Extraction =============

    def extract(self, sub_interval: Interval) -> Path:
        """Sub-path over sub_interval (time). A reversed interval reverses the path."""
        tp = self._time_parameterization
        if tp is None:
            return self.impl_extract(sub_interval)
        if tuple(sub_interval) == self._time_range:
            return self.copy()

        param_interval = tp.map_interval(sub_interval)
        result = self.impl_extract(param_interval)
        expected_range = result.param_range
        # The parameter r of the result follows the parameter p of this path
        # in one direction or the other: r = r0 + sign * (p - param_interval[0])
        sign = -1.0 if is_reversed(param_interval) else 1.0
        s_offset = expected_range[0] - sign * param_interval[0]
        if is_reversed(sub_interval):
            # Time restarts at 0 and runs from sub_interval[0] down to sub_interval[1]
            result_tp = compose(
                tp.copy(), sub_interval[0], s_offset, t_scale=-1.0, s_scale=sign
            )
            time_interval = (0.0, sub_interval[0] - sub_interval[1])
        elif sign > 0 and s_offset == 0:
            result_tp = tp.copy()
            time_interval = sub_interval
        else:
            result_tp = compose(tp.copy(), sub_interval[0], s_offset, s_scale=sign)
            time_interval = (0.0, sub_interval[1] - sub_interval[0])
        result.set_time_parameterization(result_tp, time_interval)
        assert np.allclose(result.param_range, expected_range, rtol=1e-9, atol=1e-9)
        return result

    def reverse(self) -> Path:
        return self.extract((self._time_range[1], self._time_range[0]))

    # ============= Copy =============

    def copy(self) -> Path:
        """Copy owning its own constraints and time parameterization."""
        result = copy.copy(self)
        if self._constraints is not None:
            result._constraints = self._constraints.copy()
        if self._time_parameterization is not None:
            result._time_parameterization = self._time_parameterization.copy()
        result._after_copy()
        return result

    def _after_copy(self) -> None:
        """Hook for subclasses holding mutable state."""

    # ============= Capabilities =============

    def as_hermite(self) -> HermitePath | None:
        return None

    def as_path_vector(self) -> PathVector | None:
        return None

    # ============= Validation =============

    def check_path(self) -> None:
        """Raise ProjectionError if an endpoint does not satisfy the path constraints."""
        if self._constraints is None:
            return
        projector = self._constraints.config_projector
        for label, q, param in (
            ("Initial", self.initial(), self._param_range[0]),
            ("End", self.end(), self._param_range[1]),
        ):
            if projector is not None:
                projector.right_hand_side_at(param)
            if not self._constraints.is_satisfied(q):
                error = self._constraints.residual(q)
                raise ProjectionError(
                    f"{label} configuration of path does not satisfy the path constraints: "
                    f"q={np.array2string(q)}; error={np.array2string(error)}",
                    q,
                    error,
                )

    # ============= Serialization =============

    def to_dict(self) -> dict[str, Any]:
        if self._time_parameterization is not None:
            raise UnsupportedOperationError(
                "At the moment, it is not possible to serialize a path with a time parameterization"
            )
        return {
            "kind": self.kind.name.lower(),
            "time_range": list(self._time_range),
            "output_size": self._output_size,
            "output_derivative_size": self._output_derivative_size,
            "constraints": None if self._constraints is None else self._constraints.name,
        }

    def __repr__(self) -> str:
        text = f"{type(self).__name__}(time in [{self._time_range[0]}, {self._time_range[1]}]"
        if self._time_parameterization is not None:
            text += f", param in [{self._param_range[0]}, {self._param_range[1]}]"
        return text + ")"


class ExtractedPath(Path):
    """Part of another path, possibly reversed.

    The parameter of an extracted path restarts at 0: parameter s maps to
    ``a + s`` on the original path for an interval (a, b) with a <= b, and to
    ``a - s`` for a reversed interval.
    """

    kind = PathKind.EXTRACTED

    def __init__(
        self,
        original: Path,
        param_interval: Interval,
        constraints: ConstraintSet | None = None,
    ):
        super().__init__(
            (0.0, interval_length(param_interval)),
            original.output_size,
            original.output_derivative_size,
            constraints,
        )
        self._original = original
        self._interval: Interval = (float(param_interval[0]), float(param_interval[1]))
        self._reversed = is_reversed(param_interval)

    @property
    def original(self) -> Path:
        return self._original

    def _to_original(self, s: float) -> float:
        if self._reversed:
            return self._interval[0] - s
        return self._interval[0] + s

    def _endpoint(self, original_param: float) -> Configuration:
        original_range = self._original.param_range
        if original_param == original_range[0]:
            return self._original.initial()
        if original_param == original_range[1]:
            return self._original.end()
        q, success = self._original.impl_compute(original_param)
        if success:
            q, success = self.apply_constraints(q, original_param)
        if not success:
            raise ProjectionError(f"Cannot compute endpoint at parameter {original_param}", q)
        return q

    def initial(self) -> Configuration:
        return self._endpoint(self._interval[0])

    def end(self) -> Configuration:
        return self._endpoint(self._interval[1])

    def impl_compute(self, param: float) -> tuple[Configuration, bool]:
        return self._original.impl_compute(self._to_original(param))

    def impl_derivative(self, param: float, order: int) -> Velocity:
        result = self._original.impl_derivative(self._to_original(param), order)
        if self._reversed and order % 2 == 1:
            return -result
        return result

    def impl_extract(self, param_interval: Interval) -> Path:
        if param_interval == self._param_range:
            return self.copy()
        mapped = (self._to_original(param_interval[0]), self._to_original(param_interval[1]))
        return ExtractedPath(self._original, mapped, self._constraints)
