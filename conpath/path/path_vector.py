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

"""Concatenation of paths."""

from __future__ import annotations

from typing import TYPE_CHECKING

from conpath.path.path import Path
from conpath.path.time_parameterization import is_reversed
from conpath.spec.enums import PathKind
from conpath.spec.errors import UnsupportedOperationError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from conpath.constraints.constraint_set import ConstraintSet
    from conpath.spec.types import Configuration, Interval, Velocity


class PathVector(Path):
    """Ordered sequence of paths traversed one after the other.

    The vector's time starts at 0 and each piece contributes its length. A
    piece is evaluated with its own constraints; constraints of the vector,
    if any, are applied on top.

    Example:
        vector = PathVector(device.config_size, device.nv)
        vector.append_path(first)
        vector.append_path(second)
        rank, local_time = vector.rank_at_time(0.7)
    """

    kind = PathKind.VECTOR

    def __init__(
        self,
        output_size: int,
        output_derivative_size: int,
        constraints: ConstraintSet | None = None,
    ):
        super().__init__((0.0, 0.0), output_size, output_derivative_size, constraints)
        self._paths: list[Path] = []
        self._starts: list[float] = []

    @classmethod
    def from_paths(cls, paths: Iterable[Path]) -> PathVector:
        paths = list(paths)
        if not paths:
            raise ValueError("Cannot infer sizes of a PathVector from no paths")
        result = cls(paths[0].output_size, paths[0].output_derivative_size)
        for path in paths:
            result.append_path(path)
        return result

    def as_path_vector(self) -> PathVector:
        return self

    # ============= Pieces =============

    def number_paths(self) -> int:
        return len(self._paths)

    def path_at_rank(self, rank: int) -> Path:
        return self._paths[rank]

    @property
    def paths(self) -> list[Path]:
        return list(self._paths)

    def append_path(self, path: Path) -> None:
        if self._time_parameterization is not None:
            raise UnsupportedOperationError("Cannot append to a PathVector with a time parameterization")
        if (path.output_size, path.output_derivative_size) != (
            self._output_size,
            self._output_derivative_size,
        ):
            raise ValueError(
                f"Path of sizes ({path.output_size}, {path.output_derivative_size}) cannot be "
                f"appended to a PathVector of sizes ({self._output_size}, {self._output_derivative_size})"
            )
        self._starts.append(self._time_range[1])
        self._paths.append(path)
        self._time_range = (0.0, self._time_range[1] + path.length())
        self._param_range = self._time_range

    def concatenate(self, other: PathVector) -> None:
        """Append the pieces of other (not other itself)."""
        for path in other.paths:
            self.append_path(path.copy())

    def flatten(self) -> PathVector:
        """Copy where nested path vectors are replaced by their pieces."""
        result = PathVector(self._output_size, self._output_derivative_size, self._constraints)
        for path in self._paths:
            nested = path.as_path_vector()
            if nested is None:
                result.append_path(path.copy())
            else:
                result.concatenate(nested.flatten())
        return result

    def rank_at_time(self, t: float) -> tuple[int, float]:
        """Return (rank of the piece containing t, time local to that piece)."""
        if not self._paths:
            raise ValueError("PathVector is empty")
        rank = len(self._paths) - 1
        for i, path in enumerate(self._paths):
            if t <= self._starts[i] + path.length():
                rank = i
                break
        path = self._paths[rank]
        start = self._starts[rank]
        if t == start:
            return rank, path.time_range[0]
        return rank, path.time_range[0] + (t - start)

    # ============= Geometry =============

    def initial(self) -> Configuration:
        if not self._paths:
            raise ValueError("PathVector is empty")
        return self._paths[0].initial()

    def end(self) -> Configuration:
        if not self._paths:
            raise ValueError("PathVector is empty")
        return self._paths[-1].end()

    def impl_compute(self, param: float) -> tuple[Configuration, bool]:
        rank, local = self.rank_at_time(param)
        return self._paths[rank].eval(local)

    def impl_derivative(self, param: float, order: int) -> Velocity:
        rank, local = self.rank_at_time(param)
        return self._paths[rank].derivative(local, order)

    def _local_interval(self, rank: int, low: float, high: float) -> Interval:
        path = self._paths[rank]
        start = self._starts[rank]
        end = start + path.length()
        local_low = path.time_range[0] if low <= start else path.time_range[0] + (low - start)
        local_high = path.time_range[1] if high >= end else path.time_range[0] + (high - start)
        return local_low, local_high

    def impl_extract(self, param_interval: Interval) -> Path:
        if param_interval == self._param_range:
            return self.copy()
        reversed_ = is_reversed(param_interval)
        low, high = min(param_interval), max(param_interval)
        result = PathVector(self._output_size, self._output_derivative_size, self._constraints)

        if low == high:
            rank, local = self.rank_at_time(low)
            result.append_path(self._paths[rank].extract((local, local)))
            return result

        pieces: list[Path] = []
        for rank, path in enumerate(self._paths):
            start = self._starts[rank]
            end = start + path.length()
            if max(low, start) >= min(high, end):
                continue
            local = self._local_interval(rank, low, high)
            if reversed_:
                local = (local[1], local[0])
            pieces.append(path.extract(local))
        if reversed_:
            pieces.reverse()
        for piece in pieces:
            result.append_path(piece)
        return result

    def _after_copy(self) -> None:
        self._paths = [path.copy() for path in self._paths]
        self._starts = list(self._starts)

    def __repr__(self) -> str:
        return (
            f"PathVector(time in [{self._time_range[0]}, {self._time_range[1]}], "
            f"pieces={len(self._paths)})"
        )
