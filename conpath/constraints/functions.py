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

"""Differentiable functions of a robot configuration.

A function maps a configuration (size ``input_size``) to a vector (size
``output_size``). Its Jacobian is expressed in the tangent space of the
configuration space: ``output_size x input_derivative_size``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from numpy.typing import NDArray

    from conpath.spec.types import Configuration, Jacobian


class DifferentiableFunction(ABC):
    """Base class of the functions stacked in a ConfigProjector."""

    def __init__(
        self,
        input_size: int,
        input_derivative_size: int,
        output_size: int,
        name: str,
    ):
        self.input_size = input_size
        self.input_derivative_size = input_derivative_size
        self.output_size = output_size
        self.name = name

    @abstractmethod
    def value(self, q: Configuration) -> NDArray[np.float64]: ...

    @abstractmethod
    def jacobian(self, q: Configuration) -> Jacobian: ...

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self.name!r}, in={self.input_size}/"
            f"{self.input_derivative_size}, out={self.output_size})"
        )


class AffineFunction(DifferentiableFunction):
    """f(q) = A q + b on a Euclidean configuration space."""

    def __init__(
        self,
        A: NDArray[np.float64] | Sequence[Sequence[float]],
        b: NDArray[np.float64] | Sequence[float] | None = None,
        name: str = "affine",
    ):
        A = np.atleast_2d(np.array(A, dtype=np.float64))
        b = np.zeros(A.shape[0]) if b is None else np.array(b, dtype=np.float64)
        if b.shape != (A.shape[0],):
            raise ValueError(f"b must have shape ({A.shape[0]},), got {b.shape}")
        super().__init__(A.shape[1], A.shape[1], A.shape[0], name)
        self._A = A
        self._b = b

    def value(self, q: Configuration) -> NDArray[np.float64]:
        result: NDArray[np.float64] = self._A @ q + self._b
        return result

    def jacobian(self, q: Configuration) -> Jacobian:
        return self._A.copy()


class SquaredDistance(DifferentiableFunction):
    """f(q) = ||q[indices] - center||^2.

    Components in ``indices`` must be Euclidean, so that they have the same
    index in the configuration and in the tangent space.

    Example:
        # Keep the first two joints on the unit circle
        fn = SquaredDistance(size=3, center=[0.0, 0.0], indices=[0, 1])
        constraint = Implicit(fn, [ComparisonType.EQUALITY], right_hand_side=[1.0])
    """

    def __init__(
        self,
        size: int,
        center: NDArray[np.float64] | Sequence[float],
        indices: Sequence[int] | None = None,
        name: str = "squared_distance",
    ):
        center = np.array(center, dtype=np.float64)
        indices = list(range(center.size)) if indices is None else list(indices)
        if len(indices) != center.size:
            raise ValueError("center and indices must have the same size")
        super().__init__(size, size, 1, name)
        self._center = center
        self._indices = indices

    def value(self, q: Configuration) -> NDArray[np.float64]:
        d = q[self._indices] - self._center
        return np.array([d @ d])

    def jacobian(self, q: Configuration) -> Jacobian:
        J = np.zeros((1, self.input_derivative_size))
        J[0, self._indices] = 2.0 * (q[self._indices] - self._center)
        return J


class CallableFunction(DifferentiableFunction):
    """Wrap a pair of callables (value, jacobian) as a DifferentiableFunction."""

    def __init__(
        self,
        value_fn: Callable[[Configuration], NDArray[np.float64]],
        jacobian_fn: Callable[[Configuration], Jacobian],
        input_size: int,
        input_derivative_size: int,
        output_size: int,
        name: str = "callable",
    ):
        super().__init__(input_size, input_derivative_size, output_size, name)
        self._value_fn = value_fn
        self._jacobian_fn = jacobian_fn

    def value(self, q: Configuration) -> NDArray[np.float64]:
        return np.atleast_1d(np.asarray(self._value_fn(q), dtype=np.float64))

    def jacobian(self, q: Configuration) -> Jacobian:
        return np.atleast_2d(np.asarray(self._jacobian_fn(q), dtype=np.float64))
