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

"""Distances between configurations."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from collections.abc import Sequence

    from numpy.typing import NDArray

    from conpath.device import Device
    from conpath.spec.types import Configuration


class WeighedDistance:
    """Weighted Euclidean norm of the tangent difference.

    d(q1, q2) = sqrt(sum_i (w_i v_i)^2), v = difference(q2, q1).
    All weights default to 1.
    """

    def __init__(self, device: Device, weights: Sequence[float] | NDArray[np.float64] | None = None):
        self._device = device
        if weights is None:
            self._weights = np.ones(device.nv)
        else:
            self._weights = np.array(weights, dtype=np.float64)
            if self._weights.shape != (device.nv,):
                raise ValueError(f"Expected {device.nv} weights, got {self._weights.shape}")
            if np.any(self._weights < 0):
                raise ValueError("Distance weights must be non-negative")

    @property
    def device(self) -> Device:
        return self._device

    @property
    def weights(self) -> NDArray[np.float64]:
        return self._weights.copy()

    def __call__(self, q1: Configuration, q2: Configuration) -> float:
        v = self._device.difference(q2, q1)
        return float(np.linalg.norm(self._weights * v))

    def __repr__(self) -> str:
        return f"WeighedDistance({self._device.name!r}, weights={self._weights.tolist()})"
