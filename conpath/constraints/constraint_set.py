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

"""Set of constraints attached to a path."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from conpath.constraints.config_projector import ConfigProjector
    from conpath.device import Device
    from conpath.spec.types import Configuration


class ConstraintSet:
    """Named set of constraints, holding at most one ConfigProjector.

    Paths own their constraint set: it is copied when attached to a path and
    when the path is copied, so updating the right-hand side of one path
    never changes another.
    """

    def __init__(
        self,
        device: Device,
        name: str,
        config_projector: ConfigProjector | None = None,
    ):
        self._device = device
        self.name = name
        self._config_projector = config_projector

    @property
    def device(self) -> Device:
        return self._device

    @property
    def config_projector(self) -> ConfigProjector | None:
        return self._config_projector

    @config_projector.setter
    def config_projector(self, projector: ConfigProjector | None) -> None:
        self._config_projector = projector

    def apply(self, q: Configuration) -> tuple[Configuration, bool]:
        """Project q. Without a projector, q is returned unchanged."""
        if self._config_projector is None:
            return np.array(q, dtype=np.float64), True
        return self._config_projector.apply(q)

    def is_satisfied(self, q: Configuration, error_threshold: float | None = None) -> bool:
        if self._config_projector is None:
            return True
        return self._config_projector.is_satisfied(q, error_threshold)

    def residual(self, q: Configuration) -> NDArray[np.float64]:
        if self._config_projector is None:
            return np.zeros(0)
        return self._config_projector.residual(q)

    def copy(self) -> ConstraintSet:
        projector = None if self._config_projector is None else self._config_projector.copy()
        return ConstraintSet(self._device, self.name, projector)

    def __repr__(self) -> str:
        return f"ConstraintSet({self.name!r}, {self._config_projector!r})"
