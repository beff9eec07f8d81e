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

"""Factory functions for projection engine components.

Defaults that are not given explicitly come from GlobalConfig (environment
variables prefixed with CONPATH_ or a .env file).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from conpath.core.global_config import get_global_config

if TYPE_CHECKING:
    from conpath.constraints.config_projector import ConfigProjector
    from conpath.core.global_config import GlobalConfig
    from conpath.device import Device
    from conpath.spec import (
        DistanceSpec,
        LineSearchType,
        PathProjectorSpec,
        SteeringMethodSpec,
    )


def create_config_projector(
    device: Device,
    name: str = "config_projector",
    error_threshold: float | None = None,
    max_iterations: int | None = None,
    line_search: LineSearchType | None = None,
    config: GlobalConfig | None = None,
) -> ConfigProjector:
    """Create an empty ConfigProjector, unset parameters taken from config."""
    from conpath.constraints.config_projector import ConfigProjector

    config = config or get_global_config()
    return ConfigProjector(
        device,
        name,
        config.error_threshold if error_threshold is None else error_threshold,
        config.max_iterations if max_iterations is None else max_iterations,
        config.line_search if line_search is None else line_search,
    )


def create_steering_method(
    device: Device,
    name: str = "hermite",
    **kwargs: Any,
) -> SteeringMethodSpec:
    """Create steering method. name='hermite'|'straight'."""
    if name == "hermite":
        from conpath.steering.hermite import HermiteSteeringMethod

        return HermiteSteeringMethod(device, **kwargs)
    elif name == "straight":
        from conpath.steering.straight import StraightSteeringMethod

        return StraightSteeringMethod(device, **kwargs)
    else:
        raise ValueError(f"Unknown steering method: {name}. Available: ['hermite', 'straight']")


def create_distance(
    device: Device,
    name: str = "weighed",
    **kwargs: Any,
) -> DistanceSpec:
    """Create distance. name='weighed'."""
    if name == "weighed":
        from conpath.distance import WeighedDistance

        return WeighedDistance(device, **kwargs)
    else:
        raise ValueError(f"Unknown distance: {name}. Available: ['weighed']")


def create_path_projector(
    distance: DistanceSpec,
    steering_method: SteeringMethodSpec,
    name: str = "recursive_hermite",
    config: GlobalConfig | None = None,
    **kwargs: Any,
) -> PathProjectorSpec:
    """Create path projector. name='recursive_hermite'.

    M, beta, max_depth and max_nodes default to hermite_step, hermite_beta,
    max_subdivision_depth and max_subdivision_nodes of config.
    """
    if name == "recursive_hermite":
        from conpath.projection.recursive_hermite import RecursiveHermite

        config = config or get_global_config()
        kwargs.setdefault("M", config.hermite_step)
        kwargs.setdefault("beta", config.hermite_beta)
        kwargs.setdefault("max_depth", config.max_subdivision_depth)
        kwargs.setdefault("max_nodes", config.max_subdivision_nodes)
        return RecursiveHermite(distance, steering_method, **kwargs)
    else:
        raise ValueError(f"Unknown path projector: {name}. Available: ['recursive_hermite']")
