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

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from conpath.spec.enums import LineSearchType


class GlobalConfig(BaseSettings):
    """Defaults used by the factory functions and the logger.

    Every field can be overridden with a ``CONPATH_`` prefixed environment
    variable (e.g. ``CONPATH_HERMITE_BETA=0.8``) or a ``.env`` file.
    """

    # ConfigProjector
    error_threshold: float = Field(default=1e-4, gt=0.0)
    max_iterations: int = Field(default=40, ge=1)
    line_search: LineSearchType = LineSearchType.FIXED_SEQUENCE

    # RecursiveHermite
    hermite_beta: float = 0.9
    hermite_step: float = Field(default=2.0, gt=0.0)
    max_subdivision_depth: int = Field(default=64, ge=1)
    max_subdivision_nodes: int = Field(default=100_000, ge=1)

    # Logging
    log_level: str = "INFO"
    log_dir: Path | None = None
    log_to_file: bool = True

    model_config = SettingsConfigDict(
        env_prefix="CONPATH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )


@lru_cache(maxsize=1)
def get_global_config() -> GlobalConfig:
    return GlobalConfig()
