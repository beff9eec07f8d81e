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

"""Tests for GlobalConfig."""

from pydantic import ValidationError
import pytest

from conpath.core.global_config import GlobalConfig, get_global_config
from conpath.spec import LineSearchType


def test_defaults(monkeypatch):
    monkeypatch.delenv("CONPATH_HERMITE_BETA", raising=False)
    config = GlobalConfig(_env_file=None)

    assert config.error_threshold == 1e-4
    assert config.max_iterations == 40
    assert config.line_search == LineSearchType.FIXED_SEQUENCE
    assert config.hermite_beta == 0.9
    assert config.hermite_step == 2.0


def test_environment_override(monkeypatch):
    monkeypatch.setenv("CONPATH_HERMITE_BETA", "0.8")
    monkeypatch.setenv("CONPATH_MAX_ITERATIONS", "7")

    config = GlobalConfig(_env_file=None)

    assert config.hermite_beta == 0.8
    assert config.max_iterations == 7


def test_frozen():
    config = GlobalConfig(_env_file=None)

    with pytest.raises(ValidationError):
        config.hermite_beta = 0.5


def test_invalid_value_rejected():
    with pytest.raises(ValidationError):
        GlobalConfig(_env_file=None, error_threshold=0.0)


def test_get_global_config_is_cached():
    assert get_global_config() is get_global_config()
