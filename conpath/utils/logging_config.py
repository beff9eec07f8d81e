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

"""Structured logging.

Every module logs through a module-level logger = setup_logger(). Lines go
to stdout in a compact form and, unless CONPATH_LOG_TO_FILE=false, to a
rotating JSON-lines file. The level and the log directory come from
GlobalConfig (CONPATH_LOG_LEVEL, CONPATH_LOG_DIR).
"""

from collections.abc import Mapping
from datetime import datetime
import inspect
import logging
import logging.handlers
import os
from pathlib import Path
import sys
import tempfile
from typing import Any

import structlog
from structlog.processors import CallsiteParameter, CallsiteParameterAdder

from conpath.constants import CONPATH_LOG_DIR, CONPATH_PROJECT_ROOT
from conpath.core.global_config import get_global_config

_LOG_FILE_PATH: Path | None = None
_CONFIGURED = False


def _get_log_directory() -> Path:
    configured = get_global_config().log_dir
    if configured is not None:
        log_dir = configured
    elif (CONPATH_PROJECT_ROOT / ".git").exists():
        log_dir = CONPATH_LOG_DIR
    else:
        xdg_state_home = os.getenv("XDG_STATE_HOME")
        base = Path(xdg_state_home) if xdg_state_home else Path.home() / ".local" / "state"
        log_dir = base / "conpath" / "logs"

    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except OSError:
        log_dir = Path(tempfile.gettempdir()) / "conpath" / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def get_log_file_path() -> Path:
    """Path of the JSON-lines file shared by every logger of the process."""
    global _LOG_FILE_PATH

    if _LOG_FILE_PATH is None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        _LOG_FILE_PATH = _get_log_directory() / f"conpath_{timestamp}_{os.getpid()}.jsonl"
    return _LOG_FILE_PATH


def _configure_structlog() -> None:
    global _CONFIGURED

    if _CONFIGURED:
        return

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            CallsiteParameterAdder(
                parameters=[CallsiteParameter.FUNC_NAME, CallsiteParameter.LINENO]
            ),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _CONFIGURED = True


def _module_name(filename: str) -> str:
    """conpath/projection/recursive_hermite.py -> conpath.projection.recursive_hermite"""
    path = Path(filename)
    try:
        path = path.relative_to(CONPATH_PROJECT_ROOT)
    except ValueError:
        return path.stem
    return ".".join(path.with_suffix("").parts)


def _format_value(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:.6g}"
    return str(value)


def _console_renderer(logger: Any, method_name: str, event_dict: Mapping[str, Any]) -> str:
    """Format as: HH:MM:SS.mmm lvl module.name: event key=value ..."""
    event_dict = dict(event_dict)

    timestamp = event_dict.pop("timestamp", None)
    try:
        moment = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        moment = datetime.now()
    time_str = moment.strftime("%H:%M:%S") + f".{moment.microsecond // 1000:03d}"

    level = event_dict.pop("level", "???")[:3]
    name = event_dict.pop("logger", "")
    event = event_dict.pop("event", "")
    for key in ("func_name", "lineno", "exc_info", "_record", "_from_structlog"):
        event_dict.pop(key, None)
    exception = event_dict.pop("exception", None)

    line = f"{time_str} {level} {name}: {event}"
    if event_dict:
        line += " " + " ".join(f"{k}={_format_value(v)}" for k, v in sorted(event_dict.items()))
    if exception:
        line += "\n" + exception
    return line


def setup_logger(*, level: int | None = None) -> Any:
    """Set up a structured logger named after the calling module.

    Args:
        level: The logging level. Defaults to GlobalConfig.log_level.

    Returns:
        A configured structlog logger instance.
    """
    name = _module_name(inspect.stack()[1].filename)
    config = get_global_config()
    _configure_structlog()

    if level is None:
        level = logging.getLevelName(config.log_level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {config.log_level}")

    stdlib_logger = logging.getLogger(name)
    stdlib_logger.handlers.clear()
    stdlib_logger.setLevel(level)
    stdlib_logger.propagate = False

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(structlog.stdlib.ProcessorFormatter(processor=_console_renderer))
    stdlib_logger.addHandler(console_handler)

    if config.log_to_file:
        file_handler = logging.handlers.RotatingFileHandler(
            get_log_file_path(),
            mode="a",
            maxBytes=10 * 1024 * 1024,  # 10MiB
            backupCount=20,
            encoding="utf-8",
        )
        file_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(processor=structlog.processors.JSONRenderer())
        )
        stdlib_logger.addHandler(file_handler)

    return structlog.get_logger(name)
