# Copyright 2025 - Oumi
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

import logging
import os
import sys
from pathlib import Path
from typing import Optional, Union

_DISABLE_RICH_LOGGING_ENV_VAR = "AEROCHAT_DISABLE_RICH_LOGGING"
_LOG_FILE_NAME = "aerochat.log"


def get_logger(
    name: str,
    level: str = "info",
    log_dir: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """Gets a logger instance with the specified name and log level.

    Args:
        name : The name of the logger.
        level (optional): The log level to set for the logger. Defaults to "info".
        log_dir (optional): Directory to store log files. Defaults to None.

    Returns:
        logging.Logger: The logger instance.
    """
    if name not in logging.Logger.manager.loggerDict:
        configure_logger(name, level=level, log_dir=log_dir)

    logger = logging.getLogger(name)
    return logger


def configure_logger(
    name: str,
    level: str = "info",
    log_dir: Optional[Union[str, Path]] = None,
) -> None:
    """Configures a logger with the specified name and log level."""
    logger = logging.getLogger(name)

    # Remove any existing handlers
    logger.handlers = []

    logger.setLevel(level.upper())

    default_formatter = logging.Formatter(
        "[%(asctime)s][%(name)s]"
        "[pid:%(process)d][%(threadName)s]"
        "[%(levelname)s]][%(filename)s:%(lineno)s] %(message)s"
    )

    if should_use_rich_logging():
        console_handler = _configure_rich_handler(level)
    else:
        # Logs go to stderr so they never interleave with streamed responses.
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(default_formatter)

    console_handler.setLevel(level.upper())
    logger.addHandler(console_handler)

    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_dir / _LOG_FILE_NAME)
        file_handler.setFormatter(default_formatter)
        file_handler.setLevel(level.upper())
        logger.addHandler(file_handler)

    logger.propagate = False


def should_use_rich_logging() -> bool:
    """Determines whether rich logging should be used.

    Returns:
        bool: True if rich logging should be used, False otherwise.

    Rich logging is enabled if stderr is a terminal (TTY) and not explicitly
    disabled via the AEROCHAT_DISABLE_RICH_LOGGING environment variable.
    """
    if os.environ.get(_DISABLE_RICH_LOGGING_ENV_VAR, "").lower() in (
        "1",
        "yes",
        "on",
        "true",
        "y",
    ):
        return False

    return sys.stderr.isatty()


def _configure_rich_handler(level: str) -> logging.Handler:
    """Configures a rich logging handler."""
    from rich.console import Console
    from rich.logging import RichHandler

    use_detailed_logging = level.upper() == "DEBUG"

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_time=True,
        show_level=True,
        show_path=use_detailed_logging,
        markup=False,
        rich_tracebacks=use_detailed_logging,
        tracebacks_show_locals=use_detailed_logging,
    )

    if use_detailed_logging:
        rich_formatter = logging.Formatter("[pid-%(process)d][%(threadName)s] %(message)s")
    else:
        rich_formatter = logging.Formatter("%(message)s")
    console_handler.setFormatter(rich_formatter)
    return console_handler


def update_logger_level(name: str, level: str = "info") -> None:
    """Updates the log level of the logger.

    Args:
        name (str): The logger instance to update.
        level (str, optional): The log level to set for the logger. Defaults to "info".
    """
    logger = get_logger(name, level=level)
    logger.setLevel(level.upper())

    for handler in logger.handlers:
        handler.setLevel(level.upper())


# Default logger for the package
logger = get_logger("aerochat")
