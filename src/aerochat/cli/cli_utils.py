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
from enum import Enum
from typing import Annotated, Optional

import typer
from rich.console import Console

from aerochat.core.configs.chat_config import ChatConfig
from aerochat.utils.logging import configure_logger, logger, update_logger_level

CONTEXT_ALLOW_EXTRA_ARGS = {"allow_extra_args": True, "ignore_unknown_options": True}
CONFIG_FLAGS = ["--config", "-c"]

CONSOLE = Console()


def section_header(title, console: Console = CONSOLE):
    """Print a section header with the given title.

    Args:
        title: The title text to display in the header.
        console: The Console object to use for printing.
    """
    console.print(f"\n[blue]{'━' * console.width}[/blue]")
    console.print(f"[yellow]   {title}[/yellow]")
    console.print(f"[blue]{'━' * console.width}[/blue]\n")


def parse_extra_cli_args(ctx: typer.Context) -> list[str]:
    """Parses extra CLI arguments into a list of dotlist overrides.

    Args:
        ctx: The Typer context object.

    Returns:
        List[str]: The extra CLI arguments, e.g. `remote.connection_timeout=30`.
    """
    args = []

    # The following formats are supported:
    # 1. Space separated: "--foo" "2"
    # 2. `=`-separated: "--foo=2"
    num_args = len(ctx.args)
    idx = 0
    while idx < num_args:
        original_key = ctx.args[idx]
        key = original_key.strip()
        if not key.startswith("--"):
            raise typer.BadParameter(
                "Extra arguments must start with '--'. "
                f"Found argument `{original_key}` at position {idx}: `{ctx.args}`"
            )
        # Strip leading "--"
        key = key[2:]
        pos = key.find("=")
        if pos >= 0:
            # '='-separated argument
            value = key[(pos + 1) :].strip()
            key = key[:pos].strip()
            if not key:
                raise typer.BadParameter(
                    "Empty key name for `=`-separated argument. "
                    f"Found argument `{original_key}` at position {idx}: "
                    f"`{ctx.args}`"
                )
            idx += 1
        else:
            # Space separated argument
            if idx + 1 >= num_args:
                raise typer.BadParameter(
                    "Trailing argument has no value assigned. "
                    f"Found argument `{original_key}` at position {idx}: "
                    f"`{ctx.args}`"
                )
            value = ctx.args[idx + 1].strip()
            idx += 2

        if value.startswith("--"):
            logger.warning(
                f"Argument value ('{value}') starts with `--`! Key: '{original_key}'"
            )

        args.append(f"{key}={value}")
    logger.debug(f"Parsed CLI args: {args}")
    return args


class LogLevel(str, Enum):
    """The available logging levels."""

    DEBUG = logging.getLevelName(logging.DEBUG)
    INFO = logging.getLevelName(logging.INFO)
    WARNING = logging.getLevelName(logging.WARNING)
    ERROR = logging.getLevelName(logging.ERROR)
    CRITICAL = logging.getLevelName(logging.CRITICAL)


def set_log_level(level: Optional[LogLevel]):
    """Sets the logging level for the current command.

    Args:
        level (Optional[LogLevel]): The log level to use.
    """
    if not level:
        return
    uppercase_level = level.upper()
    update_logger_level("aerochat", level=uppercase_level)
    CONSOLE.print(f"Set log level to [yellow]{uppercase_level}[/yellow]")


LOG_LEVEL_TYPE = Annotated[
    Optional[LogLevel],
    typer.Option(
        "--log-level",
        "-log",
        help="The logging level for the specified command.",
        show_default=False,
        show_choices=True,
        case_sensitive=False,
        callback=set_log_level,
    ),
]

CONFIG_TYPE = Annotated[
    Optional[str],
    typer.Option(
        *CONFIG_FLAGS,
        help="Path to a YAML application configuration file.",
        show_default=False,
    ),
]

STORAGE_DIR_TYPE = Annotated[
    Optional[str],
    typer.Option(
        "--storage-dir",
        help="Directory holding the history and developer settings.",
        show_default=False,
    ),
]


def load_chat_config(
    config_path: Optional[str],
    storage_dir: Optional[str] = None,
    extra_args: Optional[list[str]] = None,
) -> ChatConfig:
    """Loads the application configuration from a file and CLI overrides.

    Args:
        config_path: Path to a YAML configuration file, if any.
        storage_dir: Overrides `storage_dir` if set.
        extra_args: Dot-separated overrides, e.g. `max_replay_messages=20`.

    Returns:
        ChatConfig: The validated configuration.
    """
    config = ChatConfig.from_yaml_and_arg_list(
        config_path, extra_args or [], logger=logger
    )
    if storage_dir:
        config.storage_dir = storage_dir
    config.finalize_and_validate()
    if config.log_dir:
        configure_logger("aerochat", level=config.log_level, log_dir=config.log_dir)
    return config
