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

from enum import Enum
from typing import Annotated

import typer
from omegaconf import OmegaConf
from rich.syntax import Syntax

import aerochat.cli.cli_utils as cli_utils
from aerochat.controller import ChatController
from aerochat.core.configs.developer_config import DeveloperConfig


class DevAction(str, Enum):
    """Ways to change the developer-mode flag."""

    ON = "on"
    OFF = "off"
    TOGGLE = "toggle"


def _print_dev_config(config: DeveloperConfig, dev_mode: bool) -> None:
    cli_utils.CONSOLE.print(
        f"Developer mode: [yellow]{'on' if dev_mode else 'off'}[/yellow]"
    )
    cli_utils.CONSOLE.print(
        Syntax(OmegaConf.to_yaml(config.to_dict()), "yaml", theme="ansi_dark")
    )


def show(
    storage_dir: cli_utils.STORAGE_DIR_TYPE = None,
    config: cli_utils.CONFIG_TYPE = None,
    level: cli_utils.LOG_LEVEL_TYPE = None,
):
    """Show the persisted developer configuration.

    Args:
        storage_dir: Directory holding the history and developer settings.
        config: Path to the application configuration file.
        level: The logging level for the specified command.
    """
    parsed_config = cli_utils.load_chat_config(config, storage_dir)
    controller = ChatController.from_config(parsed_config)
    _print_dev_config(controller.state.dev_config, controller.state.dev_mode)


def set_values(
    overrides: Annotated[
        list[str],
        typer.Argument(
            help="Values to set, e.g. `temperature=0.2 tools.google_maps=true`."
        ),
    ],
    storage_dir: cli_utils.STORAGE_DIR_TYPE = None,
    config: cli_utils.CONFIG_TYPE = None,
    level: cli_utils.LOG_LEVEL_TYPE = None,
):
    """Edit the persisted developer configuration.

    Args:
        overrides: Dot-separated `KEY=VALUE` pairs.
        storage_dir: Directory holding the history and developer settings.
        config: Path to the application configuration file.
        level: The logging level for the specified command.
    """
    parsed_config = cli_utils.load_chat_config(config, storage_dir)
    controller = ChatController.from_config(parsed_config)
    for override in overrides:
        if "=" not in override:
            raise typer.BadParameter(f"Expected KEY=VALUE, got `{override}`.")
    try:
        dev_config = controller.update_dev_config(overrides)
    except ValueError as e:
        cli_utils.CONSOLE.print(f"[red]Invalid developer configuration:[/red] {e}")
        raise typer.Exit(code=1)
    _print_dev_config(dev_config, controller.state.dev_mode)


def reset(
    storage_dir: cli_utils.STORAGE_DIR_TYPE = None,
    config: cli_utils.CONFIG_TYPE = None,
    level: cli_utils.LOG_LEVEL_TYPE = None,
):
    """Restore the default developer configuration.

    Args:
        storage_dir: Directory holding the history and developer settings.
        config: Path to the application configuration file.
        level: The logging level for the specified command.
    """
    parsed_config = cli_utils.load_chat_config(config, storage_dir)
    controller = ChatController.from_config(parsed_config)
    _print_dev_config(controller.reset_dev_config(), controller.state.dev_mode)


def dev(
    action: Annotated[
        DevAction, typer.Argument(help="Turn developer mode on, off, or toggle it.")
    ] = DevAction.TOGGLE,
    storage_dir: cli_utils.STORAGE_DIR_TYPE = None,
    config: cli_utils.CONFIG_TYPE = None,
    level: cli_utils.LOG_LEVEL_TYPE = None,
):
    """Change the persisted developer-mode flag.

    Args:
        action: Turn developer mode on, off, or toggle it.
        storage_dir: Directory holding the history and developer settings.
        config: Path to the application configuration file.
        level: The logging level for the specified command.
    """
    parsed_config = cli_utils.load_chat_config(config, storage_dir)
    controller = ChatController.from_config(parsed_config)
    if action == DevAction.TOGGLE:
        enabled = controller.toggle_dev_mode()
    else:
        enabled = controller.set_dev_mode(action == DevAction.ON)
    cli_utils.CONSOLE.print(
        f"Developer mode: [yellow]{'on' if enabled else 'off'}[/yellow]"
    )
