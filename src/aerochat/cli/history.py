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

from typing import Annotated

import typer
from rich.console import Console

import aerochat.cli.cli_utils as cli_utils
from aerochat.controller import ChatController
from aerochat.core.types.conversation import Conversation, Role
from aerochat.rendering import renderable


def print_conversation(
    conversation: Conversation, console: Console = cli_utils.CONSOLE
) -> None:
    """Prints the transcript, one turn after another."""
    if not len(conversation):
        console.print("[dim]No messages yet.[/dim]")
        return
    for message in conversation.messages:
        timestamp = message.timestamp.astimezone().strftime("%Y-%m-%d %H:%M")
        if message.role == Role.USER:
            media = message.media
            attachment = f" [dim]<{media.mime_type}>[/dim]" if media else ""
            console.print(
                f"[bold cyan]You[/bold cyan] [dim]{timestamp}[/dim]{attachment}"
            )
            if message.text:
                console.print(message.text)
        else:
            console.print(
                f"[bold magenta]Gemini[/bold magenta] [dim]{timestamp} · "
                f"{message.mode or ''}[/dim]"
            )
            console.print(renderable(message.text))
        console.print()


def show(
    storage_dir: cli_utils.STORAGE_DIR_TYPE = None,
    config: cli_utils.CONFIG_TYPE = None,
    level: cli_utils.LOG_LEVEL_TYPE = None,
):
    """Show the persisted conversation.

    Args:
        storage_dir: Directory holding the history and developer settings.
        config: Path to the application configuration file.
        level: The logging level for the specified command.
    """
    parsed_config = cli_utils.load_chat_config(config, storage_dir)
    controller = ChatController.from_config(parsed_config)
    print_conversation(controller.state.conversation)


def export(
    output_path: Annotated[
        str, typer.Argument(help="Path of the JSON Lines file to write.")
    ],
    storage_dir: cli_utils.STORAGE_DIR_TYPE = None,
    config: cli_utils.CONFIG_TYPE = None,
    level: cli_utils.LOG_LEVEL_TYPE = None,
):
    """Export the persisted conversation as JSON Lines, one message per line.

    Args:
        output_path: Path of the JSON Lines file to write.
        storage_dir: Directory holding the history and developer settings.
        config: Path to the application configuration file.
        level: The logging level for the specified command.
    """
    parsed_config = cli_utils.load_chat_config(config, storage_dir)
    controller = ChatController.from_config(parsed_config)
    conversation = controller.state.conversation
    controller.persistence.export_history(conversation, output_path)
    cli_utils.CONSOLE.print(
        f"Exported [yellow]{len(conversation)}[/yellow] messages to {output_path}"
    )
