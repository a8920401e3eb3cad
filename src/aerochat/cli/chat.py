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

import asyncio
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.live import Live
from rich.table import Table
from rich.text import Text

import aerochat.cli.cli_utils as cli_utils
from aerochat.cli.history import print_conversation
from aerochat.controller import (
    STARTER_PROMPTS,
    ChatController,
    InputPreview,
    status_color,
    status_label,
)
from aerochat.core.grounding import SourceCard
from aerochat.core.request_configurator import RequestDescriptor
from aerochat.core.suggestions import Action
from aerochat.core.types.exceptions import SessionBusyError
from aerochat.rendering import renderable
from aerochat.session import SessionObserver, SessionResult, SessionState
from aerochat.utils.media_utils import load_media_attachment

_PROMPT = "[bold cyan]>[/bold cyan] "

_HELP_TEXT = """[bold]Commands[/bold]
  /1 … /4        Send a suggested follow-up
  /attach PATH   Stage an image or video for the next message
  /detach        Remove the staged attachment
  /dev           Toggle developer mode
  /history       Show the transcript
  /quit          Exit
Press Ctrl+C while a response streams to cancel it."""

_IMAGE_TYPE = Annotated[
    Optional[str],
    typer.Option("--image", help="Path of an image or video to attach."),
]


class ConsoleStreamObserver(SessionObserver):
    """Shows a streamed answer as live Markdown in the terminal."""

    def __init__(self, console: Console = cli_utils.CONSOLE):
        """Initializes the observer."""
        self._console = console
        self._live: Optional[Live] = None
        self._sources: list[SourceCard] = []

    def _stop_live(self) -> None:
        if self._live is not None:
            self._live.stop()
            self._live = None

    def on_state_change(
        self, state: SessionState, request: Optional[RequestDescriptor]
    ) -> None:
        """Starts the live display when streaming begins and closes it after."""
        if state == SessionState.STREAMING and request is not None:
            self._sources = []
            self._live = Live(
                Text(
                    f"{status_label(request.mode_label)}…",
                    style=status_color(request.mode_label),
                ),
                console=self._console,
                refresh_per_second=8,
                vertical_overflow="visible",
            )
            self._live.start()
        elif state in (
            SessionState.COMPLETED,
            SessionState.FAILED,
            SessionState.CANCELLED,
        ):
            self._stop_live()
            if state == SessionState.COMPLETED and request is not None:
                print_sources(self._sources, self._console)
                self._console.print(
                    Text(request.mode_label, style=status_color(request.mode_label))
                )
            elif state == SessionState.CANCELLED:
                self._console.print("[yellow]Response cancelled.[/yellow]")

    def on_render(self, text: str) -> None:
        """Replaces the live display with the rendered answer so far."""
        if self._live is not None:
            self._live.update(renderable(text))

    def on_sources(self, sources: list[SourceCard]) -> None:
        """Keeps the latest list of sources for display on completion."""
        self._sources = sources

    def on_refresh(self) -> None:
        """Refreshes the live display."""
        if self._live is not None:
            self._live.refresh()

    def on_error(self, error: Exception) -> None:
        """Shows the failure in place of the status line."""
        self._console.print(f"[bold red]Error:[/bold red] {error}")


def print_sources(sources: list[SourceCard], console: Console = cli_utils.CONSOLE):
    """Prints cited sources, web pages first."""
    if not sources:
        return
    table = Table(title="Sources", show_edge=False, title_justify="left")
    table.add_column("", style="dim")
    table.add_column("Title", style="green")
    table.add_column("Link", style="blue", overflow="fold")
    for source in sources:
        table.add_row(source.icon, source.title, source.uri)
    console.print(table)


def print_suggestions(suggestions: list[Action], console: Console = cli_utils.CONSOLE):
    """Prints the numbered follow-up actions."""
    chips = "   ".join(
        f"[bold]/{idx}[/bold] {action.label}"
        for idx, action in enumerate(suggestions, start=1)
    )
    console.print(f"[dim]{chips}[/dim]")


def print_preview(input_preview: InputPreview, console: Console = cli_utils.CONSOLE):
    """Prints a request descriptor and its suggestions as a table."""
    request = input_preview.request
    generation = request.generation
    table = Table(title="Request", show_edge=False, show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Mode", request.mode_label)
    table.add_row("Model", request.model_name)
    table.add_row("Affordance", request.affordance.value)
    table.add_row("Tools", ", ".join(t.value for t in generation.tools) or "-")
    for name in ("thinking_budget", "max_output_tokens", "temperature", "top_p"):
        value = getattr(generation, name)
        if value is not None:
            table.add_row(name, str(value))
    if generation.system_instruction:
        table.add_row("system_instruction", generation.system_instruction)
    if generation.safety_settings:
        table.add_row("safety", generation.safety_settings[0].threshold.value)
    console.print(table)
    print_suggestions(input_preview.suggestions, console)


def _create_controller(
    ctx: typer.Context, config: Optional[str], storage_dir: Optional[str]
) -> ChatController:
    extra_args = cli_utils.parse_extra_cli_args(ctx)
    parsed_config = cli_utils.load_chat_config(config, storage_dir, extra_args)
    return ChatController.from_config(
        parsed_config, observer=ConsoleStreamObserver(cli_utils.CONSOLE)
    )


def _stage_image(controller: ChatController, image: Optional[str]) -> None:
    if image:
        controller.stage_media(load_media_attachment(image))


def _send(controller: ChatController, text: str) -> Optional[SessionResult]:
    """Runs one exchange. Ctrl+C cancels the stream and returns None."""
    try:
        return asyncio.run(controller.send(text))
    except KeyboardInterrupt:
        return None


def ask(
    ctx: typer.Context,
    prompt: Annotated[str, typer.Argument(help="The message to send.")],
    image: _IMAGE_TYPE = None,
    config: cli_utils.CONFIG_TYPE = None,
    storage_dir: cli_utils.STORAGE_DIR_TYPE = None,
    level: cli_utils.LOG_LEVEL_TYPE = None,
):
    """Send one message and stream the answer.

    Args:
        ctx: The Typer context object.
        prompt: The message to send.
        image: Path of an image or video to attach.
        config: Path to the application configuration file.
        storage_dir: Directory holding the history and developer settings.
        level: The logging level for the specified command.
    """
    controller = _create_controller(ctx, config, storage_dir)
    _stage_image(controller, image)
    result = _send(controller, prompt)
    if result is not None and result.state == SessionState.FAILED:
        raise typer.Exit(code=1)


def preview(
    ctx: typer.Context,
    text: Annotated[str, typer.Argument(help="The input text to inspect.")],
    image: _IMAGE_TYPE = None,
    config: cli_utils.CONFIG_TYPE = None,
    storage_dir: cli_utils.STORAGE_DIR_TYPE = None,
    level: cli_utils.LOG_LEVEL_TYPE = None,
):
    """Show the request that would be sent for an input, without sending it.

    Args:
        ctx: The Typer context object.
        text: The input text to inspect.
        image: Path of an image or video to attach.
        config: Path to the application configuration file.
        storage_dir: Directory holding the history and developer settings.
        level: The logging level for the specified command.
    """
    controller = _create_controller(ctx, config, storage_dir)
    _stage_image(controller, image)
    print_preview(controller.preview(text))


def chat(
    ctx: typer.Context,
    config: cli_utils.CONFIG_TYPE = None,
    storage_dir: cli_utils.STORAGE_DIR_TYPE = None,
    level: cli_utils.LOG_LEVEL_TYPE = None,
):
    """Start an interactive chat session.

    Args:
        ctx: The Typer context object.
        config: Path to the application configuration file.
        storage_dir: Directory holding the history and developer settings.
        level: The logging level for the specified command.
    """
    controller = _create_controller(ctx, config, storage_dir)
    console = cli_utils.CONSOLE
    cli_utils.section_header("AeroChat", console)
    console.print(_HELP_TEXT)

    state = controller.state
    if len(state.conversation):
        print_conversation(state.conversation, console)
    else:
        for starter in STARTER_PROMPTS:
            console.print(f"  [bold]{starter.title}[/bold]  {starter.prompt or '/dev'}")

    while True:
        current = controller.preview("")
        if len(state.conversation):
            print_suggestions(current.suggestions, console)
        try:
            line = console.input(_PROMPT).strip()
        except (EOFError, KeyboardInterrupt):  # Triggered by Ctrl+D/Ctrl+C
            console.print("\nExiting...")
            return

        if not line:
            continue
        if line in ("/quit", "/exit"):
            return
        if line == "/help":
            console.print(_HELP_TEXT)
            continue
        if line == "/dev":
            enabled = controller.toggle_dev_mode()
            console.print(f"Developer mode [yellow]{'on' if enabled else 'off'}[/]")
            continue
        if line == "/history":
            print_conversation(state.conversation, console)
            continue
        if line == "/detach":
            controller.clear_media()
            continue
        if line.startswith("/attach"):
            path = line[len("/attach") :].strip()
            try:
                if controller.stage_media(load_media_attachment(path)):
                    console.print(f"[dim]Attached {path}[/dim]")
            except ValueError as e:
                console.print(f"[red]{e}[/red]")
            continue
        if line[0] == "/" and line[1:].isdigit():
            idx = int(line[1:]) - 1
            if not 0 <= idx < len(current.suggestions):
                console.print("[red]No such suggestion.[/red]")
                continue
            line = current.suggestions[idx].prompt

        try:
            _send(controller, line)
        except SessionBusyError as e:
            console.print(f"[red]{e}[/red]")
