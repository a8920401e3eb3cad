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

import sys
import traceback

import typer

from aerochat.cli.chat import ask, chat, preview
from aerochat.cli.cli_utils import CONSOLE, CONTEXT_ALLOW_EXTRA_ARGS
from aerochat.cli.config import dev, reset, set_values
from aerochat.cli.config import show as config_show
from aerochat.cli.history import export as history_export
from aerochat.cli.history import show as history_show

_ASCII_LOGO = r"""
    _                  ___ _         _
   /_\  ___ _ _ ___   / __| |_  __ _| |_
  / _ \/ -_) '_/ _ \ | (__| ' \/ _` |  _|
 /_/ \_\___|_| \___/  \___|_||_\__,_|\__|
"""


def _aerochat_welcome(ctx: typer.Context):
    if ctx.invoked_subcommand != "chat":
        return
    CONSOLE.print(_ASCII_LOGO, style="cyan", highlight=False)


def get_app() -> typer.Typer:
    """Create the Typer CLI app."""
    app = typer.Typer(pretty_exceptions_enable=False)
    app.callback(context_settings={"help_option_names": ["-h", "--help"]})(
        _aerochat_welcome
    )
    app.command(
        context_settings=CONTEXT_ALLOW_EXTRA_ARGS,
        help="Start an interactive chat session.",
    )(chat)
    app.command(
        context_settings=CONTEXT_ALLOW_EXTRA_ARGS,
        help="Send one message and stream the answer.",
    )(ask)
    app.command(
        context_settings=CONTEXT_ALLOW_EXTRA_ARGS,
        help="Show the request that would be sent for an input.",
    )(preview)
    app.command(help="Change the developer-mode flag.")(dev)

    config_app = typer.Typer(pretty_exceptions_enable=False)
    config_app.command(name="show", help="Show the developer configuration.")(
        config_show
    )
    config_app.command(name="set", help="Edit the developer configuration.")(
        set_values
    )
    config_app.command(name="reset", help="Restore the default configuration.")(
        reset
    )
    app.add_typer(config_app, name="config", help="Manage developer settings.")

    history_app = typer.Typer(pretty_exceptions_enable=False)
    history_app.command(name="show", help="Show the conversation.")(history_show)
    history_app.command(name="export", help="Export the conversation as JSONL.")(
        history_export
    )
    app.add_typer(history_app, name="history", help="Manage the conversation.")

    return app


def run():
    """The entrypoint for the CLI."""
    app = get_app()
    try:
        return app()
    except Exception:
        CONSOLE.print(traceback.format_exc())
        sys.exit(1)
