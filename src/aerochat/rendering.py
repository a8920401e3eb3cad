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

"""Markdown rendering of model answers for the terminal."""

from typing import ClassVar

from rich.console import Console, ConsoleOptions, RenderResult
from rich.markdown import BlockQuote, Markdown, MarkdownElement
from rich.panel import Panel

INSIGHT_TITLE = "Insight"


class InsightBlockQuote(BlockQuote):
    """Renders a block quotation as a highlighted "insight" callout."""

    def __rich_console__(
        self, console: Console, options: ConsoleOptions
    ) -> RenderResult:
        """Yields the quoted content inside a titled panel."""
        yield Panel(
            self.elements,
            title=INSIGHT_TITLE,
            title_align="left",
            border_style="magenta",
            padding=(0, 1),
        )


class InsightMarkdown(Markdown):
    """Markdown with block quotations rendered as insight callouts."""

    elements: ClassVar[dict[str, type[MarkdownElement]]] = {
        **Markdown.elements,
        "blockquote_open": InsightBlockQuote,
    }


def renderable(text: str) -> InsightMarkdown:
    """Returns the Rich renderable for a (possibly partial) answer."""
    return InsightMarkdown(text, code_theme="monokai", hyperlinks=True)


def render(text: str, width: int = 100, color: bool = True) -> str:
    """Renders Markdown text to a terminal string.

    Args:
        text: The Markdown text.
        width: Width of the output in columns.
        color: Whether to include ANSI styles.

    Returns:
        str: The rendered text.
    """
    console = Console(
        width=width,
        force_terminal=color,
        no_color=not color,
        color_system="truecolor" if color else None,
    )
    with console.capture() as capture:
        console.print(renderable(text))
    return capture.get()
