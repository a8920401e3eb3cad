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

"""AeroChat: a streaming chat client for the Gemini API.

The client picks a model, tool set and generation parameters from the content
of each message, streams the answer, and keeps the conversation on disk.

Modules:
    - :mod:`~aerochat.core.intent`: Search and reasoning intent detection.
    - :mod:`~aerochat.core.request_configurator`: Input to request mapping.
    - :mod:`~aerochat.core.suggestions`: Contextual follow-up actions.
    - :mod:`~aerochat.core.grounding`: Cited source extraction.
    - :mod:`~aerochat.session`: The streaming session driver.
    - :mod:`~aerochat.controller`: Application state and its transitions.
    - :mod:`~aerochat.persistence`: Durable storage of history and settings.

Functions:
    - :func:`~aerochat.ask`: Send one message and wait for the answer.
    - :func:`~aerochat.preview`: Inspect the request for an input.

Examples:
    Sending a message::

        >>> from aerochat import ask
        >>> from aerochat.core.configs import ChatConfig
        >>> result = ask(ChatConfig(), "Find the latest developments in AI")
        >>> result.request.mode_label
        'Google Search'

See Also:
    - :mod:`aerochat.core.configs`: For configuration classes used in AeroChat
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from aerochat.controller import InputPreview
    from aerochat.core.configs import ChatConfig
    from aerochat.core.inference import BaseStreamingEngine
    from aerochat.core.types import MediaAttachment
    from aerochat.session import SessionResult


def ask(
    config: ChatConfig,
    prompt: str,
    *,
    media: MediaAttachment | None = None,
    engine: BaseStreamingEngine | None = None,
) -> SessionResult | None:
    """Sends one message in the persisted conversation and waits for the answer.

    Args:
        config: The application configuration.
        prompt: The message text.
        media: An image or video to attach.
        engine: The backend to use. Defaults to the Gemini API.

    Returns:
        The outcome of the exchange, or None if there was nothing to send.
    """
    import asyncio

    from aerochat.controller import ChatController

    controller = ChatController.from_config(config, engine=engine)
    controller.stage_media(media)
    return asyncio.run(controller.send(prompt))


def preview(
    config: ChatConfig,
    text: str,
    *,
    media: MediaAttachment | None = None,
) -> InputPreview:
    """Returns the request and suggestions for an input without sending it.

    Developer mode and configuration are read from the persisted settings.

    Args:
        config: The application configuration.
        text: The input text.
        media: An image or video to attach.
    """
    from aerochat.controller import ChatController

    controller = ChatController.from_config(config)
    controller.stage_media(media)
    return controller.preview(text)


__all__ = ["ask", "preview"]
