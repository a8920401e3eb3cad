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

"""Application state of the chat client and the transitions that mutate it."""

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple, Optional

from omegaconf.errors import OmegaConfBaseException

from aerochat.core.configs.chat_config import ChatConfig
from aerochat.core.configs.developer_config import DeveloperConfig
from aerochat.core.constants import DEFAULT_MODE_LABEL
from aerochat.core.inference.base_streaming_engine import BaseStreamingEngine
from aerochat.core.request_configurator import RequestDescriptor, configure
from aerochat.core.suggestions import Action, suggest
from aerochat.core.types.conversation import Conversation, MediaAttachment, Role
from aerochat.core.types.exceptions import SessionBusyError
from aerochat.persistence.key_value_store import FileKeyValueStore
from aerochat.persistence.persistence_adapter import PersistenceAdapter
from aerochat.session import (
    SessionObserver,
    SessionResult,
    SessionState,
    StreamingSessionDriver,
)
from aerochat.utils.logging import logger


class ActivityState(str, Enum):
    """What the client is visibly doing."""

    IDLE = "idle"
    CHATTING = "chatting"
    THINKING = "thinking"
    SEARCHING = "searching"
    ANALYZING = "analyzing"
    DEVELOPER = "developer"

    def __str__(self) -> str:
        """Returns the state value."""
        return self.value


class StarterPrompt(NamedTuple):
    """A suggested opening shown on an empty transcript."""

    title: str
    prompt: Optional[str]
    """Text to send. None for the card that switches developer mode on."""


STARTER_PROMPTS: tuple[StarterPrompt, ...] = (
    StarterPrompt("Search Web", "Find the latest developments in AI"),
    StarterPrompt("Visual Analysis", "Analyze this image for design patterns"),
    StarterPrompt("Deep Thinking", "Architect a scalable backend system"),
    StarterPrompt("Developer Mode", None),
)


def activity_state(mode_label: str, dev_mode: bool) -> ActivityState:
    """Maps the mode label of a send to the activity shown while it runs."""
    if "Think" in mode_label:
        return ActivityState.THINKING
    if "Search" in mode_label:
        return ActivityState.SEARCHING
    if "Video" in mode_label or "Vis" in mode_label:
        return ActivityState.ANALYZING
    if dev_mode:
        return ActivityState.DEVELOPER
    return ActivityState.CHATTING


def status_label(mode_label: str) -> str:
    """Returns the in-progress status text for a mode label."""
    return "Generating" if mode_label == DEFAULT_MODE_LABEL else mode_label


def status_color(mode_label: str) -> str:
    """Returns the status colour (hex) for a mode label."""
    if "Think" in mode_label:
        return "#AF52DE"
    if "Search" in mode_label:
        return "#34C759"
    if "Maps" in mode_label:
        return "#FF9500"
    if "Video" in mode_label or "Vis" in mode_label:
        return "#FF2D55"
    if "Dev" in mode_label:
        return "#FF3B30"
    return "#888888"


class InputPreview(NamedTuple):
    """Transient affordances for the current, unsent input."""

    request: RequestDescriptor
    """The request that would be sent right now."""

    show_affordance: bool
    """Whether the request's affordance tag applies to the input."""

    show_send: bool
    """Whether the mode pill and send affordance are visible."""

    suggestions: list[Action]
    """Contextual follow-up actions."""


def preview(
    text: str,
    pending_media: Optional[MediaAttachment],
    dev_mode: bool,
    dev_config: DeveloperConfig,
    conversation: Conversation,
    last_response: str = "",
) -> InputPreview:
    """Computes the transient affordances for the current input. Pure."""
    has_media = pending_media is not None
    mime_type = pending_media.mime_type if pending_media is not None else None
    last_message = conversation.last_message()
    return InputPreview(
        request=configure(
            text, has_media, dev_mode, dev_config, media_mime_type=mime_type
        ),
        show_affordance=bool(text) or has_media or dev_mode,
        show_send=len(text) > 2 or has_media or dev_mode,
        suggestions=suggest(
            text,
            has_media,
            last_message.role if last_message is not None else None,
            last_response=last_response,
            media_mime_type=mime_type,
        ),
    )


@dataclass
class AppState:
    """All mutable state of the chat client."""

    conversation: Conversation = field(default_factory=Conversation)
    dev_config: DeveloperConfig = field(default_factory=DeveloperConfig)
    dev_mode: bool = False
    pending_media: Optional[MediaAttachment] = None
    last_response_text: str = ""
    activity: ActivityState = ActivityState.IDLE


def restore_state(persistence: PersistenceAdapter) -> AppState:
    """Rebuilds the application state from the persisted records."""
    conversation = persistence.load_history()
    last_message = conversation.last_message()
    last_response_text = (
        last_message.text
        if last_message is not None and last_message.role == Role.MODEL
        else ""
    )
    return AppState(
        conversation=conversation,
        dev_config=persistence.load_dev_config(),
        dev_mode=persistence.load_dev_mode(),
        last_response_text=last_response_text,
        activity=ActivityState.CHATTING if len(conversation) else ActivityState.IDLE,
    )


class ChatController:
    """Owns the application state and mediates every change to it."""

    def __init__(
        self,
        engine: BaseStreamingEngine,
        persistence: PersistenceAdapter,
        *,
        max_replay_messages: Optional[int] = None,
        observer: Optional[SessionObserver] = None,
    ):
        """Initializes the controller with state restored from `persistence`.

        Args:
            engine: The backend to stream answers from.
            persistence: Where state is loaded from and saved to.
            max_replay_messages: If set, caps the prior messages sent per request.
            observer: Receives streaming progress notifications.
        """
        self._persistence = persistence
        self._state = restore_state(persistence)
        self._driver = StreamingSessionDriver(
            engine,
            self._state.conversation,
            persistence=persistence,
            max_replay_messages=max_replay_messages,
            observer=observer,
        )

    @classmethod
    def from_config(
        cls,
        config: ChatConfig,
        engine: Optional[BaseStreamingEngine] = None,
        observer: Optional[SessionObserver] = None,
    ) -> "ChatController":
        """Builds a controller backed by file storage and the Gemini engine."""
        if engine is None:
            from aerochat.inference.gemini_streaming_engine import (
                GeminiStreamingEngine,
            )

            engine = GeminiStreamingEngine(config.remote)
        persistence = PersistenceAdapter(
            FileKeyValueStore(config.resolved_storage_dir)
        )
        return cls(
            engine,
            persistence,
            max_replay_messages=config.max_replay_messages,
            observer=observer,
        )

    @property
    def state(self) -> AppState:
        """Returns the application state. Mutate it only through the controller."""
        return self._state

    @property
    def persistence(self) -> PersistenceAdapter:
        """Returns the persistence adapter."""
        return self._persistence

    @property
    def is_busy(self) -> bool:
        """Checks if a response is being generated."""
        return self._driver.is_busy

    #
    # Developer mode and configuration
    #
    def set_dev_mode(self, enabled: bool) -> bool:
        """Sets and persists the developer-mode flag. Returns the new value."""
        self._state.dev_mode = enabled
        self._persistence.save_dev_mode(enabled)
        logger.debug(f"Developer mode {'on' if enabled else 'off'}.")
        return enabled

    def toggle_dev_mode(self) -> bool:
        """Flips and persists the developer-mode flag. Returns the new value."""
        return self.set_dev_mode(not self._state.dev_mode)

    def update_dev_config(self, overrides: list[str]) -> DeveloperConfig:
        """Applies dot-separated overrides to the developer configuration.

        The change is validated before it replaces the current configuration and
        is persisted.

        Example:
            >>> controller.update_dev_config(["temperature=0.2", "force_tools=true"])

        Raises:
            ValueError: If an override names an unknown key or an invalid value.
        """
        try:
            config = self._state.dev_config.with_overrides(overrides)
        except OmegaConfBaseException as e:
            raise ValueError(str(e)) from e
        config.finalize_and_validate()
        self._state.dev_config = config
        self._persistence.save_dev_config(config)
        return config

    def reset_dev_config(self) -> DeveloperConfig:
        """Restores and persists the default developer configuration."""
        self._state.dev_config = DeveloperConfig()
        self._persistence.save_dev_config(self._state.dev_config)
        return self._state.dev_config

    #
    # Pending media
    #
    def stage_media(self, media: Optional[MediaAttachment]) -> bool:
        """Stages an attachment, replacing any staged one.

        Returns:
            bool: False if `media` is None (unsupported input is ignored).
        """
        if media is None:
            return False
        self._state.pending_media = media
        return True

    def clear_media(self) -> None:
        """Removes the staged attachment."""
        self._state.pending_media = None

    #
    # Sending
    #
    def preview(self, text: str) -> InputPreview:
        """Returns the transient affordances for `text` in the current state."""
        return preview(
            text,
            self._state.pending_media,
            self._state.dev_mode,
            self._state.dev_config,
            self._state.conversation,
            self._state.last_response_text,
        )

    async def send(self, text: str) -> Optional[SessionResult]:
        """Sends `text` with the staged attachment, if any.

        Returns:
            Optional[SessionResult]: The outcome, or None if there was nothing to
                send.

        Raises:
            SessionBusyError: If a response is already being generated.
        """
        media = self._state.pending_media
        if not text.strip() and media is None:
            return None
        if self._driver.is_busy:
            raise SessionBusyError("A response is already being generated.")

        dev_config = copy.deepcopy(self._state.dev_config)
        self._state.pending_media = None
        mode_label = configure(
            text.strip(),
            media is not None,
            self._state.dev_mode,
            dev_config,
            media_mime_type=media.mime_type if media is not None else None,
        ).mode_label
        self._state.activity = activity_state(mode_label, self._state.dev_mode)
        try:
            result = await self._driver.send(
                text, media, dev_mode=self._state.dev_mode, dev_config=dev_config
            )
        finally:
            self._state.activity = ActivityState.CHATTING

        if result is not None and result.state == SessionState.COMPLETED:
            self._state.last_response_text = result.text
        return result

    def cancel(self) -> bool:
        """Requests cancellation of the in-flight response."""
        return self._driver.cancel()
