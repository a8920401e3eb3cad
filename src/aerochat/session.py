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

"""Drives one streamed exchange with the backend at a time."""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from aerochat.core.configs.developer_config import DeveloperConfig
from aerochat.core.grounding import SourceCard, extract
from aerochat.core.inference.base_streaming_engine import BaseStreamingEngine
from aerochat.core.request_configurator import RequestDescriptor, configure
from aerochat.core.types.conversation import Conversation, MediaAttachment, Message
from aerochat.core.types.exceptions import SessionBusyError
from aerochat.core.types.fragments import TextDeltaWithCitations
from aerochat.persistence.persistence_adapter import PersistenceAdapter
from aerochat.utils.logging import logger


class SessionState(str, Enum):
    """Lifecycle state of the streaming session driver."""

    IDLE = "idle"
    DRAFTING = "drafting"
    STREAMING = "streaming"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    def __str__(self) -> str:
        """Returns the state value."""
        return self.value


_BUSY_STATES = (SessionState.DRAFTING, SessionState.STREAMING)


class SessionObserver:
    """Receives progress notifications from the driver. All hooks are no-ops.

    Subclasses override the hooks they care about.
    """

    def on_state_change(
        self, state: SessionState, request: Optional[RequestDescriptor]
    ) -> None:
        """Called on every state transition."""

    def on_render(self, text: str) -> None:
        """Called after every fragment with the full accumulated answer text."""

    def on_sources(self, sources: list[SourceCard]) -> None:
        """Called with the full, replacing list of cited sources."""

    def on_refresh(self) -> None:
        """Called after every fragment once rendering is done."""

    def on_error(self, error: Exception) -> None:
        """Called once when the exchange fails."""


@dataclass
class SessionResult:
    """Outcome of one send."""

    state: SessionState
    """Terminal state: completed, failed or cancelled."""

    request: RequestDescriptor
    """The request descriptor used for the exchange."""

    text: str = ""
    """Accumulated answer text (possibly partial if not completed)."""

    sources: list[SourceCard] = field(default_factory=list)
    """Cited sources from the most recent citation metadata."""

    error: Optional[Exception] = None
    """The failure, if the exchange failed."""


class StreamingSessionDriver:
    """Sends user turns to a streaming engine and records the answers.

    The new user turn is appended to the conversation and persisted before the
    backend is contacted, and is kept regardless of the outcome. A model turn is
    appended only when the stream completes.
    """

    def __init__(
        self,
        engine: BaseStreamingEngine,
        conversation: Conversation,
        *,
        persistence: Optional[PersistenceAdapter] = None,
        max_replay_messages: Optional[int] = None,
        observer: Optional[SessionObserver] = None,
    ):
        """Initializes the driver.

        Args:
            engine: The backend to stream answers from.
            conversation: The conversation to replay and append to.
            persistence: If set, the conversation is saved after every append.
            max_replay_messages: If set, caps the number of prior messages sent
                with each request. The conversation itself is never pruned.
            observer: Receives progress notifications.
        """
        self._engine = engine
        self._conversation = conversation
        self._persistence = persistence
        self._max_replay_messages = max_replay_messages
        self._observer = observer or SessionObserver()
        self._state = SessionState.IDLE
        self._cancel_event: Optional[asyncio.Event] = None

    @property
    def state(self) -> SessionState:
        """Returns the current state."""
        return self._state

    @property
    def is_busy(self) -> bool:
        """Checks if an exchange is in flight."""
        return self._state in _BUSY_STATES

    @property
    def conversation(self) -> Conversation:
        """Returns the conversation the driver appends to."""
        return self._conversation

    def _transition(
        self, state: SessionState, request: Optional[RequestDescriptor] = None
    ) -> None:
        logger.debug(f"Session state: {self._state} -> {state}")
        self._state = state
        self._observer.on_state_change(state, request)

    def _persist(self) -> None:
        if self._persistence is not None:
            if not self._persistence.save_history(self._conversation):
                logger.warning("Conversation could not be persisted.")

    def cancel(self) -> bool:
        """Requests cancellation of the in-flight exchange.

        Returns:
            bool: True if an exchange was in flight.
        """
        if not self.is_busy or self._cancel_event is None:
            return False
        self._cancel_event.set()
        return True

    async def send(
        self,
        text: str,
        media: Optional[MediaAttachment] = None,
        *,
        dev_mode: bool = False,
        dev_config: Optional[DeveloperConfig] = None,
    ) -> Optional[SessionResult]:
        """Sends a user turn and streams the answer.

        Args:
            text: The user input text.
            media: The staged media attachment, if any.
            dev_mode: Whether developer mode is on.
            dev_config: The developer configuration. Defaults are used if unset.

        Returns:
            Optional[SessionResult]: The outcome, or None if there was nothing to
                send.

        Raises:
            SessionBusyError: If another exchange is in flight. Nothing is
                appended in this case.
            ValueError: If the developer configuration yields an invalid request.
                Nothing is appended in this case.
        """
        if self.is_busy:
            raise SessionBusyError("A response is already being generated.")
        text = text.strip()
        if not text and media is None:
            return None

        self._cancel_event = asyncio.Event()
        self._transition(SessionState.DRAFTING)
        try:
            return await self._exchange(text, media, dev_mode, dev_config)
        except BaseException as e:
            # Interrupts and unexpected errors must not leave the driver busy.
            if self.is_busy:
                if isinstance(e, Exception):
                    logger.error(f"Send failed unexpectedly: {e}")
                    self._transition(SessionState.FAILED)
                else:
                    self._transition(SessionState.CANCELLED)
            raise
        finally:
            self._cancel_event = None

    async def _exchange(
        self,
        text: str,
        media: Optional[MediaAttachment],
        dev_mode: bool,
        dev_config: Optional[DeveloperConfig],
    ) -> SessionResult:
        request = configure(
            text,
            media is not None,
            dev_mode,
            dev_config or DeveloperConfig(),
            media_mime_type=media.mime_type if media is not None else None,
        )

        history = self._conversation.replay_history(self._max_replay_messages)
        message = Message.user(text=text or None, media=media)
        self._conversation.append(message)
        self._persist()

        self._transition(SessionState.STREAMING, request)
        result = SessionResult(state=SessionState.STREAMING, request=request)
        try:
            await self._consume(request, history, message, result)
        except asyncio.CancelledError:
            result.state = SessionState.CANCELLED
            self._transition(SessionState.CANCELLED, request)
            raise
        except Exception as e:
            logger.error(f"Generation failed ({request.mode_label}): {e}")
            result.state = SessionState.FAILED
            result.error = e
            self._transition(SessionState.FAILED, request)
            self._observer.on_error(e)
            return result

        if result.state == SessionState.CANCELLED:
            self._transition(SessionState.CANCELLED, request)
            return result

        self._conversation.append(
            Message.model_turn(result.text, mode=request.mode_label)
        )
        self._persist()
        result.state = SessionState.COMPLETED
        self._transition(SessionState.COMPLETED, request)
        return result

    async def _consume(
        self,
        request: RequestDescriptor,
        history: list[Message],
        message: Message,
        result: SessionResult,
    ) -> None:
        """Accumulates fragments into `result` until the stream ends or is cancelled."""
        cancel_event = self._cancel_event
        stream = self._engine.stream(
            request, history, message, cancel_event=cancel_event
        )
        try:
            async for fragment in stream:
                if cancel_event is not None and cancel_event.is_set():
                    break
                result.text += fragment.text
                self._observer.on_render(result.text)
                if isinstance(fragment, TextDeltaWithCitations):
                    result.sources = extract(fragment.grounding)
                    self._observer.on_sources(result.sources)
                self._observer.on_refresh()
        finally:
            await stream.aclose()

        if cancel_event is not None and cancel_event.is_set():
            result.state = SessionState.CANCELLED
