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

import base64
import binascii
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

import pydantic


class Role(str, Enum):
    """Role of the entity sending the message."""

    USER = "user"
    """Represents a message typed (or attached) by the local user."""

    MODEL = "model"
    """Represents a message generated by the backend model."""

    def __str__(self) -> str:
        """Return the string representation of the Role enum.

        Returns:
            str: The string value of the Role enum.
        """
        return self.value


def utc_now() -> datetime:
    """Returns the current instant as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class MediaAttachment(pydantic.BaseModel):
    """An image or video payload encoded as base64.

    Used both for the staged-but-unsent attachment and as the inline-media
    fragment of a user message.
    """

    model_config = pydantic.ConfigDict(frozen=True)

    data: str
    """Base64-encoded media bytes (no `data:` URL prefix)."""

    mime_type: str
    """MIME type of the media, e.g. `image/png` or `video/mp4`."""

    @pydantic.field_validator("data")
    @classmethod
    def _check_base64(cls, value: str) -> str:
        if not value:
            raise ValueError("Media payload must not be empty.")
        try:
            base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError("Media payload is not valid base64.") from e
        return value

    @pydantic.field_validator("mime_type")
    @classmethod
    def _check_mime_type(cls, value: str) -> str:
        if "/" not in value:
            raise ValueError(f"Invalid MIME type: '{value}'.")
        return value.lower()

    def is_image(self) -> bool:
        """Checks if the attachment is an image."""
        return self.mime_type.startswith("image/")

    def is_video(self) -> bool:
        """Checks if the attachment is a video."""
        return self.mime_type.startswith("video/")


class Part(pydantic.BaseModel):
    """A content fragment of a `Message`: either text or inline media.

    Exactly one of `text` or `inline_data` must be set.
    """

    model_config = pydantic.ConfigDict(frozen=True)

    text: Optional[str] = None
    """Text content of the part."""

    inline_data: Optional[MediaAttachment] = None
    """Inline media content of the part."""

    def model_post_init(self, __context) -> None:
        """Ensures that exactly one kind of content is provided.

        Raises:
            ValueError: If both or neither of `text` and `inline_data` are set.
        """
        if (self.text is None) == (self.inline_data is None):
            raise ValueError(
                "Exactly one of `text` or `inline_data` must be provided for a part."
            )

    def is_text(self) -> bool:
        """Checks if the part contains text."""
        return self.text is not None

    def is_media(self) -> bool:
        """Checks if the part contains inline media."""
        return self.inline_data is not None

    def __repr__(self) -> str:
        """Returns a string representation of the part."""
        if self.inline_data is not None:
            return f"<{self.inline_data.mime_type.upper()}>"
        return f"{self.text}"


class Message(pydantic.BaseModel):
    """One turn in the conversation.

    A user message holds zero-or-one media part followed by zero-or-one text part
    (at least one in total). A model message holds exactly one text part and may
    carry the label of the configuration that produced it.
    """

    model_config = pydantic.ConfigDict(frozen=True)

    role: Role
    """The role of the entity sending the message."""

    parts: tuple[Part, ...]
    """Ordered content fragments of the message."""

    timestamp: datetime = pydantic.Field(default_factory=utc_now)
    """Creation instant of the message."""

    mode: Optional[str] = None
    """Human-readable label of the configuration used (model messages only)."""

    def model_post_init(self, __context) -> None:
        """Validates the part layout for the message role.

        Raises:
            ValueError: If the parts do not match the layout allowed for the role.
        """
        if self.role == Role.MODEL:
            if len(self.parts) != 1 or not self.parts[0].is_text():
                raise ValueError("A model message must have exactly one text part.")
            return

        if self.mode is not None:
            raise ValueError("Only model messages can carry a mode label.")
        if not self.parts or len(self.parts) > 2:
            raise ValueError("A user message must have one or two parts.")
        if len(self.parts) == 2 and not (
            self.parts[0].is_media() and self.parts[1].is_text()
        ):
            raise ValueError(
                "A user message with two parts must be media followed by text."
            )

    @classmethod
    def user(
        cls, text: Optional[str] = None, media: Optional[MediaAttachment] = None
    ) -> "Message":
        """Creates a user message from optional media and optional text."""
        parts: list[Part] = []
        if media is not None:
            parts.append(Part(inline_data=media))
        if text:
            parts.append(Part(text=text))
        return cls(role=Role.USER, parts=tuple(parts))

    @classmethod
    def model_turn(cls, text: str, mode: Optional[str] = None) -> "Message":
        """Creates a model message holding a single text part."""
        return cls(role=Role.MODEL, parts=(Part(text=text),), mode=mode)

    @property
    def text(self) -> str:
        """Returns the text of the message, or an empty string."""
        return "".join(part.text or "" for part in self.parts if part.is_text())

    @property
    def media(self) -> Optional[MediaAttachment]:
        """Returns the inline media attachment of the message, if any."""
        for part in self.parts:
            if part.inline_data is not None:
                return part.inline_data
        return None

    def __repr__(self) -> str:
        """Returns a string representation of the message."""
        mode_str = f" [{self.mode}]" if self.mode else ""
        return f"{self.role.upper()}{mode_str}: " + " | ".join(
            [repr(part) for part in self.parts]
        )


class Conversation(pydantic.BaseModel):
    """An append-only, chronologically ordered log of messages.

    Insertion order is the order in which turns are replayed to the backend.
    Messages are never edited, reordered or removed.
    """

    messages: list[Message] = pydantic.Field(default_factory=list)
    """Messages that make up the conversation, oldest first."""

    def __len__(self) -> int:
        """Returns the number of messages in the conversation."""
        return len(self.messages)

    def __getitem__(self, idx: int) -> Message:
        """Gets the message at the specified index."""
        return self.messages[idx]

    def append(self, message: Message) -> None:
        """Appends a message to the end of the conversation."""
        self.messages.append(message)

    def last_message(self, role: Optional[Role] = None) -> Optional[Message]:
        """Gets the last message in the conversation, optionally filtered by role.

        Args:
            role: The role to filter messages by.
                If None, considers all messages.

        Returns:
            Optional[Message]: The last message matching the criteria,
                or None if no messages are found.
        """
        for message in reversed(self.messages):
            if role is None or message.role == role:
                return message
        return None

    def replay_history(self, max_messages: Optional[int] = None) -> list[Message]:
        """Returns the messages to replay to the backend as prior turns.

        Args:
            max_messages: If set, only the most recent `max_messages` are returned.

        Returns:
            list[Message]: A copy of the (possibly capped) message list.
        """
        if max_messages is None:
            return list(self.messages)
        if max_messages <= 0:
            return []
        return list(self.messages[-max_messages:])

    def to_json(self) -> str:
        """Converts the conversation to a JSON string."""
        return self.model_dump_json(exclude_none=True)

    @classmethod
    def from_json(cls, data: str) -> "Conversation":
        """Converts a JSON string to a conversation."""
        return cls.model_validate_json(data)

    def __repr__(self) -> str:
        """Returns a string representation of the conversation."""
        return "\n".join([repr(m) for m in self.messages])
