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

"""Types module for aerochat.

This module provides the conversation data model and the typed schema for
streamed backend output.

Example:
    >>> from aerochat.core.types import Message, Role
    >>> message = Message.user("What's the weather in Tokyo?")
    >>> message.role == Role.USER
    True
"""

from aerochat.core.types.conversation import (
    Conversation,
    MediaAttachment,
    Message,
    Part,
    Role,
)
from aerochat.core.types.exceptions import (
    AeroChatError,
    BackendError,
    MalformedChunkError,
    SessionBusyError,
)
from aerochat.core.types.fragments import (
    Fragment,
    GroundingChunk,
    GroundingMetadata,
    PlaceSource,
    TextDelta,
    TextDeltaWithCitations,
    WebSource,
)

__all__ = [
    "AeroChatError",
    "BackendError",
    "Conversation",
    "Fragment",
    "GroundingChunk",
    "GroundingMetadata",
    "MalformedChunkError",
    "MediaAttachment",
    "Message",
    "Part",
    "PlaceSource",
    "Role",
    "SessionBusyError",
    "TextDelta",
    "TextDeltaWithCitations",
    "WebSource",
]
