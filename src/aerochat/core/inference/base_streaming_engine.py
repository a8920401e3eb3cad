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
from abc import ABC, abstractmethod
from collections.abc import AsyncGenerator
from typing import Optional, Union

from aerochat.core.request_configurator import RequestDescriptor
from aerochat.core.types.conversation import Message
from aerochat.core.types.fragments import TextDelta, TextDeltaWithCitations


class BaseStreamingEngine(ABC):
    """Base class for backends that stream a generated answer in fragments."""

    @abstractmethod
    def stream(
        self,
        request: RequestDescriptor,
        history: list[Message],
        message: Message,
        *,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> AsyncGenerator[Union[TextDelta, TextDeltaWithCitations], None]:
        """Streams the answer to `message`, given the prior turns in `history`.

        Args:
            request: The model, generation config and label for this exchange.
            history: Prior turns, oldest first. Does not include `message`.
            message: The new user turn.
            cancel_event: If set while streaming, the stream stops early and the
                underlying connection is released.

        Yields:
            Typed fragments, in arrival order. Fragment text is a delta.

        Raises:
            BackendError: If the request is rejected or the stream fails.
        """
        raise NotImplementedError
