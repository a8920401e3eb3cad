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
import copy
import json
import os
from collections.abc import AsyncGenerator
from typing import Any, Optional, Union

import aiohttp
from typing_extensions import override

from aerochat.core.configs.params.generation_params import GenerationParams
from aerochat.core.configs.params.remote_params import RemoteParams
from aerochat.core.inference.base_streaming_engine import BaseStreamingEngine
from aerochat.core.request_configurator import RequestDescriptor
from aerochat.core.types.conversation import Message, Part
from aerochat.core.types.exceptions import BackendError, MalformedChunkError
from aerochat.core.types.fragments import (
    TextDelta,
    TextDeltaWithCitations,
    fragment_from_api_chunk,
)
from aerochat.utils.http import get_failure_reason_from_response, iter_sse_json_events
from aerochat.utils.logging import logger

_API_KEY_HEADER = "x-goog-api-key"


def _convert_part_to_api_input(part: Part) -> dict[str, Any]:
    if part.inline_data is not None:
        return {
            "inlineData": {
                "mimeType": part.inline_data.mime_type,
                "data": part.inline_data.data,
            }
        }
    return {"text": part.text}


def _convert_message_to_api_input(message: Message) -> dict[str, Any]:
    return {
        "role": message.role.value,
        "parts": [_convert_part_to_api_input(part) for part in message.parts],
    }


def _convert_generation_params_to_api_input(
    generation_params: GenerationParams,
) -> dict[str, Any]:
    generation_config: dict[str, Any] = {}
    if generation_params.temperature is not None:
        generation_config["temperature"] = generation_params.temperature
    if generation_params.top_p is not None:
        generation_config["topP"] = generation_params.top_p
    if generation_params.max_output_tokens is not None:
        generation_config["maxOutputTokens"] = generation_params.max_output_tokens
    if generation_params.thinking_budget is not None:
        generation_config["thinkingConfig"] = {
            "thinkingBudget": generation_params.thinking_budget
        }
    return generation_config


class GeminiStreamingEngine(BaseStreamingEngine):
    """Engine for streaming generations from the Gemini API."""

    base_url = "https://generativelanguage.googleapis.com/v1beta"
    """The base URL for the Gemini API."""

    api_key_env_varname = "GEMINI_API_KEY"
    """The environment variable name for the Gemini API key."""

    _remote_params: RemoteParams
    """Parameters for connecting to the remote API."""

    def __init__(self, remote_params: Optional[RemoteParams] = None):
        """Initializes the engine.

        Args:
            remote_params: Remote server params. Defaults are used if not provided.
        """
        if remote_params:
            remote_params = copy.deepcopy(remote_params)
        else:
            remote_params = RemoteParams()

        if not remote_params.api_url:
            remote_params.api_url = self.base_url
        if not remote_params.api_key_env_varname:
            remote_params.api_key_env_varname = self.api_key_env_varname
        self._remote_params = remote_params
        self._remote_params.finalize_and_validate()

    def _get_api_key(self, remote_params: RemoteParams) -> Optional[str]:
        if remote_params.api_key:
            return remote_params.api_key

        if remote_params.api_key_env_varname:
            return os.environ.get(remote_params.api_key_env_varname)

        return None

    def _get_request_headers(self, remote_params: RemoteParams) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        api_key = self._get_api_key(remote_params)
        if api_key:
            headers[_API_KEY_HEADER] = api_key
        return headers

    def _get_stream_url(self, model_name: str) -> str:
        """Returns the server-sent-events endpoint for the given model."""
        api_url = (self._remote_params.api_url or self.base_url).rstrip("/")
        return f"{api_url}/models/{model_name}:streamGenerateContent?alt=sse"

    def _convert_request_to_api_input(
        self,
        request: RequestDescriptor,
        history: list[Message],
        message: Message,
    ) -> dict[str, Any]:
        """Converts a request descriptor and its turns to a Gemini API input.

        Documentation: https://ai.google.dev/api/generate-content

        Args:
            request: The request descriptor.
            history: Prior turns to replay, oldest first.
            message: The new user turn, sent last.

        Returns:
            Dict[str, Any]: A dictionary representing the Gemini input.
        """
        generation = request.generation
        api_input: dict[str, Any] = {
            "contents": [
                _convert_message_to_api_input(m) for m in [*history, message]
            ],
        }

        if generation.system_instruction:
            api_input["systemInstruction"] = {
                "parts": [{"text": generation.system_instruction}]
            }

        generation_config = _convert_generation_params_to_api_input(generation)
        if generation_config:
            api_input["generationConfig"] = generation_config

        if generation.tools:
            api_input["tools"] = [{tool.value: {}} for tool in generation.tools]

        if generation.safety_settings:
            api_input["safetySettings"] = [
                {
                    "category": setting.category.value,
                    "threshold": setting.threshold.value,
                }
                for setting in generation.safety_settings
            ]

        return api_input

    @override
    async def stream(
        self,
        request: RequestDescriptor,
        history: list[Message],
        message: Message,
        *,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> AsyncGenerator[Union[TextDelta, TextDeltaWithCitations], None]:
        """Streams the answer from `streamGenerateContent`.

        Chunks that cannot be interpreted are logged and skipped.

        Raises:
            BackendError: If no API key is available, the server responds with an
                error status, the stream carries an error object, or the
                connection fails or times out.
        """
        remote_params = self._remote_params
        if not self._get_api_key(remote_params):
            raise BackendError(
                "An API key is required to reach the Gemini API. "
                "Please set the environment variable "
                f"`{remote_params.api_key_env_varname}`."
            )

        api_input = self._convert_request_to_api_input(request, history, message)
        headers = self._get_request_headers(remote_params)
        url = self._get_stream_url(request.model_name)
        timeout = aiohttp.ClientTimeout(total=remote_params.connection_timeout)

        logger.debug(f"Streaming from {request.model_name} ({request.mode_label}).")
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(
                    url, json=api_input, headers=headers
                ) as response:
                    if response.status != 200:
                        failure_reason = await get_failure_reason_from_response(
                            response
                        )
                        raise BackendError(failure_reason)

                    async for chunk in iter_sse_json_events(response):
                        if cancel_event is not None and cancel_event.is_set():
                            logger.debug("Stream cancelled; closing connection.")
                            return
                        try:
                            fragment = fragment_from_api_chunk(chunk)
                        except MalformedChunkError as e:
                            logger.warning(f"Skipping unrecognized chunk: {e}")
                            continue
                        yield fragment
        except json.JSONDecodeError as e:
            raise BackendError(f"Failed to parse streamed chunk: {e}") from e
        except asyncio.TimeoutError as e:
            raise BackendError(
                "Timed out after "
                f"{remote_params.connection_timeout} seconds waiting for the stream."
            ) from e
        except aiohttp.ClientError as e:
            raise BackendError(f"Connection error: {str(e)}") from e
