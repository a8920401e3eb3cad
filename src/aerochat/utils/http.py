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

import json
from collections.abc import AsyncIterator
from typing import Any

import aiohttp

_SSE_DATA_PREFIX = "data:"


async def get_failure_reason_from_response(
    response: aiohttp.ClientResponse,
) -> str:
    """Return a string describing the error from the provided response."""
    try:
        response_json = await response.json(content_type=None)
        if isinstance(response_json, list):
            response_json = response_json[0]
        error_msg = (
            response_json.get("error", {}).get("message")
            if response_json
            else f"HTTP {response.status}"
        )
        if not error_msg:
            error_msg = f"HTTP {response.status}"
    except Exception:
        error_msg = f"HTTP {response.status}"

    return error_msg


async def iter_sse_json_events(
    response: aiohttp.ClientResponse,
) -> AsyncIterator[Any]:
    """Yields the decoded JSON payload of each `data:` event in an SSE response.

    Blank lines, comments and non-data fields are ignored. A payload that is not
    valid JSON raises `json.JSONDecodeError`.
    """
    async for raw_line in response.content:
        line = raw_line.decode("utf-8").strip()
        if not line.startswith(_SSE_DATA_PREFIX):
            continue
        payload = line[len(_SSE_DATA_PREFIX) :].strip()
        if not payload or payload == "[DONE]":
            continue
        yield json.loads(payload)
