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

"""Typed schema for the incremental output streamed by the backend."""

from typing import Annotated, Any, Literal, Optional, Union

import pydantic

from aerochat.core.types.exceptions import BackendError, MalformedChunkError


class WebSource(pydantic.BaseModel):
    """A web page cited by the model."""

    model_config = pydantic.ConfigDict(frozen=True, extra="ignore")

    uri: str
    title: Optional[str] = None


class PlaceSource(pydantic.BaseModel):
    """A geographic place cited by the model."""

    model_config = pydantic.ConfigDict(
        frozen=True, extra="ignore", populate_by_name=True
    )

    uri: str
    title: Optional[str] = None
    place_id: Optional[str] = pydantic.Field(default=None, alias="placeId")


class GroundingChunk(pydantic.BaseModel):
    """One evidence entry; at most one of `web` or `maps` is expected."""

    model_config = pydantic.ConfigDict(frozen=True, extra="ignore")

    web: Optional[WebSource] = None
    maps: Optional[PlaceSource] = None


class GroundingMetadata(pydantic.BaseModel):
    """Citation metadata attached to a candidate."""

    model_config = pydantic.ConfigDict(
        frozen=True, extra="ignore", populate_by_name=True
    )

    grounding_chunks: tuple[GroundingChunk, ...] = pydantic.Field(
        default=(), alias="groundingChunks"
    )


class TextDelta(pydantic.BaseModel):
    """A fragment carrying only new text."""

    model_config = pydantic.ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    text: str = ""


class TextDeltaWithCitations(pydantic.BaseModel):
    """A fragment carrying new text plus citation metadata."""

    model_config = pydantic.ConfigDict(frozen=True)

    kind: Literal["text_with_citations"] = "text_with_citations"
    text: str = ""
    grounding: GroundingMetadata


Fragment = Annotated[
    Union[TextDelta, TextDeltaWithCitations], pydantic.Field(discriminator="kind")
]
"""One incremental unit of streamed model output."""


def fragment_from_api_chunk(
    chunk: Any,
) -> Union[TextDelta, TextDeltaWithCitations]:
    """Converts one `GenerateContentResponse` chunk into a typed fragment.

    Only the first candidate is considered. Parts flagged as model thoughts are
    not part of the visible answer and are dropped.

    Args:
        chunk: The decoded JSON payload of a streamed event.

    Returns:
        The typed fragment.

    Raises:
        BackendError: If the chunk carries an error object.
        MalformedChunkError: If the chunk does not have a recognized shape.
    """
    if not isinstance(chunk, dict):
        raise MalformedChunkError(f"Expected a JSON object, got {type(chunk)}.")
    if "error" in chunk:
        error = chunk["error"]
        message = error.get("message", error) if isinstance(error, dict) else error
        raise BackendError(f"API error: {message}")

    candidates = chunk.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        # Usage-only or prompt-feedback chunks have no candidates.
        if "usageMetadata" in chunk or "promptFeedback" in chunk:
            return TextDelta(text="")
        raise MalformedChunkError(f"No candidates found in chunk: {chunk}")

    candidate = candidates[0]
    if not isinstance(candidate, dict):
        raise MalformedChunkError(f"Unexpected candidate shape: {candidate}")

    text_pieces: list[str] = []
    content = candidate.get("content") or {}
    parts = (content.get("parts") or []) if isinstance(content, dict) else None
    if not isinstance(parts, list):
        raise MalformedChunkError(f"Unexpected content shape: {content}")
    for part in parts:
        if not isinstance(part, dict):
            raise MalformedChunkError(f"Unexpected part shape: {part}")
        if part.get("thought"):
            continue
        text = part.get("text")
        if isinstance(text, str):
            text_pieces.append(text)

    text = "".join(text_pieces)
    raw_grounding = candidate.get("groundingMetadata")
    if raw_grounding is None:
        return TextDelta(text=text)
    try:
        grounding = GroundingMetadata.model_validate(raw_grounding)
    except pydantic.ValidationError as e:
        raise MalformedChunkError(f"Invalid grounding metadata: {e}") from e
    return TextDeltaWithCitations(text=text, grounding=grounding)
