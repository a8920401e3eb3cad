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

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from aerochat.core.configs.params.base_params import BaseParams


class ToolType(str, Enum):
    """Server-side tools that can be attached to a request."""

    GOOGLE_SEARCH = "googleSearch"
    """Grounds the answer in live web search results."""

    GOOGLE_MAPS = "googleMaps"
    """Grounds the answer in place and location data."""


class HarmCategory(str, Enum):
    """Content-safety categories that receive a blocking threshold."""

    HARASSMENT = "HARM_CATEGORY_HARASSMENT"
    HATE_SPEECH = "HARM_CATEGORY_HATE_SPEECH"
    SEXUALLY_EXPLICIT = "HARM_CATEGORY_SEXUALLY_EXPLICIT"
    DANGEROUS_CONTENT = "HARM_CATEGORY_DANGEROUS_CONTENT"


class HarmBlockThreshold(str, Enum):
    """Ordinal content-safety thresholds, from most to least permissive."""

    BLOCK_NONE = "BLOCK_NONE"
    BLOCK_ONLY_HIGH = "BLOCK_ONLY_HIGH"
    BLOCK_MEDIUM_AND_ABOVE = "BLOCK_MEDIUM_AND_ABOVE"
    BLOCK_LOW_AND_ABOVE = "BLOCK_LOW_AND_ABOVE"


@dataclass
class SafetySetting(BaseParams):
    category: HarmCategory
    threshold: HarmBlockThreshold


@dataclass
class GenerationParams(BaseParams):
    """The generation-config object of a request.

    Unset fields (`None` or empty) are omitted from the request and the backend
    applies its own defaults.
    """

    system_instruction: Optional[str] = None
    """Persona instruction sent alongside the conversation."""

    temperature: Optional[float] = None
    """Sampling temperature."""

    top_p: Optional[float] = None
    """Nucleus sampling probability mass."""

    max_output_tokens: Optional[int] = None
    """Cap on the number of generated tokens.

    Must stay unset whenever `thinking_budget` is set.
    """

    thinking_budget: Optional[int] = None
    """Token budget for extended reasoning."""

    tools: list[ToolType] = field(default_factory=list)
    """Server-side tools attached to the request, in order."""

    safety_settings: list[SafetySetting] = field(default_factory=list)
    """Per-category content-safety thresholds."""

    def __finalize_and_validate__(self) -> None:
        """Validates the generation parameters."""
        if self.thinking_budget is not None and self.max_output_tokens is not None:
            raise ValueError(
                "`max_output_tokens` cannot be set together with `thinking_budget`."
            )
        if self.thinking_budget is not None and self.thinking_budget <= 0:
            raise ValueError("Thinking budget must be greater than 0.")
        if self.max_output_tokens is not None and self.max_output_tokens <= 0:
            raise ValueError("Max output tokens must be greater than 0.")
        if self.temperature is not None and not 0.0 <= self.temperature <= 2.0:
            raise ValueError("Temperature must be between 0 and 2.")
        if self.top_p is not None and not 0.0 <= self.top_p <= 1.0:
            raise ValueError("Top P must be between 0 and 1.")
        thresholds = {setting.threshold for setting in self.safety_settings}
        if len(thresholds) > 1:
            raise ValueError(
                "All safety categories must share the same threshold, "
                f"got: {sorted(t.value for t in thresholds)}."
            )
