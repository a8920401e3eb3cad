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

"""Maps user input and developer overrides to a concrete request descriptor."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from aerochat.core.configs.developer_config import DeveloperConfig
from aerochat.core.configs.params.generation_params import (
    GenerationParams,
    HarmCategory,
    SafetySetting,
    ToolType,
)
from aerochat.core.constants import (
    DEFAULT_MODE_LABEL,
    DEV_MODE_LABEL_SUFFIX,
    FLASH_MODEL,
    LITE_MODEL,
    PRO_MODEL,
    THINKING_BUDGET_TOKENS,
)
from aerochat.core.intent import classify


class Affordance(str, Enum):
    """Visual tag shown on the input while a configuration is selected."""

    ACTIVE = "glow-active"
    VISION = "glow-vision"
    THINK = "glow-think"
    SEARCH = "glow-search"
    MAPS = "glow-maps"

    def __str__(self) -> str:
        """Returns the tag value."""
        return self.value


@dataclass(frozen=True)
class RequestDescriptor:
    """Everything needed to issue one request; derived fresh for every send."""

    model_name: str
    """Backend model id."""

    generation: GenerationParams = field(default_factory=GenerationParams)
    """Generation config: tools, sampling, reasoning budget and safety."""

    mode_label: str = DEFAULT_MODE_LABEL
    """Human-readable label of the selected configuration."""

    affordance: Affordance = Affordance.ACTIVE
    """UI affordance tag for the selected configuration."""


def _base_model_label(model_name: str) -> str:
    if model_name == PRO_MODEL:
        return "Gemini Pro"
    if "lite" in model_name:
        return "Gemini Lite"
    return "Gemini Custom"


def configure(
    text: str,
    has_media: bool,
    dev_mode: bool,
    dev_config: DeveloperConfig,
    *,
    media_mime_type: Optional[str] = None,
) -> RequestDescriptor:
    """Builds the request descriptor for the given input.

    Resolution order (first match wins): media, extended reasoning, search/maps
    tools, developer base model, default. When developer mode is on, persona,
    sampling parameters and safety thresholds are overlaid afterwards.

    This function is pure: the same arguments always produce an equal result.

    Args:
        text: The user input text.
        has_media: Whether an image or video is staged.
        dev_mode: Whether developer mode is on.
        dev_config: The developer configuration.
        media_mime_type: MIME type of the staged media; distinguishes video from
            image in the mode label.

    Returns:
        RequestDescriptor: The model, generation config, label and affordance.

    Raises:
        ValueError: If the resulting generation config is invalid, e.g. a developer
            temperature outside of [0, 2].
    """
    manual_tools = dev_mode and dev_config.force_tools
    if manual_tools:
        use_search = dev_config.tools.google_search
        use_thinking = dev_config.tools.thinking
        use_maps = dev_config.tools.google_maps
    else:
        signals = classify(text)
        use_search = signals.search_likely
        use_thinking = signals.reasoning_likely
        # Maps has no automatic detection.
        use_maps = False

    model_name = LITE_MODEL
    mode_label = DEFAULT_MODE_LABEL
    affordance = Affordance.ACTIVE
    thinking_budget: Optional[int] = None
    tools: list[ToolType] = []

    if has_media:
        model_name = PRO_MODEL
        is_video = (media_mime_type or "").lower().startswith("video")
        mode_label = "Video Intelligence" if is_video else "Visual Analysis"
        affordance = Affordance.VISION
    elif use_thinking:
        model_name = PRO_MODEL
        thinking_budget = THINKING_BUDGET_TOKENS
        mode_label = "Deep Thinking"
        affordance = Affordance.THINK
    elif use_search or use_maps:
        model_name = FLASH_MODEL
        if use_search:
            tools.append(ToolType.GOOGLE_SEARCH)
        if use_maps:
            tools.append(ToolType.GOOGLE_MAPS)
        mode_label = "Google Search" if use_search else "Google Maps"
        affordance = Affordance.SEARCH if use_search else Affordance.MAPS
    elif dev_mode:
        model_name = dev_config.model
        mode_label = _base_model_label(model_name)

    generation = GenerationParams(tools=tools, thinking_budget=thinking_budget)

    if dev_mode:
        if dev_config.system_instruction.strip():
            generation.system_instruction = dev_config.system_instruction
        generation.temperature = dev_config.temperature
        generation.top_p = dev_config.top_p
        # An output cap would starve the reasoning budget.
        if generation.thinking_budget is None:
            generation.max_output_tokens = dev_config.max_output_tokens
        generation.safety_settings = [
            SafetySetting(category=category, threshold=dev_config.safety_threshold)
            for category in HarmCategory
        ]
        mode_label += DEV_MODE_LABEL_SUFFIX

    generation.finalize_and_validate()
    return RequestDescriptor(
        model_name=model_name,
        generation=generation,
        mode_label=mode_label,
        affordance=affordance,
    )
