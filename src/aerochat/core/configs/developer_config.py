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

from aerochat.core.configs.base_config import BaseConfig
from aerochat.core.configs.params.base_params import BaseParams
from aerochat.core.configs.params.generation_params import HarmBlockThreshold
from aerochat.core.constants import LITE_MODEL


@dataclass
class ToolSwitches(BaseParams):
    """Manually selected tools, only honored when `force_tools` is set."""

    google_search: bool = False
    """Attach the web-search tool."""

    google_maps: bool = False
    """Attach the maps tool. There is no automatic detection for maps."""

    thinking: bool = False
    """Enable the extended-reasoning budget."""


@dataclass
class DeveloperConfig(BaseConfig):
    """Manual overrides applied to every request while developer mode is on."""

    system_instruction: str = ""
    """Persona instruction. Ignored when blank."""

    temperature: float = 1.0
    """Sampling temperature, between 0 and 2."""

    top_p: float = 0.95
    """Nucleus sampling probability mass, between 0 and 1."""

    max_output_tokens: int = 2048
    """Cap on generated tokens. Not sent when extended reasoning is active."""

    model: str = LITE_MODEL
    """Base model used when no tool or reasoning mode is active."""

    safety_threshold: HarmBlockThreshold = HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE
    """Threshold applied to all harm categories."""

    tools: ToolSwitches = field(default_factory=ToolSwitches)
    """Manual tool selection."""

    force_tools: bool = False
    """Use `tools` verbatim instead of intent detection."""

    def __finalize_and_validate__(self) -> None:
        """Validates the developer configuration."""
        if not 0.0 <= self.temperature <= 2.0:
            raise ValueError(
                f"Temperature must be between 0 and 2, got {self.temperature}."
            )
        if not 0.0 <= self.top_p <= 1.0:
            raise ValueError(f"Top P must be between 0 and 1, got {self.top_p}.")
        if self.max_output_tokens < 1:
            raise ValueError(
                "Max output tokens must be greater than or equal to 1, "
                f"got {self.max_output_tokens}."
            )
        if not self.model.strip():
            raise ValueError("Model must not be empty.")
