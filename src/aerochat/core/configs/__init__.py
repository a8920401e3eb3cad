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

"""Configuration module for aerochat.

The configurations are organized into different categories:

- Application:
    - :class:`~aerochat.core.configs.chat_config.ChatConfig`
    - :class:`~aerochat.core.configs.params.remote_params.RemoteParams`
- Developer overrides:
    - :class:`~aerochat.core.configs.developer_config.DeveloperConfig`
    - :class:`~aerochat.core.configs.developer_config.ToolSwitches`
- Generation:
    - :class:`~aerochat.core.configs.params.generation_params.GenerationParams`
    - :class:`~aerochat.core.configs.params.generation_params.SafetySetting`
    - :class:`~aerochat.core.configs.params.generation_params.HarmCategory`
    - :class:`~aerochat.core.configs.params.generation_params.HarmBlockThreshold`
    - :class:`~aerochat.core.configs.params.generation_params.ToolType`

Example:
    >>> from aerochat.core.configs import DeveloperConfig
    >>> config = DeveloperConfig().with_overrides(["tools.google_maps=true"])
    >>> config.tools.google_maps
    True
"""

from aerochat.core.configs.base_config import BaseConfig
from aerochat.core.configs.chat_config import ChatConfig
from aerochat.core.configs.developer_config import DeveloperConfig, ToolSwitches
from aerochat.core.configs.params.base_params import BaseParams
from aerochat.core.configs.params.generation_params import (
    GenerationParams,
    HarmBlockThreshold,
    HarmCategory,
    SafetySetting,
    ToolType,
)
from aerochat.core.configs.params.remote_params import RemoteParams

__all__ = [
    "BaseConfig",
    "BaseParams",
    "ChatConfig",
    "DeveloperConfig",
    "GenerationParams",
    "HarmBlockThreshold",
    "HarmCategory",
    "RemoteParams",
    "SafetySetting",
    "ToolSwitches",
    "ToolType",
]
