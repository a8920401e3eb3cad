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

from typing import Final

# Models, from lightest to most capable.
LITE_MODEL: Final[str] = "gemini-2.5-flash-lite"
FLASH_MODEL: Final[str] = "gemini-3-flash-preview"
PRO_MODEL: Final[str] = "gemini-3-pro-preview"

SUPPORTED_BASE_MODELS: Final[tuple[str, ...]] = (LITE_MODEL, FLASH_MODEL, PRO_MODEL)

# Token budget for extended reasoning. Never combined with an output cap.
THINKING_BUDGET_TOKENS: Final[int] = 32768

DEFAULT_MODE_LABEL: Final[str] = "Gemini Flash Lite"
DEV_MODE_LABEL_SUFFIX: Final[str] = " (Dev)"

# Keys of the three persisted records.
HISTORY_STORAGE_KEY: Final[str] = "gemini_chat_history_v7"
DEV_CONFIG_STORAGE_KEY: Final[str] = "gemini_dev_config_v7"
DEV_MODE_STORAGE_KEY: Final[str] = "gemini_is_dev_mode_v7"

DEFAULT_API_URL: Final[str] = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_API_KEY_ENV_VARNAME: Final[str] = "GEMINI_API_KEY"
DEFAULT_STORAGE_DIR: Final[str] = "~/.aerochat"

MAX_CONTEXTUAL_ACTIONS: Final[int] = 4
LONG_RESPONSE_CHARS: Final[int] = 500
