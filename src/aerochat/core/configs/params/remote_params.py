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

import math
from dataclasses import dataclass
from typing import Optional

from aerochat.core.configs.params.base_params import BaseParams
from aerochat.core.constants import DEFAULT_API_KEY_ENV_VARNAME, DEFAULT_API_URL


@dataclass
class RemoteParams(BaseParams):
    """Parameters for streaming generations from the remote API."""

    api_url: Optional[str] = DEFAULT_API_URL
    """Base URL of the API; the model path is appended per request."""

    api_key: Optional[str] = None
    """API key to use for authentication."""

    api_key_env_varname: Optional[str] = DEFAULT_API_KEY_ENV_VARNAME
    """Name of the environment variable containing the API key for authentication."""

    connection_timeout: Optional[float] = None
    """Total timeout in seconds for one streamed exchange.

    If unset, a stalled stream is waited on indefinitely.
    """

    def __post_init__(self):
        """Validate the remote parameters."""
        self.__finalize_and_validate__()

    def __finalize_and_validate__(self) -> None:
        """Validate the remote parameters."""
        if self.connection_timeout is not None:
            if self.connection_timeout <= 0:
                raise ValueError("Connection timeout must be greater than 0.")
            if not math.isfinite(self.connection_timeout):
                raise ValueError("Connection timeout must be finite.")
