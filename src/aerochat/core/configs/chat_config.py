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
from pathlib import Path
from typing import Optional

from aerochat.core.configs.base_config import BaseConfig
from aerochat.core.configs.params.remote_params import RemoteParams
from aerochat.core.constants import DEFAULT_STORAGE_DIR

_LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


@dataclass
class ChatConfig(BaseConfig):
    storage_dir: str = DEFAULT_STORAGE_DIR
    """Directory holding the persisted history, developer config and flags."""

    remote: RemoteParams = field(default_factory=RemoteParams)
    """Parameters for the remote generation API."""

    max_replay_messages: Optional[int] = None
    """Maximum number of prior messages replayed to the backend per request.

    If unset, the full history is replayed. Persisted history is never pruned.
    """

    log_level: str = "info"
    """Log level for the `aerochat` logger."""

    log_dir: Optional[str] = None
    """If set, logs are also written to a file in this directory."""

    @property
    def resolved_storage_dir(self) -> Path:
        """Returns the storage directory with `~` expanded."""
        return Path(self.storage_dir).expanduser()

    def __finalize_and_validate__(self) -> None:
        """Validates the chat configuration."""
        if not self.storage_dir:
            raise ValueError("Storage directory must not be empty.")
        if self.max_replay_messages is not None and self.max_replay_messages < 0:
            raise ValueError(
                "Max replay messages must be greater than or equal to 0."
            )
        if self.log_level.lower() not in _LOG_LEVELS:
            raise ValueError(
                f"Invalid log level: '{self.log_level}'. "
                f"Expected one of: {', '.join(_LOG_LEVELS)}."
            )
