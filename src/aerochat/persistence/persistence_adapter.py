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

import dataclasses
import json
from pathlib import Path
from typing import Any, Union

from omegaconf.errors import OmegaConfBaseException

from aerochat.core.configs.developer_config import DeveloperConfig
from aerochat.core.constants import (
    DEV_CONFIG_STORAGE_KEY,
    DEV_MODE_STORAGE_KEY,
    HISTORY_STORAGE_KEY,
)
from aerochat.core.types.conversation import Conversation
from aerochat.persistence.key_value_store import KeyValueStore
from aerochat.utils.io_utils import save_jsonlines
from aerochat.utils.logging import logger


def _drop_unknown_keys(data: dict[str, Any], schema: type, prefix: str = "") -> dict:
    """Returns a copy of `data` restricted to the fields of a dataclass schema."""
    fields = {field.name: field for field in dataclasses.fields(schema)}
    result: dict[str, Any] = {}
    for key, value in data.items():
        field = fields.get(key)
        if field is None:
            logger.warning(f"Ignoring unknown developer config key: '{prefix}{key}'.")
            continue
        field_type = field.type
        if (
            isinstance(value, dict)
            and isinstance(field_type, type)
            and dataclasses.is_dataclass(field_type)
        ):
            value = _drop_unknown_keys(value, field_type, prefix=f"{prefix}{key}.")
        result[key] = value
    return result


class PersistenceAdapter:
    """Reads and writes the three persisted records of the chat client.

    Each record is loaded independently: an absent or corrupt record falls back
    to its default without affecting the others. Write failures are logged and
    reported through the return value, never raised.
    """

    def __init__(self, store: KeyValueStore):
        """Initializes the adapter over a key/value store."""
        self._store = store

    @property
    def store(self) -> KeyValueStore:
        """Returns the underlying store."""
        return self._store

    #
    # Conversation history
    #
    def load_history(self) -> Conversation:
        """Loads the persisted conversation, or an empty one."""
        raw = self._store.get(HISTORY_STORAGE_KEY)
        if raw is None:
            return Conversation()
        try:
            return Conversation.from_json(raw)
        except ValueError as e:
            logger.warning(f"Discarding corrupt conversation history: {e}")
            return Conversation()

    def save_history(self, conversation: Conversation) -> bool:
        """Persists the full conversation."""
        try:
            data = conversation.to_json()
        except ValueError as e:
            logger.warning(f"Conversation history could not be serialized: {e}")
            return False
        return self._store.set(HISTORY_STORAGE_KEY, data)

    def export_history(
        self, conversation: Conversation, output_path: Union[str, Path]
    ) -> None:
        """Writes the conversation to a JSON Lines file, one message per line.

        Raises:
            OSError: If the file cannot be written.
        """
        save_jsonlines(
            output_path,
            [
                message.model_dump(mode="json", exclude_none=True)
                for message in conversation.messages
            ],
        )

    #
    # Developer configuration
    #
    def load_dev_config(self) -> DeveloperConfig:
        """Loads the persisted developer configuration overlaid on the defaults."""
        raw = self._store.get(DEV_CONFIG_STORAGE_KEY)
        if raw is None:
            return DeveloperConfig()
        try:
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise ValueError(f"Expected a JSON object, got {type(data)}.")
            config = DeveloperConfig.from_dict(
                _drop_unknown_keys(data, DeveloperConfig)
            )
            config.finalize_and_validate()
        except (ValueError, KeyError, TypeError, OmegaConfBaseException) as e:
            logger.warning(f"Discarding corrupt developer config: {e}")
            return DeveloperConfig()
        return config

    def save_dev_config(self, config: DeveloperConfig) -> bool:
        """Persists the developer configuration."""
        return self._store.set(DEV_CONFIG_STORAGE_KEY, json.dumps(config.to_dict()))

    #
    # Developer-mode flag
    #
    def load_dev_mode(self) -> bool:
        """Loads the persisted developer-mode flag. Defaults to off."""
        raw = self._store.get(DEV_MODE_STORAGE_KEY)
        if raw is None:
            return False
        try:
            value = json.loads(raw)
        except ValueError as e:
            logger.warning(f"Discarding corrupt developer-mode flag: {e}")
            return False
        if not isinstance(value, bool):
            logger.warning(f"Discarding non-boolean developer-mode flag: {raw!r}")
            return False
        return value

    def save_dev_mode(self, enabled: bool) -> bool:
        """Persists the developer-mode flag."""
        return self._store.set(DEV_MODE_STORAGE_KEY, json.dumps(enabled))
