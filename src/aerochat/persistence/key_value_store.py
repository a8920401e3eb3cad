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

import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

from aerochat.utils.io_utils import load_file, save_file_atomic
from aerochat.utils.logging import logger

_VALID_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStore(ABC):
    """Durable string storage addressed by key.

    Implementations never raise on storage failures: reads report the value as
    absent and writes report failure.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Returns the value stored under `key`, or None if absent or unreadable."""
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, value: str) -> bool:
        """Stores `value` under `key`. Returns whether the write succeeded."""
        raise NotImplementedError

    @abstractmethod
    def remove(self, key: str) -> bool:
        """Removes `key`. Returns whether the key is absent afterwards."""
        raise NotImplementedError


class InMemoryKeyValueStore(KeyValueStore):
    """A store that lives only as long as the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        """Initializes the store, optionally with existing records."""
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        """See base class."""
        return self._data.get(key)

    def set(self, key: str, value: str) -> bool:
        """See base class."""
        self._data[key] = value
        return True

    def remove(self, key: str) -> bool:
        """See base class."""
        self._data.pop(key, None)
        return True


class FileKeyValueStore(KeyValueStore):
    """Stores each key as one JSON file under a directory.

    Example:
        >>> store = FileKeyValueStore("~/.aerochat")
        >>> store.set("gemini_is_dev_mode_v7", "true")
        True
    """

    def __init__(self, storage_dir: Union[str, Path]):
        """Initializes the store. The directory is created on first write."""
        self._storage_dir = Path(storage_dir).expanduser()

    @property
    def storage_dir(self) -> Path:
        """Returns the directory holding the records."""
        return self._storage_dir

    def _path_for(self, key: str) -> Path:
        if not _VALID_KEY_PATTERN.match(key):
            raise ValueError(f"Invalid storage key: '{key}'.")
        return self._storage_dir / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        """See base class."""
        path = self._path_for(key)
        if not path.is_file():
            return None
        try:
            return load_file(path)
        except OSError as e:
            logger.warning(f"Failed to read '{key}' from {path}: {e}")
            return None
        except UnicodeDecodeError as e:
            logger.warning(f"Record '{key}' at {path} is not valid UTF-8: {e}")
            return None

    def set(self, key: str, value: str) -> bool:
        """See base class."""
        path = self._path_for(key)
        try:
            save_file_atomic(path, value)
        except OSError as e:
            logger.warning(f"Failed to write '{key}' to {path}: {e}")
            return False
        return True

    def remove(self, key: str) -> bool:
        """See base class."""
        path = self._path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Failed to remove '{key}' at {path}: {e}")
            return False
        return True
