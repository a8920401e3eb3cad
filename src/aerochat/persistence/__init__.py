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

"""Persistence module for aerochat.

This module provides durable key/value storage and the adapter that maps the
conversation history, developer configuration and developer-mode flag onto it.
"""

from aerochat.persistence.key_value_store import (
    FileKeyValueStore,
    InMemoryKeyValueStore,
    KeyValueStore,
)
from aerochat.persistence.persistence_adapter import PersistenceAdapter

__all__ = [
    "FileKeyValueStore",
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "PersistenceAdapter",
]
