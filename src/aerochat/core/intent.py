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
from typing import Final, NamedTuple

SEARCH_TERMS: Final[tuple[str, ...]] = (
    "search",
    "find",
    "latest",
    "news",
    "google",
    "weather",
    "price",
    "stock",
)

REASONING_TERMS: Final[tuple[str, ...]] = (
    "think",
    "reason",
    "plan",
    "complex",
    "solve",
    "math",
    "optimize",
    "architect",
    "code",
)


def _compile_vocabulary(terms: tuple[str, ...]) -> re.Pattern:
    return re.compile("|".join(re.escape(term) for term in terms), re.IGNORECASE)


_SEARCH_PATTERN: Final[re.Pattern] = _compile_vocabulary(SEARCH_TERMS)
_REASONING_PATTERN: Final[re.Pattern] = _compile_vocabulary(REASONING_TERMS)


class IntentSignals(NamedTuple):
    """Independent intent flags detected in user input; both may be true."""

    search_likely: bool
    """The input asks for fresh or external information."""

    reasoning_likely: bool
    """The input asks for multi-step reasoning or code."""


def is_search_likely(text: str) -> bool:
    """Checks if the text contains a search-indicative term."""
    return _SEARCH_PATTERN.search(text) is not None


def is_reasoning_likely(text: str) -> bool:
    """Checks if the text contains a reasoning-indicative term."""
    return _REASONING_PATTERN.search(text) is not None


def classify(text: str) -> IntentSignals:
    """Classifies input text by case-insensitive substring matching.

    Terms match anywhere in the text, including inside longer words
    (e.g. "explanation" contains "plan").
    """
    return IntentSignals(
        search_likely=is_search_likely(text),
        reasoning_likely=is_reasoning_likely(text),
    )
