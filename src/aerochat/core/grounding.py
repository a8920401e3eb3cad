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

from enum import Enum
from typing import NamedTuple, Optional, Union

from aerochat.core.types.fragments import GroundingMetadata, PlaceSource, WebSource


class SourceKind(str, Enum):
    """Origin of a cited source."""

    WEB = "web"
    PLACE = "place"


class SourceCard(NamedTuple):
    """A cited source, ready for display."""

    kind: SourceKind
    uri: str
    title: str
    """Source title; falls back to the URI when the backend gives none."""

    @property
    def icon(self) -> str:
        """Returns the icon name for the source kind."""
        return "place" if self.kind == SourceKind.PLACE else "public"


def _to_cards(
    sources: list[Union[WebSource, PlaceSource]], kind: SourceKind
) -> list[SourceCard]:
    cards: list[SourceCard] = []
    seen_uris: set[str] = set()
    for source in sources:
        if source.uri in seen_uris:
            continue
        seen_uris.add(source.uri)
        cards.append(SourceCard(kind=kind, uri=source.uri, title=source.title or source.uri))
    return cards


def extract(metadata: Optional[GroundingMetadata]) -> list[SourceCard]:
    """Builds the full list of source cards from citation metadata.

    Web sources come before places; first-seen order is kept within each group
    and repeated URIs are dropped. The list is derived from scratch on every
    call, so passing cumulative metadata again never duplicates entries.
    """
    if metadata is None:
        return []
    web_sources: list[Union[WebSource, PlaceSource]] = [
        chunk.web for chunk in metadata.grounding_chunks if chunk.web is not None
    ]
    place_sources: list[Union[WebSource, PlaceSource]] = [
        chunk.maps for chunk in metadata.grounding_chunks if chunk.maps is not None
    ]
    return _to_cards(web_sources, SourceKind.WEB) + _to_cards(
        place_sources, SourceKind.PLACE
    )
