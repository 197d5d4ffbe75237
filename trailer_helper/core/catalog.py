# Copyright (c) 2025 Trae AI. All rights reserved.

from typing import List, Protocol
from .models import ItemKind, MediaItem, MediaType


class LibraryCatalog(Protocol):
    """
    What the trailer job needs from a media library.
    """

    def query_items(self, media_type: MediaType, kind: ItemKind, has_provider_id: str) -> List[MediaItem]:
        ...
