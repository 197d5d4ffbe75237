# Copyright (c) 2025 Trae AI. All rights reserved.

import time
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional
from pydantic import BaseModel, Field


class MediaType(Enum):
    VIDEO = "Video"
    AUDIO = "Audio"


class ItemKind(Enum):
    MOVIE = "Movie"
    SERIES = "Series"
    EPISODE = "Episode"
    MUSIC_VIDEO = "MusicVideo"
    VIDEO = "Video"


class MediaItem(BaseModel):
    """
    Represents a library entry as the catalog knows it.
    The folder at container_path holds the media file and its trailers folder.
    """

    id: Optional[int] = None
    name: str
    container_path: Path
    media_type: MediaType = MediaType.VIDEO
    kind: ItemKind = ItemKind.MOVIE
    provider_ids: Dict[str, str] = Field(default_factory=dict)
    remote_trailers: List[str] = Field(default_factory=list)

    @property
    def trailer_url(self) -> Optional[str]:
        for url in self.remote_trailers:
            if url and url.strip():
                return url
        return None

    def get_provider_id(self, key: str) -> Optional[str]:
        return self.provider_ids.get(key)

    def set_provider_id(self, key: str, value: str):
        self.provider_ids[key] = value


class OutcomeStatus(Enum):
    CREATED = "created"
    UNCHANGED = "unchanged"
    REMOVED = "removed"
    IGNORED = "ignored"
    NO_TRAILER = "no_trailer"
    FAILED = "failed"


class ItemOutcome(BaseModel):
    item_id: Optional[int] = None
    item_name: str
    status: OutcomeStatus
    reason: Optional[str] = None
    stub_path: Optional[Path] = None


class RunReport(BaseModel):
    """
    Collects one outcome per visited item during a trailer run.
    """

    outcomes: List[ItemOutcome] = Field(default_factory=list)
    started_at: float = Field(default_factory=time.time)
    finished_at: Optional[float] = None
    cancelled: bool = False

    def add(self, outcome: ItemOutcome):
        self.outcomes.append(outcome)

    def count(self, status: OutcomeStatus) -> int:
        return sum(1 for o in self.outcomes if o.status == status)

    def summary(self) -> Dict[str, int]:
        return {status.value: self.count(status) for status in OutcomeStatus}
