"""
Pydantic models for Note Tooltips.

Contains data models for indexed notes, index snapshots, match results,
refresh outcomes, and the persisted cache file layout.
"""

import math
import time
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


def now_ms() -> int:
    """Current time in milliseconds since the epoch, rounded up.

    Rounding up keeps a build stamp at or after any modification made in the
    same millisecond, which staleness compares against in fractional ms.
    """
    return math.ceil(time.time() * 1000)


class NoteRecord(BaseModel):
    """A single indexed note."""

    model_config = ConfigDict(frozen=True)

    relative_path: str
    absolute_path: str
    aliases: tuple[str, ...] = ()
    link_target: str

    @property
    def title(self) -> str:
        """Filename without directory or .md extension."""
        name = self.relative_path.rsplit("/", 1)[-1]
        return name[:-3] if name.endswith(".md") else name


class NoteIndex(BaseModel):
    """Immutable snapshot of the vault index.

    Records keep the order in which the build discovered them; matching
    relies on that order for tie-breaks.
    """

    model_config = ConfigDict(frozen=True)

    notes: dict[str, NoteRecord] = Field(default_factory=dict)
    built_at: int = 0

    @classmethod
    def empty(cls) -> "NoteIndex":
        return cls()

    def __len__(self) -> int:
        return len(self.notes)

    def records(self) -> list[NoteRecord]:
        return list(self.notes.values())


class MatchPhase(str, Enum):
    """Phases of word resolution, in the order they run."""

    EXACT = "exact"
    NORMALIZED = "normalized"


class MatchResult(BaseModel):
    """A resolved note for an input word."""

    relative_path: str
    full_path: str
    type: Literal["filename", "alias"]
    matched_alias: str | None = None
    link_target: str
    phase: MatchPhase


class RefreshResult(BaseModel):
    """Outcome of a refresh request."""

    refreshed: bool
    note_count: int
    built_at: int
    reason: str = ""


class CacheLoadResult(BaseModel):
    """Index restored from the cache file, or an empty one."""

    index: NoteIndex
    cache_loaded: bool


# ============== Cache file layout ==============

class CachedNoteEntry(BaseModel):
    """Value half of a cache file `notes` pair."""

    model_config = ConfigDict(populate_by_name=True)

    full_path: str = Field(alias="fullPath")
    aliases: list[str] = Field(default_factory=list)
    uri: str


class CacheFile(BaseModel):
    """On-disk cache: `{"notes": [[relativePath, entry], ...], "timestamp": ms}`."""

    notes: list[tuple[str, CachedNoteEntry]]
    timestamp: int
