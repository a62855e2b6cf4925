"""
Directory selection filter for Note Tooltips.

Decides which notes make it into the index based on their top-level
directory in the vault.
"""

from collections.abc import Iterable

from .config import ALL_DIRECTORIES, ROOT_NOTES
from .utils import EmptySelectionError, root_segment


class DirectoryFilter:
    """Selected top-level directories, plus the ROOT_NOTES and ALL_DIRECTORIES sentinels."""

    def __init__(self, selected: Iterable[str]):
        self._selected = frozenset(selected)
        if not self._selected:
            raise EmptySelectionError("At least one directory must be selected")

    @classmethod
    def default(cls) -> "DirectoryFilter":
        return cls([ROOT_NOTES])

    @classmethod
    def from_state(cls, saved: Iterable[str] | None) -> "DirectoryFilter":
        """Restore a persisted selection; missing or empty state means the default."""
        if not saved:
            return cls.default()
        return cls(saved)

    @property
    def selected(self) -> frozenset[str]:
        return self._selected

    def includes(self, relative_path: str) -> bool:
        """Whether a note at this vault-relative (POSIX) path belongs in the index."""
        if ALL_DIRECTORIES in self._selected:
            return True
        segment = root_segment(relative_path)
        if segment == "":
            return ROOT_NOTES in self._selected
        return segment in self._selected

    def to_state(self) -> list[str]:
        return sorted(self._selected)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DirectoryFilter):
            return NotImplemented
        return self._selected == other._selected

    def __hash__(self) -> int:
        return hash(self._selected)

    def __repr__(self) -> str:
        return f"DirectoryFilter({self.to_state()!r})"
