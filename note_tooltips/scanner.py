"""
Vault traversal for Note Tooltips.

Walks the vault depth-first, one directory at a time, skipping hidden
entries and yielding Markdown notes.
"""

from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

import aiofiles.os

from .config import NOTE_EXTENSION


@dataclass(frozen=True)
class NoteFile:
    """A note discovered during a vault walk."""

    path: Path  # Absolute path
    name: str


def _is_hidden(name: str) -> bool:
    return name.startswith(".")


async def _sorted_entries(directory: Path) -> list:
    with await aiofiles.os.scandir(directory) as it:
        return sorted(it, key=lambda entry: entry.name)


async def scan_vault(root: Path) -> AsyncIterator[NoteFile]:
    """Yield every non-hidden .md file under root.

    Entries are visited in name order within each directory and symlinks are
    not followed. Listing errors (OSError) propagate to the caller.
    """
    for entry in await _sorted_entries(root):
        if _is_hidden(entry.name):
            continue

        entry_path = Path(entry.path)
        if entry.is_dir(follow_symlinks=False):
            async for note_file in scan_vault(entry_path):
                yield note_file
        elif entry.is_file(follow_symlinks=False) and entry_path.suffix == NOTE_EXTENSION:
            yield NoteFile(path=entry_path, name=entry.name)


async def visit_vault(root: Path, visit: Callable[[Path, NoteFile], Awaitable[None]]) -> None:
    """Await visit(path, note_file) once for every note under root."""
    async for note_file in scan_vault(root):
        await visit(note_file.path, note_file)


async def list_root_directories(vault_path: Path) -> list[str]:
    """Names of the non-hidden directories directly under the vault root."""
    return [
        entry.name
        for entry in await _sorted_entries(vault_path)
        if entry.is_dir(follow_symlinks=False) and not _is_hidden(entry.name)
    ]
