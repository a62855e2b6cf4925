"""
Index builder for Note Tooltips.

Scans the vault, keeps the notes selected by the directory filter, and
produces a fresh NoteIndex snapshot.
"""

import time
from pathlib import Path

import aiofiles
import structlog

from .filters import DirectoryFilter
from .frontmatter import AliasFormat, extract_aliases
from .models import NoteIndex, NoteRecord, now_ms
from .scanner import scan_vault
from .utils import build_link_target, to_relative_posix

logger = structlog.get_logger(__name__)


async def read_note(path: Path) -> str:
    """Read a note as UTF-8, replacing undecodable bytes."""
    async with aiofiles.open(path, encoding="utf-8", errors="replace") as f:
        return await f.read()


async def build_index(
    vault_path: Path,
    directory_filter: DirectoryFilter,
    alias_format: AliasFormat = "block",
) -> NoteIndex:
    """Build a new index snapshot for the vault.

    Args:
        vault_path: Vault root directory
        directory_filter: Selection deciding which notes are indexed
        alias_format: Front matter alias format, see extract_aliases

    Returns:
        A new NoteIndex; earlier snapshots are never touched

    Raises:
        OSError: If any directory listing or note read fails. No partial
            index is returned.
    """
    start_time = time.time()
    vault_path = vault_path.absolute()
    vault_name = vault_path.name
    notes: dict[str, NoteRecord] = {}
    skipped = 0

    logger.info("index_build_started", vault=str(vault_path), directories=directory_filter.to_state())

    async for note_file in scan_vault(vault_path):
        rel_path = to_relative_posix(note_file.path, vault_path)
        if not directory_filter.includes(rel_path):
            skipped += 1
            continue

        content = await read_note(note_file.path)
        aliases = extract_aliases(content, alias_format)
        record = NoteRecord(
            relative_path=rel_path,
            absolute_path=str(note_file.path),
            aliases=tuple(aliases),
            link_target=build_link_target(vault_name, rel_path),
        )
        notes[rel_path] = record
        logger.debug("note_indexed", path=rel_path, aliases=aliases, uri=record.link_target)

    index = NoteIndex(notes=notes, built_at=now_ms())
    logger.info(
        "index_built",
        vault=str(vault_path),
        note_count=len(notes),
        skipped=skipped,
        duration_ms=round((time.time() - start_time) * 1000, 2),
    )
    return index
