"""
Persisted index cache for Note Tooltips.

Contains the IndexCache class, which stores an index snapshot and its build
time as JSON so a restart does not need a full vault scan.
"""

import json
from pathlib import Path

import aiofiles
import aiofiles.os
import structlog
from pydantic import ValidationError

from .models import CachedNoteEntry, CacheFile, CacheLoadResult, NoteIndex, NoteRecord

logger = structlog.get_logger(__name__)


class IndexCache:
    """JSON file holding the last built index.

    Layout: {"notes": [[relativePath, {"fullPath", "aliases", "uri"}], ...], "timestamp": ms}
    """

    def __init__(self, cache_path: Path):
        self.cache_path = cache_path

    @staticmethod
    def _to_file(index: NoteIndex) -> CacheFile:
        return CacheFile(
            notes=[
                (
                    rel_path,
                    CachedNoteEntry(
                        full_path=record.absolute_path,
                        aliases=list(record.aliases),
                        uri=record.link_target,
                    ),
                )
                for rel_path, record in index.notes.items()
            ],
            timestamp=index.built_at,
        )

    @staticmethod
    def _from_file(data: CacheFile) -> NoteIndex:
        notes = {
            rel_path: NoteRecord(
                relative_path=rel_path,
                absolute_path=entry.full_path,
                aliases=tuple(entry.aliases),
                link_target=entry.uri,
            )
            for rel_path, entry in data.notes
        }
        return NoteIndex(notes=notes, built_at=data.timestamp)

    async def save(self, index: NoteIndex) -> None:
        """Write the snapshot to disk.

        Raises:
            OSError: If the directory cannot be created or the file written
        """
        await aiofiles.os.makedirs(self.cache_path.parent, exist_ok=True)
        payload = self._to_file(index).model_dump(mode="json", by_alias=True)
        async with aiofiles.open(self.cache_path, "w", encoding="utf-8") as f:
            await f.write(json.dumps(payload, indent=2, ensure_ascii=False))
        logger.info("cache_saved", path=str(self.cache_path), note_count=len(index))

    async def load(self) -> CacheLoadResult:
        """Load the cached snapshot.

        A missing file and an unreadable or malformed one both give an empty
        index with cache_loaded=False; neither raises.
        """
        if not await aiofiles.os.path.exists(self.cache_path):
            logger.info("cache_missing", path=str(self.cache_path))
            return CacheLoadResult(index=NoteIndex.empty(), cache_loaded=False)

        try:
            async with aiofiles.open(self.cache_path, encoding="utf-8") as f:
                raw = await f.read()
            index = self._from_file(CacheFile.model_validate_json(raw))
        except (OSError, UnicodeDecodeError, ValidationError) as e:
            logger.warning("cache_load_failed", path=str(self.cache_path), error=str(e))
            return CacheLoadResult(index=NoteIndex.empty(), cache_loaded=False)

        logger.info("cache_loaded", path=str(self.cache_path), note_count=len(index), timestamp=index.built_at)
        return CacheLoadResult(index=index, cache_loaded=True)
