"""
Vault context for Note Tooltips.

Contains the VaultContext class, which owns the connected vault, the
directory selection, and the active index snapshot, and ties the builder,
staleness check, cache and resolver together.
"""

import asyncio
from collections.abc import Iterable
from pathlib import Path

import aiofiles.os
import structlog

from .builder import build_index, read_note
from .cache import IndexCache
from .config import ALL_DIRECTORIES, ROOT_NOTES, Settings
from .filters import DirectoryFilter
from .frontmatter import extract_preview
from .models import MatchResult, NoteIndex, RefreshResult
from .resolver import resolve
from .scanner import list_root_directories
from .staleness import is_stale
from .state import PersistedState, StateStore
from .utils import VaultNotConfiguredError, VaultNotFoundError, word_at

logger = structlog.get_logger(__name__)


class VaultContext:
    """Index state for one connected vault.

    The active index is only ever replaced as a whole, after a build has
    completed, so readers see either the previous snapshot or the new one.

    Refreshes are single-flight: a non-forced refresh joins one already in
    progress; a forced refresh waits for it and then runs its own.
    """

    def __init__(self, settings: Settings, index_cache: IndexCache | None = None, state_store: StateStore | None = None):
        self.settings = settings
        self.index_cache = index_cache or IndexCache(settings.cache_path)
        self.state_store = state_store or StateStore(settings.state_path)
        self._vault_path: Path | None = settings.vault_path
        self._directory_filter = DirectoryFilter.default()
        self._index = NoteIndex.empty()
        self._refresh_task: asyncio.Task | None = None

    # ============== Accessors ==============

    @property
    def index(self) -> NoteIndex:
        return self._index

    @property
    def vault_path(self) -> Path | None:
        return self._vault_path

    @property
    def directory_filter(self) -> DirectoryFilter:
        return self._directory_filter

    def _require_vault(self) -> Path:
        if self._vault_path is None:
            raise VaultNotConfiguredError("Please connect to an Obsidian vault first")
        return self._vault_path

    async def _persist_state(self) -> None:
        await self.state_store.save(PersistedState(
            connected_vault=str(self._vault_path) if self._vault_path else None,
            selected_directories=self._directory_filter.to_state(),
        ))

    # ============== Lifecycle ==============

    async def start(self) -> bool:
        """Restore state and cache, then refresh if the vault changed since the cached build.

        Returns:
            Whether a cached index was loaded
        """
        state = await self.state_store.load()
        if state.connected_vault:
            self._vault_path = Path(state.connected_vault)
        self._directory_filter = DirectoryFilter.from_state(state.selected_directories)

        if self._vault_path is None:
            logger.info("no_connected_vault")
            return False

        loaded = await self.index_cache.load()
        self._index = loaded.index
        if not loaded.cache_loaded:
            logger.info("cache_not_loaded_starting_fresh")

        try:
            if await is_stale(self._vault_path, self._index.built_at):
                await self.refresh(force=True)
            else:
                logger.info("vault_up_to_date_using_cache", note_count=len(self._index))
        except OSError as e:
            logger.error("startup_refresh_failed", vault=str(self._vault_path), error=str(e))

        return loaded.cache_loaded

    async def connect(self, vault_path: Path) -> RefreshResult:
        """Connect a vault and index it."""
        vault_path = vault_path.absolute()
        if not await aiofiles.os.path.isdir(vault_path):
            raise VaultNotFoundError(f"Vault directory not found: {vault_path}")

        self._vault_path = vault_path
        self._index = NoteIndex.empty()
        await self._persist_state()
        logger.info("vault_connected", vault=str(vault_path))
        return await self.refresh(force=True)

    async def disconnect(self) -> None:
        """Forget the connected vault and clear the index, in memory and on disk.

        A refresh still in flight is waited for; its result is discarded.
        """
        logger.info("vault_disconnected", vault=str(self._vault_path))
        self._vault_path = None

        pending = self._refresh_task
        if pending is not None and not pending.done():
            await asyncio.wait([pending])

        self._index = NoteIndex.empty()
        await self._persist_state()
        await self._save_cache(self._index)

    async def _save_cache(self, index: NoteIndex) -> None:
        try:
            await self.index_cache.save(index)
        except OSError as e:
            logger.warning("cache_save_failed", path=str(self.index_cache.cache_path), error=str(e))

    # ============== Refresh ==============

    async def is_stale(self) -> bool:
        return await is_stale(self._require_vault(), self._index.built_at)

    async def _run_refresh(self, vault_path: Path, directory_filter: DirectoryFilter, force: bool) -> RefreshResult:
        if not force and not await is_stale(vault_path, self._index.built_at):
            logger.info("refresh_skipped", reason="up_to_date", note_count=len(self._index))
            return RefreshResult(
                refreshed=False,
                note_count=len(self._index),
                built_at=self._index.built_at,
                reason="up_to_date",
            )

        try:
            new_index = await build_index(vault_path, directory_filter, self.settings.alias_format)
        except OSError as e:
            logger.error("refresh_failed", vault=str(vault_path), error=str(e))
            raise

        if self._vault_path != vault_path:
            logger.info("refresh_discarded", vault=str(vault_path), reason="vault_changed")
            return RefreshResult(
                refreshed=False,
                note_count=len(self._index),
                built_at=self._index.built_at,
                reason="vault_changed",
            )

        self._index = new_index
        await self._save_cache(new_index)

        return RefreshResult(
            refreshed=True,
            note_count=len(new_index),
            built_at=new_index.built_at,
            reason="forced" if force else "modified",
        )

    async def refresh(self, force: bool = False) -> RefreshResult:
        """Rebuild the index when the vault changed, or unconditionally when forced.

        Raises:
            VaultNotConfiguredError: If no vault is connected
            OSError: If the build fails; the previous index stays active
        """
        vault_path = self._require_vault()

        while self._refresh_task is not None and not self._refresh_task.done():
            pending = self._refresh_task
            if not force:
                logger.debug("refresh_joined")
                return await asyncio.shield(pending)
            await asyncio.wait([pending])

        self._refresh_task = asyncio.ensure_future(
            self._run_refresh(vault_path, self._directory_filter, force)
        )
        return await asyncio.shield(self._refresh_task)

    # ============== Directory selection ==============

    async def list_directories(self) -> list[str]:
        """Choices for the directory picker: the sentinels, then top-level directories."""
        vault_path = self._require_vault()
        return [ROOT_NOTES, ALL_DIRECTORIES, *await list_root_directories(vault_path)]

    async def set_directory_filter(self, selection: Iterable[str]) -> RefreshResult:
        """Replace the directory selection, persist it, and rebuild the index.

        Raises:
            EmptySelectionError: If the selection is empty
            VaultNotConfiguredError: If no vault is connected
        """
        new_filter = DirectoryFilter(selection)
        self._require_vault()

        self._directory_filter = new_filter
        await self._persist_state()
        logger.info("directory_selection_saved", directories=new_filter.to_state())
        return await self.refresh(force=True)

    # ============== Queries ==============

    def resolve(self, word: str) -> MatchResult | None:
        return resolve(word, self._index, self.settings.case_insensitive)

    def resolve_at(self, text: str, offset: int) -> MatchResult | None:
        """Resolve the word covering offset in text, using the configured word pattern."""
        word = word_at(text, offset, self.settings.word_pattern)
        if word is None:
            return None
        return self.resolve(word)

    async def preview(self, match: MatchResult) -> str:
        """Pre-header excerpt of the matched note, or "" when disabled or unreadable."""
        if self.settings.note_content_display != "showPreHeader":
            return ""
        try:
            content = await read_note(Path(match.full_path))
        except OSError as e:
            logger.warning("note_preview_failed", path=match.full_path, error=str(e))
            return ""
        return extract_preview(content)
