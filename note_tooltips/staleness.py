"""
Staleness detection for Note Tooltips.

An index is stale when any note in the vault was modified after the index
was built. The whole vault is considered, regardless of directory selection.
"""

from datetime import datetime
from pathlib import Path

import aiofiles.os
import structlog

from .scanner import scan_vault

logger = structlog.get_logger(__name__)


async def latest_modification(vault_path: Path) -> float:
    """Newest note modification time under the vault, in ms since epoch (0 if no notes)."""
    latest = 0.0
    async for note_file in scan_vault(vault_path):
        stat = await aiofiles.os.stat(note_file.path)
        latest = max(latest, stat.st_mtime * 1000)
    return latest


def _fmt(ms: float) -> str:
    return datetime.fromtimestamp(ms / 1000).isoformat(timespec="seconds")


async def is_stale(vault_path: Path, last_build_time: float) -> bool:
    """Check whether the vault changed since last_build_time (ms since epoch).

    Returns True when the walk fails: skipping a needed refresh is worse
    than an unnecessary rebuild.
    """
    try:
        latest = await latest_modification(vault_path)
    except OSError as e:
        logger.warning("vault_modification_check_failed", vault=str(vault_path), error=str(e))
        return True

    needs_refresh = latest > last_build_time
    logger.info(
        "vault_modification_check",
        last_update=_fmt(last_build_time),
        latest_modification=_fmt(latest),
        needs_refresh=needs_refresh,
    )
    return needs_refresh
