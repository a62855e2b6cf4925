"""
Persisted user state for Note Tooltips: the connected vault and the
directory selection.
"""

import json
from pathlib import Path

import aiofiles
import aiofiles.os
import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = structlog.get_logger(__name__)


class PersistedState(BaseModel):
    """Contents of the state file."""

    model_config = ConfigDict(populate_by_name=True)

    connected_vault: str | None = Field(default=None, alias="connectedVault")
    selected_directories: list[str] | None = Field(default=None, alias="selectedDirectories")


class StateStore:
    """Reads and writes PersistedState as JSON."""

    def __init__(self, state_path: Path):
        self.state_path = state_path

    async def load(self) -> PersistedState:
        if not await aiofiles.os.path.exists(self.state_path):
            return PersistedState()
        try:
            async with aiofiles.open(self.state_path, encoding="utf-8") as f:
                return PersistedState.model_validate_json(await f.read())
        except (OSError, UnicodeDecodeError, ValidationError) as e:
            logger.warning("state_load_failed", path=str(self.state_path), error=str(e))
            return PersistedState()

    async def save(self, state: PersistedState) -> None:
        await aiofiles.os.makedirs(self.state_path.parent, exist_ok=True)
        async with aiofiles.open(self.state_path, "w", encoding="utf-8") as f:
            await f.write(json.dumps(state.model_dump(by_alias=True), indent=2))
