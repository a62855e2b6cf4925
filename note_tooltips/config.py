"""
Configuration module for Note Tooltips.

Uses pydantic-settings for configuration management with environment variable support.
Environment variables use NOTE_TOOLTIPS_ prefix (e.g., NOTE_TOOLTIPS_VAULT_PATH).
"""

import os
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Directory selection sentinels
ROOT_NOTES = "Notes In Root"
ALL_DIRECTORIES = "All"

NOTE_EXTENSION = ".md"

# Words made of letters/digits, optionally joined by . - _ : ( )
DEFAULT_WORD_PATTERN = r"(?:\b|^)([A-Za-z0-9]+(?:[.\-_:()]*[A-Za-z0-9]+)*)(?=\b|$)"


def _get_default_state_dir() -> Path:
    """Get default directory for the index cache and persisted state."""
    if os.name == "nt":  # Windows
        return Path(os.environ.get("LOCALAPPDATA", str(Path.home()))) / "note-tooltips"
    else:  # Linux/macOS
        return Path.home() / ".note-tooltips"


class Settings(BaseSettings):
    """Application settings with environment variable support.

    Environment variables:
    - NOTE_TOOLTIPS_VAULT_PATH: Vault to connect on first start (optional)
    - NOTE_TOOLTIPS_STATE_DIR: Directory holding the index cache and state files
    - NOTE_TOOLTIPS_CASE_INSENSITIVE: Case-insensitive word matching
    - NOTE_TOOLTIPS_WORD_PATTERN: Regex used to pick the word under the cursor
    - NOTE_TOOLTIPS_ALIAS_FORMAT: "block" (aliases as an indented list) or "yaml"
    - NOTE_TOOLTIPS_NOTE_CONTENT_DISPLAY: "showPreHeader" or "none"
    - NOTE_TOOLTIPS_LOG_LEVEL: Minimum log level
    """

    vault_path: Path | None = None
    state_dir: Path = Field(default_factory=_get_default_state_dir)
    cache_filename: str = "notes-cache.json"
    state_filename: str = "state.json"
    case_insensitive: bool = True
    word_pattern: str = DEFAULT_WORD_PATTERN
    alias_format: Literal["block", "yaml"] = "block"
    note_content_display: Literal["showPreHeader", "none"] = "showPreHeader"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="NOTE_TOOLTIPS_")

    @property
    def cache_path(self) -> Path:
        return self.state_dir / self.cache_filename

    @property
    def state_path(self) -> Path:
        return self.state_dir / self.state_filename


# Global settings instance
settings = Settings()
