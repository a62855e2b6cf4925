"""
Pytest configuration and fixtures for note-tooltips tests.
"""

import os
import time
from pathlib import Path

import pytest

# Notes are created an hour in the past so a build right afterwards is never
# within the same millisecond as a note modification.
AGED_MTIME = time.time() - 3600


def age_tree(root: Path) -> None:
    for path in root.rglob("*"):
        if path.is_file():
            os.utime(path, (AGED_MTIME, AGED_MTIME))


def touch(path: Path, offset: float = 5.0) -> None:
    """Set a file's modification time into the future."""
    future = time.time() + offset
    os.utime(path, (future, future))


@pytest.fixture
def touch_note():
    return touch


@pytest.fixture
def temp_vault(tmp_path: Path):
    """Create a temporary vault with root-level, one-level and two-level-nested notes."""
    vault_path = tmp_path / "vault"
    vault_path.mkdir()

    (vault_path / "Projects" / "Deep").mkdir(parents=True)
    (vault_path / "Archive" / "Nested").mkdir(parents=True)
    (vault_path / ".obsidian").mkdir()

    # Root note with block-list aliases
    (vault_path / "Widget.md").write_text("""---
aliases:
  - Gadget
  - Thing
---
# Widget
Body text""", encoding="utf-8")

    # Root note with an alias and a pre-header paragraph
    (vault_path / "Foo.md").write_text("""---
title: Foo
aliases:
  - foo-alt
tags:
  - sample
---
Intro line before the heading.

# Foo

Details.
""", encoding="utf-8")

    # Root note without front matter
    (vault_path / "plain.md").write_text("# Plain\n\nNo front matter here.\n", encoding="utf-8")

    # Not a note
    (vault_path / "readme.txt").write_text("Widget", encoding="utf-8")

    # Hidden entries
    (vault_path / ".hidden.md").write_text("---\naliases:\n  - Hidden\n---\n", encoding="utf-8")
    (vault_path / ".obsidian" / "workspace.md").write_text("# Workspace\n", encoding="utf-8")

    # One level deep
    (vault_path / "Projects" / "Alpha.md").write_text("""---
aliases:
  - First Letter
---
Alpha project.
""", encoding="utf-8")

    # Two levels deep
    (vault_path / "Projects" / "Deep" / "Beta.md").write_text("# Beta\n", encoding="utf-8")
    (vault_path / "Archive" / "Old Note.md").write_text("Archived.\n", encoding="utf-8")

    # Flow-sequence aliases, only understood by the yaml alias format
    (vault_path / "Archive" / "Nested" / "Gamma.md").write_text("""---
aliases: [Third Letter, G]
---
Gamma.
""", encoding="utf-8")

    age_tree(vault_path)
    yield vault_path


@pytest.fixture
def empty_vault(tmp_path: Path):
    vault_path = tmp_path / "empty"
    vault_path.mkdir()
    return vault_path


@pytest.fixture
def test_settings(tmp_path: Path):
    """Settings pointing the cache and state files into tmp_path."""
    from note_tooltips.config import Settings

    return Settings(state_dir=tmp_path / "state", vault_path=None)


@pytest.fixture
def vault_context(test_settings):
    """A VaultContext with no vault connected."""
    from note_tooltips.context import VaultContext

    return VaultContext(test_settings)


@pytest.fixture
async def connected_context(vault_context, temp_vault):
    """A VaultContext connected to temp_vault and indexed with every directory selected."""
    from note_tooltips.config import ALL_DIRECTORIES

    await vault_context.connect(temp_vault)
    await vault_context.set_directory_filter([ALL_DIRECTORIES])
    return vault_context


@pytest.fixture
def patched_vault_context(connected_context, monkeypatch):
    """Patch the tool module's vault context with the connected one."""
    from note_tooltips import tools

    monkeypatch.setattr(tools, "vault_context", connected_context)
    return connected_context
