"""
Utility functions and compiled regex patterns for Note Tooltips.

Contains link target construction, comparison normalization, word lookup,
and the precondition exceptions raised by the vault context.
"""

import re
from pathlib import Path, PurePath
from urllib.parse import quote

from .config import NOTE_EXTENSION

# Trailing punctuation run. Dots and hyphens survive inside a word ("v1.2",
# "foo-alt") but not at its end ("foo." -> "foo"). Keeping trailing dots and
# hyphens, as a [^\w.-] set would, leaves a sentence-final "Foo." unmatched.
TRAILING_PUNCTUATION_PATTERN = re.compile(r"[^\w]+\Z")

# Characters encodeURIComponent leaves untouched besides alphanumerics
URI_COMPONENT_SAFE = "-_.!~*'()"

LINK_TARGET_PREFIX = "obsidian://vault"


# ============== Exceptions ==============

class PreconditionError(Exception):
    """Raised when an operation is requested against an unusable configuration."""
    pass


class VaultNotConfiguredError(PreconditionError):
    """Raised when no vault is connected."""
    pass


class VaultNotFoundError(PreconditionError):
    """Raised when the vault path is not an existing directory."""
    pass


class EmptySelectionError(PreconditionError):
    """Raised when the directory selection is empty."""
    pass


# ============== Helper Functions ==============

def to_relative_posix(path: Path, root: Path) -> str:
    """Vault-relative path of a note with forward slashes."""
    return PurePath(path).relative_to(root).as_posix()


def root_segment(relative_path: str) -> str:
    """First component of a vault-relative path, or "" for files in the vault root."""
    head, sep, _ = relative_path.partition("/")
    return head if sep else ""


def strip_note_extension(relative_path: str) -> str:
    if relative_path.endswith(NOTE_EXTENSION):
        return relative_path[: -len(NOTE_EXTENSION)]
    return relative_path


def build_link_target(vault_name: str, relative_path: str) -> str:
    """Build the obsidian:// reference for a note.

    Args:
        vault_name: Name of the vault directory
        relative_path: Note path relative to the vault root

    Returns:
        obsidian://vault/<vault>/<note path without extension>, both segments
        encoded like JavaScript's encodeURIComponent.
    """
    note_path = strip_note_extension(relative_path.replace("\\", "/"))
    encoded_vault = quote(vault_name, safe=URI_COMPONENT_SAFE)
    encoded_note = quote(note_path, safe=URI_COMPONENT_SAFE)
    return f"{LINK_TARGET_PREFIX}/{encoded_vault}/{encoded_note}"


def normalize_for_comparison(value: str, case_insensitive: bool) -> str:
    """Strip trailing punctuation and optionally case-fold."""
    normalized = TRAILING_PUNCTUATION_PATTERN.sub("", value)
    if case_insensitive:
        normalized = normalized.casefold()
    return normalized


def word_at(text: str, offset: int, pattern: str | re.Pattern) -> str | None:
    """Return the word of `text` that covers `offset`, using a word-boundary pattern.

    Mirrors how an editor picks the word under the cursor: the first match
    whose span contains the offset (end inclusive) wins.
    """
    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
    for match in compiled.finditer(text):
        if match.start() <= offset <= match.end():
            return match.group(0)
        if match.start() > offset:
            break
    return None
