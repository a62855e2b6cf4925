"""
Front matter parsing for Note Tooltips.

Aliases are read from the block list form only:

    ---
    aliases:
      - First alias
      - Second alias
    ---

Anything else yields no aliases. The optional "yaml" format hands the block
to PyYAML instead, which also accepts flow sequences (`aliases: [a, b]`).
"""

from typing import Literal

import structlog
import yaml

logger = structlog.get_logger(__name__)

DELIMITER = "---"
ALIASES_KEY = "aliases:"
ALIAS_ITEM_PREFIX = "  - "

AliasFormat = Literal["block", "yaml"]


def _lines(content: str) -> list[str]:
    return [line.rstrip("\r") for line in content.split("\n")]


def split_front_matter(content: str) -> tuple[list[str] | None, list[str]]:
    """Split note content into (front matter lines, body lines).

    Front matter lines are None when the note does not open with a `---`
    line or the block is never closed; the body is then the whole note.
    """
    lines = _lines(content)
    if not lines or lines[0] != DELIMITER:
        return None, lines

    for idx in range(1, len(lines)):
        if lines[idx] == DELIMITER:
            return lines[1:idx], lines[idx + 1:]

    return None, lines


def _block_aliases(block: list[str]) -> list[str]:
    aliases: list[str] = []
    for idx, line in enumerate(block):
        if line.rstrip() != ALIASES_KEY:
            continue
        for item in block[idx + 1:]:
            if not item.startswith(ALIAS_ITEM_PREFIX):
                break
            value = item[len(ALIAS_ITEM_PREFIX):].strip()
            if value:
                aliases.append(value)
        break
    return aliases


def _yaml_aliases(block: list[str]) -> list[str]:
    try:
        data = yaml.safe_load("\n".join(block)) or {}
    except yaml.YAMLError as e:
        logger.debug("front_matter_yaml_invalid", error=str(e))
        return []

    if not isinstance(data, dict):
        return []

    raw = data.get("aliases")
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list):
        return []
    return [str(a).strip() for a in raw if a is not None and str(a).strip()]


def extract_aliases(content: str, alias_format: AliasFormat = "block") -> list[str]:
    """Extract the alias list declared in a note's front matter.

    Args:
        content: Full note text
        alias_format: "block" for the indented list form only, "yaml" to parse
            the block with PyYAML

    Returns:
        Aliases in declaration order; empty when there is no usable block
    """
    block, _ = split_front_matter(content)
    if block is None:
        return []

    if alias_format == "yaml":
        return _yaml_aliases(block)
    return _block_aliases(block)


def extract_preview(content: str) -> str:
    """Text between the front matter and the first H1 heading, trailing whitespace trimmed."""
    _, body = split_front_matter(content)

    collected: list[str] = []
    for line in body:
        if line.startswith("# "):
            break
        collected.append(line)

    return "\n".join(collected).rstrip()
