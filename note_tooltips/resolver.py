"""
Word resolution for Note Tooltips.

Resolution runs in two phases. EXACT compares the word as given (case-folded
when enabled) against each note's title, then its aliases. NORMALIZED only
runs when EXACT finds nothing, and compares after stripping trailing
punctuation from both sides, so "Widget." still finds Widget.md.

Within a phase, notes are visited in index order and the first hit wins.
"""

from collections.abc import Callable

import structlog

from .models import MatchPhase, MatchResult, NoteIndex, NoteRecord
from .utils import normalize_for_comparison

logger = structlog.get_logger(__name__)

PHASES = (MatchPhase.EXACT, MatchPhase.NORMALIZED)


def _comparator(phase: MatchPhase, case_insensitive: bool) -> Callable[[str], str]:
    if phase is MatchPhase.NORMALIZED:
        return lambda value: normalize_for_comparison(value, case_insensitive)
    if case_insensitive:
        return str.casefold
    return lambda value: value


def _match_record(record: NoteRecord, target: str, prepare: Callable[[str], str]) -> tuple[str, str | None] | None:
    if prepare(record.title) == target:
        return "filename", None
    for alias in record.aliases:
        if prepare(alias) == target:
            return "alias", alias
    return None


def search_phase(
    phase: MatchPhase,
    word: str,
    index: NoteIndex,
    case_insensitive: bool,
) -> MatchResult | None:
    """Run a single resolution phase over the index."""
    prepare = _comparator(phase, case_insensitive)
    target = prepare(word)

    for record in index.notes.values():
        hit = _match_record(record, target, prepare)
        if hit is None:
            continue
        kind, alias = hit
        return MatchResult(
            relative_path=record.relative_path,
            full_path=record.absolute_path,
            type=kind,
            matched_alias=alias,
            link_target=record.link_target,
            phase=phase,
        )
    return None


def resolve(word: str, index: NoteIndex, case_insensitive: bool = True) -> MatchResult | None:
    """Resolve a word to a note by title or alias.

    Args:
        word: Word under the cursor
        index: Index snapshot to search
        case_insensitive: Compare case-folded values

    Returns:
        The first match, or None when no note matches
    """
    if not word or not word.strip():
        return None

    for phase in PHASES:
        match = search_phase(phase, word, index, case_insensitive)
        if match is not None:
            logger.debug("word_resolved", word=word, phase=phase.value, path=match.relative_path, type=match.type)
            return match

    logger.debug("word_unresolved", word=word, note_count=len(index))
    return None
