"""Decisions made when a match score is committed."""

from __future__ import annotations

from fieldcontrol.records import MatchResult

_UNRECORDED_TYPES = frozenset({"test"})
_UNPUBLISHED_TYPES = frozenset({"practice", "test"})


def next_play_number(previous_result: MatchResult | None) -> int:
    """Play number for a new result, following the latest stored result of the match."""
    if previous_result is None:
        return 1
    return previous_result.play_number + 1


def apply_elimination_tiebreakers(match_type: str, elim_round: int, finals_round: int) -> bool:
    """True if a tie is broken by the score breakdown instead of a replay.

    That holds for playoff matches before the finals; finals ties are replayed.
    """
    return match_type == "elimination" and elim_round < finals_round


def should_publish(tba_enabled: bool, match_type: str) -> bool:
    """True if the committed match is published to the online results service."""
    return tba_enabled and match_type not in _UNPUBLISHED_TYPES


def backup_label(match_type: str, display_name: str) -> str:
    """Label of the database backup taken after committing a match."""
    return f"post_{match_type}_match_{display_name}"