"""Choosing the upcoming matches shown on the queueing display."""

from __future__ import annotations

from datetime import timedelta
from typing import Sequence

from fieldcontrol.records import Match

NUM_NON_ELIM_MATCHES_TO_SHOW = 5
NUM_ELIM_MATCHES_TO_SHOW = 4


def upcoming_matches(matches: Sequence[Match], match_type: str, max_gap_minutes: float) -> list[Match]:
    """The next unplayed matches, stopping at the display limit or a long gap in the schedule."""
    limit = NUM_ELIM_MATCHES_TO_SHOW if match_type == "elimination" else NUM_NON_ELIM_MATCHES_TO_SHOW
    max_gap = timedelta(minutes=max_gap_minutes)
    upcoming: list[Match] = []
    for match, following in zip(matches, [*matches[1:], None]):
        if match.is_complete():
            continue
        upcoming.append(match)
        if len(upcoming) == limit:
            break
        # Leave out later matches when there is a significant break before the next one.
        if (
            following is not None
            and following.time is not None
            and match.time is not None
            and following.time - match.time > max_gap
        ):
            break
    return upcoming