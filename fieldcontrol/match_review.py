"""The list of matches shown on the match review page."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Mapping

from fieldcontrol.records import Match, MatchStatus

_COLOR_CLASSES = {
    MatchStatus.RED_WON: "danger",
    MatchStatus.BLUE_WON: "info",
    MatchStatus.TIE: "warning",
}


@dataclass
class MatchReviewListItem:
    id: int
    display_name: str
    time: str
    red_teams: list[int] = field(default_factory=list)
    blue_teams: list[int] = field(default_factory=list)
    red_score: int = 0
    blue_score: int = 0
    color_class: str = ""
    is_complete: bool = False


def _format_time(value: datetime | None) -> str:
    if value is None:
        return ""
    if value.tzinfo is not None:
        value = value.astimezone()
    return f"{value:%a} {value.month}/{value.day:02d} {value:%I:%M %p}"


def build_match_review_list(
    matches: Iterable[Match], scores: Mapping[int, tuple[int, int]]
) -> list[MatchReviewListItem]:
    """Builds one review item per match.

    scores maps a match ID to its (red, blue) score; matches without a result
    are left out of it and show zero for both.
    """
    items = []
    for match in matches:
        red_score, blue_score = scores.get(match.id, (0, 0))
        items.append(
            MatchReviewListItem(
                id=match.id,
                display_name=match.type_prefix() + match.display_name,
                time=_format_time(match.time),
                red_teams=[match.red1, match.red2, match.red3],
                blue_teams=[match.blue1, match.blue2, match.blue3],
                red_score=red_score,
                blue_score=blue_score,
                color_class=_COLOR_CLASSES.get(match.status, ""),
                is_complete=match.status in _COLOR_CLASSES,
            )
        )
    return items