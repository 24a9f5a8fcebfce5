"""Event records and an in-memory store that keeps them."""

from __future__ import annotations

import copy
import enum
import itertools
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Generic, Iterator, TypeVar


class MatchStatus(enum.Enum):
    """Outcome of a match."""

    NOT_PLAYED = "not_played"
    RED_WON = "red_won"
    BLUE_WON = "blue_won"
    TIE = "tie"


class AwardType(enum.IntEnum):
    """Kind of award presented at an event."""

    JUDGED = 0
    FINALIST = 1
    WINNER = 2


@dataclass
class Team:
    id: int
    nickname: str = ""
    yellow_card: bool = False


@dataclass
class Award:
    id: int = 0
    type: AwardType = AwardType.JUDGED
    award_name: str = ""
    team_id: int = 0
    person_name: str = ""


@dataclass
class LowerThird:
    id: int = 0
    top_text: str = ""
    bottom_text: str = ""
    display_order: int = 0
    award_id: int = 0


@dataclass
class Alliance:
    id: int
    team_ids: list[int] = field(default_factory=list)
    lineup: tuple[int, int, int] = (0, 0, 0)


_TYPE_PREFIXES = {"practice": "P", "qualification": "Q"}


@dataclass
class Match:
    id: int = 0
    type: str = ""
    display_name: str = ""
    time: datetime | None = None
    red1: int = 0
    red1_is_surrogate: bool = False
    red2: int = 0
    red2_is_surrogate: bool = False
    red3: int = 0
    red3_is_surrogate: bool = False
    blue1: int = 0
    blue1_is_surrogate: bool = False
    blue2: int = 0
    blue2_is_surrogate: bool = False
    blue3: int = 0
    blue3_is_surrogate: bool = False
    status: MatchStatus = MatchStatus.NOT_PLAYED
    elim_round: int = 0
    elim_group: int = 0
    elim_red_alliance: int = 0
    elim_blue_alliance: int = 0

    def is_complete(self) -> bool:
        """True once the match has a committed outcome."""
        return self.status is not MatchStatus.NOT_PLAYED

    def type_prefix(self) -> str:
        """Short prefix shown before the display name of the match."""
        return _TYPE_PREFIXES.get(self.type, "")


@dataclass
class MatchResult:
    id: int = 0
    match_id: int = 0
    play_number: int = 0
    match_type: str = ""
    red_cards: dict[str, str] = field(default_factory=dict)
    blue_cards: dict[str, str] = field(default_factory=dict)


@dataclass
class ScheduleBlock:
    id: int = 0
    match_type: str = ""
    start_time: datetime = field(default_factory=lambda: datetime.fromtimestamp(0, timezone.utc))
    num_matches: int = 0
    match_spacing_sec: int = 0


_R = TypeVar("_R")


class _Table(Generic[_R]):
    """Rows keyed by id; every read and write goes through a copy."""

    def __init__(self, auto_id: bool) -> None:
        self._rows: dict[int, _R] = {}
        self._ids = itertools.count(1)
        self._auto_id = auto_id

    def create(self, record: _R) -> None:
        if self._auto_id:
            record.id = next(self._ids)  # type: ignore[attr-defined]
        elif record.id in self._rows:  # type: ignore[attr-defined]
            raise ValueError(f"record {record.id} already exists")  # type: ignore[attr-defined]
        self._rows[record.id] = copy.deepcopy(record)  # type: ignore[attr-defined]

    def update(self, record: _R) -> None:
        if record.id not in self._rows:  # type: ignore[attr-defined]
            raise KeyError(f"no record with id {record.id}")  # type: ignore[attr-defined]
        self._rows[record.id] = copy.deepcopy(record)  # type: ignore[attr-defined]

    def delete(self, record_id: int) -> None:
        if record_id not in self._rows:
            raise KeyError(f"no record with id {record_id}")
        del self._rows[record_id]

    def get(self, record_id: int) -> _R | None:
        row = self._rows.get(record_id)
        return copy.deepcopy(row) if row is not None else None

    def select(self, where: Callable[[_R], bool] = lambda _: True, key: Callable[[_R], object] | None = None) -> list[_R]:
        rows: Iterator[_R] = (row for _, row in sorted(self._rows.items()) if where(row))
        chosen = list(rows)
        if key is not None:
            chosen.sort(key=key)
        return [copy.deepcopy(row) for row in chosen]


def _lower_third_order(lower_third: LowerThird) -> tuple[int, int]:
    return lower_third.display_order, lower_third.id


def _match_order(match: Match) -> tuple[float, int]:
    return (match.time.timestamp() if match.time is not None else 0.0), match.id


class EventStore:
    """In-memory storage for the records of one event."""

    def __init__(self) -> None:
        self._teams: _Table[Team] = _Table(auto_id=False)
        self._awards: _Table[Award] = _Table(auto_id=True)
        self._lower_thirds: _Table[LowerThird] = _Table(auto_id=True)
        self._alliances: _Table[Alliance] = _Table(auto_id=False)
        self._matches: _Table[Match] = _Table(auto_id=True)
        self._match_results: _Table[MatchResult] = _Table(auto_id=True)

    # Teams
    def create_team(self, team: Team) -> None:
        self._teams.create(team)

    def get_team_by_id(self, team_id: int) -> Team | None:
        return self._teams.get(team_id)

    def get_all_teams(self) -> list[Team]:
        return self._teams.select()

    def update_team(self, team: Team) -> None:
        self._teams.update(team)

    # Awards
    def create_award(self, award: Award) -> None:
        self._awards.create(award)

    def update_award(self, award: Award) -> None:
        self._awards.update(award)

    def delete_award(self, award_id: int) -> None:
        self._awards.delete(award_id)

    def get_award_by_id(self, award_id: int) -> Award | None:
        return self._awards.get(award_id)

    def get_all_awards(self) -> list[Award]:
        return self._awards.select()

    def get_awards_by_type(self, award_type: AwardType) -> list[Award]:
        return self._awards.select(lambda award: award.type == award_type)

    # Lower thirds
    def create_lower_third(self, lower_third: LowerThird) -> None:
        self._lower_thirds.create(lower_third)

    def update_lower_third(self, lower_third: LowerThird) -> None:
        self._lower_thirds.update(lower_third)

    def delete_lower_third(self, lower_third_id: int) -> None:
        self._lower_thirds.delete(lower_third_id)

    def get_all_lower_thirds(self) -> list[LowerThird]:
        return self._lower_thirds.select(key=_lower_third_order)

    def get_lower_thirds_by_award_id(self, award_id: int) -> list[LowerThird]:
        return self._lower_thirds.select(lambda lt: lt.award_id == award_id, key=_lower_third_order)

    def next_lower_third_display_order(self) -> int:
        """Display order that places a new lower third after all existing ones."""
        orders = [lt.display_order for lt in self._lower_thirds.select()]
        return max(orders, default=0) + 1

    # Alliances
    def create_alliance(self, alliance: Alliance) -> None:
        self._alliances.create(alliance)

    def get_alliance_by_id(self, alliance_id: int) -> Alliance | None:
        return self._alliances.get(alliance_id)

    def get_all_alliances(self) -> list[Alliance]:
        return self._alliances.select()

    # Matches
    def create_match(self, match: Match) -> None:
        self._matches.create(match)

    def get_matches_by_type(self, match_type: str) -> list[Match]:
        return self._matches.select(lambda match: match.type == match_type, key=_match_order)

    # Match results
    def create_match_result(self, match_result: MatchResult) -> None:
        self._match_results.create(match_result)

    def get_match_result_for_match(self, match_id: int) -> MatchResult | None:
        """The result with the highest play number for the match, if any."""
        results = self._match_results.select(lambda result: result.match_id == match_id)
        return max(results, key=lambda result: (result.play_number, result.id), default=None)