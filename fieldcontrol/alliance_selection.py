"""Running the alliance selection that seeds the playoff bracket."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import datetime
from typing import Mapping

from fieldcontrol.records import Alliance, EventStore

START_TIME_FORMAT = "%Y-%m-%d %I:%M:%S %p"


class AllianceSelectionError(Exception):
    """Raised when an alliance selection step is not allowed or its input is invalid."""


@dataclass
class RankedTeam:
    rank: int
    team_id: int
    picked: bool = False


def parse_start_time(value: str) -> datetime:
    """Parses the playoff start time, given as e.g. '2014-01-01 01:00:00 PM'."""
    try:
        return datetime.strptime(value, START_TIME_FORMAT)
    except (TypeError, ValueError):
        raise AllianceSelectionError("Must specify a valid start time for the playoff rounds.") from None


@dataclass
class AllianceSelection:
    """The alliances being picked and the ranked teams they are picked from."""

    store: EventStore | None = None
    alliances: list[Alliance] = field(default_factory=list)
    ranked_teams: list[RankedTeam] = field(default_factory=list)
    finalized: bool = False
    playoffs_started: bool = False

    def start(self, num_alliances: int, ranked_team_ids: list[int], round3_order: str = "") -> None:
        """Creates empty alliances and the ranked list of teams eligible for picking."""
        if self.alliances:
            raise AllianceSelectionError("Can't start alliance selection when it is already in progress.")
        self._check_modifiable()
        teams_per_alliance = 4 if round3_order else 3
        self.alliances = [
            Alliance(id=number, team_ids=[0] * teams_per_alliance) for number in range(1, num_alliances + 1)
        ]
        self.ranked_teams = [
            RankedTeam(rank=rank, team_id=team_id) for rank, team_id in enumerate(ranked_team_ids, start=1)
        ]

    def update(self, selections: Mapping[str, str]) -> None:
        """Applies form values named 'selection<alliance>_<spot>'; missing or blank values clear a spot."""
        self._check_modifiable()
        ranked = [RankedTeam(team.rank, team.team_id) for team in self.ranked_teams]
        by_team_id = {team.team_id: team for team in ranked}
        alliances = copy.deepcopy(self.alliances)

        for i, alliance in enumerate(alliances):
            for j in range(len(alliance.team_ids)):
                value = selections.get(f"selection{i}_{j}", "")
                if not value:
                    alliance.team_ids[j] = 0
                    continue
                try:
                    team_id = int(value)
                except ValueError:
                    raise AllianceSelectionError(f"Invalid team number value '{value}'.") from None
                team = by_team_id.get(team_id)
                if team is None:
                    raise AllianceSelectionError(
                        f"Team {team_id} has not played any matches at this event and is ineligible for selection."
                    )
                if team.picked:
                    raise AllianceSelectionError(f"Team {team_id} is already part of an alliance.")
                team.picked = True
                alliance.team_ids[j] = team_id

        self.alliances = alliances
        self.ranked_teams = ranked

    def reset(self) -> None:
        """Returns the selection to its starting point, unless playoff matches have been played."""
        if self.playoffs_started:
            raise AllianceSelectionError(
                "Cannot reset alliance selection; playoff matches have already started."
            )
        self.alliances = []
        self.ranked_teams = []
        self.finalized = False

    def next_cell(self, round2_order: str, round3_order: str) -> tuple[int, int]:
        """Row and column of the next spot to fill, or (-1, -1) when none is left."""
        for i, alliance in enumerate(self.alliances):
            if alliance.team_ids[0] == 0:
                return i, 0
            if alliance.team_ids[1] == 0:
                return i, 1

        cell = self._first_open(2, reverse=round2_order != "F")
        if cell is not None:
            return cell

        if round3_order in ("F", "L"):
            cell = self._first_open(3, reverse=round3_order == "L")
            if cell is not None:
                return cell
        return -1, -1

    def finalize(self) -> list[Alliance]:
        """Fixes the alliances with their initial lineups and saves them to the store."""
        self._check_modifiable()
        if any(team_id <= 0 for alliance in self.alliances for team_id in alliance.team_ids):
            raise AllianceSelectionError("Can't finalize alliance selection until all spots have been filled.")
        for alliance in self.alliances:
            # Captain in the middle, first pick on the left, second pick on the right.
            alliance.lineup = (alliance.team_ids[1], alliance.team_ids[0], alliance.team_ids[2])
            if self.store is not None:
                self.store.create_alliance(alliance)
        self.finalized = True
        return copy.deepcopy(self.alliances)

    def _check_modifiable(self) -> None:
        if self.finalized:
            raise AllianceSelectionError("Alliance selection has already been finalized.")

    def _first_open(self, column: int, reverse: bool) -> tuple[int, int] | None:
        rows = list(enumerate(self.alliances))
        if reverse:
            rows.reverse()
        for i, alliance in rows:
            if column < len(alliance.team_ids) and alliance.team_ids[column] == 0:
                return i, column
        return None