"""Residual yellow cards carried by teams."""

from __future__ import annotations

from fieldcontrol.records import EventStore


class CardError(Exception):
    """Raised when card state cannot be worked out from the stored results."""


def calculate_team_cards(store: EventStore, match_type: str) -> None:
    """Marks every team that received a yellow or red card in a completed match of the type."""
    teams = {str(team.id): team for team in store.get_all_teams()}
    for team in teams.values():
        team.yellow_card = False

    for match in store.get_matches_by_type(match_type):
        if not match.is_complete():
            continue
        result = store.get_match_result_for_match(match.id)
        if result is None:
            raise CardError(f"found no match result for match {match.id}")
        for cards in (result.red_cards, result.blue_cards):
            for team_id, card in cards.items():
                if card and team_id in teams:
                    teams[team_id].yellow_card = True

    for team in teams.values():
        store.update_team(team)