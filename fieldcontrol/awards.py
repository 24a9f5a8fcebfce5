"""Awards and the lower thirds that announce them."""

from __future__ import annotations

from fieldcontrol.records import Award, AwardType, EventStore, LowerThird, Team

_NO_AWARDEE = "(No awardee assigned yet)"


class AwardError(Exception):
    """Raised when an award cannot be created or updated."""


def create_or_update_award(store: EventStore, award: Award, create_intro_lower_third: bool) -> None:
    """Saves the award and its lower thirds, creating or updating as needed."""
    if not award.award_name:
        raise AwardError("Award name cannot be blank.")
    team: Team | None = None
    if award.team_id > 0:
        team = store.get_team_by_id(award.team_id)
        if team is None:
            raise AwardError(f"Team {award.team_id} is not present at this event.")

    if award.id == 0:
        store.create_award(award)
    else:
        store.update_award(award)

    bottom_text = award.person_name
    if team is not None:
        team_text = f"Team {team.id}, {team.nickname}"
        bottom_text = f"{award.person_name} &ndash; {team_text}" if award.person_name else team_text
    intro = LowerThird(top_text=award.award_name, award_id=award.id)
    winner = LowerThird(top_text=award.award_name, bottom_text=bottom_text or _NO_AWARDEE, award_id=award.id)

    existing = store.get_lower_thirds_by_award_id(award.id)
    pending = [intro, winner] if create_intro_lower_third else [winner]
    for index, lower_third in enumerate(pending):
        _save_lower_third(store, lower_third, existing[index] if index < len(existing) else None)


def delete_award(store: EventStore, award_id: int) -> None:
    """Deletes the award and any lower thirds tied to it."""
    store.delete_award(award_id)
    for lower_third in store.get_lower_thirds_by_award_id(award_id):
        store.delete_lower_third(lower_third.id)


def create_or_update_winner_and_finalist_awards(
    store: EventStore, winner_alliance_id: int, finalist_alliance_id: int
) -> None:
    """Replaces the winner and finalist awards with ones for the given alliances."""
    winner_alliance = store.get_alliance_by_id(winner_alliance_id)
    finalist_alliance = store.get_alliance_by_id(finalist_alliance_id)
    if winner_alliance is None or finalist_alliance is None:
        raise AwardError("Winner and/or finalist alliances do not exist.")
    if not winner_alliance.team_ids or not finalist_alliance.team_ids:
        raise AwardError("Winner and/or finalist alliances do not contain teams.")

    # Clear out awards left over from scoring the final match more than once.
    stale = store.get_awards_by_type(AwardType.WINNER) + store.get_awards_by_type(AwardType.FINALIST)
    for award in stale:
        delete_award(store, award.id)

    # Finalists are usually presented first.
    _create_alliance_awards(store, "Finalist", AwardType.FINALIST, finalist_alliance.team_ids)
    _create_alliance_awards(store, "Winner", AwardType.WINNER, winner_alliance.team_ids)


def _create_alliance_awards(store: EventStore, name: str, award_type: AwardType, team_ids: list[int]) -> None:
    for position, team_id in enumerate(team_ids):
        award = Award(type=award_type, award_name=name, team_id=team_id)
        create_or_update_award(store, award, create_intro_lower_third=position == 0)


def _save_lower_third(store: EventStore, lower_third: LowerThird, existing: LowerThird | None) -> None:
    if existing is not None:
        lower_third.id = existing.id
        lower_third.display_order = existing.display_order
        store.update_lower_third(lower_third)
    else:
        lower_third.display_order = store.next_lower_third_display_order()
        store.create_lower_third(lower_third)