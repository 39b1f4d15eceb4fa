"""Roster-composition filtering and pick validation."""

from typing import Dict, List, Sequence

from src.draft_manager.draft_state import LeagueConfig, Player, Sex
from src.draft_manager.errors import (
    PlayerNotAllowedError,
    PlayerUnavailableError,
    ValidationError,
)


__all__ = ["DraftRules", "ValidationError", "filter_available_players"]


def filter_available_players(
    pool: Sequence[Player],
    current_roster: Sequence[Player],
    round_number: int,
    max_per_category: Dict[Sex, int],
    early_rounds_threshold: int = 2,
) -> List[Player]:
    """Narrow the draftable pool by the roster's composition.

    Early rounds: no filtering.
    Later rounds:
      - category A at its cap -> only category B players
      - category B at its cap -> only category A players
      - otherwise the pool unchanged
    Pool order is preserved.
    """
    if round_number <= early_rounds_threshold:
        return list(pool)

    male_count = sum(1 for p in current_roster if p.is_male)
    female_count = sum(1 for p in current_roster if p.is_female)

    if male_count >= max_per_category[Sex.MALE]:
        return [p for p in pool if p.is_female]

    if female_count >= max_per_category[Sex.FEMALE]:
        return [p for p in pool if p.is_male]

    return list(pool)


class DraftRules:
    """Applies a league's composition rules to pools and picks."""

    def __init__(self, league_config: LeagueConfig):
        self.league_config = league_config

    def filter_pool(
        self,
        pool: Sequence[Player],
        current_roster: Sequence[Player],
        round_number: int,
    ) -> List[Player]:
        return filter_available_players(
            pool,
            current_roster,
            round_number,
            self.league_config.max_per_category,
            self.league_config.early_rounds_threshold,
        )

    def validate_pick(
        self,
        player_id: str,
        available_pool: Sequence[Player],
        current_roster: Sequence[Player],
        round_number: int,
    ) -> Player:
        """Check a player against the unfiltered then the filtered pool.

        Returns:
            The matching Player.

        Raises:
            PlayerUnavailableError: player already drafted or not in the pool.
            PlayerNotAllowedError: player breaks the composition filter.
        """
        player = next((p for p in available_pool if p.player_id == player_id), None)
        if player is None:
            raise PlayerUnavailableError(f"Player {player_id} is not available")

        allowed = self.filter_pool(available_pool, current_roster, round_number)
        if not any(p.player_id == player_id for p in allowed):
            raise PlayerNotAllowedError(
                f"{player.name} ({player.sex.value}) does not meet roster "
                f"composition requirements for round {round_number}"
            )

        return player
