"""Roster composition checks."""

from typing import Dict, List, Tuple

from src.draft_manager.draft_state import LeagueConfig, Roster, Sex


class RosterValidator:
    """Validates roster composition against a league's category caps."""

    def __init__(self, league_config: LeagueConfig):
        self.league_config = league_config

    def remaining_needs(self, roster: Roster) -> Dict[Sex, int]:
        """How many more players of each category the roster may still take."""
        return {
            sex: max(0, cap - roster.count(sex))
            for sex, cap in self.league_config.max_per_category.items()
        }

    def within_caps(self, roster: Roster) -> bool:
        return all(
            roster.count(sex) <= cap
            for sex, cap in self.league_config.max_per_category.items()
        )

    def validate_final_roster(self, roster: Roster) -> Tuple[bool, List[str]]:
        """
        Validate that a completed roster meets all requirements.

        A completed roster holds exactly ``total_rounds`` players with every
        category filled to its cap. With the default settings (4 rounds, caps
        2 + 2) that is exactly two of each.

        Returns:
            (is_valid, list_of_errors)
        """
        errors = []

        for sex, cap in self.league_config.max_per_category.items():
            actual = roster.count(sex)
            if actual > cap:
                errors.append(
                    f"Too many {sex.value} players (have {actual}, max {cap})"
                )
            elif actual < cap:
                errors.append(
                    f"Too few {sex.value} players (have {actual}, need {cap})"
                )

        expected_size = self.league_config.total_rounds
        if len(roster) != expected_size:
            errors.append(
                f"Roster has {len(roster)} players, expected {expected_size}"
            )

        return (len(errors) == 0, errors)

    def get_roster_summary(self, roster: Roster) -> Dict[str, Dict]:
        """Generate summary of a roster's composition."""
        summary = {}

        for sex, cap in self.league_config.max_per_category.items():
            filled = roster.count(sex)
            summary[sex.value] = {
                "filled": filled,
                "max": cap,
                "remaining": max(0, cap - filled),
            }

        return summary
