"""Tests for roster-composition filtering and pick validation."""

import pytest

from src.draft_manager.draft_rules import DraftRules, filter_available_players
from src.draft_manager.draft_state import LeagueConfig, Player, Sex
from src.draft_manager.errors import (
    PlayerNotAllowedError,
    PlayerUnavailableError,
    ValidationError,
)


# ── Helpers ──────────────────────────────────────────────────────────

CAPS = {Sex.MALE: 2, Sex.FEMALE: 2}


def _male(n, rating=80.0):
    return Player(f"m{n}", f"Male {n}", Sex.MALE, rating=rating)


def _female(n, rating=80.0):
    return Player(f"f{n}", f"Female {n}", Sex.FEMALE, rating=rating)


def _pool():
    return [_male(1), _female(1), _male(2), _female(2), _male(3), _female(3)]


def _ids(players):
    return [p.player_id for p in players]


# ── Filter ───────────────────────────────────────────────────────────


class TestFilterAvailablePlayers:
    def test_early_rounds_unfiltered(self):
        roster = [_male(8), _male(9)]
        for round_number in (1, 2):
            result = filter_available_players(_pool(), roster, round_number, CAPS)
            assert _ids(result) == _ids(_pool())

    def test_male_cap_reached_only_females(self):
        roster = [_male(8), _male(9)]
        result = filter_available_players(_pool(), roster, 3, CAPS)
        assert _ids(result) == ["f1", "f2", "f3"]

    def test_female_cap_reached_only_males(self):
        roster = [_female(8), _female(9)]
        result = filter_available_players(_pool(), roster, 3, CAPS)
        assert _ids(result) == ["m1", "m2", "m3"]

    def test_balanced_roster_unfiltered(self):
        roster = [_male(8), _female(8)]
        result = filter_available_players(_pool(), roster, 3, CAPS)
        assert _ids(result) == _ids(_pool())

    def test_male_cap_with_no_females_in_pool_is_empty(self):
        roster = [_male(8), _male(9)]
        pool = [_male(1), _male(2)]
        assert filter_available_players(pool, roster, 3, CAPS) == []

    def test_threshold_is_configurable(self):
        roster = [_male(8)]
        caps = {Sex.MALE: 1, Sex.FEMALE: 3}
        result = filter_available_players(_pool(), roster, 1, caps, early_rounds_threshold=0)
        assert _ids(result) == ["f1", "f2", "f3"]

    def test_idempotent(self):
        for roster in ([], [_male(8), _male(9)], [_female(8), _female(9)], [_male(8)]):
            for round_number in range(1, 5):
                once = filter_available_players(_pool(), roster, round_number, CAPS)
                twice = filter_available_players(once, roster, round_number, CAPS)
                assert _ids(once) == _ids(twice)

    def test_does_not_mutate_pool(self):
        pool = _pool()
        filter_available_players(pool, [_male(8), _male(9)], 3, CAPS)
        assert _ids(pool) == _ids(_pool())


# ── DraftRules wrapper ───────────────────────────────────────────────


class TestDraftRules:
    def test_uses_league_caps(self):
        rules = DraftRules(LeagueConfig())
        result = rules.filter_pool(_pool(), [_male(8), _male(9)], 3)
        assert _ids(result) == ["f1", "f2", "f3"]

    def test_validate_returns_player(self):
        rules = DraftRules(LeagueConfig())
        player = rules.validate_pick("f2", _pool(), [], 1)
        assert player.player_id == "f2"

    def test_validate_unavailable(self):
        rules = DraftRules(LeagueConfig())
        with pytest.raises(PlayerUnavailableError):
            rules.validate_pick("m9", _pool(), [], 1)

    def test_validate_not_allowed(self):
        rules = DraftRules(LeagueConfig())
        with pytest.raises(PlayerNotAllowedError, match="composition"):
            rules.validate_pick("m1", _pool(), [_male(8), _male(9)], 3)

    def test_errors_are_validation_errors(self):
        assert issubclass(PlayerUnavailableError, ValidationError)
        assert issubclass(PlayerNotAllowedError, ValidationError)
