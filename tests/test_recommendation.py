"""Tests for the recommendation selector."""

from src.draft_manager.draft_state import Player, Sex
from src.draft_manager.recommendation import recommend


def _player(pid, rating):
    return Player(pid, f"Player {pid}", Sex.MALE, rating=rating)


class TestRecommend:
    def test_highest_rating_wins(self):
        pool = [_player("p1", 70), _player("p2", 95), _player("p3", 80)]
        assert recommend(pool).player_id == "p2"

    def test_tie_goes_to_first_in_order(self):
        pool = [_player("p1", 90), _player("p2", 90)]
        for _ in range(5):
            assert recommend(pool).player_id == "p1"

    def test_tie_respects_input_order_not_id(self):
        pool = [_player("p2", 90), _player("p1", 90)]
        assert recommend(pool).player_id == "p2"

    def test_missing_rating_counts_as_zero(self):
        pool = [_player("p1", None), _player("p2", 0.5)]
        assert recommend(pool).player_id == "p2"

    def test_all_unrated_picks_first(self):
        pool = [_player("p1", None), _player("p2", None)]
        assert recommend(pool).player_id == "p1"

    def test_empty_pool_returns_none(self):
        assert recommend([]) is None
