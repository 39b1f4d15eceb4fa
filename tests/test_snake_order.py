"""Tests for snake draft order arithmetic."""

import pytest

from src.draft_manager.snake_order import PickSlot, SnakeDraftOrder


# ── Position for pick ────────────────────────────────────────────────


class TestPositionForPick:
    def test_first_pick(self):
        slot = SnakeDraftOrder.position_for_pick(1, 6)
        assert slot == PickSlot(
            pick_number=1, round=1, position_in_round=1, draft_position=1
        )

    def test_first_pick_of_round_two_reverses(self):
        slot = SnakeDraftOrder.position_for_pick(7, 6)
        assert slot.round == 2
        assert slot.position_in_round == 1
        assert slot.draft_position == 6

    def test_last_pick_of_round_two(self):
        slot = SnakeDraftOrder.position_for_pick(12, 6)
        assert slot.round == 2
        assert slot.draft_position == 1

    def test_round_three_runs_forward_again(self):
        slot = SnakeDraftOrder.position_for_pick(13, 6)
        assert slot.round == 3
        assert slot.draft_position == 1

    def test_last_pick_of_round_one_is_last_position(self):
        assert SnakeDraftOrder.position_for_pick(6, 6).draft_position == 6

    def test_single_participant_is_always_position_one(self):
        for pick in range(1, 6):
            slot = SnakeDraftOrder.position_for_pick(pick, 1)
            assert slot.draft_position == 1
            assert slot.round == pick

    def test_rejects_zero_participants(self):
        with pytest.raises(ValueError):
            SnakeDraftOrder.position_for_pick(1, 0)

    def test_rejects_zero_pick(self):
        with pytest.raises(ValueError):
            SnakeDraftOrder.position_for_pick(0, 6)


# ── Properties over the whole range ──────────────────────────────────


class TestSnakeProperties:
    def test_every_round_position_pair_visited_once(self):
        for participants in range(2, 21):
            for rounds in range(1, 11):
                order = SnakeDraftOrder.pick_order(participants, rounds)
                pairs = [(s.round, s.draft_position) for s in order]
                expected = {
                    (r, p)
                    for r in range(1, rounds + 1)
                    for p in range(1, participants + 1)
                }
                assert len(pairs) == len(set(pairs)) == len(expected)
                assert set(pairs) == expected

    def test_direction_alternates_by_round(self):
        for participants in range(2, 21):
            order = SnakeDraftOrder.pick_order(participants, 10)
            for round_number in range(1, 11):
                positions = [s.draft_position for s in order if s.round == round_number]
                pairs = list(zip(positions, positions[1:]))
                if round_number % 2 == 1:
                    assert all(a < b for a, b in pairs)
                else:
                    assert all(a > b for a, b in pairs)

    def test_inverse_returns_same_pick(self):
        for participants in range(2, 21):
            for rounds in range(1, 11):
                for pick in range(1, participants * rounds + 1):
                    slot = SnakeDraftOrder.position_for_pick(pick, participants)
                    found = SnakeDraftOrder.next_pick_for_position(
                        slot.draft_position, participants, pick, rounds
                    )
                    assert found == pick


# ── Next pick for position ───────────────────────────────────────────


class TestNextPickForPosition:
    def test_finds_next_turn_after_current(self):
        # 6 teams: position 1 picks at 1, 12, 13, 24
        assert SnakeDraftOrder.next_pick_for_position(1, 6, 2, 4) == 12
        assert SnakeDraftOrder.next_pick_for_position(1, 6, 13, 4) == 13
        assert SnakeDraftOrder.next_pick_for_position(1, 6, 14, 4) == 24

    def test_returns_none_after_last_turn(self):
        assert SnakeDraftOrder.next_pick_for_position(1, 6, 25, 4) is None
        assert SnakeDraftOrder.next_pick_for_position(6, 6, 20, 4) is None

    def test_unknown_position_returns_none(self):
        assert SnakeDraftOrder.next_pick_for_position(7, 6, 1, 4) is None


# ── Pick order / upcoming picks ──────────────────────────────────────


class TestPickOrder:
    def test_length(self):
        assert len(SnakeDraftOrder.pick_order(6, 4)) == 24

    def test_pick_numbers_sequential(self):
        order = SnakeDraftOrder.pick_order(5, 3)
        assert [s.pick_number for s in order] == list(range(1, 16))

    def test_upcoming_picks_for_middle_position(self):
        upcoming = SnakeDraftOrder.upcoming_picks(3, 6, 1, 4)
        assert [(s.round, s.pick_number) for s in upcoming] == [
            (1, 3), (2, 10), (3, 15), (4, 22),
        ]

    def test_upcoming_picks_skip_past_slots(self):
        upcoming = SnakeDraftOrder.upcoming_picks(3, 6, 11, 4)
        assert [s.pick_number for s in upcoming] == [15, 22]
