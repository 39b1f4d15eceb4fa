"""Snake draft pick-order arithmetic.

Round 1 runs draft position 1 -> N, round 2 runs N -> 1, and so on.
"""

from typing import List, NamedTuple, Optional


class PickSlot(NamedTuple):
    """Where an overall pick number lands in the draft."""

    pick_number: int
    round: int
    position_in_round: int
    draft_position: int


class SnakeDraftOrder:
    """Stateless snake-order calculator."""

    @staticmethod
    def position_for_pick(pick_number: int, participant_count: int) -> PickSlot:
        """Map a 1-based overall pick number to its round and draft position.

        Examples (6 participants):
            pick 1  -> round 1, draft position 1
            pick 7  -> round 2, draft position 6
            pick 12 -> round 2, draft position 1
        """
        if participant_count < 1:
            raise ValueError(
                f"participant_count must be at least 1 (got {participant_count})"
            )
        if pick_number < 1:
            raise ValueError(f"pick_number must be at least 1 (got {pick_number})")

        round_number = (pick_number - 1) // participant_count + 1
        position_in_round = (pick_number - 1) % participant_count + 1

        if round_number % 2 == 1:  # Odd rounds: 1 -> N
            draft_position = position_in_round
        else:  # Even rounds: N -> 1
            draft_position = participant_count - position_in_round + 1

        return PickSlot(pick_number, round_number, position_in_round, draft_position)

    @staticmethod
    def next_pick_for_position(
        draft_position: int,
        participant_count: int,
        start_pick: int,
        total_rounds: int,
    ) -> Optional[int]:
        """Find the first pick >= start_pick at which draft_position is on the clock.

        Returns None if the position has no pick left in the draft.
        """
        total_picks = participant_count * total_rounds

        for pick in range(max(start_pick, 1), total_picks + 1):
            slot = SnakeDraftOrder.position_for_pick(pick, participant_count)
            if slot.draft_position == draft_position:
                return pick

        return None

    @staticmethod
    def pick_order(participant_count: int, total_rounds: int) -> List[PickSlot]:
        """Full pick table for the draft, in pick order."""
        return [
            SnakeDraftOrder.position_for_pick(pick, participant_count)
            for pick in range(1, participant_count * total_rounds + 1)
        ]

    @staticmethod
    def upcoming_picks(
        draft_position: int,
        participant_count: int,
        current_pick: int,
        total_rounds: int,
    ) -> List[PickSlot]:
        """All remaining slots (from current_pick on) for one draft position."""
        return [
            slot
            for slot in SnakeDraftOrder.pick_order(participant_count, total_rounds)
            if slot.pick_number >= current_pick
            and slot.draft_position == draft_position
        ]
