"""Draft pick recommendation."""

from typing import Optional, Sequence

from src.draft_manager.draft_state import Player


def recommend(filtered_pool: Sequence[Player]) -> Optional[Player]:
    """Highest-rated player in the pool, or None if the pool is empty.

    Missing ratings count as 0. Ties go to the earliest player in the
    input order, so callers should pass a deterministically ordered pool.
    """
    best = None
    for player in filtered_pool:
        if best is None or player.effective_rating > best.effective_rating:
            best = player
    return best
