"""Shared factories and fixtures for the draft and pipeline test suites."""

import random
import textwrap

import pytest

from src.data_pipeline.cleaning import PlayerPoolCleaner
from src.draft_manager.draft_controller import DraftController
from src.draft_manager.draft_initializer import DraftInitializer
from src.draft_manager.draft_state import Player, Sex
from src.draft_manager.state_persistence import InMemoryPickStore

LEAGUE_ID = "league-1"
COMMISSIONER = "user0"


# ------------------------------------------------------------------
# Lightweight factories – cheap to construct, no I/O
# ------------------------------------------------------------------

def make_players(males=8, females=8, base_rating=90.0):
    """Males m01.., females f01.., ratings descending by index."""
    players = []
    for i in range(1, males + 1):
        players.append(
            Player(f"m{i:02d}", f"Male Pro {i}", Sex.MALE, rating=base_rating - i)
        )
    for i in range(1, females + 1):
        players.append(
            Player(f"f{i:02d}", f"Female Pro {i}", Sex.FEMALE, rating=base_rating - i)
        )
    return players


def make_drafting_league(
    participant_count=4, players=None, config=None, seed=7, store=None
):
    """Store + controller for a league that has just started drafting."""
    if store is None:
        store = InMemoryPickStore(make_players() if players is None else players)
    initializer = DraftInitializer(store, rng=random.Random(seed))
    initializer.create_league(
        "Test League", COMMISSIONER, "Team 0", config=config, league_id=LEAGUE_ID
    )
    for i in range(1, participant_count):
        initializer.join_league(LEAGUE_ID, f"user{i}", f"Team {i}")
    initializer.start_draft(LEAGUE_ID, COMMISSIONER)
    return store, DraftController(store, LEAGUE_ID)


@pytest.fixture
def players():
    return make_players()


@pytest.fixture
def player_factory():
    return make_players


@pytest.fixture
def league_factory():
    return make_drafting_league


@pytest.fixture
def drafting():
    """(store, controller) for a four-participant league in drafting."""
    return make_drafting_league()


# ------------------------------------------------------------------
# Player pool pipeline
# ------------------------------------------------------------------

@pytest.fixture(scope="module")
def cleaner():
    return PlayerPoolCleaner()


@pytest.fixture
def pool_csv(tmp_path):
    """Write ``players_{season}.csv`` into tmp_path; returns the directory."""
    def _write(text, season=2026):
        path = tmp_path / f"players_{season}.csv"
        path.write_text(textwrap.dedent(text).lstrip(), encoding="utf-8")
        return tmp_path
    return _write
