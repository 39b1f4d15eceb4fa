from src.draft_manager.draft_controller import (
    ClockState,
    DraftController,
    DraftOptions,
    participant_owner_authorizer,
)
from src.draft_manager.draft_initializer import DraftInitializer
from src.draft_manager.draft_rules import DraftRules, filter_available_players
from src.draft_manager.draft_state import (
    DraftPick,
    DraftSession,
    DraftStatus,
    League,
    LeagueConfig,
    LeagueStatus,
    Participant,
    Player,
    Roster,
    Sex,
)
from src.draft_manager.errors import (
    ConflictError,
    DraftError,
    InvalidStateError,
    NoLegalPicksError,
    NotFoundError,
    NotYourTurnError,
    PlayerNotAllowedError,
    PlayerUnavailableError,
    UnauthorizedError,
    ValidationError,
)
from src.draft_manager.recommendation import recommend
from src.draft_manager.roster_validator import RosterValidator
from src.draft_manager.snake_order import PickSlot, SnakeDraftOrder
from src.draft_manager.state_persistence import (
    InMemoryPickStore,
    JsonPickStore,
    PickStore,
)

__all__ = [
    "ClockState",
    "ConflictError",
    "DraftController",
    "DraftError",
    "DraftInitializer",
    "DraftOptions",
    "DraftPick",
    "DraftRules",
    "DraftSession",
    "DraftStatus",
    "InMemoryPickStore",
    "InvalidStateError",
    "JsonPickStore",
    "League",
    "LeagueConfig",
    "LeagueStatus",
    "NoLegalPicksError",
    "NotFoundError",
    "NotYourTurnError",
    "Participant",
    "PickSlot",
    "PickStore",
    "Player",
    "PlayerNotAllowedError",
    "PlayerUnavailableError",
    "Roster",
    "RosterValidator",
    "Sex",
    "SnakeDraftOrder",
    "UnauthorizedError",
    "ValidationError",
    "filter_available_players",
    "participant_owner_authorizer",
    "recommend",
]
