"""Draft data models - the pick sequence is the single source of truth.

Rosters and "who is on the clock" are derived from the ordered list of
DraftPick records held by a DraftSession snapshot.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Iterable, List, Optional, Set

from src.draft_manager.config import (
    DEFAULT_AUTO_PICK_ENABLED,
    DEFAULT_EARLY_ROUNDS_THRESHOLD,
    DEFAULT_MAX_PARTICIPANTS,
    DEFAULT_MAX_PER_CATEGORY,
    DEFAULT_SECONDS_PER_PICK,
    DEFAULT_TOTAL_ROUNDS,
    MAX_PARTICIPANTS,
    MAX_RATING,
    MAX_ROUNDS,
    MIN_PARTICIPANTS,
    MIN_RATING,
    MIN_ROUNDS,
)
from src.draft_manager.errors import (
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from src.draft_manager.snake_order import PickSlot, SnakeDraftOrder


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class Sex(str, Enum):
    """The two roster-composition categories."""

    MALE = "male"
    FEMALE = "female"

    @classmethod
    def parse(cls, value) -> "Sex":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown sex tag: {value!r}") from None


@dataclass(frozen=True)
class Player:
    """A draftable player. Only rating and active flag change between seasons."""

    player_id: str
    name: str
    sex: Sex
    rating: Optional[float] = None
    active: bool = True

    def __post_init__(self):
        if not self.player_id:
            raise ValidationError("player_id is required")
        if not self.name or not str(self.name).strip():
            raise ValidationError(f"Player {self.player_id} has no name")
        object.__setattr__(self, "sex", Sex.parse(self.sex))

        if self.rating is not None:
            try:
                rating = float(self.rating)
            except (TypeError, ValueError):
                raise ValidationError(
                    f"Player {self.player_id} has non-numeric rating {self.rating!r}"
                ) from None
            if not MIN_RATING <= rating <= MAX_RATING:
                raise ValidationError(
                    f"Player {self.player_id} rating {rating} outside "
                    f"[{MIN_RATING}, {MAX_RATING}]"
                )
            object.__setattr__(self, "rating", rating)

    @property
    def effective_rating(self) -> float:
        """Rating used for recommendations (missing counts as 0)."""
        return self.rating if self.rating is not None else 0.0

    @property
    def is_male(self) -> bool:
        return self.sex is Sex.MALE

    @property
    def is_female(self) -> bool:
        return self.sex is Sex.FEMALE

    def with_season_update(
        self, rating: Optional[float] = None, active: Optional[bool] = None
    ) -> "Player":
        """Return a copy with an updated rating and/or active flag."""
        changes = {}
        if rating is not None:
            changes["rating"] = rating
        if active is not None:
            changes["active"] = active
        return replace(self, **changes)


@dataclass(frozen=True)
class Participant:
    """A user's seat in a league."""

    participant_id: str
    user_id: str
    display_name: str
    draft_position: Optional[int] = None
    paid: bool = False

    def __post_init__(self):
        if not self.participant_id or not self.user_id:
            raise ValidationError("participant_id and user_id are required")
        if not self.display_name or not self.display_name.strip():
            raise ValidationError(
                f"Participant {self.participant_id} has no display name"
            )
        if self.draft_position is not None and self.draft_position < 1:
            raise ValidationError(
                f"Draft position must be >= 1 (got {self.draft_position})"
            )

    def with_draft_position(self, draft_position: int) -> "Participant":
        return replace(self, draft_position=draft_position)


@dataclass(frozen=True)
class DraftPick:
    """An immutable, append-only pick record."""

    league_id: str
    participant_id: str
    player_id: str
    round: int
    pick_number: int
    auto_picked: bool
    timestamp: str

    def __post_init__(self):
        if self.round < 1:
            raise ValidationError(f"round must be >= 1 (got {self.round})")
        if self.pick_number < 1:
            raise ValidationError(
                f"pick_number must be >= 1 (got {self.pick_number})"
            )

    @classmethod
    def create(
        cls,
        league_id: str,
        participant_id: str,
        player_id: str,
        round: int,
        pick_number: int,
        auto_picked: bool = False,
        now: Optional[datetime] = None,
    ) -> "DraftPick":
        timestamp = (now or datetime.now(timezone.utc)).isoformat()
        return cls(
            league_id=league_id,
            participant_id=participant_id,
            player_id=player_id,
            round=round,
            pick_number=pick_number,
            auto_picked=auto_picked,
            timestamp=timestamp,
        )

    @property
    def picked_at(self) -> datetime:
        return datetime.fromisoformat(self.timestamp)


def _default_category_caps() -> Dict[Sex, int]:
    return {Sex.parse(k): v for k, v in DEFAULT_MAX_PER_CATEGORY.items()}


@dataclass
class LeagueConfig:
    """Draft and roster-composition settings for a league."""

    total_rounds: int = DEFAULT_TOTAL_ROUNDS
    early_rounds_threshold: int = DEFAULT_EARLY_ROUNDS_THRESHOLD
    max_per_category: Dict[Sex, int] = field(default_factory=_default_category_caps)
    seconds_per_pick: int = DEFAULT_SECONDS_PER_PICK
    auto_pick_enabled: bool = DEFAULT_AUTO_PICK_ENABLED
    min_participants: int = MIN_PARTICIPANTS

    def __post_init__(self):
        self.max_per_category = {
            Sex.parse(k): int(v) for k, v in self.max_per_category.items()
        }
        missing = set(Sex) - set(self.max_per_category)
        if missing:
            raise ValidationError(
                f"max_per_category missing categories: "
                f"{sorted(s.value for s in missing)}"
            )
        if any(cap < 0 for cap in self.max_per_category.values()):
            raise ValidationError("Category caps cannot be negative")

        if not MIN_ROUNDS <= self.total_rounds <= MAX_ROUNDS:
            raise ValidationError(
                f"total_rounds must be between {MIN_ROUNDS} and {MAX_ROUNDS} "
                f"(got {self.total_rounds})"
            )
        if self.early_rounds_threshold < 0:
            raise ValidationError("early_rounds_threshold cannot be negative")
        if self.early_rounds_threshold > min(self.max_per_category.values()):
            raise ValidationError(
                f"early_rounds_threshold ({self.early_rounds_threshold}) cannot "
                f"exceed the smallest category cap"
            )
        if sum(self.max_per_category.values()) != self.total_rounds:
            raise ValidationError(
                f"Category caps ({sum(self.max_per_category.values())}) must add "
                f"up to the {self.total_rounds} rounds"
            )
        if self.seconds_per_pick <= 0:
            raise ValidationError("seconds_per_pick must be positive")
        if not MIN_PARTICIPANTS <= self.min_participants <= MAX_PARTICIPANTS:
            raise ValidationError(
                f"min_participants must be between {MIN_PARTICIPANTS} and "
                f"{MAX_PARTICIPANTS}"
            )

    def total_picks(self, participant_count: int) -> int:
        return participant_count * self.total_rounds

    def get_category_cap(self, sex: Sex) -> int:
        return self.max_per_category[Sex.parse(sex)]


class LeagueStatus(str, Enum):
    SETUP = "setup"
    DRAFTING = "drafting"
    ACTIVE = "active"
    COMPLETE = "complete"


VALID_TRANSITIONS: Dict[LeagueStatus, Set[LeagueStatus]] = {
    LeagueStatus.SETUP: {LeagueStatus.DRAFTING},
    LeagueStatus.DRAFTING: {LeagueStatus.ACTIVE},
    LeagueStatus.ACTIVE: {LeagueStatus.COMPLETE},
    LeagueStatus.COMPLETE: set(),
}


@dataclass
class League:
    """A league owns one draft and its composition settings."""

    league_id: str
    name: str
    commissioner_id: str
    config: LeagueConfig = field(default_factory=LeagueConfig)
    status: LeagueStatus = LeagueStatus.SETUP
    max_participants: int = DEFAULT_MAX_PARTICIPANTS
    draft_started_at: Optional[str] = None
    created_at: str = field(default_factory=utc_now)

    def __post_init__(self):
        if not self.league_id:
            raise ValidationError("league_id is required")
        if not self.name or not self.name.strip():
            raise ValidationError("League name is required")
        if not MIN_PARTICIPANTS <= self.max_participants <= MAX_PARTICIPANTS:
            raise ValidationError(
                f"max_participants must be between {MIN_PARTICIPANTS} and "
                f"{MAX_PARTICIPANTS} (got {self.max_participants})"
            )
        self.status = LeagueStatus(self.status)

    @property
    def is_setup(self) -> bool:
        return self.status is LeagueStatus.SETUP

    @property
    def is_drafting(self) -> bool:
        return self.status is LeagueStatus.DRAFTING

    @property
    def is_active(self) -> bool:
        return self.status is LeagueStatus.ACTIVE

    @property
    def is_complete(self) -> bool:
        return self.status is LeagueStatus.COMPLETE

    def is_commissioner(self, user_id: str) -> bool:
        return self.commissioner_id == user_id

    def can_transition_to(self, new_status: LeagueStatus) -> bool:
        return LeagueStatus(new_status) in VALID_TRANSITIONS[self.status]

    def transition_to(self, new_status: LeagueStatus):
        """Move to new_status, raising InvalidStateError if not allowed."""
        new_status = LeagueStatus(new_status)
        if not self.can_transition_to(new_status):
            raise InvalidStateError(
                f"League {self.league_id} cannot move from "
                f"{self.status.value} to {new_status.value}"
            )
        self.status = new_status


@dataclass
class Roster:
    """A participant's players in pick order. Derived from the pick sequence."""

    participant_id: str
    players: List[Player] = field(default_factory=list)

    def __post_init__(self):
        ids = [p.player_id for p in self.players]
        if len(ids) != len(set(ids)):
            raise ValidationError(
                f"Roster for {self.participant_id} contains duplicate players"
            )

    @classmethod
    def from_picks(
        cls,
        participant_id: str,
        picks: Iterable[DraftPick],
        players_by_id: Dict[str, Player],
    ) -> "Roster":
        roster = cls(participant_id=participant_id)
        for pick in picks:
            if pick.participant_id != participant_id:
                continue
            player = players_by_id.get(pick.player_id)
            if player is None:
                raise NotFoundError("Player", pick.player_id)
            roster.add_player(player)
        return roster

    def __len__(self) -> int:
        return len(self.players)

    @property
    def player_ids(self) -> List[str]:
        return [p.player_id for p in self.players]

    def has_player(self, player_id: str) -> bool:
        return player_id in self.player_ids

    def add_player(self, player: Player):
        if self.has_player(player.player_id):
            raise ValidationError(
                f"{player.name} is already on roster {self.participant_id}"
            )
        self.players.append(player)

    def count(self, sex: Sex) -> int:
        sex = Sex.parse(sex)
        return sum(1 for p in self.players if p.sex is sex)

    def category_counts(self) -> Dict[Sex, int]:
        return {sex: self.count(sex) for sex in Sex}


class DraftStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"


@dataclass
class DraftSession:
    """In-memory snapshot of one league's draft.

    Everything here is computed from ``picks``; nothing is stored twice.
    """

    league: League
    participants: List[Participant]
    picks: List[DraftPick] = field(default_factory=list)

    def __post_init__(self):
        self._check_pick_sequence()
        self._check_draft_positions()

    def _check_pick_sequence(self):
        numbers = [pick.pick_number for pick in self.picks]
        if numbers != list(range(1, len(numbers) + 1)):
            raise InvalidStateError(
                f"Pick sequence for league {self.league.league_id} has gaps "
                f"or duplicates: {numbers}"
            )
        drafted = [pick.player_id for pick in self.picks]
        if len(drafted) != len(set(drafted)):
            raise InvalidStateError(
                f"Pick sequence for league {self.league.league_id} drafts "
                f"a player twice"
            )

    def _check_draft_positions(self):
        positions = [
            p.draft_position for p in self.participants if p.draft_position is not None
        ]
        if not positions:
            return
        expected = list(range(1, len(self.participants) + 1))
        if len(positions) != len(self.participants) or sorted(positions) != expected:
            raise ValidationError(
                f"Draft positions must be a permutation of 1..{len(self.participants)} "
                f"(got {sorted(positions)})"
            )

    @property
    def league_id(self) -> str:
        return self.league.league_id

    @property
    def config(self) -> LeagueConfig:
        return self.league.config

    @property
    def participant_count(self) -> int:
        return len(self.participants)

    @property
    def total_rounds(self) -> int:
        return self.config.total_rounds

    @property
    def total_picks(self) -> int:
        return self.config.total_picks(self.participant_count)

    @property
    def current_pick_number(self) -> int:
        return len(self.picks) + 1

    @property
    def is_complete(self) -> bool:
        return self.participant_count > 0 and len(self.picks) >= self.total_picks

    @property
    def positions_assigned(self) -> bool:
        return bool(self.participants) and all(
            p.draft_position is not None for p in self.participants
        )

    @property
    def status(self) -> DraftStatus:
        if self.league.is_setup or not self.positions_assigned:
            return DraftStatus.NOT_STARTED
        if self.is_complete or not self.league.is_drafting:
            return DraftStatus.COMPLETE
        return DraftStatus.IN_PROGRESS

    def current_slot(self) -> Optional[PickSlot]:
        """Snake slot for the next pick, or None once the draft is complete."""
        if self.is_complete or not self.participants:
            return None
        return SnakeDraftOrder.position_for_pick(
            self.current_pick_number, self.participant_count
        )

    @property
    def current_round(self) -> int:
        slot = self.current_slot()
        return slot.round if slot else self.total_rounds

    def on_the_clock(self) -> Optional[Participant]:
        """Participant whose turn it is, or None if nobody is on the clock."""
        if not self.positions_assigned:
            return None
        slot = self.current_slot()
        if slot is None:
            return None
        return self.participant_at_position(slot.draft_position)

    def participant_at_position(self, draft_position: int) -> Participant:
        for p in self.participants:
            if p.draft_position == draft_position:
                return p
        raise NotFoundError("Draft position", str(draft_position))

    def get_participant(self, participant_id: str) -> Participant:
        for p in self.participants:
            if p.participant_id == participant_id:
                return p
        raise NotFoundError("Participant", participant_id)

    def drafted_player_ids(self) -> Set[str]:
        return {pick.player_id for pick in self.picks}

    def picks_for(self, participant_id: str) -> List[DraftPick]:
        return [p for p in self.picks if p.participant_id == participant_id]

    @property
    def last_pick(self) -> Optional[DraftPick]:
        return self.picks[-1] if self.picks else None

    def with_pick(self, pick: DraftPick) -> "DraftSession":
        """New snapshot with one more pick appended."""
        return DraftSession(
            league=self.league,
            participants=list(self.participants),
            picks=[*self.picks, pick],
        )
