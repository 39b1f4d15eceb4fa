"""Draft controller - turn order, pick validation and commit.

All checks run against an in-memory DraftSession snapshot. The only
mutation is ``PickStore.append_pick``, which is conditioned on the pick
count seen at validation time, so two racing commits for the same turn
cannot both land.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

from src.draft_manager.draft_rules import DraftRules
from src.draft_manager.draft_state import (
    DraftPick,
    DraftSession,
    DraftStatus,
    Participant,
    Player,
    Roster,
)
from src.draft_manager.errors import (
    ConflictError,
    InvalidStateError,
    NoLegalPicksError,
    NotYourTurnError,
    UnauthorizedError,
    ValidationError,
)
from src.draft_manager.recommendation import recommend
from src.draft_manager.roster_validator import RosterValidator
from src.draft_manager.snake_order import PickSlot, SnakeDraftOrder
from src.draft_manager.state_persistence import PickStore

logger = logging.getLogger(__name__)

# (acting_user_id, participant) -> may this user pick for this participant?
Authorizer = Callable[[str, Participant], bool]


def participant_owner_authorizer(acting_user_id: str, participant: Participant) -> bool:
    """Default authorization: only the participant's own user may pick."""
    return participant.user_id == acting_user_id


@dataclass(frozen=True)
class DraftOptions:
    available_pool: List[Player]
    filtered_pool: List[Player]
    recommendation: Optional[Player]
    current_round: int


@dataclass(frozen=True)
class ClockState:
    """Derived "on the clock" view of a draft."""

    league_id: str
    status: DraftStatus
    current_pick: int
    current_round: int
    participant_id: Optional[str]
    is_complete: bool


class DraftController:
    """Main controller for draft orchestration.

    Coordinates between SnakeDraftOrder (turn order), DraftRules
    (composition filter), the recommendation selector, and the injected
    PickStore (commits).
    """

    def __init__(
        self,
        store: PickStore,
        league_id: str,
        authorizer: Optional[Authorizer] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.league_id = league_id
        self.authorizer = authorizer or participant_owner_authorizer
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------
    def load_session(self) -> DraftSession:
        return self.store.load_session(self.league_id)

    def get_draft_state(self) -> ClockState:
        """Who is on the clock, computed from the pick count."""
        session = self.load_session()
        on_clock = session.on_the_clock()
        return ClockState(
            league_id=self.league_id,
            status=session.status,
            current_pick=min(session.current_pick_number, max(session.total_picks, 1)),
            current_round=session.current_round,
            participant_id=on_clock.participant_id if on_clock else None,
            is_complete=session.is_complete,
        )

    @property
    def is_complete(self) -> bool:
        return self.load_session().is_complete

    # ------------------------------------------------------------------
    # Options
    # ------------------------------------------------------------------
    def request_options(self, participant_id: str) -> DraftOptions:
        """Available pool, filtered pool and recommendation for a participant.

        Any participant may ask; the filter is applied to the asking
        participant's roster at the current round. No side effects.
        """
        return self._options_for(self.load_session(), participant_id)

    def _options_for(self, session: DraftSession, participant_id: str) -> DraftOptions:
        session.get_participant(participant_id)

        if session.is_complete:
            return DraftOptions(
                available_pool=[],
                filtered_pool=[],
                recommendation=None,
                current_round=session.current_round,
            )

        available = self.store.list_available_players(session.drafted_player_ids())
        roster = self._roster_for(session, participant_id)
        rules = DraftRules(session.config)
        filtered = rules.filter_pool(available, roster.players, session.current_round)

        return DraftOptions(
            available_pool=available,
            filtered_pool=filtered,
            recommendation=recommend(filtered),
            current_round=session.current_round,
        )

    # ------------------------------------------------------------------
    # Picks
    # ------------------------------------------------------------------
    def make_pick(
        self, participant_id: str, player_id: str, acting_user_id: str
    ) -> DraftPick:
        """Validate and commit a manual pick.

        Raises:
            InvalidStateError: league not drafting, or draft complete.
            NotYourTurnError: participant is not on the clock.
            UnauthorizedError: acting user may not pick for the participant.
            PlayerUnavailableError: player already drafted or unknown.
            PlayerNotAllowedError: player breaks the composition filter.
            ConflictError: another commit took this turn first.
        """
        session = self.load_session()
        self._require_in_progress(session)

        on_clock = session.on_the_clock()
        if on_clock is None or on_clock.participant_id != participant_id:
            current = on_clock.participant_id if on_clock else None
            logger.warning(
                "Pick %d: participant %s tried to pick out of turn (on clock: %s)",
                session.current_pick_number,
                participant_id,
                current,
            )
            raise NotYourTurnError(
                f"Not participant {participant_id}'s turn (current: {current})"
            )

        if not self.authorizer(acting_user_id, on_clock):
            logger.warning(
                "User %s is not allowed to pick for participant %s",
                acting_user_id,
                participant_id,
            )
            raise UnauthorizedError(
                f"User {acting_user_id} cannot pick for participant {participant_id}"
            )

        available = self.store.list_available_players(session.drafted_player_ids())
        roster = self._roster_for(session, participant_id)
        rules = DraftRules(session.config)
        try:
            player = rules.validate_pick(
                player_id, available, roster.players, session.current_round
            )
        except ValidationError as e:
            logger.warning("Invalid pick attempted: %s", e)
            raise

        return self._commit(session, on_clock, player, auto_picked=False)

    def auto_pick(
        self,
        triggered_by_timeout: bool = True,
        expected_pick_number: Optional[int] = None,
    ) -> DraftPick:
        """Commit the recommended player for whoever is on the clock.

        Skips the turn and authorization checks; the caller runs this only
        once the pick clock has expired. When ``expected_pick_number`` is
        given, the auto-pick only fills that pick; if the draft has moved
        past it the call fails instead of taking the next turn.

        Raises:
            InvalidStateError: league not drafting, or draft complete.
            NoLegalPicksError: the filtered pool is empty.
            ConflictError: another commit took this turn first.
        """
        if not triggered_by_timeout:
            raise InvalidStateError("Auto-pick only runs when the pick clock expires")

        session = self.load_session()

        if (
            expected_pick_number is not None
            and session.current_pick_number != expected_pick_number
        ):
            logger.warning(
                "Auto-pick for pick %d in league %s skipped: draft is at pick %d",
                expected_pick_number,
                self.league_id,
                session.current_pick_number,
            )
            raise ConflictError(
                f"Pick {expected_pick_number} was already made "
                f"(draft is at pick {session.current_pick_number})"
            )
        self._require_in_progress(session)

        on_clock = session.on_the_clock()
        options = self._options_for(session, on_clock.participant_id)

        if options.recommendation is None:
            logger.error(
                "No legal picks for participant %s at pick %d (round %d): "
                "%d available, 0 allowed",
                on_clock.participant_id,
                session.current_pick_number,
                options.current_round,
                len(options.available_pool),
            )
            raise NoLegalPicksError(
                f"No legal picks remain for participant {on_clock.participant_id} "
                f"at pick {session.current_pick_number}"
            )

        return self._commit(session, on_clock, options.recommendation, auto_picked=True)

    def submit_pick(
        self, participant_id: str, player_id: str, acting_user_id: str
    ) -> DraftPick:
        """make_pick, re-validated and retried once if the commit race is lost."""
        try:
            return self.make_pick(participant_id, player_id, acting_user_id)
        except ConflictError:
            logger.warning(
                "Commit conflict for participant %s, re-validating once",
                participant_id,
            )
            return self.make_pick(participant_id, player_id, acting_user_id)

    def _commit(
        self,
        session: DraftSession,
        participant: Participant,
        player: Player,
        auto_picked: bool,
    ) -> DraftPick:
        pick = DraftPick.create(
            league_id=self.league_id,
            participant_id=participant.participant_id,
            player_id=player.player_id,
            round=session.current_round,
            pick_number=session.current_pick_number,
            auto_picked=auto_picked,
            now=self.clock(),
        )

        try:
            self.store.append_pick(self.league_id, pick, expected_count=len(session.picks))
        except ConflictError:
            logger.warning(
                "Lost commit race for pick %d in league %s", pick.pick_number, self.league_id
            )
            raise

        logger.info(
            "Pick %d (Rd %d): %s selects %s (%s, rating %.1f)%s",
            pick.pick_number,
            pick.round,
            participant.display_name,
            player.name,
            player.sex.value,
            player.effective_rating,
            " [auto]" if auto_picked else "",
        )

        if session.with_pick(pick).is_complete:
            logger.info(
                "Draft complete for league %s after %d picks",
                self.league_id,
                pick.pick_number,
            )

        return pick

    @staticmethod
    def _require_in_progress(session: DraftSession):
        if not session.league.is_drafting:
            raise InvalidStateError(
                f"League {session.league_id} is not in drafting phase "
                f"(status: {session.league.status.value})"
            )
        if session.is_complete:
            raise InvalidStateError(f"Draft for league {session.league_id} is complete")
        if session.status is not DraftStatus.IN_PROGRESS:
            raise InvalidStateError(
                f"Draft for league {session.league_id} has not started"
            )

    # ------------------------------------------------------------------
    # Pick clock
    # ------------------------------------------------------------------
    def pick_deadline(self) -> Optional[datetime]:
        """When the current pick expires, or None if nobody is on the clock."""
        return self._deadline_for(self.load_session())

    def _deadline_for(self, session: DraftSession) -> Optional[datetime]:
        if session.status is not DraftStatus.IN_PROGRESS:
            return None

        if session.last_pick is not None:
            started = session.last_pick.picked_at
        elif session.league.draft_started_at:
            started = datetime.fromisoformat(session.league.draft_started_at)
        else:
            return None

        return started + timedelta(seconds=session.config.seconds_per_pick)

    def auto_pick_if_expired(self, now: Optional[datetime] = None) -> Optional[DraftPick]:
        """Run the timeout auto-pick if the clock has run out.

        Returns the committed pick, or None when nothing was due or a
        human pick for the expired turn landed first.
        """
        session = self.load_session()
        if not session.config.auto_pick_enabled:
            return None

        deadline = self._deadline_for(session)
        if deadline is None or (now or self.clock()) < deadline:
            return None

        expired_pick = session.current_pick_number
        logger.info(
            "Pick clock expired for pick %d in league %s",
            expired_pick,
            self.league_id,
        )
        try:
            return self.auto_pick(
                triggered_by_timeout=True, expected_pick_number=expired_pick
            )
        except ConflictError:
            logger.info(
                "Pick %d in league %s was made before the auto-pick; turn already advanced",
                expired_pick,
                self.league_id,
            )
            return None

    # ------------------------------------------------------------------
    # Read models
    # ------------------------------------------------------------------
    def get_roster(self, participant_id: str) -> Roster:
        session = self.load_session()
        session.get_participant(participant_id)
        return self._roster_for(session, participant_id)

    def _roster_for(self, session: DraftSession, participant_id: str) -> Roster:
        players_by_id = {p.player_id: p for p in self.store.list_players()}
        return Roster.from_picks(participant_id, session.picks, players_by_id)

    def get_draft_history(self) -> List[Dict]:
        """Picks in order with participant and player names."""
        session = self.load_session()
        names = {p.participant_id: p.display_name for p in session.participants}
        players = {p.player_id: p.name for p in self.store.list_players()}

        return [
            {
                "pick_number": pick.pick_number,
                "round": pick.round,
                "participant_name": names.get(pick.participant_id, "Unknown"),
                "player_name": players.get(pick.player_id, "Unknown"),
                "auto_picked": pick.auto_picked,
            }
            for pick in session.picks
        ]

    def get_upcoming_picks(self, participant_id: str) -> List[PickSlot]:
        """Remaining pick slots for a participant."""
        session = self.load_session()
        participant = session.get_participant(participant_id)
        if participant.draft_position is None or session.is_complete:
            return []

        return SnakeDraftOrder.upcoming_picks(
            participant.draft_position,
            session.participant_count,
            session.current_pick_number,
            session.total_rounds,
        )

    def get_draft_summary(self) -> Dict:
        """Generate summary of draft results.

        Returns dict with "error" key if draft is not yet complete.
        """
        session = self.load_session()
        if not session.is_complete:
            return {"error": "Draft not complete"}

        validator = RosterValidator(session.config)
        summary = {
            "league_id": self.league_id,
            "total_picks": len(session.picks),
            "auto_picks": sum(1 for p in session.picks if p.auto_picked),
            "participants": [],
        }

        for participant in sorted(session.participants, key=lambda p: p.draft_position):
            roster = self._roster_for(session, participant.participant_id)
            is_valid, errors = validator.validate_final_roster(roster)
            summary["participants"].append(
                {
                    "participant_id": participant.participant_id,
                    "display_name": participant.display_name,
                    "draft_position": participant.draft_position,
                    "roster": [p.name for p in roster.players],
                    "composition": validator.get_roster_summary(roster),
                    "is_valid": is_valid,
                    "errors": errors,
                }
            )

        return summary
