"""Draft initialization - league setup, draft start and player pool loading."""

import json
import logging
import random
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from src.draft_manager.config import DEFAULT_MAX_PARTICIPANTS, PROCESSED_DATA_DIR
from src.draft_manager.draft_state import (
    League,
    LeagueConfig,
    LeagueStatus,
    Participant,
    Player,
    Roster,
)
from src.draft_manager.errors import (
    InvalidStateError,
    UnauthorizedError,
    ValidationError,
)
from src.draft_manager.roster_validator import RosterValidator
from src.draft_manager.state_persistence import PickStore, player_from_dict

logger = logging.getLogger(__name__)


class DraftInitializer:
    """Handles league creation and the league's move into and out of drafting."""

    def __init__(
        self,
        store: PickStore,
        rng: Optional[random.Random] = None,
        processed_data_dir: Optional[Path] = None,
    ):
        self.store = store
        self.rng = rng or random.Random()
        self.processed_data_dir = processed_data_dir or PROCESSED_DATA_DIR

    def create_league(
        self,
        name: str,
        commissioner_id: str,
        commissioner_name: str = "Commissioner",
        config: Optional[LeagueConfig] = None,
        max_participants: int = DEFAULT_MAX_PARTICIPANTS,
        league_id: Optional[str] = None,
    ) -> League:
        """
        Create a new league in setup state with the commissioner as its
        first participant.

        Args:
            name: League display name
            commissioner_id: User who manages the league
            commissioner_name: Display name for the commissioner's seat
            config: Draft settings (defaults: 4 rounds, 2 + 2 roster)
            max_participants: Seat limit (2-20)
            league_id: Explicit id; a UUID is generated when omitted

        Returns:
            The saved League
        """
        league = League(
            league_id=league_id or str(uuid.uuid4()),
            name=name,
            commissioner_id=commissioner_id,
            config=config or LeagueConfig(),
            max_participants=max_participants,
        )
        self.store.save_league(league)
        self.join_league(league.league_id, commissioner_id, commissioner_name)

        logger.info(
            "Created league %s (%s): %d rounds, max %d participants",
            league.league_id,
            name,
            league.config.total_rounds,
            max_participants,
        )
        return league

    def join_league(self, league_id: str, user_id: str, display_name: str) -> Participant:
        """Add a user to a league that is still in setup."""
        league = self.store.get_league(league_id)
        participants = self.store.list_participants(league_id)

        if not league.is_setup:
            raise InvalidStateError("League is not accepting new participants")
        if len(participants) >= league.max_participants:
            raise ValidationError("League is full")
        if any(p.user_id == user_id for p in participants):
            raise ValidationError("Already a participant in this league")

        participant = Participant(
            participant_id=str(uuid.uuid4()),
            user_id=user_id,
            display_name=display_name,
        )
        self.store.save_participant(league_id, participant)
        logger.info("User %s joined league %s as %s", user_id, league_id, display_name)
        return participant

    def start_draft(self, league_id: str, acting_user_id: str) -> League:
        """Assign shuffled draft positions 1..N and move the league to drafting."""
        league = self.store.get_league(league_id)
        self._require_commissioner(league, acting_user_id, "start the draft")

        if not league.can_transition_to(LeagueStatus.DRAFTING):
            raise InvalidStateError(
                f"League must be in setup to start the draft (status: {league.status.value})"
            )

        participants = self.store.list_participants(league_id)
        if len(participants) < league.config.min_participants:
            raise InvalidStateError(
                f"League needs at least {league.config.min_participants} participants "
                f"(has {len(participants)})"
            )

        shuffled = list(participants)
        self.rng.shuffle(shuffled)
        for position, participant in enumerate(shuffled, start=1):
            self.store.save_participant(league_id, participant.with_draft_position(position))

        league.transition_to(LeagueStatus.DRAFTING)
        league.draft_started_at = datetime.now(timezone.utc).isoformat()
        self.store.save_league(league)

        logger.info(
            "Draft started for league %s: order %s",
            league_id,
            ", ".join(p.display_name for p in shuffled),
        )
        return league

    def complete_draft(self, league_id: str, acting_user_id: str) -> League:
        """Move a fully drafted league to active after checking every roster."""
        league = self.store.get_league(league_id)
        self._require_commissioner(league, acting_user_id, "complete the draft")

        if not league.is_drafting:
            raise InvalidStateError("League must be in drafting status")

        session = self.store.load_session(league_id)
        if not session.is_complete:
            raise InvalidStateError(
                f"Draft has {len(session.picks)} of {session.total_picks} picks"
            )

        validator = RosterValidator(league.config)
        players_by_id = {p.player_id: p for p in self.store.list_players()}
        for participant in session.participants:
            roster = Roster.from_picks(participant.participant_id, session.picks, players_by_id)
            is_valid, errors = validator.validate_final_roster(roster)
            if not is_valid:
                raise ValidationError(
                    f"Roster for {participant.display_name} is invalid: {'; '.join(errors)}"
                )

        league.transition_to(LeagueStatus.ACTIVE)
        self.store.save_league(league)
        logger.info("League %s is now active", league_id)
        return league

    def finalize_league(self, league_id: str, acting_user_id: str) -> League:
        """End of season: active -> complete."""
        league = self.store.get_league(league_id)
        self._require_commissioner(league, acting_user_id, "complete the league")

        if not league.is_active:
            raise InvalidStateError("League must be active to complete")

        league.transition_to(LeagueStatus.COMPLETE)
        self.store.save_league(league)
        logger.info("League %s is complete", league_id)
        return league

    def load_player_pool(self, season: int) -> List[Player]:
        """Load the processed player pool for a season into the store."""
        season_file = self.processed_data_dir / f"players_{season}.json"

        if not season_file.exists():
            raise FileNotFoundError(
                f"No player data found for {season}. "
                "Run data pipeline first: "
                "python -m src.data_pipeline.run_update"
            )

        with open(season_file, "r", encoding="utf-8") as f:
            data = json.load(f)

        try:
            players = [player_from_dict(record) for record in data["players"]]
        except KeyError as e:
            raise ValueError(
                f"Malformed player data file for {season}: missing key {e}. "
                "Re-run data pipeline to regenerate."
            ) from e

        self.store.save_players(players)
        logger.info("Loaded %d players for %d season", len(players), season)
        return players

    @staticmethod
    def _require_commissioner(league: League, user_id: str, action: str):
        if not league.is_commissioner(user_id):
            raise UnauthorizedError(f"Only the commissioner can {action}")
