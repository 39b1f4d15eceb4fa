"""State persistence - the record store the draft core commits picks to.

The draft logic only depends on ``PickStore``. Two implementations ship:
an in-memory store for tests and single-process use, and a JSON-file
store that keeps one document per league.
"""

import copy
import json
import logging
import os
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from src.draft_manager.config import DRAFTS_DIR
from src.draft_manager.draft_state import (
    DraftPick,
    DraftSession,
    League,
    LeagueConfig,
    LeagueStatus,
    Participant,
    Player,
)
from src.draft_manager.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


class PickStore(ABC):
    """Record-store contract consumed by the draft controller."""

    @abstractmethod
    def get_league(self, league_id: str) -> League:
        """Return the league or raise NotFoundError."""

    @abstractmethod
    def save_league(self, league: League) -> League:
        """Insert or replace a league record."""

    @abstractmethod
    def list_leagues(self) -> List[League]:
        """All leagues, oldest first."""

    @abstractmethod
    def delete_league(self, league_id: str) -> bool:
        """Delete a league with its participants and picks."""

    @abstractmethod
    def list_participants(self, league_id: str) -> List[Participant]:
        """Participants in join order."""

    @abstractmethod
    def save_participant(self, league_id: str, participant: Participant) -> Participant:
        """Insert or replace a participant (matched by participant_id)."""

    @abstractmethod
    def list_picks(self, league_id: str) -> List[DraftPick]:
        """Picks for a league, oldest first."""

    @abstractmethod
    def append_pick(
        self, league_id: str, pick: DraftPick, expected_count: Optional[int] = None
    ) -> DraftPick:
        """Append a pick.

        Raises:
            ConflictError: a pick with this pick_number already exists, or the
                stored pick count differs from expected_count.
        """

    @abstractmethod
    def list_players(self) -> List[Player]:
        """Every player in the pool, ordered by player_id."""

    @abstractmethod
    def save_players(self, players: Iterable[Player]) -> int:
        """Insert or replace players. Returns the number saved."""

    def get_player(self, player_id: str) -> Player:
        for player in self.list_players():
            if player.player_id == player_id:
                return player
        raise NotFoundError("Player", player_id)

    def list_available_players(
        self, excluding_player_ids: Iterable[str], active_only: bool = True
    ) -> List[Player]:
        """Pool minus the given ids, ordered by player_id."""
        excluded = set(excluding_player_ids)
        return [
            p
            for p in self.list_players()
            if p.player_id not in excluded and (p.active or not active_only)
        ]

    def get_roster(self, league_id: str, participant_id: str) -> List[Player]:
        """Players drafted by a participant, in pick order."""
        players_by_id = {p.player_id: p for p in self.list_players()}
        roster = []
        for pick in self.list_picks(league_id):
            if pick.participant_id != participant_id:
                continue
            if pick.player_id not in players_by_id:
                raise NotFoundError("Player", pick.player_id)
            roster.append(players_by_id[pick.player_id])
        return roster

    def load_session(self, league_id: str) -> DraftSession:
        """Snapshot a league's draft for validation."""
        return DraftSession(
            league=self.get_league(league_id),
            participants=self.list_participants(league_id),
            picks=self.list_picks(league_id),
        )

    @staticmethod
    def _check_append(
        existing: List[DraftPick], pick: DraftPick, expected_count: Optional[int]
    ):
        if any(p.pick_number == pick.pick_number for p in existing):
            raise ConflictError(
                f"Pick {pick.pick_number} already committed for league {pick.league_id}"
            )
        if expected_count is not None and len(existing) != expected_count:
            raise ConflictError(
                f"League {pick.league_id} has {len(existing)} picks, "
                f"expected {expected_count}"
            )


class InMemoryPickStore(PickStore):
    """Dictionary-backed store. Writes are serialized by a lock."""

    def __init__(self, players: Optional[Iterable[Player]] = None):
        self._lock = threading.Lock()
        self._leagues: Dict[str, League] = {}
        self._participants: Dict[str, List[Participant]] = {}
        self._picks: Dict[str, List[DraftPick]] = {}
        self._players: Dict[str, Player] = {}
        if players:
            self.save_players(players)

    def get_league(self, league_id: str) -> League:
        with self._lock:
            if league_id not in self._leagues:
                raise NotFoundError("League", league_id)
            return copy.deepcopy(self._leagues[league_id])

    def save_league(self, league: League) -> League:
        with self._lock:
            self._leagues[league.league_id] = copy.deepcopy(league)
            self._participants.setdefault(league.league_id, [])
            self._picks.setdefault(league.league_id, [])
        return league

    def list_leagues(self) -> List[League]:
        with self._lock:
            return [copy.deepcopy(league) for league in self._leagues.values()]

    def delete_league(self, league_id: str) -> bool:
        with self._lock:
            if league_id not in self._leagues:
                return False
            del self._leagues[league_id]
            self._participants.pop(league_id, None)
            self._picks.pop(league_id, None)
        logger.info("Deleted league %s", league_id)
        return True

    def list_participants(self, league_id: str) -> List[Participant]:
        with self._lock:
            self._require_league(league_id)
            return list(self._participants[league_id])

    def save_participant(self, league_id: str, participant: Participant) -> Participant:
        with self._lock:
            self._require_league(league_id)
            members = self._participants[league_id]
            for i, existing in enumerate(members):
                if existing.participant_id == participant.participant_id:
                    members[i] = participant
                    break
            else:
                members.append(participant)
        return participant

    def list_picks(self, league_id: str) -> List[DraftPick]:
        with self._lock:
            self._require_league(league_id)
            return list(self._picks[league_id])

    def append_pick(
        self, league_id: str, pick: DraftPick, expected_count: Optional[int] = None
    ) -> DraftPick:
        with self._lock:
            self._require_league(league_id)
            existing = self._picks[league_id]
            self._check_append(existing, pick, expected_count)
            existing.append(pick)
        return pick

    def list_players(self) -> List[Player]:
        with self._lock:
            return [self._players[pid] for pid in sorted(self._players)]

    def save_players(self, players: Iterable[Player]) -> int:
        count = 0
        with self._lock:
            for player in players:
                self._players[player.player_id] = player
                count += 1
        return count

    def _require_league(self, league_id: str):
        if league_id not in self._leagues:
            raise NotFoundError("League", league_id)


class JsonPickStore(PickStore):
    """Stores each league as ``league_{id}.json`` and the pool as ``players.json``.

    Every write rewrites the whole document via an atomic replace. The
    in-process lock makes read-check-append a single step for all threads
    sharing this instance.
    """

    PLAYERS_FILE = "players.json"

    def __init__(self, storage_dir: Optional[Path] = None):
        self.storage_dir = Path(storage_dir or DRAFTS_DIR)
        self.storage_dir.mkdir(parents=True, exist_ok=True)
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Leagues
    # ------------------------------------------------------------------
    def get_league(self, league_id: str) -> League:
        with self._lock:
            return league_from_dict(self._read_league_doc(league_id)["league"])

    def save_league(self, league: League) -> League:
        with self._lock:
            path = self._league_path(league.league_id)
            if path.exists():
                doc = self._read_json(path)
            else:
                doc = {"participants": [], "picks": []}
            doc["league"] = league_to_dict(league)
            self._write_json(path, doc)

        logger.info(
            "Saved league %s (%s) to %s", league.league_id, league.status.value, path
        )
        return league

    def list_leagues(self) -> List[League]:
        leagues = []

        with self._lock:
            for filepath in self.storage_dir.glob("league_*.json"):
                try:
                    leagues.append(league_from_dict(self._read_json(filepath)["league"]))
                except (json.JSONDecodeError, OSError, KeyError) as e:
                    logger.warning("Skipping corrupt league file %s: %s", filepath, e)
                    continue

        return sorted(leagues, key=lambda league: league.created_at)

    def delete_league(self, league_id: str) -> bool:
        with self._lock:
            path = self._league_path(league_id)
            if not path.exists():
                return False
            path.unlink()
        logger.info("Deleted league %s", league_id)
        return True

    # ------------------------------------------------------------------
    # Participants
    # ------------------------------------------------------------------
    def list_participants(self, league_id: str) -> List[Participant]:
        with self._lock:
            doc = self._read_league_doc(league_id)
        return [participant_from_dict(d) for d in doc["participants"]]

    def save_participant(self, league_id: str, participant: Participant) -> Participant:
        with self._lock:
            doc = self._read_league_doc(league_id)
            record = participant_to_dict(participant)
            members = doc["participants"]
            for i, existing in enumerate(members):
                if existing["participant_id"] == participant.participant_id:
                    members[i] = record
                    break
            else:
                members.append(record)
            self._write_json(self._league_path(league_id), doc)
        return participant

    # ------------------------------------------------------------------
    # Picks
    # ------------------------------------------------------------------
    def list_picks(self, league_id: str) -> List[DraftPick]:
        with self._lock:
            doc = self._read_league_doc(league_id)
        picks = [pick_from_dict(d) for d in doc["picks"]]
        return sorted(picks, key=lambda p: p.pick_number)

    def append_pick(
        self, league_id: str, pick: DraftPick, expected_count: Optional[int] = None
    ) -> DraftPick:
        with self._lock:
            doc = self._read_league_doc(league_id)
            existing = [pick_from_dict(d) for d in doc["picks"]]
            self._check_append(existing, pick, expected_count)
            doc["picks"].append(pick_to_dict(pick))
            self._write_json(self._league_path(league_id), doc)
        return pick

    # ------------------------------------------------------------------
    # Players
    # ------------------------------------------------------------------
    def list_players(self) -> List[Player]:
        path = self.storage_dir / self.PLAYERS_FILE
        with self._lock:
            if not path.exists():
                return []
            data = self._read_json(path)
        players = [player_from_dict(d) for d in data["players"]]
        return sorted(players, key=lambda p: p.player_id)

    def save_players(self, players: Iterable[Player]) -> int:
        path = self.storage_dir / self.PLAYERS_FILE
        with self._lock:
            merged = {p.player_id: p for p in self.list_players()}
            incoming = list(players)
            for player in incoming:
                merged[player.player_id] = player
            self._write_json(
                path,
                {"players": [player_to_dict(merged[pid]) for pid in sorted(merged)]},
            )
        logger.info("Saved %d players (%d total) to %s", len(incoming), len(merged), path)
        return len(incoming)

    # ------------------------------------------------------------------
    # File helpers
    # ------------------------------------------------------------------
    def _league_path(self, league_id: str) -> Path:
        return self.storage_dir / f"league_{league_id}.json"

    def _read_league_doc(self, league_id: str) -> Dict:
        path = self._league_path(league_id)
        if not path.exists():
            raise NotFoundError("League", league_id)
        return self._read_json(path)

    @staticmethod
    def _read_json(path: Path) -> Dict:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    @staticmethod
    def _write_json(path: Path, data: Dict):
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp_path, path)


# ----------------------------------------------------------------------
# Record <-> dict conversion
# ----------------------------------------------------------------------
def player_to_dict(player: Player) -> Dict:
    return {
        "player_id": player.player_id,
        "name": player.name,
        "sex": player.sex.value,
        "rating": player.rating,
        "active": player.active,
    }


def player_from_dict(data: Dict) -> Player:
    return Player(
        player_id=data["player_id"],
        name=data["name"],
        sex=data["sex"],
        rating=data.get("rating"),
        active=data.get("active", True),
    )


def participant_to_dict(participant: Participant) -> Dict:
    return {
        "participant_id": participant.participant_id,
        "user_id": participant.user_id,
        "display_name": participant.display_name,
        "draft_position": participant.draft_position,
        "paid": participant.paid,
    }


def participant_from_dict(data: Dict) -> Participant:
    return Participant(
        participant_id=data["participant_id"],
        user_id=data["user_id"],
        display_name=data["display_name"],
        draft_position=data.get("draft_position"),
        paid=data.get("paid", False),
    )


def pick_to_dict(pick: DraftPick) -> Dict:
    return {
        "league_id": pick.league_id,
        "participant_id": pick.participant_id,
        "player_id": pick.player_id,
        "round": pick.round,
        "pick_number": pick.pick_number,
        "auto_picked": pick.auto_picked,
        "timestamp": pick.timestamp,
    }


def pick_from_dict(data: Dict) -> DraftPick:
    return DraftPick(
        league_id=data["league_id"],
        participant_id=data["participant_id"],
        player_id=data["player_id"],
        round=data["round"],
        pick_number=data["pick_number"],
        auto_picked=data.get("auto_picked", False),
        timestamp=data["timestamp"],
    )


def league_to_dict(league: League) -> Dict:
    config = league.config
    return {
        "league_id": league.league_id,
        "name": league.name,
        "commissioner_id": league.commissioner_id,
        "status": league.status.value,
        "max_participants": league.max_participants,
        "draft_started_at": league.draft_started_at,
        "created_at": league.created_at,
        "config": {
            "total_rounds": config.total_rounds,
            "early_rounds_threshold": config.early_rounds_threshold,
            "max_per_category": {
                sex.value: cap for sex, cap in config.max_per_category.items()
            },
            "seconds_per_pick": config.seconds_per_pick,
            "auto_pick_enabled": config.auto_pick_enabled,
            "min_participants": config.min_participants,
        },
    }


def league_from_dict(data: Dict) -> League:
    lc = data["config"]
    config = LeagueConfig(
        total_rounds=lc["total_rounds"],
        early_rounds_threshold=lc["early_rounds_threshold"],
        max_per_category=lc["max_per_category"],
        seconds_per_pick=lc["seconds_per_pick"],
        auto_pick_enabled=lc.get("auto_pick_enabled", True),
        min_participants=lc.get("min_participants", 2),
    )
    return League(
        league_id=data["league_id"],
        name=data["name"],
        commissioner_id=data["commissioner_id"],
        config=config,
        status=LeagueStatus(data["status"]),
        max_participants=data["max_participants"],
        draft_started_at=data.get("draft_started_at"),
        created_at=data["created_at"],
    )
