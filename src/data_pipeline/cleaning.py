"""Data cleaning for the player pool.

- Normalize player names
- Map sex tags to the two roster categories
- Parse active flags
- Reject out-of-range ratings
- Generate stable player IDs
"""

import logging
import re
from typing import Optional

import pandas as pd

from src.data_pipeline.config import (
    ACTIVE_VALUES,
    INACTIVE_VALUES,
    RATING_RANGE,
    SEX_ALIASES,
)

logger = logging.getLogger(__name__)

_ID_UNSAFE = re.compile(r"[^a-z0-9_]+")


class PlayerPoolCleaner:
    """Cleans and standardizes the raw player pool."""

    # ------------------------------------------------------------------
    # Value helpers
    # ------------------------------------------------------------------
    @staticmethod
    def normalize_player_name(name: str) -> Optional[str]:
        """Normalize a player name.

        - Strips quotes and extra whitespace
        - Standardizes apostrophes and hyphens
        """
        if pd.isna(name):
            return None

        name = str(name).strip().strip('"')
        if name == "":
            return None

        name = name.replace("’", "'")
        name = name.replace("‘", "'")
        name = name.replace("ʼ", "'")
        name = name.replace("–", "-")
        name = name.replace("—", "-")

        return " ".join(name.split())

    @staticmethod
    def normalize_sex(value: str) -> Optional[str]:
        """Map a sex tag to "male" / "female".

        Examples:
            "M"      -> "male"
            "Women"  -> "female"
            "other"  -> None
        """
        if pd.isna(value):
            return None
        key = str(value).strip().strip('"').strip().lower()
        if key.endswith("'s"):
            key = key[:-2]
        return SEX_ALIASES.get(key)

    @staticmethod
    def parse_active(value) -> bool:
        """Blank means active; only explicit "no"/"inactive"/... turn it off."""
        if value is None or pd.isna(value):
            return True
        text = str(value).strip().lower()
        if text in INACTIVE_VALUES:
            return False
        if text in ACTIVE_VALUES or text == "":
            return True
        logger.warning("Unrecognized active flag %r, treating as active", value)
        return True

    @staticmethod
    def rating_in_range(rating) -> bool:
        """Missing ratings are allowed; present ones must be on the 0-100 scale."""
        if pd.isna(rating):
            return True
        low, high = RATING_RANGE
        return low <= float(rating) <= high

    # ------------------------------------------------------------------
    # DataFrame-level cleaning
    # ------------------------------------------------------------------
    def clean_players(self, df: pd.DataFrame) -> pd.DataFrame:
        """Clean the ingested pool.

        Adds columns:
            Player_Norm - normalized display name
            Sex_Norm    - "male" / "female"
            Active_Flag - bool

        Rows with an unknown sex tag or an out-of-range rating are dropped.
        """
        out = df.copy()
        out["Player_Norm"] = out["Name"].apply(self.normalize_player_name)
        out["Sex_Norm"] = out["Sex"].apply(self.normalize_sex)
        out["Active_Flag"] = out["Active"].apply(self.parse_active)

        bad_sex = out["Sex_Norm"].isna()
        if bad_sex.any():
            logger.warning(
                "Dropping %d players with unrecognized sex tag: %s",
                bad_sex.sum(),
                out.loc[bad_sex, "Name"].tolist(),
            )

        bad_rating = ~out["Rating"].apply(self.rating_in_range).astype(bool)
        if bad_rating.any():
            logger.warning(
                "Dropping %d players with rating outside %s: %s",
                bad_rating.sum(),
                RATING_RANGE,
                out.loc[bad_rating, "Name"].tolist(),
            )

        out = out[~bad_sex & ~bad_rating & out["Player_Norm"].notna()]
        out = out.reset_index(drop=True)
        logger.info("Cleaned player pool: %d rows", len(out))
        return out

    @staticmethod
    def generate_player_ids(df: pd.DataFrame) -> pd.DataFrame:
        """Generate unique player IDs.

        Uses the export's ID column when present, else {name}_{sex}.
        Example: nelly_korda_female
        """
        def _make_id(row):
            given = row.get("ID")
            if given is not None and not pd.isna(given) and str(given).strip():
                return str(given).strip()
            name = str(row.get("Player_Norm") or "unknown").lower()
            name = name.replace("'", "").replace(".", "").replace("-", "_")
            name = _ID_UNSAFE.sub("_", name.replace(" ", "_")).strip("_")
            return f"{name}_{row['Sex_Norm']}"

        out = df.copy()
        out["player_id"] = out.apply(_make_id, axis=1) if len(out) else pd.Series(dtype=str)

        # Disambiguate collisions by appending a numeric suffix
        dupes = out["player_id"].duplicated(keep=False)
        if dupes.any():
            dupe_ids = out.loc[dupes, "player_id"].unique().tolist()
            logger.warning("Duplicate player_ids detected: %s", dupe_ids)
            for pid in dupe_ids:
                mask = out["player_id"] == pid
                out.loc[mask, "player_id"] = [
                    f"{pid}_{i}" for i in range(1, mask.sum() + 1)
                ]

        logger.info("Generated %d player IDs", len(out))
        return out
