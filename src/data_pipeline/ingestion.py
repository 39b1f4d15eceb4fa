"""CSV ingestion for the player pool.

Handles the quirks of hand-maintained roster exports:
- Header spellings vary (Player / Name, Gender / Sex, ...)
- Quoted values with stray whitespace
- Comma-formatted or blank ratings
- Blank trailing rows
"""

import logging
from pathlib import Path

import pandas as pd

from src.data_pipeline.config import COLUMN_ALIASES, FILE_PATTERNS, REQUIRED_COLUMNS

logger = logging.getLogger(__name__)


class IngestionError(Exception):
    """Raised when CSV ingestion fails."""


def _parse_numeric(value):
    """Parse a numeric string that may contain commas (e.g., '1,000.5' -> 1000.5)."""
    if pd.isna(value):
        return value
    if isinstance(value, (int, float)):
        return float(value)
    s = str(value).replace(",", "").strip().strip('"')
    if s == "" or s.isspace():
        return float("nan")
    try:
        return float(s)
    except ValueError:
        return float("nan")


class PlayerPoolIngester:
    """Reads the season's player pool CSV into a DataFrame with canonical columns.

    Columns: Name, Sex, Rating (float, NaN when missing), Active (raw text)
    and ID when the export carries one.
    """

    def __init__(self, data_dir: Path, season: int):
        self.data_dir = Path(data_dir)
        self.season = season

    def _resolve_path(self, file_key: str) -> Path:
        """Build the full file path for a given file key, raising if missing."""
        filename = FILE_PATTERNS[file_key].format(season=self.season)
        filepath = self.data_dir / filename
        if not filepath.exists():
            raise FileNotFoundError(f"Expected file not found: {filepath}")
        return filepath

    def read_players(self) -> pd.DataFrame:
        """Read the player pool file.

        Raises:
            IngestionError: if the file is unreadable or lacks required columns.
        """
        filepath = self._resolve_path("players")
        logger.info("Reading player pool: %s", filepath.name)

        try:
            df = pd.read_csv(filepath, quotechar='"', dtype=str, skip_blank_lines=True)
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
            raise IngestionError(f"Failed to read {filepath}: {e}") from e

        df = df.rename(columns=self._canonical_columns(df.columns))

        missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
        if missing:
            raise IngestionError(f"{filepath.name} is missing columns: {missing}")

        # Strip surrounding quotes from string values
        for col in df.columns:
            df[col] = df[col].str.strip().str.strip('"').str.strip()

        df = df[df["Name"].notna() & (df["Name"] != "")]
        df = df.reset_index(drop=True)

        if "Rating" in df.columns:
            df["Rating"] = df["Rating"].apply(_parse_numeric).astype(float)
        else:
            df["Rating"] = float("nan")

        if "Active" not in df.columns:
            df["Active"] = None

        logger.info("Loaded %d players", len(df))
        return df

    @staticmethod
    def _canonical_columns(columns) -> dict:
        renamed = {}
        for col in columns:
            key = str(col).strip().strip('"').strip().lower()
            if key in COLUMN_ALIASES:
                renamed[col] = COLUMN_ALIASES[key]
        return renamed
