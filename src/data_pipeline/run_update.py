"""Build the processed player pool for a season.

Usage:
    python -m src.data_pipeline.run_update [season] [data_dir]

Examples:
    python -m src.data_pipeline.run_update 2026
    python -m src.data_pipeline.run_update 2026 /path/to/csvs
"""

import json
import logging
import math
import sys
from datetime import datetime, timezone
from pathlib import Path

import pandas as pd

from src.data_pipeline.cleaning import PlayerPoolCleaner
from src.data_pipeline.config import PROCESSED_DATA_DIR, RAW_DATA_DIR
from src.data_pipeline.ingestion import PlayerPoolIngester
from src.logging_config import setup_logging

logger = logging.getLogger(__name__)


def _safe(val, default=None):
    """Return *default* when *val* is NaN/None/pd.NA, else the value."""
    if val is None or val is pd.NA:
        return default
    if isinstance(val, float) and math.isnan(val):
        return default
    return val


def _player_to_dict(row: pd.Series) -> dict:
    """Convert a single player row to the output JSON structure."""
    rating = _safe(row.get("Rating"))
    return {
        "player_id": row["player_id"],
        "name": row["Player_Norm"],
        "sex": row["Sex_Norm"],
        "rating": float(rating) if rating is not None else None,
        "active": bool(row["Active_Flag"]),
    }


def run_pipeline(
    season: int = 2026,
    data_dir: Path | None = None,
    output_dir: Path | None = None,
) -> Path:
    """Run the player pool pipeline.

    Args:
        season: Season year.
        data_dir: Directory containing ``players_{season}.csv``.
            Defaults to ``data/raw/{season}``.
        output_dir: Directory for JSON output.
            Defaults to ``data/processed/``.

    Returns:
        Path to the generated JSON file.

    Raises:
        FileNotFoundError: If the data directory doesn't exist.
    """
    if data_dir is None:
        data_dir = RAW_DATA_DIR / str(season)
    if output_dir is None:
        output_dir = PROCESSED_DATA_DIR

    if not data_dir.is_dir():
        raise FileNotFoundError(f"Data directory not found: {data_dir}")

    logger.info("Starting pipeline for %d season (data: %s)", season, data_dir)

    # 1. Ingest
    logger.info("Step 1/3: Ingesting player pool...")
    raw = PlayerPoolIngester(data_dir, season).read_players()

    # 2. Clean + IDs
    logger.info("Step 2/3: Cleaning data...")
    cleaner = PlayerPoolCleaner()
    players_df = cleaner.generate_player_ids(cleaner.clean_players(raw))

    # 3. Output JSON
    logger.info("Step 3/3: Generating JSON output...")
    players_list = [_player_to_dict(row) for _, row in players_df.iterrows()]
    players_list.sort(key=lambda p: p["player_id"])

    by_sex: dict[str, int] = {}
    for p in players_list:
        by_sex[p["sex"]] = by_sex.get(p["sex"], 0) + 1

    output_data = {
        "metadata": {
            "version": "1.0",
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "season": season,
            "total_players": len(players_list),
            "active_players": sum(1 for p in players_list if p["active"]),
            "by_sex": by_sex,
        },
        "players": players_list,
    }

    output_dir.mkdir(parents=True, exist_ok=True)
    output_file = output_dir / f"players_{season}.json"

    with open(output_file, "w", encoding="utf-8") as f:
        json.dump(output_data, f, indent=2)

    # Update latest symlink
    latest_link = output_dir / "players_latest.json"
    if latest_link.exists() or latest_link.is_symlink():
        latest_link.unlink()
    latest_link.symlink_to(output_file.name)

    logger.info("Pipeline complete! Output: %s", output_file)
    logger.info("  Total players: %d", len(players_list))
    logger.info(
        "  By sex: %s",
        ", ".join(f"{k}={v}" for k, v in sorted(by_sex.items())),
    )

    return output_file


if __name__ == "__main__":
    setup_logging()

    season = int(sys.argv[1]) if len(sys.argv) > 1 else 2026
    data_dir = Path(sys.argv[2]) if len(sys.argv) > 2 else None

    try:
        output = run_pipeline(season, data_dir)
        print(f"Pipeline complete: {output}")
    except Exception:
        logger.exception("Pipeline failed")
        sys.exit(1)
