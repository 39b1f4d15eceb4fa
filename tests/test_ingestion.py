"""Tests for the player pool CSV ingestion module."""

import math

import pandas as pd
import pytest

from src.data_pipeline.ingestion import IngestionError, PlayerPoolIngester, _parse_numeric


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

POOL_CSV = """
    "Player","Gender","Rating","Status"
    "Nelly Korda","Women","95.5","Active"
    " Scottie Scheffler ","M","98",""
    "Lydia Ko","F","",""
    "","M","50",""
"""


@pytest.fixture
def ingester(pool_csv):
    return PlayerPoolIngester(pool_csv(POOL_CSV), season=2026)


# ---------------------------------------------------------------------------
# Player pool
# ---------------------------------------------------------------------------

class TestReadPlayers:
    def test_canonical_columns(self, ingester):
        df = ingester.read_players()
        assert {"Name", "Sex", "Rating", "Active"}.issubset(df.columns)

    def test_drops_blank_names(self, ingester):
        df = ingester.read_players()
        assert df["Name"].tolist() == ["Nelly Korda", "Scottie Scheffler", "Lydia Ko"]

    def test_rating_is_float(self, ingester):
        df = ingester.read_players()
        assert pd.api.types.is_float_dtype(df["Rating"])
        assert df.loc[0, "Rating"] == 95.5
        assert math.isnan(df.loc[2, "Rating"])

    def test_optional_columns_default(self, pool_csv):
        data_dir = pool_csv("""
            Name,Sex
            Pro A,male
        """)
        df = PlayerPoolIngester(data_dir, season=2026).read_players()
        assert math.isnan(df.loc[0, "Rating"])
        assert df.loc[0, "Active"] is None

    def test_keeps_id_column(self, pool_csv):
        data_dir = pool_csv("""
            player_id,name,sex
            p-001,Pro A,m
        """)
        df = PlayerPoolIngester(data_dir, season=2026).read_players()
        assert df.loc[0, "ID"] == "p-001"

    def test_missing_required_column(self, pool_csv):
        data_dir = pool_csv("""
            Name,Rating
            Pro A,50
        """)
        with pytest.raises(IngestionError, match="missing columns"):
            PlayerPoolIngester(data_dir, season=2026).read_players()

    def test_empty_file(self, tmp_path):
        (tmp_path / "players_2026.csv").write_text("")
        with pytest.raises(IngestionError):
            PlayerPoolIngester(tmp_path, season=2026).read_players()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            PlayerPoolIngester(tmp_path, season=2031).read_players()


# ---------------------------------------------------------------------------
# Numeric parsing
# ---------------------------------------------------------------------------

class TestParseNumeric:
    def test_comma_formatted(self):
        assert _parse_numeric("1,000.5") == 1000.5

    def test_quoted(self):
        assert _parse_numeric('"72"') == 72.0

    def test_blank_is_nan(self):
        assert math.isnan(_parse_numeric("  "))

    def test_garbage_is_nan(self):
        assert math.isnan(_parse_numeric("n/a"))
