"""Tests for src.data_pipeline.run_update (full pipeline integration)."""

import json
import random

import pytest

from src.data_pipeline.run_update import run_pipeline
from src.draft_manager.draft_initializer import DraftInitializer
from src.draft_manager.state_persistence import InMemoryPickStore

_REQUIRED_PLAYER_KEYS = {"player_id", "name", "sex", "rating", "active"}

POOL_CSV = """
    Name,Sex,Rating,Active
    Nelly Korda,F,95,yes
    Scottie Scheffler,M,98,
    Lydia Ko,W,,
    Rory McIlroy,Men,91,
    Retired Pro,M,40,retired
    Mystery Pro,?,50,
"""


# ── Pipeline execution ────────────────────────────────────────────────


class TestRunPipeline:
    """End-to-end tests writing to a temp directory."""

    @pytest.fixture
    def pipeline_output(self, pool_csv, tmp_path):
        data_dir = pool_csv(POOL_CSV)
        output_dir = tmp_path / "processed"
        output_path = run_pipeline(season=2026, data_dir=data_dir, output_dir=output_dir)
        with open(output_path) as f:
            data = json.load(f)
        return data, output_path, output_dir

    def test_pipeline_produces_file(self, pipeline_output):
        _, output_path, _ = pipeline_output
        assert output_path.exists()
        assert output_path.name == "players_2026.json"

    def test_latest_symlink_created(self, pipeline_output):
        _, _, output_dir = pipeline_output
        latest = output_dir / "players_latest.json"
        assert latest.is_symlink()
        assert json.loads(latest.read_text())["metadata"]["season"] == 2026

    def test_metadata(self, pipeline_output):
        data, _, _ = pipeline_output
        meta = data["metadata"]
        assert meta["total_players"] == 5
        assert meta["active_players"] == 4
        assert meta["by_sex"] == {"female": 2, "male": 3}
        assert "generated_at" in meta

    def test_player_records(self, pipeline_output):
        data, _, _ = pipeline_output
        players = data["players"]
        ids = [p["player_id"] for p in players]
        assert ids == sorted(ids)
        for p in players:
            assert set(p) == _REQUIRED_PLAYER_KEYS

        by_id = {p["player_id"]: p for p in players}
        assert by_id["lydia_ko_female"]["rating"] is None
        assert by_id["retired_pro_male"]["active"] is False
        assert by_id["scottie_scheffler_male"]["rating"] == 98.0

    def test_rerun_replaces_symlink(self, pipeline_output, pool_csv):
        _, _, output_dir = pipeline_output
        run_pipeline(season=2026, data_dir=pool_csv(POOL_CSV), output_dir=output_dir)
        assert (output_dir / "players_latest.json").is_symlink()

    def test_output_loads_into_store(self, pipeline_output):
        _, _, output_dir = pipeline_output
        store = InMemoryPickStore()
        init = DraftInitializer(store, rng=random.Random(0), processed_data_dir=output_dir)
        init.load_player_pool(2026)
        assert len(store.list_players()) == 5
        assert len(store.list_available_players(set())) == 4

    def test_missing_data_dir(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            run_pipeline(season=2026, data_dir=tmp_path / "nope", output_dir=tmp_path)
