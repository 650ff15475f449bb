"""Tests for the results infrastructure and scenario configuration.

Tests for:
- Result dataclasses
- JSON/CSV serialization
- Config loading, merging and engine settings
- Scenario runner
"""

import tempfile
from pathlib import Path

import numpy as np
import pytest

from srp_pake.configs import (
    EngineSettings,
    _deep_merge,
    engine_settings,
    list_scenarios,
    load_base_config,
    load_scenario,
)
from srp_pake.core.exceptions import InvalidGroup
from srp_pake.scripts.run_scenarios import main, run_handshake, run_scenario
from srp_pake.utils.logging import set_log_level
from srp_pake.utils.results import (
    RunResult,
    ScenarioResult,
    generate_result_filename,
    generate_summary_report,
    load_results_csv,
    load_results_json,
    save_results_csv,
    save_results_json,
)


def _fast_config(**run_overrides):
    """Base config switched to the 1024-bit group with a single run."""
    config = load_base_config()
    return _deep_merge(config, {"engine": {"group": "1024"}, "run": dict(num_runs=1, **run_overrides)})


# =============================================================================
# RunResult Tests
# =============================================================================


class TestRunResult:
    """Tests for RunResult dataclass."""

    def test_create_successful_run(self):
        """Test creating a successful run result."""
        result = RunResult(
            run_id=0,
            success=True,
            group="2048",
            digest="sha256",
            keys_match=True,
            duration_ms=12.5,
        )

        assert result.success is True
        assert result.keys_match is True
        assert result.error_message is None
        assert result.as_expected

    def test_expected_failure(self):
        """Test a rejected run counts as expected when the scenario says so."""
        result = RunResult(
            run_id=1,
            success=False,
            error_type="ProofMismatch",
            error_message="Proof verification failed",
            expected_success=False,
        )

        assert result.as_expected
        assert result.keys_match is None

    def test_default_values(self):
        """Test default values are set correctly."""
        result = RunResult(run_id=0, success=False)

        assert result.group == ""
        assert result.digest == ""
        assert result.error_type is None
        assert result.duration_ms == 0.0
        assert result.expected_success is True
        assert not result.as_expected


# =============================================================================
# ScenarioResult Tests
# =============================================================================


class TestScenarioResult:
    """Tests for ScenarioResult dataclass."""

    @pytest.fixture
    def sample_runs(self):
        """Create sample run results."""
        return [
            RunResult(run_id=0, success=True, keys_match=True, duration_ms=10.0),
            RunResult(run_id=1, success=True, keys_match=True, duration_ms=20.0),
            RunResult(run_id=2, success=False, error_type="ProofMismatch", duration_ms=30.0),
            RunResult(run_id=3, success=True, keys_match=True, duration_ms=40.0),
        ]

    def test_compute_summary(self, sample_runs):
        """Test summary computation."""
        result = ScenarioResult(scenario_name="test_scenario", runs=sample_runs)

        summary = result.compute_summary()

        assert summary["total_runs"] == 4
        assert summary["successful_runs"] == 3
        assert summary["failed_runs"] == 1
        assert summary["success_rate"] == 0.75
        assert summary["as_expected_rate"] == 0.75
        assert summary["keys_match_rate"] == 1.0
        assert summary["error_distribution"] == {"ProofMismatch": 1}

    def test_duration_statistics(self, sample_runs):
        """Test numpy duration statistics."""
        summary = ScenarioResult(scenario_name="t", runs=sample_runs).compute_summary()
        durations = [10.0, 20.0, 30.0, 40.0]

        assert summary["avg_duration_ms"] == 25.0
        assert abs(summary["std_duration_ms"] - np.std(durations)) < 1e-9
        assert summary["min_duration_ms"] == 10.0
        assert summary["max_duration_ms"] == 40.0
        assert summary["median_duration_ms"] == 25.0
        assert isinstance(summary["avg_duration_ms"], float)

    def test_compute_summary_empty(self):
        """Test summary computation with no runs."""
        assert ScenarioResult(scenario_name="empty").compute_summary() == {}

    def test_compute_summary_all_failed(self):
        """Test summary computation when all runs fail."""
        runs = [
            RunResult(run_id=0, success=False, error_type="InvalidPublicValue"),
            RunResult(run_id=1, success=False, error_type="ProofMismatch"),
            RunResult(run_id=2, success=False, error_type="InvalidPublicValue"),
        ]
        summary = ScenarioResult(scenario_name="all_failed", runs=runs).compute_summary()

        assert summary["success_rate"] == 0.0
        assert "keys_match_rate" not in summary
        assert summary["error_distribution"]["InvalidPublicValue"] == 2
        assert summary["error_distribution"]["ProofMismatch"] == 1


# =============================================================================
# Serialization Tests
# =============================================================================


class TestSerialization:
    """Tests for JSON/CSV serialization."""

    @pytest.fixture
    def sample_scenario(self):
        """Create a sample scenario result."""
        runs = [
            RunResult(run_id=0, success=True, group="1024", digest="sha1", keys_match=True),
            RunResult(run_id=1, success=False, group="1024", digest="sha1", error_type="ProofMismatch"),
        ]
        result = ScenarioResult(
            scenario_name="test_scenario",
            config={"engine": {"group": "1024"}},
            runs=runs,
        )
        result.compute_summary()
        return result

    def test_save_and_load_json(self, sample_scenario):
        """Test JSON save and load round-trip."""
        with tempfile.TemporaryDirectory() as tmpdir:
            saved_path = save_results_json(sample_scenario, Path(tmpdir) / "results")
            assert saved_path.suffix == ".json"

            loaded = load_results_json(saved_path)

            assert len(loaded) == 1
            assert loaded[0].scenario_name == "test_scenario"
            assert loaded[0].runs[0].keys_match is True
            assert loaded[0].runs[1].error_type == "ProofMismatch"
            assert loaded[0].summary["total_runs"] == 2

    def test_save_multiple_scenarios_json(self, sample_scenario):
        """Test saving multiple scenarios to JSON."""
        with tempfile.TemporaryDirectory() as tmpdir:
            saved_path = save_results_json([sample_scenario, sample_scenario], Path(tmpdir) / "r.json")
            assert len(load_results_json(saved_path)) == 2

    def test_save_csv(self, sample_scenario):
        """Test CSV export."""
        with tempfile.TemporaryDirectory() as tmpdir:
            saved_path = save_results_csv(sample_scenario, Path(tmpdir) / "results.csv")
            rows = load_results_csv(saved_path)

            assert len(rows) == 2
            assert rows[0]["scenario"] == "test_scenario"
            assert rows[0]["success"] == "True"
            assert rows[1]["error_type"] == "ProofMismatch"

    def test_generate_filename(self):
        """Test result filename generation."""
        filename = generate_result_filename("default", "csv")

        assert filename.startswith("default_")
        assert filename.endswith(".csv")

    def test_generate_summary_report(self, sample_scenario):
        """Test summary report generation."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "report.txt"
            report = generate_summary_report([sample_scenario], path)
            assert path.read_text() == report

        assert "SRP HANDSHAKE RESULTS SUMMARY" in report
        assert "test_scenario" in report
        assert "ProofMismatch: 1" in report


# =============================================================================
# Configuration Tests
# =============================================================================


class TestConfiguration:
    """Tests for configuration loading."""

    def test_load_base_config(self):
        """Test the base configuration has engine and run sections."""
        config = load_base_config()

        assert config["engine"]["group"] == "2048"
        assert config["engine"]["digest"] == "sha256"
        assert config["run"]["identity"] == "alice"

    def test_list_scenarios(self):
        """Test the bundled scenarios are listed."""
        scenarios = list_scenarios()

        assert "default" in scenarios
        assert "wrong_password" in scenarios
        assert scenarios == sorted(scenarios)

    def test_load_scenario_not_found(self):
        """Test loading a non-existent scenario raises error."""
        with pytest.raises(FileNotFoundError):
            load_scenario("nonexistent_scenario_xyz")

    def test_config_inheritance(self):
        """Test scenario values override base values and keep the rest."""
        config = load_scenario("large_group")

        assert config["engine"]["group"] == "4096"
        assert config["engine"]["digest"] == "sha512"
        assert config["engine"]["salt_bytes"] == 16
        assert config["run"]["identity"] == "alice"

    def test_deep_merge_does_not_mutate(self):
        """Test _deep_merge leaves its inputs untouched."""
        base = {"a": {"b": 1, "c": 2}}
        merged = _deep_merge(base, {"a": {"b": 3}})

        assert merged == {"a": {"b": 3, "c": 2}}
        assert base == {"a": {"b": 1, "c": 2}}


class TestEngineSettings:
    """Tests for engine_settings."""

    def test_defaults_from_base(self):
        settings = engine_settings()

        assert settings == EngineSettings(group="2048", digest="sha256", log_level="WARNING")

    def test_integer_group_names(self):
        """Test YAML integers are accepted as group names."""
        assert engine_settings({"engine": {"group": 3072}}).group == "3072"

    def test_invalid_group(self):
        with pytest.raises(InvalidGroup):
            engine_settings({"engine": {"group": "999"}})

    def test_invalid_values(self):
        """Test unknown digests, sizes below minimum and unknown keys."""
        with pytest.raises(ValueError):
            engine_settings({"engine": {"digest": "md5"}})
        with pytest.raises(ValueError):
            engine_settings({"engine": {"private_bits": 128}})
        with pytest.raises(ValueError):
            engine_settings({"engine": {"salt_bytes": 2}})
        with pytest.raises(ValueError):
            engine_settings({"engine": {"colour": "blue"}})

    def test_settings_are_frozen(self):
        with pytest.raises(AttributeError):
            engine_settings().group = "1024"


# =============================================================================
# Scenario Runner Tests
# =============================================================================


class TestScenarioRunner:
    """Tests for the in-process scenario runner."""

    def test_honest_handshake(self):
        """Test an honest run succeeds with matching keys."""
        result = run_handshake(_fast_config(), run_id=3)

        assert result.run_id == 3
        assert result.success is True
        assert result.keys_match is True
        assert result.group == "1024"
        assert result.duration_ms > 0
        assert result.as_expected

    def test_wrong_password(self):
        """Test a wrong login password is rejected as expected."""
        result = run_handshake(_fast_config(login_password="not-it"))

        assert result.success is False
        assert result.error_type == "ProofMismatch"
        assert result.as_expected

    @pytest.mark.parametrize("target,error", [
        ("A", "InvalidPublicValue"),
        ("B", "InvalidPublicValue"),
        ("M1", "ProofMismatch"),
        ("M2", "ProofMismatch"),
    ])
    def test_tampering(self, target, error):
        """Test every tamper target is detected."""
        result = run_handshake(_fast_config(tamper=target))

        assert result.success is False
        assert result.error_type == error
        assert result.as_expected

    def test_unknown_tamper_target(self):
        with pytest.raises(ValueError):
            run_handshake(_fast_config(tamper="K"))

    def test_run_scenario(self):
        """Test a bundled scenario runs end to end."""
        result = run_scenario("legacy_sha1")

        assert result.scenario_name == "legacy_sha1"
        assert len(result.runs) == 5
        assert result.summary["success_rate"] == 1.0
        assert all(r.digest == "sha1" for r in result.runs)

    def test_main_list(self, capsys):
        """Test --list prints the scenarios."""
        assert main(["--list"]) == 0
        assert "default" in capsys.readouterr().out

    def test_main_log_level_overrides_config(self, engine_stderr):
        """Test --log-level wins over the level in the scenario config."""
        try:
            assert main(["--scenario", "legacy_sha1", "--log-level", "DEBUG", "--no-save"]) == 0
            err = engine_stderr.readouterr().err
        finally:
            set_log_level("WARNING")

        assert "Running scenario legacy_sha1" in err
        assert "DEBUG:srp_pake.session.client:" in err
        assert "DEBUG:srp_pake.session.server:" in err

    def test_run_scenario_uses_config_level(self, engine_stderr):
        """Test the config level applies when no override is given."""
        run_scenario("legacy_sha1")
        assert "DEBUG:srp_pake.session" not in engine_stderr.readouterr().err

    def test_main_writes_results(self):
        """Test main saves JSON, CSV and the report."""
        with tempfile.TemporaryDirectory() as tmpdir:
            code = main(["--scenario", "tampered_proof", "--output-dir", tmpdir, "--log-level", "WARNING"])
            files = sorted(p.suffix for p in Path(tmpdir).iterdir())

        assert code == 0
        assert files == [".csv", ".json", ".txt"]
