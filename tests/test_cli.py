from pathlib import Path

import pytest

import melee_census.continuous.cli as cli
from melee_census.core.config import FailurePolicy
from melee_census.core.errors import PermanentUpstreamError


class _RecordingHarvester:
    instances: list = []

    def __init__(self, config):
        self.config = config
        self.skipped = []
        _RecordingHarvester.instances.append(self)

    def run(self):
        return []


@pytest.fixture(autouse=True)
def _quiet(monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda **_k: None)
    monkeypatch.setattr(cli, "init_sentry", lambda **_k: False)
    _RecordingHarvester.instances = []


def test_missing_key_prints_usage_and_exits_zero(capsys, monkeypatch):
    monkeypatch.setattr(cli, "MonthlyHarvester", _RecordingHarvester)
    assert cli.main([]) == 0
    assert "usage: melee-census" in capsys.readouterr().out
    assert _RecordingHarvester.instances == []


def test_defaults(monkeypatch):
    monkeypatch.setattr(cli, "MonthlyHarvester", _RecordingHarvester)
    assert cli.main(["secret"]) == 0
    config = _RecordingHarvester.instances[0].config
    assert config.api_key == "secret"
    assert config.results_path == Path("results.csv")
    assert config.output_dir == Path("tournaments")
    assert config.failure_policy is FailurePolicy.ABORT
    assert config.timeout is None
    assert config.exclusions.owner_ids == frozenset({906371, 1031337})


def test_options(monkeypatch, tmp_path: Path):
    monkeypatch.setattr(cli, "MonthlyHarvester", _RecordingHarvester)
    rc = cli.main(
        [
            "secret",
            "--results",
            str(tmp_path / "r.csv"),
            "--output-dir",
            str(tmp_path / "out"),
            "--failure-policy",
            "skip",
            "--exclude-slug",
            "weekly-1",
            "--exclude-owner",
            "42",
            "--timeout",
            "30",
            "--no-progress",
        ]
    )
    assert rc == 0
    config = _RecordingHarvester.instances[0].config
    assert config.results_path == tmp_path / "r.csv"
    assert config.failure_policy is FailurePolicy.SKIP
    assert config.exclusions.slugs == frozenset({"weekly-1"})
    assert 42 in config.exclusions.owner_ids
    assert 906371 in config.exclusions.owner_ids
    assert config.timeout == 30.0
    assert config.show_progress is False


def test_harvest_error_returns_one(monkeypatch):
    class _Failing(_RecordingHarvester):
        def run(self):
            raise PermanentUpstreamError("Unauthorized", status_code=401)

    monkeypatch.setattr(cli, "MonthlyHarvester", _Failing)
    assert cli.main(["bad-key"]) == 1
