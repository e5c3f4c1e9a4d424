"""Tests for wave_release.cli."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from wave_release.cli import cli
from wave_release.errors import PublishActionError
from wave_release.models import PublishTag


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def packages_dir(tmp_path: Path, write_package) -> Path:
    write_package("a", {"name": "a", "version": "1.0.0"})
    write_package("b", {"name": "b", "version": "1.0.0", "dependencies": {"a": "*"}})
    write_package("c", {"name": "c", "version": "1.0.0", "dependencies": {"a": "*", "b": "*"}})
    return tmp_path / "packages"


class TestPlan:
    def test_prints_waves(self, runner: CliRunner, packages_dir: Path) -> None:
        result = runner.invoke(cli, ["plan", "--packages-dir", str(packages_dir)])

        assert result.exit_code == 0, result.output
        assert "Wave 0:\n  a 1.0.0\n" in result.output
        assert "Wave 1:\n  b 1.0.0 → [a]\n" in result.output
        assert "Wave 2:\n  c 1.0.0 → [a, b]\n" in result.output

    def test_cycle_exits_non_zero(
        self, runner: CliRunner, tmp_path: Path, write_package
    ) -> None:
        write_package("x", {"name": "x", "version": "1.0.0", "dependencies": {"y": "*"}})
        write_package("y", {"name": "y", "version": "1.0.0", "dependencies": {"x": "*"}})

        result = runner.invoke(cli, ["plan", "--packages-dir", str(tmp_path / "packages")])

        assert result.exit_code == 1
        assert "cyclical dependencies" in result.output
        assert "x → y → x" in result.output


class TestPublish:
    @patch("wave_release.cli.run_release")
    def test_env_and_flags(
        self,
        mock_run_release: MagicMock,
        runner: CliRunner,
        packages_dir: Path,
    ) -> None:
        result = runner.invoke(
            cli,
            ["publish", "--packages-dir", str(packages_dir), "-j", "4", "--dry-run"],
            env={"RELEASE_NIGHTLY": "1", "NPM_REGISTRY": "https://r.example/"},
        )

        assert result.exit_code == 0, result.output
        path, config = mock_run_release.call_args[0]
        assert path == packages_dir
        assert config.tag is PublishTag.NIGHTLY
        assert config.registry == "https://r.example"
        assert config.jobs == 4
        assert config.dry_run

    @patch("wave_release.cli.run_release")
    def test_nightly_flag_and_registry_override(
        self, mock_run_release: MagicMock, runner: CliRunner, packages_dir: Path
    ) -> None:
        result = runner.invoke(
            cli,
            [
                "publish",
                "--packages-dir",
                str(packages_dir),
                "--nightly",
                "--registry",
                "https://other.example/",
            ],
            env={"RELEASE_NIGHTLY": ""},
        )

        assert result.exit_code == 0, result.output
        config = mock_run_release.call_args[0][1]
        assert config.tag is PublishTag.NIGHTLY
        assert config.registry == "https://other.example"
        assert config.jobs == 1

    @patch("wave_release.cli.run_release", side_effect=PublishActionError("b", 1))
    def test_release_error_exits_non_zero(
        self, mock_run_release: MagicMock, runner: CliRunner, packages_dir: Path
    ) -> None:
        result = runner.invoke(cli, ["publish", "--packages-dir", str(packages_dir)])

        assert result.exit_code == 1
        assert "Error: Failed to publish b (exit code 1)" in result.output

    def test_rejects_zero_jobs(self, runner: CliRunner, packages_dir: Path) -> None:
        result = runner.invoke(cli, ["publish", "--packages-dir", str(packages_dir), "-j", "0"])
        assert result.exit_code == 2
