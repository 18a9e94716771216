"""
Tests for the CLI commands (click CliRunner).

Only --links-only, --dry-run and --mock runs are exercised here; a
full install would call apt and curl.
"""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from dotkit.main import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch):
    """No stray dotkit.yml above the working directory."""
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)


class TestCliBasics:
    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for name in ("install", "uninstall", "status", "timer"):
            assert name in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestInstall:
    def test_links_only(self, runner, repo, home):
        (home / ".zshrc").write_text("original")

        result = runner.invoke(cli, ["install", "--links-only", "--repo", str(repo)])

        assert result.exit_code == 0, result.output
        assert "Starting setup..." in result.output
        assert "Setup complete!" in result.output
        assert (home / ".zshrc").resolve() == (repo / ".zshrc").resolve()
        assert (home / ".zshrc.bak").read_text() == "original"
        assert (home / ".config" / "starship.toml").is_symlink()

    def test_missing_source_warns_and_continues(self, runner, repo, home):
        (repo / ".config" / "starship.toml").unlink()

        result = runner.invoke(cli, ["install", "--links-only", "--repo", str(repo)])

        assert result.exit_code == 0, result.output
        assert "[WARN]" in result.output
        assert (home / ".zshrc").is_symlink()
        assert not (home / ".config" / "starship.toml").exists()

    def test_dry_run_changes_nothing(self, runner, repo, home):
        result = runner.invoke(cli, ["install", "--dry-run", "--repo", str(repo)])

        assert result.exit_code == 0, result.output
        assert "[dry-run] Would run sudo apt update" in result.output
        assert "Dry run complete" in result.output
        assert list(home.iterdir()) == []

    def test_mock_changes_nothing(self, runner, repo, home):
        result = runner.invoke(cli, ["install", "--mock", "--repo", str(repo)])
        assert result.exit_code == 0, result.output
        assert "[mock] Starting setup..." in result.output
        assert "Hugo v0.145.0 extended (static site generator)" in result.output
        assert "Sheldon (plugin manager) with plugins defined in dotfiles" in result.output
        assert not (home / ".zshrc").exists()

    def test_json_output(self, runner, repo, home):
        result = runner.invoke(cli, ["install", "--links-only", "--json", "--repo", str(repo)])
        data = json.loads(result.output)
        assert data["operation"] == "install"
        assert data["repo_root"] == str(repo.resolve())
        steps = data["report"]["steps"]
        assert [r["outcome"] for r in steps[0]["results"]] == ["linked", "linked", "linked"]

    def test_invalid_config_exits_1(self, runner, tmp_path):
        bad = tmp_path / "dotkit.yml"
        bad.write_text("links: [unclosed\n")
        result = runner.invoke(cli, ["-c", str(bad), "install", "--links-only"])
        assert result.exit_code == 1
        assert "Invalid YAML" in result.output

    def test_manifest_directory_is_repo_root(self, runner, repo, home, monkeypatch):
        (repo / "dotkit.yml").write_text("brew_packages: [fzf]\n")
        monkeypatch.chdir(repo / ".config")

        result = runner.invoke(cli, ["install", "--links-only"])

        assert result.exit_code == 0, result.output
        assert (home / ".zshrc").resolve() == (repo / ".zshrc").resolve()


class TestUninstall:
    def test_round_trip(self, runner, repo, home):
        (home / ".zshrc").write_text("original")
        runner.invoke(cli, ["install", "--links-only", "--repo", str(repo)])

        result = runner.invoke(cli, ["uninstall", "--repo", str(repo)])

        assert result.exit_code == 0, result.output
        assert "Uninstallation (restoration) complete." in result.output
        assert "NOT removed" in result.output
        assert (home / ".zshrc").read_text() == "original"
        assert not (home / ".zshrc").is_symlink()
        assert not (home / ".config" / "starship.toml").exists()

    def test_user_file_left_alone(self, runner, repo, home):
        (home / ".zshrc").write_text("hand-written")
        result = runner.invoke(cli, ["uninstall", "--repo", str(repo)])
        assert result.exit_code == 0
        assert "[WARN]" in result.output
        assert (home / ".zshrc").read_text() == "hand-written"


class TestStatus:
    def test_status_json(self, runner, repo, home):
        runner.invoke(cli, ["install", "--links-only", "--repo", str(repo)])
        result = runner.invoke(cli, ["status", "--json", "--repo", str(repo)])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["linked"] == 3
        assert data["total"] == 3
        assert {link["state"] for link in data["links"]} == {"symlink"}

    def test_status_text(self, runner, repo, home):
        result = runner.invoke(cli, ["status", "--repo", str(repo)])
        assert result.exit_code == 0
        assert "Links: 0/3 linked" in result.output


class TestTimer:
    def test_start_prints_timestamp(self, runner):
        result = runner.invoke(cli, ["timer", "start"])
        assert result.exit_code == 0
        assert float(result.output.strip()) > 0

    def test_finish_without_start_is_silent(self, runner):
        # first prompt of a new shell: no command has started yet
        result = runner.invoke(cli, ["timer", "finish", "--started-at", "", "--command", "", "--exit-code", "0"])
        assert result.exit_code == 0
        assert result.output == ""

    def test_finish_with_option_missing_is_silent(self, runner):
        result = runner.invoke(cli, ["timer", "finish", "--json"])
        assert result.exit_code == 0
        assert result.output == ""

    def test_finish_garbage_timestamp_does_not_fail(self, runner):
        result = runner.invoke(cli, ["timer", "finish", "--started-at", "soon"])
        assert result.exit_code == 0
        assert "not a timestamp" in result.output

    def test_only_one_notification_per_start(self, runner, tmp_path):
        config = tmp_path / "dotkit.yml"
        config.write_text("notify:\n  command: [dotkit-no-such-notifier]\n")
        base = ["-c", str(config), "timer", "finish", "--command", "make", "--json"]

        first = runner.invoke(cli, [*base, "--started-at", "0"])
        # empty Enter: the hook cleared the start value, so finish gets ""
        second = runner.invoke(cli, [*base, "--started-at", ""])

        assert json.loads(first.output)["notified"] is True
        assert second.exit_code == 0
        assert second.output == ""

    def test_finish_short_command(self, runner):
        result = runner.invoke(cli, ["timer", "finish", "--started-at", "9999999999", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output)["notified"] is False

    def test_finish_long_command(self, runner, tmp_path):
        config = tmp_path / "dotkit.yml"
        config.write_text("notify:\n  command: [dotkit-no-such-notifier]\n")

        result = runner.invoke(
            cli,
            ["-c", str(config), "timer", "finish", "--started-at", "0", "--command", "make", "--exit-code", "2", "--json"],
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["notified"] is True
        assert data["sent"] is False
        assert data["title"] == "Command failed (exit 2)"
        assert data["message"].startswith("make (")
