"""
Tests for the dotkit.yml loader.
"""

from pathlib import Path

import pytest

from dotkit.core.config.loader import (
    ConfigError,
    find_manifest,
    load_manifest,
    resolve_repo_root,
)


class TestFindManifest:
    def test_found_in_start_dir(self, tmp_path: Path):
        (tmp_path / "dotkit.yml").write_text("")
        assert find_manifest(tmp_path) == tmp_path.resolve() / "dotkit.yml"

    def test_found_in_parent(self, tmp_path: Path):
        (tmp_path / "dotkit.yml").write_text("")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_manifest(nested) == tmp_path.resolve() / "dotkit.yml"

    def test_not_found(self, tmp_path: Path):
        assert find_manifest(tmp_path) is None


class TestLoadManifest:
    def test_defaults_when_nothing_found(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        manifest = load_manifest()
        assert [e.name for e in manifest.links] == ["zshrc", "sheldon", "starship"]

    def test_empty_file_means_defaults(self, tmp_path: Path):
        path = tmp_path / "dotkit.yml"
        path.write_text("")
        assert load_manifest(path).hugo.version == "0.145.0"

    def test_overrides(self, tmp_path: Path):
        path = tmp_path / "dotkit.yml"
        path.write_text(
            "backup_suffix: .orig\n"
            "brew_packages: [fzf]\n"
            "hugo:\n"
            "  version: 0.150.1\n"
            "links:\n"
            "  - name: gitconfig\n"
            "    source: git/config\n"
            "    target: ~/.gitconfig\n"
        )
        manifest = load_manifest(path)
        assert manifest.backup_suffix == ".orig"
        assert manifest.brew_packages == ["fzf"]
        assert manifest.hugo.version == "0.150.1"
        assert [e.name for e in manifest.links] == ["gitconfig"]

    def test_explicit_path_missing(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="Config file not found"):
            load_manifest(tmp_path / "nope.yml")

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "dotkit.yml"
        path.write_text("links: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_manifest(path)

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "dotkit.yml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ConfigError, match="Expected a YAML mapping"):
            load_manifest(path)

    def test_validation_error(self, tmp_path: Path):
        path = tmp_path / "dotkit.yml"
        path.write_text("backup_suffix: ''\n")
        with pytest.raises(ConfigError, match="Invalid manifest"):
            load_manifest(path)


class TestResolveRepoRoot:
    def test_override_wins(self, tmp_path: Path):
        assert resolve_repo_root(tmp_path / "x" / "dotkit.yml", tmp_path / "repo") == (tmp_path / "repo").resolve()

    def test_manifest_directory(self, tmp_path: Path):
        assert resolve_repo_root(tmp_path / "dotkit.yml") == tmp_path.resolve()

    def test_cwd_fallback(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert resolve_repo_root(None) == tmp_path.resolve()
