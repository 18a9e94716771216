"""
Shared test fixtures: a fake dotfiles repository, a fake home, and a
machine probe that answers from a dict instead of the real system.
"""

from pathlib import Path

import pytest

from dotkit.core.models.manifest import Manifest
from dotkit.core.services.probes import SystemProbe


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    """A dotfiles repository holding the three managed config files."""
    root = tmp_path / "dotfiles"
    (root / ".config" / "sheldon").mkdir(parents=True)
    (root / ".zshrc").write_text("# managed zshrc\n")
    (root / ".config" / "sheldon" / "plugins.toml").write_text("shell = 'zsh'\n")
    (root / ".config" / "starship.toml").write_text("add_newline = false\n")
    return root


@pytest.fixture
def home(tmp_path: Path, monkeypatch) -> Path:
    """An empty home directory, also exported as $HOME."""
    path = tmp_path / "home"
    path.mkdir()
    monkeypatch.setenv("HOME", str(path))
    return path


@pytest.fixture
def specs(repo: Path, home: Path):
    return Manifest().link_specs(repo, home)


class FakeProbe(SystemProbe):
    """Probe with canned answers.

    tools:    name → path returned by which()
    outputs:  first argv element → text returned by output()
    files:    paths reported as existing (in addition to the real filesystem)
    """

    def __init__(self, tools=None, outputs=None, files=None, environ=None):
        super().__init__(base_path="/usr/bin", environ=environ or {"SHELL": "/bin/bash"})
        self.tools = dict(tools or {})
        self.outputs = dict(outputs or {})
        self.files = {Path(p) for p in (files or [])}

    def which(self, tool):
        return self.tools.get(tool)

    def output(self, argv, timeout=10):
        return self.outputs.get(argv[0], "")

    def exists(self, path):
        return Path(path) in self.files or Path(path).exists()


@pytest.fixture
def fake_probe():
    return FakeProbe
