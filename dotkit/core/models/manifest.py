"""
Manifest model — what the bootstrap installs and links.

Loaded from ``dotkit.yml`` when one exists; every field has a default
so an empty (or missing) manifest describes the stock setup: zsh,
Homebrew with fzf/sheldon/uv, a pinned Hugo extended release, starship,
and the three managed configuration files.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from dotkit.core.models.link import DEFAULT_BACKUP_SUFFIX, LinkSpec


class LinkEntry(BaseModel):
    """A link as declared in the manifest (paths not yet resolved)."""

    name: str
    source: str   # relative to the dotfiles repository root
    target: str   # "~/..." or relative to home, or absolute


DEFAULT_LINKS: tuple[LinkEntry, ...] = (
    LinkEntry(name="zshrc", source=".zshrc", target="~/.zshrc"),
    LinkEntry(
        name="sheldon",
        source=".config/sheldon/plugins.toml",
        target="~/.config/sheldon/plugins.toml",
    ),
    LinkEntry(
        name="starship",
        source=".config/starship.toml",
        target="~/.config/starship.toml",
    ),
)


class PinnedRelease(BaseModel):
    """A binary release installed from a downloaded .deb at a fixed version."""

    name: str = "hugo"
    version: str = "0.145.0"
    url_template: str = (
        "https://github.com/gohugoio/hugo/releases/download/"
        "v{version}/hugo_extended_{version}_linux-amd64.deb"
    )
    expected_template: str = "hugo v{version}"
    version_command: list[str] = Field(default_factory=lambda: ["hugo", "version"])
    download_dir: str = "/tmp"

    @property
    def url(self) -> str:
        return self.url_template.format(version=self.version)

    @property
    def expected(self) -> str:
        """Substring the version command must print when the pin is installed."""
        return self.expected_template.format(version=self.version)

    @property
    def download_path(self) -> Path:
        return Path(self.download_dir) / self.url.rsplit("/", 1)[-1]


class NotifySettings(BaseModel):
    """Long-running command notifications."""

    threshold_seconds: float = 10.0
    command: list[str] = Field(default_factory=lambda: ["wsl-notify-send"])


class Manifest(BaseModel):
    """Root bootstrap configuration."""

    links: list[LinkEntry] = Field(default_factory=lambda: list(DEFAULT_LINKS))
    backup_suffix: str = DEFAULT_BACKUP_SUFFIX

    apt_packages: list[str] = Field(
        default_factory=lambda: [
            "build-essential", "curl", "wget", "git", "file", "procps", "zsh", "wsl-utils",
        ]
    )
    apt_upgrade: bool = True

    homebrew_install_url: str = (
        "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"
    )
    brew_prefix: str = "/home/linuxbrew/.linuxbrew"
    brew_packages: list[str] = Field(default_factory=lambda: ["fzf", "sheldon", "uv"])

    hugo: PinnedRelease = Field(default_factory=PinnedRelease)

    starship_install_url: str = "https://starship.rs/install.sh"
    login_shell: str = "zsh"

    notify: NotifySettings = Field(default_factory=NotifySettings)

    @field_validator("links")
    @classmethod
    def _unique_link_names(cls, links: list[LinkEntry]) -> list[LinkEntry]:
        seen: set[str] = set()
        for entry in links:
            if entry.name in seen:
                raise ValueError(f"duplicate link name: {entry.name}")
            seen.add(entry.name)
        return links

    @field_validator("backup_suffix")
    @classmethod
    def _non_empty_suffix(cls, suffix: str) -> str:
        if not suffix:
            raise ValueError("backup_suffix must not be empty")
        return suffix

    def link_specs(self, repo_root: Path, home: Path) -> list[LinkSpec]:
        """Resolve the declared links against a repository root and home dir."""
        root = repo_root.resolve()
        return [
            LinkSpec(
                name=entry.name,
                source=root / entry.source,
                target=resolve_target(entry.target, home),
                backup_suffix=self.backup_suffix,
            )
            for entry in self.links
        ]


def resolve_target(raw: str, home: Path) -> Path:
    """Expand ``~`` against ``home``; relative paths are taken from home too."""
    path = Path(raw)
    if path.parts and path.parts[0] == "~":
        return home.joinpath(*path.parts[1:])
    if path.is_absolute():
        return path
    return home / path
