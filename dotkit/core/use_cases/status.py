"""
Status use case — where each managed link stands right now.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from dotkit.core.config.loader import ConfigError, find_manifest, load_manifest, resolve_repo_root
from dotkit.core.models.link import LinkSpec, LinkState


@dataclass
class LinkStatus:
    spec: LinkSpec
    state: LinkState
    linked: bool
    source_exists: bool
    backup_exists: bool

    def to_dict(self) -> dict:
        return {
            "name": self.spec.name,
            "source": str(self.spec.source),
            "target": str(self.spec.target),
            "state": self.state.value,
            "linked": self.linked,
            "source_exists": self.source_exists,
            "backup_exists": self.backup_exists,
        }


@dataclass
class StatusResult:
    repo_root: Path | None = None
    links: list[LinkStatus] = field(default_factory=list)
    error: str | None = None

    @property
    def linked_count(self) -> int:
        return sum(1 for s in self.links if s.linked)

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        return {
            "repo_root": str(self.repo_root),
            "linked": self.linked_count,
            "total": len(self.links),
            "links": [s.to_dict() for s in self.links],
        }


def get_link_status(
    config_path: Path | None = None,
    repo_root: Path | None = None,
    home: Path | None = None,
) -> StatusResult:
    """Inspect every managed link without changing anything."""
    result = StatusResult()
    try:
        if config_path is None:
            config_path = find_manifest()
        manifest = load_manifest(config_path)
    except ConfigError as e:
        result.error = str(e)
        return result

    result.repo_root = resolve_repo_root(config_path, repo_root)
    for spec in manifest.link_specs(result.repo_root, home or Path.home()):
        result.links.append(
            LinkStatus(
                spec=spec,
                state=spec.target_state(),
                linked=spec.is_linked(),
                source_exists=spec.source.exists(),
                backup_exists=spec.backup.exists(),
            )
        )
    return result
