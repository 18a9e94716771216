"""
Install / uninstall use cases — manifest to executed plan.

Loads the manifest, resolves the repository and home directories,
builds the plan, runs it through the adapter registry and hands back a
result the CLI can render.  Fatal problems end up in ``result.error``
rather than escaping as exceptions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from dotkit.adapters.registry import AdapterRegistry, default_registry
from dotkit.core.config.loader import ConfigError, find_manifest, load_manifest, resolve_repo_root
from dotkit.core.engine.executor import (
    Announcer,
    ExecutionPlan,
    ExecutionReport,
    Reporter,
    StepFailed,
    execute_plan,
)
from dotkit.core.models.manifest import Manifest
from dotkit.core.services.bootstrap import (
    BootstrapPaths,
    build_install_plan,
    build_uninstall_plan,
)
from dotkit.core.services.probes import SystemProbe

logger = logging.getLogger(__name__)


@dataclass
class BootstrapResult:
    """Result of an install or uninstall run."""

    operation: str = ""
    manifest: Manifest | None = None
    paths: BootstrapPaths | None = None
    plan: ExecutionPlan | None = None
    report: ExecutionReport | None = None
    dry_run: bool = False
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        d: dict = {"operation": self.operation, "ok": self.ok, "dry_run": self.dry_run}
        if self.error:
            d["error"] = self.error
        if self.paths:
            d["repo_root"] = str(self.paths.repo_root)
            d["home"] = str(self.paths.home)
        if self.report:
            d["report"] = self.report.to_dict()
        return d


def _prepare(
    result: BootstrapResult,
    config_path: Path | None,
    repo_root: Path | None,
    home: Path | None,
) -> bool:
    try:
        if config_path is None:
            config_path = find_manifest()
        result.manifest = load_manifest(config_path)
    except ConfigError as e:
        result.error = str(e)
        return False

    result.paths = BootstrapPaths(
        repo_root=resolve_repo_root(config_path, repo_root),
        home=(home or Path.home()),
    )
    logger.info("Repository root: %s, home: %s", result.paths.repo_root, result.paths.home)
    return True


def _execute(
    result: BootstrapResult,
    registry: AdapterRegistry,
    reporter: Reporter | None,
    announce: Announcer | None,
) -> BootstrapResult:
    assert result.plan is not None
    try:
        result.report = execute_plan(
            result.plan, registry, dry_run=result.dry_run, reporter=reporter, announce=announce
        )
    except StepFailed as e:
        result.report = e.report
        result.error = str(e)
    return result


def run_install(
    config_path: Path | None = None,
    repo_root: Path | None = None,
    home: Path | None = None,
    dry_run: bool = False,
    mock_mode: bool = False,
    links_only: bool = False,
    registry: AdapterRegistry | None = None,
    probe: SystemProbe | None = None,
    reporter: Reporter | None = None,
    announce: Announcer | None = None,
) -> BootstrapResult:
    """Install tools and link the managed configuration files.

    Args:
        config_path: Explicit dotkit.yml (default: search upward, else defaults).
        repo_root: Dotfiles repository root (default: manifest dir, else cwd).
        home: Home directory (default: ``Path.home()``).
        dry_run: Show what would run without changing anything.
        mock_mode: Dispatch every step to a mock that always succeeds.
        links_only: Skip package installation; only link and lock plugins.
        registry: Pre-configured adapter registry (tests).
        probe: Machine probe (tests).
        reporter: Called for each step as it completes.
        announce: Called before each step runs.
    """
    result = BootstrapResult(operation="install", dry_run=dry_run)
    if not _prepare(result, config_path, repo_root, home):
        return result
    assert result.manifest is not None and result.paths is not None

    result.plan = build_install_plan(result.manifest, result.paths, probe=probe, links_only=links_only)
    return _execute(result, registry or default_registry(mock_mode=mock_mode), reporter, announce)


def run_uninstall(
    config_path: Path | None = None,
    repo_root: Path | None = None,
    home: Path | None = None,
    dry_run: bool = False,
    registry: AdapterRegistry | None = None,
    reporter: Reporter | None = None,
    announce: Announcer | None = None,
) -> BootstrapResult:
    """Remove the managed symlinks and restore any backups."""
    result = BootstrapResult(operation="uninstall", dry_run=dry_run)
    if not _prepare(result, config_path, repo_root, home):
        return result
    assert result.manifest is not None and result.paths is not None

    result.plan = build_uninstall_plan(result.manifest, result.paths)
    return _execute(result, registry or default_registry(), reporter, announce)
