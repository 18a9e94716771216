"""
Bootstrap plans — the full install and uninstall sequences.

``build_install_plan`` lays out, in order: system packages, Homebrew and
its packages, the pinned Hugo release, starship, the config symlinks,
``sheldon lock``, the fzf shell integration, and the login shell.
Conditional steps decide when they run, so re-running the install on a
finished machine only relinks and re-locks.

``build_uninstall_plan`` only restores the symlinked configuration; it
does not remove packages or change the login shell back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from dotkit.core.engine.executor import ExecutionPlan, SkipReason, Step
from dotkit.core.models.action import Action
from dotkit.core.models.link import LinkSpec
from dotkit.core.models.manifest import Manifest
from dotkit.core.services import pinned_release
from dotkit.core.services.probes import SystemProbe

logger = logging.getLogger(__name__)

UNINSTALL_REMINDERS = [
    "Installed packages (apt, brew, hugo, uv, fzf, sheldon, starship) were NOT removed.",
    "The default shell was NOT changed back. Use e.g. 'chsh -s /bin/bash' if you want to.",
    "Generated files like ~/.fzf.zsh were NOT removed.",
    "The dotfiles repository itself was NOT removed.",
]

_TOOL_LABELS = {
    "fzf": "fzf (fuzzy finder)",
    "sheldon": "Sheldon (plugin manager) with plugins defined in dotfiles",
    "uv": "uv (Python package manager)",
}


@dataclass
class BootstrapPaths:
    """Where the bootstrap reads from and writes to."""

    repo_root: Path
    home: Path

    @property
    def fzf_config(self) -> Path:
        return self.home / ".fzf.zsh"


def _shell(action_id: str, name: str, argv: list[str], **params) -> Action:
    return Action(id=action_id, name=name, adapter="shell", params={"argv": argv, **params})


def _links_action(operation: str, specs: list[LinkSpec]) -> Action:
    return Action(
        id=f"links-{operation}",
        name=f"{operation.capitalize()} configuration symlinks",
        adapter="links",
        params={"operation": operation, "specs": specs},
    )


# ── Install ─────────────────────────────────────────────────────


def system_package_steps(manifest: Manifest) -> list[Step]:
    steps = [
        Step.run(
            "Updating apt package lists",
            _shell("apt-update", "apt update", ["apt", "update"], sudo=True, stream=True),
        )
    ]
    if manifest.apt_upgrade:
        steps.append(
            Step.run(
                "Upgrading installed packages",
                _shell("apt-upgrade", "apt upgrade", ["apt", "upgrade", "-y"], sudo=True, stream=True),
            )
        )
    if manifest.apt_packages:
        steps.append(
            Step.run(
                f"Installing essentials ({', '.join(manifest.apt_packages)})",
                _shell(
                    "apt-install",
                    "apt install",
                    ["apt", "install", "-y", *manifest.apt_packages],
                    sudo=True,
                    stream=True,
                ),
            )
        )
    return steps


def homebrew_steps(manifest: Manifest, probe: SystemProbe) -> list[Step]:
    def _bootstrap() -> Action | SkipReason:
        if probe.which("brew"):
            return SkipReason("Homebrew is already installed.")
        return _shell(
            "brew-bootstrap",
            "Install Homebrew",
            ["/bin/bash", "-c", f'/bin/bash -c "$(curl -fsSL {manifest.homebrew_install_url})"'],
            stream=True,
        )

    steps = [Step(title="Installing Homebrew (Linuxbrew)", build=_bootstrap)]
    if manifest.brew_packages:
        steps.append(
            Step.run(
                f"Installing tools via Homebrew ({', '.join(manifest.brew_packages)})",
                _shell("brew-install", "brew install", ["brew", "install", *manifest.brew_packages], stream=True),
            )
        )
    return steps


def starship_step(manifest: Manifest, probe: SystemProbe) -> Step:
    def _build() -> Action | SkipReason:
        if probe.which("starship"):
            return SkipReason("Starship is already installed.")
        return _shell(
            "starship-install",
            "Install starship",
            ["bash", "-o", "pipefail", "-c", f"curl -fsSL {manifest.starship_install_url} | sh -s -- --yes"],
            stream=True,
        )

    return Step(title="Installing Starship", build=_build)


def sheldon_step(specs: list[LinkSpec], probe: SystemProbe) -> Step | None:
    sheldon = next((s for s in specs if s.name == "sheldon"), None)
    if sheldon is None:
        return None

    def _build() -> Action | SkipReason:
        if not probe.exists(sheldon.target):
            return SkipReason(
                f"Sheldon config file ({sheldon.target}) not found or not linked. Skipping 'sheldon lock'.",
                warn=True,
            )
        if not probe.which("sheldon"):
            return SkipReason("sheldon not found in PATH. Skipping 'sheldon lock'.", warn=True)
        return _shell("sheldon-lock", "sheldon lock", ["sheldon", "lock"], stream=True)

    return Step(title="Installing Sheldon plugins (sheldon lock)", build=_build)


def fzf_step(manifest: Manifest, paths: BootstrapPaths, probe: SystemProbe) -> Step:
    script = Path(manifest.brew_prefix) / "opt" / "fzf" / "install"
    config = paths.fzf_config

    def _build() -> Action | SkipReason:
        if not probe.exists(script):
            return SkipReason(f"fzf install script not found at {script}. Cannot generate {config}.", warn=True)
        if probe.exists(config) and not probe.is_symlink(config):
            return SkipReason(f"{config} already exists and is a regular file (not generating).")
        # --no-update-rc: the managed .zshrc already sources it
        return _shell("fzf-install", "fzf shell integration", [str(script), "--all", "--no-update-rc"], stream=True)

    return Step(title=f"Generating {config}", build=_build)


def login_shell_step(manifest: Manifest, probe: SystemProbe) -> Step:
    def _build() -> Action | SkipReason:
        shell_path = probe.which(manifest.login_shell)
        if not shell_path:
            return SkipReason(
                f"{manifest.login_shell} not found in PATH. Cannot change default shell.", warn=True
            )
        if probe.getenv("SHELL") == shell_path:
            return SkipReason(f"Default shell is already {manifest.login_shell} ({shell_path}).")
        # chsh prompts for the password; it must reach the terminal
        return _shell("chsh", f"Change login shell to {shell_path}", ["chsh", "-s", shell_path], stream=True)

    return Step(
        title=f"Changing default shell to {manifest.login_shell}",
        build=_build,
        fatal=False,
        on_failure=[
            "Failed to change default shell using 'chsh'. You might need to do it manually,",
            f"e.g. 'sudo chsh -s \"$(which {manifest.login_shell})\" \"$USER\"'.",
        ],
        on_success=["Log out and back in (or restart WSL) for the new shell to take effect."],
    )


def build_install_plan(
    manifest: Manifest,
    paths: BootstrapPaths,
    probe: SystemProbe | None = None,
    links_only: bool = False,
) -> ExecutionPlan:
    """Full install sequence; ``links_only`` keeps just the symlink and plugin steps."""
    probe = probe or SystemProbe()
    probe.add_path(Path(manifest.brew_prefix) / "bin")
    specs = manifest.link_specs(paths.repo_root, paths.home)
    plan = ExecutionPlan(name="install")

    if not links_only:
        for step in system_package_steps(manifest):
            plan.add(step)
        for step in homebrew_steps(manifest, probe):
            plan.add(step)
        for step in pinned_release.plan_steps(manifest.hugo, probe):
            plan.add(step)
        plan.add(starship_step(manifest, probe))

    plan.add(Step.run(f"Linking configuration files from {paths.repo_root}", _links_action("install", specs)))

    sheldon = sheldon_step(specs, probe)
    if sheldon is not None:
        plan.add(sheldon)

    if not links_only:
        plan.add(fzf_step(manifest, paths, probe))
        plan.add(login_shell_step(manifest, probe))

    plan.env = probe.env()
    logger.debug("Install plan: %d steps", plan.total_steps)
    return plan


# ── Uninstall ───────────────────────────────────────────────────


def build_uninstall_plan(manifest: Manifest, paths: BootstrapPaths) -> ExecutionPlan:
    """Remove the managed symlinks and restore backups."""
    specs = manifest.link_specs(paths.repo_root, paths.home)
    plan = ExecutionPlan(name="uninstall")
    plan.add(Step.run("Restoring original configuration files", _links_action("restore", specs)))
    return plan


# ── Summary ─────────────────────────────────────────────────────


def install_summary(manifest: Manifest, links_only: bool = False) -> list[str]:
    """What a finished install set up, one line per tool."""
    lines: list[str] = []
    if not links_only:
        if manifest.apt_packages:
            lines.append(f"System essentials and {manifest.login_shell.capitalize()} shell")
        lines.append("Homebrew (Linuxbrew)")
        lines.extend(_TOOL_LABELS.get(pkg, pkg) for pkg in manifest.brew_packages)
        lines.append("Starship (prompt)")
        release = manifest.hugo
        lines.append(f"{release.name.capitalize()} v{release.version} extended (static site generator)")
    names = ", ".join(entry.name for entry in manifest.links)
    lines.append(f"Dotfiles ({names}) linked")
    return lines
