"""
Pinned binary release — install one versioned .deb only when needed.

The installed version is read from the tool's own version command and
compared by substring (``"hugo v0.145.0"``): build suffixes such as
``+extended`` and commit hashes vary, the version number does not.
"""

from __future__ import annotations

import logging

from dotkit.core.engine.executor import SkipReason, Step
from dotkit.core.models.action import Action
from dotkit.core.models.manifest import PinnedRelease
from dotkit.core.services.probes import SystemProbe

logger = logging.getLogger(__name__)


def installed_version_text(release: PinnedRelease, probe: SystemProbe) -> str:
    """Output of the release's version command, or "" when the tool is absent."""
    return probe.output(release.version_command).strip()


def needs_install(release: PinnedRelease, current_text: str) -> bool:
    """True unless ``current_text`` already contains the expected version string."""
    return release.expected not in current_text


def plan_steps(release: PinnedRelease, probe: SystemProbe) -> list[Step]:
    """Steps that download, install and verify ``release``.

    The first step checks the installed version when it runs; on a match
    every step of the release is skipped.
    """
    state = {"install": True}
    deb = str(release.download_path)
    label = f"{release.name} {release.version}"

    def _download() -> Action | SkipReason:
        current = installed_version_text(release, probe)
        state["install"] = needs_install(release, current)
        if not state["install"]:
            logger.debug("%s already installed: %s", release.name, current)
            return SkipReason(f"{label} (or compatible) is already installed: {current}")
        return Action(
            id=f"{release.name}-download",
            name=f"Download {label}",
            adapter="shell",
            params={"argv": ["wget", release.url, "-O", deb], "stream": True},
        )

    def _then(action: Action) -> Action | SkipReason:
        if not state["install"]:
            return SkipReason(f"{label} already installed")
        return action

    install = Action(
        id=f"{release.name}-install",
        name=f"Install {label}",
        adapter="shell",
        params={"argv": ["dpkg", "-i", deb], "sudo": True, "stream": True},
    )
    cleanup = Action(
        id=f"{release.name}-cleanup",
        name="Remove downloaded package",
        adapter="shell",
        params={"argv": ["rm", "-f", deb]},
    )
    fix = Action(
        id=f"{release.name}-fix-broken",
        name="Fix broken dependencies",
        adapter="shell",
        params={"argv": ["apt", "--fix-broken", "install", "-y"], "sudo": True, "stream": True},
    )
    verify = Action(
        id=f"{release.name}-verify",
        name=f"Verify {label}",
        adapter="shell",
        params={"argv": list(release.version_command), "expect_output": release.expected},
    )

    return [
        Step(title=f"Downloading {label} from {release.url}", build=_download),
        Step(title=f"Installing {label} package", build=lambda: _then(install)),
        Step(title="Cleaning up downloaded package", build=lambda: _then(cleanup)),
        Step(title="Checking for and fixing broken dependencies", build=lambda: _then(fix)),
        Step(
            title=f"Verifying {label}",
            build=lambda: _then(verify),
            fatal=False,
            on_failure=[f"{label} installation might have failed. Please check manually."],
            on_success=[f"{label} installed successfully."],
        ),
    ]
