"""
Link models — the managed (source, target, backup) triples.

A LinkSpec names one configuration file kept in the dotfiles
repository (``source``) and the place a tool expects to find it
(``target``).  Pre-existing content at the target is parked next to it
under ``target + backup_suffix``.

At any time a target is in one of three states: absent, a regular
file (or directory), or a symlink.  ``inspect_target`` classifies a
path without following symlinks, so a dangling link still counts as a
symlink.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict

DEFAULT_BACKUP_SUFFIX = ".bak"


class LinkState(str, Enum):
    """Filesystem state of a link target."""

    ABSENT = "absent"
    FILE = "file"
    SYMLINK = "symlink"


def inspect_target(path: Path) -> LinkState:
    """Classify ``path`` without following a symlink at its last component."""
    if path.is_symlink():
        return LinkState.SYMLINK
    if path.exists():
        return LinkState.FILE
    return LinkState.ABSENT


class LinkSpec(BaseModel):
    """One managed configuration file."""

    model_config = ConfigDict(frozen=True)

    name: str
    source: Path
    target: Path
    backup_suffix: str = DEFAULT_BACKUP_SUFFIX

    @property
    def backup(self) -> Path:
        """Sibling of ``target`` holding the pre-install content."""
        return self.target.with_name(self.target.name + self.backup_suffix)

    def target_state(self) -> LinkState:
        return inspect_target(self.target)

    def is_linked(self) -> bool:
        """True when ``target`` is a symlink whose text points at ``source``."""
        if not self.target.is_symlink():
            return False
        return Path(os.readlink(self.target)) == self.source


class LinkOutcome(str, Enum):
    """What install/restore did to one LinkSpec."""

    # install
    LINKED = "linked"
    RELINKED = "relinked"
    BACKED_UP_AND_LINKED = "backed_up_and_linked"
    SKIPPED_MISSING_SOURCE = "skipped_missing_source"
    # restore
    UNLINKED = "unlinked"
    RESTORED = "restored"
    UNLINKED_AND_RESTORED = "unlinked_and_restored"
    LEFT_UNTOUCHED = "left_untouched"
    NOTHING_TO_DO = "nothing_to_do"


# Outcomes that leave the entry short of what was asked for.
_UNCLEAN = {LinkOutcome.SKIPPED_MISSING_SOURCE, LinkOutcome.LEFT_UNTOUCHED}


@dataclass
class LinkResult:
    """Result of installing or restoring one LinkSpec."""

    spec: LinkSpec
    outcome: LinkOutcome
    message: str = ""
    warnings: list[str] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        return self.outcome not in _UNCLEAN

    def to_dict(self) -> dict:
        return {
            "name": self.spec.name,
            "source": str(self.spec.source),
            "target": str(self.spec.target),
            "backup": str(self.spec.backup),
            "outcome": self.outcome.value,
            "message": self.message,
            "warnings": list(self.warnings),
        }
