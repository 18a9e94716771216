"""
Link installer and restorer.

``install_link`` makes a target a symlink to its source, parking any
pre-existing regular content at the backup path.  ``restore_link``
undoes that: it removes the symlink and moves the backup back, but
never deletes or overwrites content it did not create.

Both are idempotent.  A missing source or an unexpected regular file
during restore is reported in the LinkResult and leaves the entry's
state unchanged; filesystem errors (permissions and the like) propagate.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from dotkit.core.models.link import LinkOutcome, LinkResult, LinkSpec, LinkState, inspect_target

logger = logging.getLogger(__name__)


def install_link(spec: LinkSpec) -> LinkResult:
    """Point ``spec.target`` at ``spec.source``."""
    if not spec.source.exists():
        msg = f"{spec.source.name} not found in {spec.source.parent}. Skipping link."
        logger.info("[%s] %s", spec.name, msg)
        return LinkResult(spec, LinkOutcome.SKIPPED_MISSING_SOURCE, msg, warnings=[msg])

    spec.target.parent.mkdir(parents=True, exist_ok=True)

    state = inspect_target(spec.target)
    if state is LinkState.SYMLINK:
        logger.info("[%s] Replacing existing symlink %s", spec.name, spec.target)
        spec.target.unlink()
        outcome = LinkOutcome.RELINKED
    elif state is LinkState.FILE:
        # An older backup at the same path is overwritten.
        logger.info("[%s] Backing up %s to %s", spec.name, spec.target, spec.backup)
        spec.target.replace(spec.backup)
        outcome = LinkOutcome.BACKED_UP_AND_LINKED
    else:
        outcome = LinkOutcome.LINKED

    spec.target.symlink_to(spec.source)
    logger.info("[%s] %s linked to %s", spec.name, spec.target, spec.source)

    if outcome is LinkOutcome.BACKED_UP_AND_LINKED:
        msg = f"Backed up existing {spec.target} to {spec.backup}; linked to {spec.source}."
        return LinkResult(spec, outcome, msg)
    return LinkResult(spec, outcome, f"{spec.target} linked to {spec.source}.")


def restore_link(spec: LinkSpec) -> LinkResult:
    """Remove the symlink at ``spec.target`` and put the backup back."""
    if not spec.target.parent.is_dir():
        msg = f"Directory {spec.target.parent} does not exist. Nothing to restore for {spec.target}."
        logger.info("[%s] %s", spec.name, msg)
        return LinkResult(spec, LinkOutcome.NOTHING_TO_DO, msg)

    warnings: list[str] = []
    unlinked = False

    state = inspect_target(spec.target)
    if state is LinkState.SYMLINK:
        logger.info("[%s] Removing symlink %s", spec.name, spec.target)
        spec.target.unlink()
        unlinked = True
    elif state is LinkState.FILE:
        warnings.append(
            f"Found a non-symlink file/directory at {spec.target}; leaving it in place. "
            f"Remove it manually first if you want the backup restored."
        )

    restored = False
    if spec.backup.exists():
        if inspect_target(spec.target) is LinkState.ABSENT:
            logger.info("[%s] Restoring %s to %s", spec.name, spec.backup, spec.target)
            spec.backup.rename(spec.target)
            restored = True
        else:
            warnings.append(
                f"Backup {spec.backup} exists, but {spec.target} is already present. "
                f"Skipping restoration to prevent overwriting."
            )

    for warning in warnings:
        logger.info("[%s] %s", spec.name, warning)

    if state is LinkState.FILE:
        return LinkResult(spec, LinkOutcome.LEFT_UNTOUCHED, f"Left {spec.target} untouched.", warnings)
    if unlinked and restored:
        return LinkResult(
            spec,
            LinkOutcome.UNLINKED_AND_RESTORED,
            f"Removed symlink {spec.target} and restored it from {spec.backup}.",
            warnings,
        )
    if unlinked:
        return LinkResult(spec, LinkOutcome.UNLINKED, f"Removed symlink {spec.target}; no backup found.", warnings)
    if restored:
        return LinkResult(spec, LinkOutcome.RESTORED, f"Restored {spec.target} from {spec.backup}.", warnings)
    return LinkResult(spec, LinkOutcome.NOTHING_TO_DO, f"No symlink or backup for {spec.target}.", warnings)


def install_links(specs: Iterable[LinkSpec]) -> list[LinkResult]:
    """Install every spec in order; each entry is handled independently."""
    return [install_link(spec) for spec in specs]


def restore_links(specs: Iterable[LinkSpec]) -> list[LinkResult]:
    """Restore every spec in order; each entry is handled independently."""
    return [restore_link(spec) for spec in specs]
