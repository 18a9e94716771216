"""
Domain models — Pydantic types for the bootstrap kit.

    from dotkit.core.models import LinkSpec, Manifest, Action, Receipt
"""

from dotkit.core.models.action import Action, Receipt
from dotkit.core.models.link import (
    LinkOutcome,
    LinkResult,
    LinkSpec,
    LinkState,
    inspect_target,
)
from dotkit.core.models.manifest import (
    LinkEntry,
    Manifest,
    NotifySettings,
    PinnedRelease,
)

__all__ = [
    # action.py
    "Action",
    "Receipt",
    # link.py
    "LinkOutcome",
    "LinkResult",
    "LinkSpec",
    "LinkState",
    "inspect_target",
    # manifest.py
    "LinkEntry",
    "Manifest",
    "NotifySettings",
    "PinnedRelease",
]
