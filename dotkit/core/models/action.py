"""
Action and Receipt models — the step execution contract.

An Action is one bootstrap step handed to an adapter (run a command,
install the links, restore the links). A Receipt is what comes back.
Adapters report failure through the receipt, never by raising; the
executor decides whether a failed receipt aborts the run.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Action(BaseModel):
    """A single step to be executed by an adapter."""

    id: str                         # e.g. "apt-install", "links-install"
    name: str = ""                  # human-readable title
    adapter: str                    # "shell", "links", ...
    params: dict[str, Any] = Field(default_factory=dict)

    def describe(self) -> str:
        """Short text for dry-run and progress output."""
        argv = self.params.get("argv")
        if argv:
            prefix = "sudo " if self.params.get("sudo") else ""
            return prefix + " ".join(str(a) for a in argv)
        if self.params.get("operation"):
            return f"{self.adapter}:{self.params['operation']}"
        return self.name or self.id


class Receipt(BaseModel):
    """Outcome of executing an Action."""

    adapter: str
    action_id: str
    status: Literal["ok", "skipped", "failed"] = "ok"

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    output: str = ""
    error: str | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def success(cls, adapter: str, action_id: str, output: str = "", **kwargs: Any) -> Receipt:
        """Create a success receipt."""
        return cls(adapter=adapter, action_id=action_id, status="ok", output=output, **kwargs)

    @classmethod
    def failure(cls, adapter: str, action_id: str, error: str, **kwargs: Any) -> Receipt:
        """Create a failure receipt."""
        return cls(adapter=adapter, action_id=action_id, status="failed", error=error, **kwargs)

    @classmethod
    def skip(cls, adapter: str, action_id: str, reason: str = "", **kwargs: Any) -> Receipt:
        """Create a skip receipt."""
        return cls(adapter=adapter, action_id=action_id, status="skipped", output=reason, **kwargs)
