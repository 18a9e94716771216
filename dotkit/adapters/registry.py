"""
Adapter registry — how a plan step reaches an adapter.

Every action goes through ``execute_action``: pick the adapter (or the
mock), validate its params, then either describe it (dry run) or run
it.  The result is always a Receipt.
"""

from __future__ import annotations

import logging
import time

from dotkit.adapters.base import Adapter, ExecutionContext
from dotkit.core.models.action import Action, Receipt

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Adapters by name, plus the dispatch rules for dry-run and mock mode.

    In mock mode every action goes to ``mock_adapter``; without one,
    each action gets a canned success receipt and nothing is touched.
    """

    def __init__(self, mock_mode: bool = False, mock_adapter: Adapter | None = None):
        self._adapters: dict[str, Adapter] = {}
        self.mock_mode = mock_mode
        self.mock_adapter = mock_adapter

    def register(self, adapter: Adapter) -> None:
        if adapter.name in self._adapters:
            logger.warning("Replacing adapter %r", adapter.name)
        self._adapters[adapter.name] = adapter

    def get(self, name: str) -> Adapter | None:
        return self._adapters.get(name)

    def _resolve(self, action: Action) -> Adapter | None:
        if self.mock_mode and self.mock_adapter is not None:
            return self.mock_adapter
        return self.get(action.adapter)

    def execute_action(
        self,
        action: Action,
        env: dict[str, str] | None = None,
        dry_run: bool = False,
    ) -> Receipt:
        """Run ``action`` through its adapter.

        Args:
            action: The action to execute.
            env: Environment overrides for command adapters.
            dry_run: Validate only; return a skipped receipt describing the action.
        """
        if self.mock_mode and self.mock_adapter is None:
            return Receipt.success(
                adapter=action.adapter,
                action_id=action.id,
                output=f"[mock] {action.describe()}",
                metadata={"mock": True, "dry_run": dry_run},
            )

        adapter = self._resolve(action)
        if adapter is None:
            return Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"No adapter registered for '{action.adapter}'",
            )
        if not adapter.is_available():
            return Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"Adapter '{adapter.name}' is not available on this machine",
            )

        context = ExecutionContext(action=action, env=env or {})
        is_valid, error_msg = adapter.validate(context)
        if not is_valid:
            return Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"Validation failed: {error_msg}",
            )

        if dry_run:
            return Receipt.skip(
                adapter=action.adapter,
                action_id=action.id,
                reason=f"[dry-run] Would run {action.describe()}",
                metadata={"dry_run": True},
            )

        started = time.monotonic()
        receipt = adapter.execute(context)
        receipt.duration_ms = int((time.monotonic() - started) * 1000)
        logger.debug("%s via %s: %s in %dms", action.id, adapter.name, receipt.status, receipt.duration_ms)
        return receipt


def default_registry(mock_mode: bool = False) -> AdapterRegistry:
    """Registry with the shell and links adapters registered."""
    from dotkit.adapters.shell.command import ShellCommandAdapter
    from dotkit.adapters.shell.links import LinkAdapter

    registry = AdapterRegistry(mock_mode=mock_mode)
    registry.register(ShellCommandAdapter())
    registry.register(LinkAdapter())
    return registry
