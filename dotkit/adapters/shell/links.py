"""
Links adapter — install or restore the managed symlinks.

Wraps ``core.services.linker`` so the link table runs as an ordinary
plan step.  Per-entry skips (missing source, user-modified target) are
reported in the receipt metadata and do not fail the step; a
filesystem error such as a permission denial does.
"""

from __future__ import annotations

import logging

from dotkit.adapters.base import Adapter, ExecutionContext
from dotkit.core.models.action import Receipt
from dotkit.core.models.link import LinkSpec
from dotkit.core.services.linker import install_links, restore_links

logger = logging.getLogger(__name__)

_OPERATIONS = {"install": install_links, "restore": restore_links}


class LinkAdapter(Adapter):
    """Symlink management with receipts.

    Action params:
        operation (str): 'install' or 'restore'.
        specs (list[LinkSpec]): The entries to process, in order.
    """

    @property
    def name(self) -> str:
        return "links"

    def is_available(self) -> bool:
        return True

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        operation = context.params.get("operation", "")
        if operation not in _OPERATIONS:
            return False, f"Unknown operation '{operation}'. Valid: {', '.join(sorted(_OPERATIONS))}"

        specs = context.params.get("specs")
        if specs is None:
            return False, "Missing required param: 'specs'"
        if not all(isinstance(s, LinkSpec) for s in specs):
            return False, "'specs' must be a list of LinkSpec"

        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        operation = context.params["operation"]
        specs: list[LinkSpec] = context.params["specs"]

        try:
            results = _OPERATIONS[operation](specs)
        except OSError as e:
            logger.error("Link %s failed: %s", operation, e)
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Filesystem error: {e}",
                metadata={"operation": operation},
            )

        lines = [r.message for r in results]
        return Receipt.success(
            adapter=self.name,
            action_id=context.action.id,
            output="\n".join(lines),
            metadata={
                "operation": operation,
                "results": [r.to_dict() for r in results],
                "clean": all(r.clean for r in results),
            },
        )
