"""
Mock adapter — stands in for "shell" (or any adapter) in tests and
behind ``install --mock``.

Nothing is executed.  Every context is remembered so a test can check
which steps a plan reached and with what params.
"""

from __future__ import annotations

from dotkit.adapters.base import Adapter, ExecutionContext
from dotkit.core.models.action import Receipt


class MockAdapter(Adapter):
    """Adapter that runs nothing and remembers what it was asked to run.

    Every action succeeds unless ``fail`` or ``respond`` was called for
    its id.
    """

    def __init__(
        self,
        adapter_name: str = "mock",
        available: bool = True,
        output: str = "[mock] executed",
    ):
        self._name = adapter_name
        self._available = available
        self._output = output
        self._failures: dict[str, str] = {}
        self._responses: dict[str, Receipt] = {}
        self.calls: list[ExecutionContext] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def executed(self) -> list[str]:
        """Action ids in the order they reached this adapter."""
        return [ctx.action.id for ctx in self.calls]

    def fail(self, action_id: str, error: str = "mock failure") -> None:
        self._failures[action_id] = error

    def respond(self, action_id: str, receipt: Receipt) -> None:
        self._responses[action_id] = receipt

    def reset(self) -> None:
        self.calls.clear()
        self._failures.clear()
        self._responses.clear()

    def is_available(self) -> bool:
        return self._available

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        self.calls.append(context)
        action_id = context.action.id

        if action_id in self._responses:
            return self._responses[action_id]
        if action_id in self._failures:
            return Receipt.failure(adapter=self._name, action_id=action_id, error=self._failures[action_id])

        return Receipt.success(
            adapter=self._name,
            action_id=action_id,
            output=self._output,
            metadata={"mock": True, "describe": context.action.describe()},
        )
