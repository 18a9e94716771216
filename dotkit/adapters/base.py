"""
Adapter base — the contract between the step executor and the outside world.

The executor never runs a command or touches a managed file itself; it
hands an Action to an adapter and gets a Receipt back.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel, Field

from dotkit.core.models.action import Action, Receipt


class ExecutionContext(BaseModel):
    """Everything an adapter needs to execute one action."""

    action: Action
    env: dict[str, str] = Field(default_factory=dict)   # overrides on top of os.environ

    @property
    def params(self) -> dict:
        return self.action.params


class Adapter(ABC):
    """Abstract base class for adapters.

    Adapters perform side effects and return receipts.  They do not
    raise: failures are captured in the Receipt with status 'failed'.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier ('shell', 'links', ...)."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the adapter's underlying tool exists.  Fast, never raises."""

    @abstractmethod
    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        """Check the action's params.

        Returns:
            (is_valid, error_message).  error_message is empty if valid.
        """

    @abstractmethod
    def execute(self, context: ExecutionContext) -> Receipt:
        """Execute the action and return a receipt."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
