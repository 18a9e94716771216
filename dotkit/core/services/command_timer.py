"""
Long-running command notifications.

The shell calls a before/after hook pair around every command:
``start_timer`` hands back an explicit CommandTimer value that the
shell keeps for exactly one command cycle and passes to
``finish_timer``, which decides whether the command ran long enough to
be worth a desktop notification.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from dotkit.adapters.base import ExecutionContext
from dotkit.adapters.shell.command import ShellCommandAdapter
from dotkit.core.models.action import Action, Receipt
from dotkit.core.models.manifest import NotifySettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandTimer:
    command: str
    started_at: float


@dataclass(frozen=True)
class Notification:
    command: str
    elapsed: float
    exit_code: int

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0

    @property
    def title(self) -> str:
        if self.succeeded:
            return "Command finished"
        return f"Command failed (exit {self.exit_code})"

    @property
    def message(self) -> str:
        return f"{self.command} ({format_elapsed(self.elapsed)})"


def format_elapsed(seconds: float) -> str:
    """``75.2`` → ``"1m 15s"``; ``3725`` → ``"1h 02m 05s"``."""
    total = int(round(seconds))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}h {minutes:02d}m {secs:02d}s"
    if minutes:
        return f"{minutes}m {secs:02d}s"
    return f"{secs}s"


def start_timer(command: str, now: float | None = None) -> CommandTimer:
    return CommandTimer(command=command, started_at=time.time() if now is None else now)


def finish_timer(
    timer: CommandTimer,
    exit_code: int,
    threshold: float,
    now: float | None = None,
) -> Notification | None:
    """Notification for ``timer`` if it ran at least ``threshold`` seconds."""
    elapsed = (time.time() if now is None else now) - timer.started_at
    if elapsed < threshold:
        return None
    return Notification(command=timer.command, elapsed=elapsed, exit_code=exit_code)


def send_notification(
    notification: Notification,
    settings: NotifySettings,
    adapter: ShellCommandAdapter | None = None,
) -> Receipt:
    """Run the configured notifier with the title and message appended."""
    adapter = adapter or ShellCommandAdapter()
    action = Action(
        id="notify",
        name="Send notification",
        adapter=adapter.name,
        params={"argv": [*settings.command, notification.title, notification.message], "timeout": 10},
    )
    receipt = adapter.execute(ExecutionContext(action=action))
    if receipt.failed:
        logger.debug("Notifier failed: %s", receipt.error)
    return receipt
