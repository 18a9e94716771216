"""
Step executor — runs a bootstrap plan in order, fail-fast.

A plan is a list of Steps.  Each step builds its Action lazily, right
before it runs, so it can look at the machine as the earlier steps left
it (is ``brew`` on PATH yet? which ``zsh`` did apt install?).  A builder
may return a ``SkipReason`` instead of an Action.

Flow:
    for step: build → (skip | dispatch through registry) → record → abort on fatal failure
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from dotkit.adapters.registry import AdapterRegistry
from dotkit.core.errors import DotkitError
from dotkit.core.models.action import Action, Receipt

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SkipReason:
    """Why a step did not run.  ``warn`` marks skips the user should look at."""

    message: str
    warn: bool = False


@dataclass
class Step:
    """One planned bootstrap step.

    Attributes:
        title: Progress line shown before the step runs.
        build: Returns the Action to run, or a SkipReason.
        fatal: Whether a failure aborts the whole run.
        on_failure: Extra warning lines shown when a non-fatal step fails.
        on_success: Lines shown after the step succeeds.
    """

    title: str
    build: Callable[[], Action | SkipReason]
    fatal: bool = True
    on_failure: list[str] = field(default_factory=list)
    on_success: list[str] = field(default_factory=list)

    @classmethod
    def run(cls, title: str, action: Action, **kwargs) -> Step:
        """A step whose action is known up front."""
        return cls(title=title, build=lambda: action, **kwargs)


@dataclass
class ExecutionPlan:
    """An ordered set of steps plus the environment they run with."""

    name: str = ""
    steps: list[Step] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)

    def add(self, step: Step) -> Step:
        self.steps.append(step)
        return step

    @property
    def total_steps(self) -> int:
        return len(self.steps)


@dataclass
class StepRecord:
    """What happened to one step."""

    step: Step
    action: Action | None = None
    receipt: Receipt | None = None
    skipped: SkipReason | None = None

    @property
    def failed(self) -> bool:
        return self.receipt is not None and self.receipt.failed

    @property
    def status(self) -> str:
        if self.skipped is not None:
            return "skipped"
        assert self.receipt is not None
        return self.receipt.status

    def to_dict(self) -> dict:
        d: dict = {"title": self.step.title, "status": self.status}
        if self.action is not None:
            d["action"] = self.action.describe()
        if self.skipped is not None:
            d["reason"] = self.skipped.message
        if self.receipt is not None:
            if self.receipt.error:
                d["error"] = self.receipt.error
            if "results" in self.receipt.metadata:
                d["results"] = self.receipt.metadata["results"]
        return d


@dataclass
class ExecutionReport:
    """Result of executing a plan."""

    name: str = ""
    records: list[StepRecord] = field(default_factory=list)
    aborted_at: StepRecord | None = None

    @property
    def total(self) -> int:
        return len(self.records)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.records if r.failed)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.records if r.status == "skipped")

    @property
    def status(self) -> str:
        if self.aborted_at is not None:
            return "failed"
        return "ok"

    def to_dict(self) -> dict:
        return {
            "plan": self.name,
            "status": self.status,
            "total": self.total,
            "failed": self.failed,
            "skipped": self.skipped,
            "steps": [r.to_dict() for r in self.records],
        }


class StepFailed(DotkitError):
    """A fatal step failed; the run stopped there."""

    def __init__(self, record: StepRecord, report: ExecutionReport):
        self.record = record
        self.report = report
        error = record.receipt.error if record.receipt else "unknown error"
        super().__init__(f"{record.step.title}: {error}")


Reporter = Callable[[StepRecord], None]
Announcer = Callable[[Step], None]


def execute_plan(
    plan: ExecutionPlan,
    registry: AdapterRegistry,
    dry_run: bool = False,
    reporter: Reporter | None = None,
    announce: Announcer | None = None,
) -> ExecutionReport:
    """Execute every step of ``plan`` through ``registry``.

    Args:
        plan: The plan to run.
        registry: Adapter registry for dispatch.
        dry_run: Build and validate actions but execute nothing.
        reporter: Called with each StepRecord as soon as it is known.
        announce: Called with each step just before its action runs.

    Returns:
        ExecutionReport with one record per step.

    Raises:
        StepFailed: On the first failed step marked fatal.
    """
    report = ExecutionReport(name=plan.name)

    for step in plan.steps:
        built = step.build()

        if isinstance(built, SkipReason):
            record = StepRecord(step=step, skipped=built)
            logger.info("⊘ %s — %s", step.title, built.message)
        else:
            if announce is not None:
                announce(step)
            receipt = registry.execute_action(built, env=plan.env, dry_run=dry_run)
            record = StepRecord(step=step, action=built, receipt=receipt)
            marker = "✓" if receipt.ok else "✗" if receipt.failed else "⊘"
            logger.info("%s %s → %s", marker, step.title, receipt.status)

        report.records.append(record)
        if reporter is not None:
            reporter(record)

        if record.failed and step.fatal:
            report.aborted_at = record
            raise StepFailed(record, report)

    return report
