"""
Console rendering for bootstrap runs.

``[INFO]`` lines in green, ``[WARN]`` lines in yellow, fatal errors in
red — the same register whether a step ran, was skipped or failed.
"""

from __future__ import annotations

import click

from dotkit.core.engine.executor import Step, StepRecord


def info(message: str) -> None:
    click.secho("[INFO] ", fg="green", nl=False)
    click.echo(message)


def warn(message: str) -> None:
    click.secho("[WARN] ", fg="yellow", nl=False)
    click.echo(message)


def fatal(message: str) -> None:
    click.secho(f"❌ {message}", fg="red", err=True)


def rule() -> None:
    info("-------------------------------------")


def announce_step(step: Step) -> None:
    info(f"{step.title}...")


def report_step(record: StepRecord) -> None:
    """Print the outcome of one step."""
    if record.skipped is not None:
        (warn if record.skipped.warn else info)(record.skipped.message)
        return

    receipt = record.receipt
    assert receipt is not None

    if receipt.status == "skipped":
        info(receipt.output)
        return

    if receipt.failed:
        if record.step.fatal:
            return  # the caller prints the fatal error once
        warn(f"{record.step.title} failed: {receipt.error}")
        for line in record.step.on_failure:
            warn(line)
        return

    for entry in receipt.metadata.get("results", []):
        warnings = entry["warnings"]
        (warn if entry["message"] in warnings else info)(entry["message"])
        for line in warnings:
            if line != entry["message"]:
                warn(line)
    for line in record.step.on_success:
        info(line)
