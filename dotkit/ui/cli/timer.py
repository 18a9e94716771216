"""
CLI commands for long-running command notifications.

Meant to be called from the shell's preexec/precmd hooks:

    preexec() { _dotkit_started=$(dotkit timer start); _dotkit_command=$1 }
    precmd() {
        local rc=$?
        dotkit timer finish --started-at "$_dotkit_started" \\
            --command "$_dotkit_command" --exit-code $rc
        unset _dotkit_started _dotkit_command
    }

The start value covers exactly one command: ``precmd`` also runs for the
first prompt and after an empty line, when no ``preexec`` has set it,
and ``finish`` then does nothing.
"""

from __future__ import annotations

import json

import click


@click.group()
def timer() -> None:
    """Timer — notify when a shell command runs long."""


@timer.command("start")
def start() -> None:
    """Print the start timestamp for the command about to run."""
    from dotkit.core.services.command_timer import start_timer

    click.echo(f"{start_timer(command='').started_at:.3f}")


@timer.command("finish")
@click.option("--started-at", default=None, help="Value printed by 'timer start' (empty: no command ran).")
@click.option("--command", "command", default="", help="The command line that ran.")
@click.option("--exit-code", default=0, type=int, help="Its exit status.")
@click.option("--threshold", default=None, type=float, help="Seconds (default: from dotkit.yml).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def finish(
    ctx: click.Context,
    started_at: str | None,
    command: str,
    exit_code: int,
    threshold: float | None,
    as_json: bool,
) -> None:
    """Send a notification if the command ran past the threshold."""
    if not started_at:
        return  # no command ran since the last prompt
    try:
        started = float(started_at)
    except ValueError:
        click.secho(f"dotkit: not a timestamp: {started_at!r}", fg="red", err=True)
        return

    from dotkit.core.config.loader import ConfigError, load_manifest
    from dotkit.core.services.command_timer import (
        CommandTimer,
        finish_timer,
        send_notification,
    )

    try:
        settings = load_manifest(ctx.obj.get("config_path")).notify
    except ConfigError as e:
        # Runs after every prompt; a broken manifest must not break the shell.
        click.secho(f"dotkit: {e}", fg="red", err=True)
        return

    limit = settings.threshold_seconds if threshold is None else threshold
    notification = finish_timer(CommandTimer(command=command, started_at=started), exit_code, limit)

    sent = False
    if notification is not None:
        sent = send_notification(notification, settings).ok

    if as_json:
        click.echo(json.dumps({
            "notified": notification is not None,
            "sent": sent,
            "title": notification.title if notification else None,
            "message": notification.message if notification else None,
        }))
