"""
dotkit — CLI entrypoint.

Usage:
    dotkit install            (or: dotkit-install)
    dotkit uninstall          (or: dotkit-uninstall)
    dotkit status
    python -m dotkit.main --help
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from dotkit import __version__
from dotkit.core.observability.logging_config import (
    ENV_FILE,
    ENV_FILE_LEVEL,
    resolve_level,
    setup_logging,
)
from dotkit.ui.cli import output


@click.group()
@click.version_option(version=__version__, prog_name="dotkit")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to dotkit.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """dotkit — bootstrap zsh, starship, sheldon, fzf and hugo, and link the dotfiles."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_logging(
        level=resolve_level(verbose=verbose, quiet=quiet, debug=debug),
        log_file=os.environ.get(ENV_FILE),
        log_file_level=os.environ.get(ENV_FILE_LEVEL),
    )


def _repo_option(fn):
    return click.option(
        "--repo",
        "repo_root",
        type=click.Path(file_okay=False, path_type=Path),
        default=None,
        help="Dotfiles repository root (default: dotkit.yml's directory, else cwd).",
    )(fn)


@cli.command()
@_repo_option
@click.option("--dry-run", is_flag=True, help="Show what would run; change nothing.")
@click.option("--mock", is_flag=True, help="Use mock adapter (no real execution).")
@click.option("--links-only", is_flag=True, help="Only link the config files and lock plugins.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def install(
    ctx: click.Context,
    repo_root: Path | None,
    dry_run: bool,
    mock: bool,
    links_only: bool,
    as_json: bool,
) -> None:
    """Install the tools and link the configuration files.

    Examples:

        dotkit install

        dotkit install --links-only --repo ~/dotfiles

        dotkit install --dry-run
    """
    from dotkit.core.services.bootstrap import install_summary
    from dotkit.core.use_cases.bootstrap import run_install

    live = not as_json
    if live:
        label = "[dry-run] " if dry_run else "[mock] " if mock else ""
        output.info(f"{label}Starting setup...")

    result = run_install(
        config_path=ctx.obj.get("config_path"),
        repo_root=repo_root,
        dry_run=dry_run,
        mock_mode=mock,
        links_only=links_only,
        reporter=output.report_step if live else None,
        announce=output.announce_step if live else None,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    if result.error:
        output.fatal(result.error)
        sys.exit(1)

    assert result.paths is not None and result.manifest is not None
    click.echo()
    output.rule()
    output.info("Setup complete!" if not dry_run else "Dry run complete; nothing was changed.")
    if not dry_run:
        output.info(f"The following tools and configurations have been set up from {result.paths.repo_root}:")
        for line in install_summary(result.manifest, links_only=links_only):
            output.info(f" - {line}")
    output.info("Links:")
    for entry in result.manifest.links:
        output.info(f" - {entry.target} -> {entry.source}")
    if not links_only:
        output.warn("Restart your terminal (or WSL instance) for all changes to apply.")
    output.rule()


@cli.command()
@_repo_option
@click.option("--dry-run", is_flag=True, help="Show what would run; change nothing.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def uninstall(ctx: click.Context, repo_root: Path | None, dry_run: bool, as_json: bool) -> None:
    """Remove the config symlinks and restore the .bak backups."""
    from dotkit.core.services.bootstrap import UNINSTALL_REMINDERS
    from dotkit.core.use_cases.bootstrap import run_uninstall

    live = not as_json
    if live:
        output.info("Starting restoration of original configuration files...")
        output.warn("Only symlinks created by install are removed and .bak backups restored.")

    result = run_uninstall(
        config_path=ctx.obj.get("config_path"),
        repo_root=repo_root,
        dry_run=dry_run,
        reporter=output.report_step if live else None,
        announce=output.announce_step if live else None,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    if result.error:
        output.fatal(result.error)
        sys.exit(1)

    click.echo()
    output.rule()
    output.info("Uninstallation (restoration) complete.")
    output.warn("Remember:")
    for line in UNINSTALL_REMINDERS:
        output.warn(f" - {line}")
    output.rule()


@cli.command()
@_repo_option
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def status(ctx: click.Context, repo_root: Path | None, as_json: bool) -> None:
    """Show where each managed config file stands."""
    from dotkit.core.models.link import LinkState
    from dotkit.core.use_cases.status import get_link_status

    result = get_link_status(config_path=ctx.obj.get("config_path"), repo_root=repo_root)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.error is None else 1)

    if result.error:
        output.fatal(result.error)
        sys.exit(1)

    click.secho(f"\n🔗 Links: {result.linked_count}/{len(result.links)} linked", fg="cyan", bold=True)
    click.echo(f"   Repository: {result.repo_root}")
    click.echo()
    for link in result.links:
        if link.linked:
            click.secho(f"   ✓ {link.spec.name:<10}", fg="green", nl=False)
        elif link.state is LinkState.SYMLINK:
            click.secho(f"   ⚠ {link.spec.name:<10}", fg="yellow", nl=False)
        else:
            click.secho(f"   ✗ {link.spec.name:<10}", fg="red", nl=False)
        extras = []
        if link.backup_exists:
            extras.append("backup present")
        if not link.source_exists:
            extras.append("source missing")
        suffix = f"  ({', '.join(extras)})" if extras else ""
        click.echo(f" {link.spec.target} [{link.state.value}]{suffix}")
    click.echo()


# ── Sub-command groups from dotkit/ui/cli/ ──────────────────────

from dotkit.ui.cli.timer import timer  # noqa: E402

cli.add_command(timer)


def install_main() -> None:
    """``dotkit-install`` console script."""
    cli(args=["install", *sys.argv[1:]], prog_name="dotkit-install")


def uninstall_main() -> None:
    """``dotkit-uninstall`` console script."""
    cli(args=["uninstall", *sys.argv[1:]], prog_name="dotkit-uninstall")


if __name__ == "__main__":
    cli()
