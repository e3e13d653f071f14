"""
Hardener — entry point and orchestrator.

Startup is two-phase: make sure we run elevated (or hand over to an
elevated copy and exit), then load the bundle for this OS and run the
audit and snapshot passes under one overall deadline.
"""

import logging
from pathlib import Path
from typing import NoReturn, Optional

import click
from rich.console import Console

from hardener import __version__
from hardener.config import load_config
from hardener.elevation import ensure_privileged, get_elevator
from hardener.errors import BundleError, ElevationError
from hardener.host import HostEnvironment, current_host
from hardener.log import setup_logging, verbosity_to_level
from hardener.output import audit_json, save_snapshot
from hardener.policy.dispatcher import Deadline
from hardener.policy.loader import bundle_path_for, load_bundle
from hardener.policy.runner import run_audit, run_snapshot
from hardener.ui.theme import HARDENER_THEME

logger = logging.getLogger(__name__)


# ── Console (shared across the tool) ─────────────────────────────────────────

console = Console(theme=HARDENER_THEME)
err_console = Console(theme=HARDENER_THEME, stderr=True)


# ── CLI ───────────────────────────────────────────────────────────────────────

@click.command(name="hardener", context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "-V", "--version", prog_name="hardener")
@click.option(
    "--policies",
    "policies_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Policy bundle to run (default: picked from the policy directory by OS).",
)
@click.option(
    "--snapshot-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory for snapshot files (default: snapshots).",
)
@click.option(
    "--timeout",
    "run_timeout",
    type=click.IntRange(min=1),
    default=None,
    help="Overall deadline in seconds for audit plus snapshot (default: 300).",
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Print audit results as JSON.")
@click.option(
    "--wait-elevated",
    is_flag=True,
    default=False,
    help="When relaunching elevated, wait for the elevated copy and exit with its status.",
)
@click.option("-v", "--verbose", count=True, help="More log output (-vv for debug).")
def cli(
    policies_path: Optional[Path],
    snapshot_dir: Optional[Path],
    run_timeout: Optional[int],
    as_json: bool,
    wait_elevated: bool,
    verbose: int,
) -> None:
    """Host compliance auditor.

    Runs every policy's check script and classifies the result, then runs
    every snapshot script and writes the captured state to a timestamped
    JSON file. Requires administrator/root rights and relaunches itself
    elevated when started without them.
    """
    config = load_config()
    setup_logging(verbosity_to_level(verbose, config["log_level"]))
    host = current_host()

    # ── Phase 1: privileges ───────────────────────────────────────────────────
    try:
        outcome = ensure_privileged(get_elevator(host), wait=wait_elevated)
    except ElevationError as e:
        _fail(f"Failed to obtain elevated privileges: {e}")
    if outcome.must_exit:
        # The elevated copy does the work; never run both
        raise SystemExit(outcome.exit_code)

    # ── Phase 2: audit and snapshot ───────────────────────────────────────────
    bundle_file = policies_path or _default_bundle(host, config["policy_dir"])
    try:
        bundle = load_bundle(bundle_file)
    except BundleError as e:
        _fail(f"Failed to load policies: {e}")

    deadline = Deadline(run_timeout or config["run_timeout"])

    audit_results = run_audit(bundle, deadline=deadline, host=host)
    if as_json:
        click.echo(audit_json(audit_results))
    else:
        from hardener.ui.report import print_audit_report
        print_audit_report(audit_results, console)

    snapshot_results = run_snapshot(bundle, deadline=deadline, host=host)
    try:
        path = save_snapshot(snapshot_results, snapshot_dir or config["snapshot_dir"])
    except OSError as e:
        _fail(f"Failed to write snapshot file: {e}")

    if as_json:
        logger.info("Snapshot written to %s", path)
    else:
        from hardener.ui.report import print_snapshot_report
        print_snapshot_report(snapshot_results, console, path=path)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _default_bundle(host: HostEnvironment, policy_dir: Path) -> Path:
    detected = host.detect_os()
    path = bundle_path_for(detected, policy_dir)
    if path is None:
        _fail(f"Unsupported OS: {detected}")
    if not path.is_file():
        _fail(f"Policy file not found for {detected} at {path}")
    return path


def _fail(message: str) -> NoReturn:
    err_console.print(f"[red]Error:[/red] {message}", highlight=False)
    raise SystemExit(1)


# ── Entry ─────────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    cli()
