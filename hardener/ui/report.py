"""
Report renderer.

Audit results: one line each
  ✅  CIS-1.1.1   Ensure password history         current=24 expected=24
  🔴  CIS-1.1.2   Ensure maximum password age     current=0 expected=365

followed by a one-line status summary. Snapshot results: one line each,
with the error text when the snapshot failed or was skipped.
"""

from collections import Counter
from pathlib import Path
from typing import Any, Optional

from rich.console import Console
from rich.text import Text

from hardener.policy.models import AuditResult, SnapshotResult
from hardener.ui.theme import (
    COLOR_DIM,
    COLOR_TEXT,
    ICON_SNAPSHOT,
    STATUS_ICONS,
    STATUS_STYLES,
)


# ── Constants ─────────────────────────────────────────────────────────────────

_DETAIL_KEYS = ("current", "expected", "details")

_SUMMARY_ORDER = ("ok", "noncompliant", "error", "skipped")

_ID_WIDTH = 12
_TITLE_WIDTH = 38


# ── Public API ────────────────────────────────────────────────────────────────

def print_audit_report(results: list[AuditResult], console: Console) -> None:
    if not results:
        console.print("[dim]  No policies in bundle.[/dim]")
        return

    console.print()
    for r in results:
        console.print(format_audit_line(r))
    console.print()
    console.print(build_summary(results))
    console.print()


def print_snapshot_report(
    results: list[SnapshotResult],
    console: Console,
    path: Optional[Path] = None,
) -> None:
    for r in results:
        console.print(format_snapshot_line(r))
    if path is not None:
        console.print()
        console.print(f"  [dim]Snapshot written to[/dim] [text]{path}[/text]")
    console.print()


def format_audit_line(result: AuditResult) -> Text:
    icon = STATUS_ICONS.get(result.status, "?")
    style = STATUS_STYLES.get(result.status)

    line = Text()
    line.append(f"  {icon}  ", style=str(style))
    line.append(result.policy_id.ljust(_ID_WIDTH), style=str(style))
    line.append(f"  {result.title.ljust(_TITLE_WIDTH)}", style=COLOR_TEXT)

    message = result.error or format_details(result.parsed)
    if message:
        line.append(f"  {message}", style=COLOR_DIM)
    return line


def format_snapshot_line(result: SnapshotResult) -> Text:
    line = Text()
    line.append(f"  {ICON_SNAPSHOT}  ")
    line.append(result.policy_id.ljust(_ID_WIDTH), style=COLOR_TEXT)
    line.append(f"  {result.title.ljust(_TITLE_WIDTH)}", style=COLOR_TEXT)
    if result.error:
        line.append(f"  {result.error}", style=COLOR_DIM)
    return line


def format_details(parsed: Optional[dict[str, Any]]) -> str:
    """current= / expected= / details= from a check's JSON output, when present."""
    if not parsed:
        return ""
    parts = [f"{key}={parsed[key]}" for key in _DETAIL_KEYS if key in parsed]
    return " ".join(parts)


def build_summary(results: list[AuditResult]) -> Text:
    counts = Counter(r.status for r in results)
    text = Text("  ")
    first = True
    for status in _SUMMARY_ORDER:
        if not counts[status]:
            continue
        if not first:
            text.append("  ·  ", style=COLOR_DIM)
        text.append(f"{counts[status]} {status}", style=str(STATUS_STYLES[status]))
        first = False
    return text
