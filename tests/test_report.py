"""
Tests for ui/report.py — console rendering of audit and snapshot results.
"""

from io import StringIO
from pathlib import Path

from rich.console import Console
from rich.theme import Theme

from hardener.policy.models import AuditResult, SnapshotResult
from hardener.ui.theme import HARDENER_THEME, STATUS_ICONS, STATUS_STYLES
from hardener.ui.report import (
    build_summary,
    format_audit_line,
    format_details,
    print_audit_report,
    print_snapshot_report,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _console() -> tuple[Console, StringIO]:
    """Return a Console that captures output in a StringIO buffer."""
    buf = StringIO()
    con = Console(file=buf, highlight=False, no_color=True, width=160)
    return con, buf


def _audit(**kwargs) -> AuditResult:
    """Build a minimal AuditResult; kwargs override any field."""
    defaults = dict(policy_id="CIS-1", title="Test Policy", kind="bash", status="ok")
    defaults.update(kwargs)
    return AuditResult(**defaults)


# ── Tests ─────────────────────────────────────────────────────────────────────

class TestFormatDetails:
    def test_known_keys_in_order(self):
        parsed = {"details": "d", "expected": 24, "current": 5, "other": "x"}
        assert format_details(parsed) == "current=5 expected=24 details=d"

    def test_nothing_parsed(self):
        assert format_details(None) == ""
        assert format_details({"compliant": True}) == ""


class TestAuditLines:
    def test_line_has_id_title_and_details(self):
        line = format_audit_line(_audit(parsed={"current": "no", "expected": "no"})).plain
        assert "CIS-1" in line
        assert "Test Policy" in line
        assert "current=no expected=no" in line

    def test_error_shown_instead_of_details(self):
        line = format_audit_line(_audit(status="error", error="non-zero exit code: 1")).plain
        assert "non-zero exit code: 1" in line

    def test_summary_counts(self):
        results = [_audit(), _audit(), _audit(status="noncompliant"), _audit(status="skipped")]
        text = build_summary(results).plain
        assert "2 ok" in text
        assert "1 noncompliant" in text
        assert "1 skipped" in text
        assert "error" not in text

    def test_report_prints_every_policy(self):
        con, buf = _console()
        print_audit_report([_audit(policy_id="A"), _audit(policy_id="B", status="error")], con)
        out = buf.getvalue()
        assert "A" in out and "B" in out
        assert "1 ok" in out and "1 error" in out

    def test_empty_report(self):
        con, buf = _console()
        print_audit_report([], con)
        assert "No policies" in buf.getvalue()


class TestSnapshotReport:
    def test_lines_and_path(self):
        con, buf = _console()
        results = [
            SnapshotResult(policy_id="S1", title="Snap", kind="sh"),
            SnapshotResult(policy_id="S2", title="Other", kind="", error="no snapshot block"),
        ]
        print_snapshot_report(results, con, path=Path("snapshots/snapshot-x.json"))
        out = buf.getvalue()
        assert "S1" in out
        assert "no snapshot block" in out
        assert "snapshot-x.json" in out


class TestTheme:
    def test_every_status_has_icon_and_style(self):
        statuses = {"ok", "noncompliant", "error", "skipped"}
        assert set(STATUS_ICONS) == statuses
        assert set(STATUS_STYLES) == statuses

    def test_theme_carries_report_tags_only(self):
        defaults = Theme().styles
        custom = {name for name, style in HARDENER_THEME.styles.items() if defaults.get(name) != style}
        assert custom == {"dim", "text"}

    def test_themed_markup_renders(self):
        buf = StringIO()
        con = Console(file=buf, theme=HARDENER_THEME, no_color=True, width=160)
        print_snapshot_report([], con, path=Path("out.json"))
        assert "Snapshot written to out.json" in buf.getvalue()
