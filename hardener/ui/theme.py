"""
Hardener visual design system.

All colors, styles, and icons as named constants.
Import from here — never hardcode markup strings in other modules.
"""

from rich.style import Style
from rich.theme import Theme


# ── Color palette ─────────────────────────────────────────────────────────────

COLOR_CRITICAL = "#E05252"      # Warm severity red
COLOR_WARNING  = "#D4870A"      # Amber
COLOR_PASS     = "#4DBD74"      # Calm sage-green
COLOR_DIM      = "#787878"      # Medium gray
COLOR_TEXT     = "#F0F0F0"      # Primary text


# ── Rich styles ───────────────────────────────────────────────────────────────

STYLE_CRITICAL = Style(color=COLOR_CRITICAL, bold=True)
STYLE_WARNING  = Style(color=COLOR_WARNING,  bold=True)
STYLE_PASS     = Style(color=COLOR_PASS,     bold=True)
STYLE_DIM      = Style(color=COLOR_DIM)


# ── Status icons ──────────────────────────────────────────────────────────────

ICON_OK = "✅"
ICON_NONCOMPLIANT = "🔴"
ICON_ERROR = "❌"
ICON_SKIPPED = "⏭️ "
ICON_SNAPSHOT = "📸"

STATUS_ICONS: dict[str, str] = {
    "ok": ICON_OK,
    "noncompliant": ICON_NONCOMPLIANT,
    "error": ICON_ERROR,
    "skipped": ICON_SKIPPED,
}

STATUS_STYLES: dict[str, Style] = {
    "ok": STYLE_PASS,
    "noncompliant": STYLE_CRITICAL,
    "error": STYLE_WARNING,
    "skipped": STYLE_DIM,
}


# ── Rich Theme ────────────────────────────────────────────────────────────────

# Markup tags used by the report
HARDENER_THEME = Theme(
    {
        "dim":  COLOR_DIM,
        "text": COLOR_TEXT,
    }
)
