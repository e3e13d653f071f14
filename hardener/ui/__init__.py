"""
Console output for hardener.

Modules:
  theme.py  — colors, styles, status icons, rich Theme.
  report.py — audit and snapshot result lines, status summary.
"""
