"""Utilities for rendering link-monitor reports in the CLI."""

from __future__ import annotations

import re
from typing import List

from linkmonitor.repair.report import Report

_RULE = "═" * 43
_THIN_RULE = "─" * 43


def _short_url(url: str) -> str:
    return re.sub(r"https?://", "", url, count=1)[:60]


def _pages(count: int) -> str:
    return f"{count} page{'s' if count > 1 else ''}"


def render_report(report: Report) -> str:
    """Render *report* as the plain-text block shown at the end of a run."""
    lines: List[str] = [
        _RULE,
        "   AFFILIATE LINK REPORT",
        _RULE,
        "",
        f"   Unique URLs checked:  {report.total_checked}",
        f"   Healthy:              {report.healthy_count}",
        f"   Broken:               {report.broken_count}",
    ]
    if report.broken_count:
        lines.append(
            f"   Auto-replaced:        {len(report.replacements)} (→ {report.fallback_label})"
        )
    lines.append("")

    if report.replacements:
        lines.append("🔧 REPLACED LINKS:")
        lines.append("")
        for r in report.replacements:
            lines.append(f"   {r.url}")
            lines.append(f"     Reason: {r.reason}")
            lines.append(f"     Used on: {r.files_using} page(s)")
            lines.append(f"     Replaced with: {r.fallback_url}")
            lines.append("")
        lines.append("📋 ACTION NEEDED: Update the broken URLs in your source code.")
        lines.append("   The fallback URL is live now but earns less-targeted commissions.")
        lines.append("")

    lines.extend([_THIN_RULE, "   ALL AFFILIATE LINKS", _THIN_RULE, ""])
    for record in report.links:
        icon = "✅" if record.ok else "🔧"
        lines.append(f"   {icon} {_short_url(record.url):<62} {_pages(len(record.files))}")
    lines.append("")

    if report.broken_count == 0:
        lines.append("✅ All affiliate links are healthy!")

    return "\n".join(lines)
