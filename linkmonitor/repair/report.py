"""Summaries and the pass/fail verdict for a finished run.

Everything here is a pure function of the final record set; rendering the
report as text lives in :mod:`cli.rendering`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from linkmonitor.config import MonitorConfig
from linkmonitor.models import LinkRecord, LinkStatus


@dataclass(frozen=True)
class Replacement:
    """One broken URL that was rewritten to the fallback."""

    url: str
    reason: str
    files_using: int
    fallback_url: str


@dataclass
class Report:
    total_checked: int = 0
    healthy_count: int = 0
    redirected_count: int = 0
    broken_count: int = 0
    fallback_url: str = ""
    fallback_label: str = ""
    replacements: List[Replacement] = field(default_factory=list)
    links: List[LinkRecord] = field(default_factory=list)


@dataclass(frozen=True)
class Verdict:
    failed: bool
    broken_count: int
    fallback_url: str
    broken_links: List[Tuple[str, str]] = field(default_factory=list)

    def message(self) -> str:
        """Operator-facing failure text listing every replaced URL."""
        listing = "\n  • ".join(f"{url} ({reason})" for url, reason in self.broken_links)
        return (
            f"Affiliate Link Monitor: {self.broken_count} broken link(s) found and "
            f"auto-replaced with fallback {self.fallback_url}:\n  • {listing}\n\n"
            "Update source URLs. Set failOnBroken: false to deploy without notification."
        )


def summarize(records: Iterable[LinkRecord], config: MonitorConfig) -> Report:
    """Aggregate checked *records* into a :class:`Report`.

    Records still ``PENDING`` (e.g. from an interrupted run) are left out.
    Redirected links count towards ``healthy_count``.
    """
    report = Report(fallback_url=config.fallback_url, fallback_label=config.fallback_label)
    for record in records:
        if not record.status.is_terminal:
            continue
        report.links.append(record)
        report.total_checked += 1
        if record.status is LinkStatus.BROKEN:
            report.broken_count += 1
        else:
            report.healthy_count += 1
            if record.status is LinkStatus.REDIRECTED:
                report.redirected_count += 1
        if record.replaced:
            report.replacements.append(
                Replacement(
                    url=record.url,
                    reason=record.reason,
                    files_using=len(record.files),
                    fallback_url=config.fallback_url,
                )
            )
    return report


def build_verdict(report: Report, fail_on_broken: bool) -> Verdict:
    """The run fails only when *fail_on_broken* is set and something broke."""
    return Verdict(
        failed=fail_on_broken and report.broken_count > 0,
        broken_count=report.broken_count,
        fallback_url=report.fallback_url,
        broken_links=[(r.url, r.reason) for r in report.replacements],
    )
