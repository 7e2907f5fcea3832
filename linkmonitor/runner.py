"""High-level runner for the link monitor.

``monitor_links`` wires together the file store, extractor, dedup index,
repair engine and report builder.  Stage progress is printed to stdout; the
caller receives a :class:`RunResult` and decides how to surface the verdict.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path

import httpx

from linkmonitor.config import MonitorConfig
from linkmonitor.repair.engine import run_repair
from linkmonitor.repair.index import build_index
from linkmonitor.repair.report import Report, Verdict, build_verdict, summarize
from linkmonitor.scanner.files import collect_occurrences, find_html_files


@dataclass
class RunResult:
    report: Report
    verdict: Verdict
    files_scanned: int


async def monitor_links(
    publish_dir: str | Path,
    config: MonitorConfig,
    client: httpx.AsyncClient | None = None,
) -> RunResult:
    """Check and heal every affiliate link in the HTML under *publish_dir*.

    Raises:
        ConfigError: If *config* fails validation.
        OSError: If a page cannot be read or rewritten.
    """
    config.validate()
    for warning in config.warnings():
        print(f"[config] ⚠ {warning}")

    # ------------------------------------------------------------------
    # Scan: one read per page, one record per distinct URL
    # ------------------------------------------------------------------
    html_files = find_html_files(publish_dir)
    records = build_index(collect_occurrences(html_files, config.affiliate_pattern))
    print(
        f"[SCANNING] Found {len(records)} unique affiliate URL(s) "
        f"across {len(html_files)} page(s)."
    )

    if not records:
        print("[SCANNING] No affiliate links found. Nothing to check.")
        report = summarize([], config)
        return RunResult(report, build_verdict(report, config.fail_on_broken), len(html_files))

    # ------------------------------------------------------------------
    # Check & repair
    # ------------------------------------------------------------------
    records, _ = await run_repair(records, config, client=client)

    report = summarize(records.values(), config)
    return RunResult(report, build_verdict(report, config.fail_on_broken), len(html_files))


def run_monitor(publish_dir: str | Path, config: MonitorConfig) -> RunResult:
    """Synchronous wrapper around :func:`monitor_links`."""
    return asyncio.run(monitor_links(publish_dir, config))
