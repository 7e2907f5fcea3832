"""Repair engine: check each distinct URL and patch broken ones in place.

HTML is treated as opaque text.  A broken URL is swapped for the fallback with
a plain substring replace over the whole file, so the rest of the markup is
left byte-for-byte untouched.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Tuple

import httpx

from linkmonitor.config import MonitorConfig
from linkmonitor.models import LinkRecord, LinkStatus
from linkmonitor.scanner.checker import check_with_retry, make_client
from linkmonitor.scanner.files import read_text, write_text


def replace_in_file(path: Path, url: str, replacement: str) -> int:
    """Replace every literal occurrence of *url* in *path* with *replacement*.

    The file is only rewritten when it actually contains *url*.  I/O errors
    propagate to the caller.

    Returns:
        The number of occurrences replaced.
    """
    text = read_text(path)
    count = text.count(url)
    if count:
        write_text(path, text.replace(url, replacement))
    return count


def _describe(record: LinkRecord) -> str:
    if record.status is LinkStatus.REDIRECTED:
        return f"✓ {record.http_status} → {(record.redirect_target or '')[:50]}"
    if record.ok:
        return f"✓ {record.http_status}"
    return f"✗ {record.error_detail or record.http_status}"


async def _process(
    records: Dict[str, LinkRecord],
    config: MonitorConfig,
    client: httpx.AsyncClient,
) -> int:
    broken = 0
    for record in records.values():
        if record.status.is_terminal:
            continue
        print(f"[CHECKING] {record.url[:70]}")
        outcome = await check_with_retry(
            record.url, config.timeout_ms, config.retries, client=client
        )
        record.apply_outcome(outcome)
        print(f"[CHECKING] {_describe(record)}")

        if record.status is not LinkStatus.BROKEN:
            continue

        broken += 1
        for file in record.files:
            count = replace_in_file(file, record.url, config.fallback_url)
            print(f"[REPAIRING] {file}: {count} occurrence(s) → {config.fallback_label}")
        record.replaced = True
    return broken


async def run_repair(
    records: Dict[str, LinkRecord],
    config: MonitorConfig,
    client: httpx.AsyncClient | None = None,
) -> Tuple[Dict[str, LinkRecord], int]:
    """Check every pending record in order and repair the broken ones.

    URLs are probed strictly one at a time in first-seen order, and files are
    rewritten one at a time within each URL.  Records that already carry a
    terminal status are skipped.  If the caller cancels the run, any record
    still ``PENDING`` was never repaired.

    Args:
        records: Output of :func:`~linkmonitor.repair.index.build_index`;
            mutated in place.
        config: Run configuration.
        client: Optional shared HTTP client.  A client is opened for the
            duration of the call when omitted.

    Returns:
        ``(records, broken_count)``.
    """
    if client is None:
        async with make_client(config.user_agent) as own_client:
            broken = await _process(records, config, own_client)
    else:
        broken = await _process(records, config, client)
    return records, broken
