"""Affiliate link monitor CLI — entry-point for build post-processing.

Usage:
    python cli/main.py --help

Commands:
    check   → check every affiliate link and heal broken ones in place
    scan    → list affiliate links without touching the network (dry run)
    probe   → check a single URL with the configured retry policy
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from linkmonitor.xxx
# import ...` works when the CLI is invoked as `python cli/main.py`.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import asyncio
from typing import Any, Optional

import typer

from linkmonitor.config import MonitorConfig, load_config, load_inputs_file
from linkmonitor.errors import ConfigError
from linkmonitor.repair.index import build_index
from linkmonitor.runner import run_monitor
from linkmonitor.scanner.checker import check_with_retry, make_client
from linkmonitor.scanner.files import collect_occurrences, find_html_files

from cli.rendering import render_report

app = typer.Typer(
    name="affiliate-monitor",
    help="Validate affiliate links in built HTML and heal broken ones.",
    no_args_is_help=True,
)

_PublishDir = typer.Argument(
    ...,
    exists=True,
    file_okay=False,
    dir_okay=True,
    help="Directory of rendered HTML pages.",
)


def _resolve_config(config_file: Optional[Path], **options: Any) -> MonitorConfig:
    """Merge defaults, env, the optional inputs file and CLI options; exit 2 on error."""
    try:
        overrides: dict[str, Any] = {}
        if config_file is not None:
            overrides.update(load_inputs_file(config_file))
        overrides.update({k: v for k, v in options.items() if v is not None})
        config = load_config(overrides)
        config.validate()
    except ConfigError as exc:
        typer.echo(f"❌ Configuration error: {exc}")
        raise typer.Exit(code=2)
    return config


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------
@app.command("check")
def check(
    publish_dir: Path = _PublishDir,
    pattern: Optional[str] = typer.Option(None, "--pattern", help="Regex fragment identifying affiliate URLs."),
    fallback_url: Optional[str] = typer.Option(None, "--fallback-url", help="URL substituted for broken links."),
    fallback_label: Optional[str] = typer.Option(None, "--fallback-label", help="Label for the fallback in the report."),
    timeout_ms: Optional[int] = typer.Option(None, "--timeout-ms", help="Per-attempt timeout in milliseconds."),
    retries: Optional[int] = typer.Option(None, "--retries", help="Extra attempts after the first failure."),
    fail_on_broken: Optional[bool] = typer.Option(
        None, "--fail-on-broken/--no-fail-on-broken", help="Exit non-zero when broken links were found."
    ),
    check_external: Optional[bool] = typer.Option(
        None, "--check-external/--no-check-external", help="Reserved; accepted but currently inert."
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config", exists=True, dir_okay=False, help="JSON file of monitor inputs."
    ),
) -> None:
    """Check every affiliate link under PUBLISH_DIR and heal broken ones."""
    config = _resolve_config(
        config_file,
        affiliate_pattern=pattern,
        fallback_url=fallback_url,
        fallback_label=fallback_label,
        timeout_ms=timeout_ms,
        retries=retries,
        fail_on_broken=fail_on_broken,
        check_external=check_external,
    )

    typer.echo("[check] 🔗 Affiliate Link Monitor — checking tracking URLs …")
    result = run_monitor(publish_dir, config)

    if result.report.total_checked:
        typer.echo("")
        typer.echo(render_report(result.report))

    if result.verdict.failed:
        typer.echo(result.verdict.message())
        raise typer.Exit(code=1)


# ---------------------------------------------------------------------------
# scan (dry run)
# ---------------------------------------------------------------------------
@app.command("scan")
def scan(
    publish_dir: Path = _PublishDir,
    pattern: Optional[str] = typer.Option(None, "--pattern", help="Regex fragment identifying affiliate URLs."),
) -> None:
    """List affiliate URLs under PUBLISH_DIR without checking or rewriting."""
    config = _resolve_config(None, affiliate_pattern=pattern)
    html_files = find_html_files(publish_dir)
    records = build_index(collect_occurrences(html_files, config.affiliate_pattern))

    typer.echo(f"[scan] {len(records)} unique affiliate URL(s) across {len(html_files)} page(s).")
    for record in records.values():
        typer.echo(f"  {record.url}  ({len(record.files)} page(s))")


# ---------------------------------------------------------------------------
# probe
# ---------------------------------------------------------------------------
@app.command("probe")
def probe(
    url: str = typer.Argument(..., help="URL to check."),
    timeout_ms: Optional[int] = typer.Option(None, "--timeout-ms", help="Per-attempt timeout in milliseconds."),
    retries: Optional[int] = typer.Option(None, "--retries", help="Extra attempts after the first failure."),
) -> None:
    """Check a single URL with the configured timeout and retry policy."""
    config = _resolve_config(None, timeout_ms=timeout_ms, retries=retries)

    async def _run():
        async with make_client(config.user_agent) as client:
            return await check_with_retry(url, config.timeout_ms, config.retries, client=client)

    outcome = asyncio.run(_run())
    if outcome.ok and outcome.redirect_target:
        typer.echo(f"[probe] ✅ {outcome.http_status} → {outcome.redirect_target}")
    elif outcome.ok:
        typer.echo(f"[probe] ✅ {outcome.http_status}")
    else:
        typer.echo(f"[probe] ❌ {outcome.error_message or f'HTTP {outcome.http_status}'}")
        raise typer.Exit(code=1)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
