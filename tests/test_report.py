"""Tests for report aggregation, the build verdict and report rendering."""

from __future__ import annotations

from pathlib import Path

from cli.rendering import render_report
from linkmonitor.config import MonitorConfig
from linkmonitor.models import CheckOutcome, LinkRecord
from linkmonitor.repair.report import Replacement, build_verdict, summarize

_FALLBACK = "https://shop.example/home"


def _config() -> MonitorConfig:
    return MonitorConfig(
        affiliate_pattern=r"aff\.example",
        fallback_url=_FALLBACK,
        fallback_label="Shop",
    )


def _record(url: str, outcome: CheckOutcome | None, files: int = 1, replaced: bool = False) -> LinkRecord:
    record = LinkRecord(url=url, files=[Path(f"p{i}.html") for i in range(files)])
    if outcome is not None:
        record.apply_outcome(outcome)
    record.replaced = replaced
    return record


def _mixed() -> list[LinkRecord]:
    return [
        _record("https://aff.example/a", CheckOutcome(ok=True, http_status=200), files=2),
        _record(
            "https://aff.example/b",
            CheckOutcome(ok=False, http_status=0, error_message="timeout"),
            files=3,
            replaced=True,
        ),
        _record(
            "https://aff.example/c",
            CheckOutcome(ok=True, http_status=302, redirect_target="https://m.example/"),
        ),
        _record("https://aff.example/d", CheckOutcome(ok=False, http_status=503), replaced=True),
    ]


# ---------------------------------------------------------------------------
# summarize
# ---------------------------------------------------------------------------

class TestSummarize:
    def test_counts(self) -> None:
        report = summarize(_mixed(), _config())
        assert report.total_checked == 4
        assert report.healthy_count == 2
        assert report.redirected_count == 1
        assert report.broken_count == 2

    def test_replacements_in_order_with_reasons(self) -> None:
        report = summarize(_mixed(), _config())
        assert report.replacements == [
            Replacement("https://aff.example/b", "timeout", 3, _FALLBACK),
            Replacement("https://aff.example/d", "HTTP 503", 1, _FALLBACK),
        ]

    def test_links_keep_first_seen_order(self) -> None:
        report = summarize(_mixed(), _config())
        assert [r.url[-1] for r in report.links] == ["a", "b", "c", "d"]

    def test_pending_records_are_excluded(self) -> None:
        records = _mixed() + [_record("https://aff.example/e", None)]
        report = summarize(records, _config())
        assert report.total_checked == 4
        assert all(r.url != "https://aff.example/e" for r in report.links)

    def test_empty(self) -> None:
        report = summarize([], _config())
        assert report.total_checked == 0
        assert report.replacements == []


# ---------------------------------------------------------------------------
# build_verdict
# ---------------------------------------------------------------------------

class TestBuildVerdict:
    def test_no_broken_links_always_passes(self) -> None:
        healthy = [_record("https://aff.example/a", CheckOutcome(ok=True, http_status=200))]
        report = summarize(healthy, _config())
        assert build_verdict(report, fail_on_broken=True).failed is False
        assert build_verdict(report, fail_on_broken=False).failed is False

    def test_broken_links_fail_only_when_requested(self) -> None:
        report = summarize(_mixed(), _config())
        assert build_verdict(report, fail_on_broken=False).failed is False
        assert build_verdict(report, fail_on_broken=True).failed is True

    def test_payload_lists_every_replaced_url(self) -> None:
        verdict = build_verdict(summarize(_mixed(), _config()), fail_on_broken=True)
        assert verdict.broken_count == 2
        assert verdict.fallback_url == _FALLBACK
        assert verdict.broken_links == [
            ("https://aff.example/b", "timeout"),
            ("https://aff.example/d", "HTTP 503"),
        ]

    def test_message_format(self) -> None:
        message = build_verdict(summarize(_mixed(), _config()), fail_on_broken=True).message()
        assert message.startswith("Affiliate Link Monitor: 2 broken link(s)")
        assert "https://aff.example/b (timeout)" in message
        assert "https://aff.example/d (HTTP 503)" in message
        assert _FALLBACK in message


# ---------------------------------------------------------------------------
# render_report
# ---------------------------------------------------------------------------

class TestRenderReport:
    def test_renders_counts_and_replacements(self) -> None:
        text = render_report(summarize(_mixed(), _config()))
        assert "Unique URLs checked:  4" in text
        assert "Broken:               2" in text
        assert "Auto-replaced:        2 (→ Shop)" in text
        assert "Reason: timeout" in text
        assert "Used on: 3 page(s)" in text
        assert "ACTION NEEDED" in text
        assert "All affiliate links are healthy" not in text

    def test_all_links_listing(self) -> None:
        text = render_report(summarize(_mixed(), _config()))
        assert "✅ aff.example/a" in text
        assert "🔧 aff.example/b" in text
        assert "2 pages" in text
        assert "1 page\n" in text

    def test_all_healthy(self) -> None:
        healthy = [_record("https://aff.example/a", CheckOutcome(ok=True, http_status=200))]
        text = render_report(summarize(healthy, _config()))
        assert "REPLACED LINKS" not in text
        assert text.endswith("✅ All affiliate links are healthy!")
