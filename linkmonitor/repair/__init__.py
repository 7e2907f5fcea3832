"""Repair package — dedup index, link repair and run reporting."""

from linkmonitor.repair.engine import replace_in_file, run_repair
from linkmonitor.repair.index import build_index
from linkmonitor.repair.report import Report, Verdict, build_verdict, summarize

__all__ = [
    "build_index",
    "run_repair",
    "replace_in_file",
    "summarize",
    "build_verdict",
    "Report",
    "Verdict",
]
