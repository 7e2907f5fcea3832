"""Scanner package — file walk, URL extraction & liveness probes."""

from linkmonitor.scanner.checker import check_once, check_with_retry
from linkmonitor.scanner.extractor import extract_affiliate_links
from linkmonitor.scanner.files import collect_occurrences, find_html_files

__all__ = [
    "check_once",
    "check_with_retry",
    "extract_affiliate_links",
    "collect_occurrences",
    "find_html_files",
]
