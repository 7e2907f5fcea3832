"""Affiliate URL extraction from rendered HTML."""

from __future__ import annotations

import re
from typing import List


def _link_regex(pattern: str) -> re.Pattern[str]:
    # *pattern* is spliced in verbatim; callers own its correctness.
    return re.compile(
        rf"""href=["'](https?://[^"']*{pattern}[^"']*)["']""",
        re.IGNORECASE,
    )


def extract_affiliate_links(html: str, pattern: str) -> List[str]:
    """Return every ``href`` URL in *html* that matches *pattern*.

    URLs are returned left to right with duplicates kept.  An attribute
    whose closing quote is missing produces no match; HTML entities are not
    decoded.
    """
    if not html:
        return []
    return [m.group(1) for m in _link_regex(pattern).finditer(html)]
