"""Deduplicate occurrences so each distinct URL is checked exactly once."""

from __future__ import annotations

from typing import Dict, Iterable

from linkmonitor.models import LinkRecord, Occurrence


def build_index(occurrences: Iterable[Occurrence]) -> Dict[str, LinkRecord]:
    """Group *occurrences* into one :class:`LinkRecord` per distinct URL.

    URLs are compared verbatim (no trailing-slash or query normalisation).
    The returned dict iterates in first-seen URL order, and each record's
    ``files`` lists the referencing files in first-seen order without repeats.
    """
    records: Dict[str, LinkRecord] = {}
    for occ in occurrences:
        record = records.get(occ.url)
        if record is None:
            records[occ.url] = LinkRecord(url=occ.url, files=[occ.file])
        else:
            record.add_file(occ.file)
    return records
