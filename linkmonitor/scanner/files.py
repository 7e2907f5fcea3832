"""File-store helpers: locate built HTML pages and read/write them as UTF-8."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, List

from linkmonitor.models import Occurrence
from linkmonitor.scanner.extractor import extract_affiliate_links


def find_html_files(root: str | Path) -> List[Path]:
    """Return every ``*.html`` file under *root*, depth first in name order."""
    found: List[Path] = []

    def _walk(directory: Path) -> None:
        for entry in sorted(directory.iterdir(), key=lambda p: p.name):
            if entry.is_dir():
                _walk(entry)
            elif entry.name.endswith(".html"):
                found.append(entry)

    _walk(Path(root))
    return found


def read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def write_text(path: Path, text: str) -> None:
    path.write_text(text, encoding="utf-8")


def collect_occurrences(files: Iterable[Path], pattern: str) -> Iterator[Occurrence]:
    """Yield an :class:`Occurrence` for every affiliate URL in *files*.

    Each file is read once; order is file order, then document order.
    """
    for file in files:
        for url in extract_affiliate_links(read_text(file), pattern):
            yield Occurrence(url=url, file=file)
