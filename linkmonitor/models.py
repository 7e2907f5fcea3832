"""Dataclass models shared by the scanner, repair and report stages.

These are plain Python objects; nothing here performs I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class LinkStatus(str, Enum):
    PENDING = "pending"
    HEALTHY = "healthy"
    REDIRECTED = "redirected"
    BROKEN = "broken"

    @property
    def is_terminal(self) -> bool:
        return self is not LinkStatus.PENDING


@dataclass(frozen=True)
class Occurrence:
    """One textual appearance of *url* inside *file*."""

    url: str
    file: Path


@dataclass(frozen=True)
class CheckOutcome:
    """Result of a single probe, or of a whole retry sequence."""

    ok: bool
    http_status: int | None = None
    redirect_target: str | None = None
    error_message: str | None = None


@dataclass
class LinkRecord:
    """Everything known about one distinct affiliate URL during a run."""

    url: str
    files: list[Path] = field(default_factory=list)
    status: LinkStatus = LinkStatus.PENDING
    http_status: int | None = None
    redirect_target: str | None = None
    error_detail: str | None = None
    replaced: bool = False

    # ------------------------------------------------------------------
    # Convenience helpers
    # ------------------------------------------------------------------
    @property
    def ok(self) -> bool:
        return self.status in (LinkStatus.HEALTHY, LinkStatus.REDIRECTED)

    @property
    def reason(self) -> str:
        """Failure reason for reports: the error text, else ``HTTP <status>``."""
        return self.error_detail or f"HTTP {self.http_status}"

    def add_file(self, file: Path) -> None:
        """Append *file* unless it is already listed."""
        if file not in self.files:
            self.files.append(file)

    def apply_outcome(self, outcome: CheckOutcome) -> None:
        """Move this record from ``PENDING`` to its terminal status.

        Raises:
            ValueError: If the record has already been checked.
        """
        if self.status.is_terminal:
            raise ValueError(f"{self.url!r} already has terminal status {self.status.value}")
        self.http_status = outcome.http_status
        if outcome.ok and outcome.redirect_target:
            self.status = LinkStatus.REDIRECTED
            self.redirect_target = outcome.redirect_target
        elif outcome.ok:
            self.status = LinkStatus.HEALTHY
        else:
            self.status = LinkStatus.BROKEN
            self.error_detail = outcome.error_message
