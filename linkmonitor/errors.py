"""Exception types raised by the link monitor.

Network failures are never raised; the checker reports them as data.
File-system errors surface as the built-in ``OSError`` family.
"""

from __future__ import annotations


class MonitorError(Exception):
    """Base class for errors raised by the link monitor."""


class ConfigError(MonitorError):
    """The run configuration is invalid or could not be loaded."""
