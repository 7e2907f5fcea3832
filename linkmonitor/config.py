"""Run configuration for the affiliate link monitor.

A :class:`MonitorConfig` is built once at the start of a run by
:func:`load_config` and passed explicitly to every component.  Defaults can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported), and explicit overrides
(CLI options, an inputs file) win over both.
"""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Mapping

from dotenv import load_dotenv

from linkmonitor.errors import ConfigError

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

DEFAULT_PATTERN = r"nationalcouncilonstrength\.sjv\.io"
DEFAULT_FALLBACK_URL = "https://nationalcouncilonstrength.sjv.io/certfit-home"
DEFAULT_FALLBACK_LABEL = "NCSF Homepage"

# Input names as a build configuration spells them.
_CAMEL_KEYS = {
    "affiliatePattern": "affiliate_pattern",
    "fallbackUrl": "fallback_url",
    "fallbackLabel": "fallback_label",
    "timeoutMs": "timeout_ms",
    "retries": "retries",
    "failOnBroken": "fail_on_broken",
    "checkExternal": "check_external",
    "userAgent": "user_agent",
}

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}

_INT_FIELDS = ("timeout_ms", "retries")
_BOOL_FIELDS = ("fail_on_broken", "check_external")
_STR_FIELDS = ("affiliate_pattern", "fallback_url", "fallback_label", "user_agent")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class MonitorConfig:
    # ------------------------------------------------------------------
    # Link selection / replacement
    # ------------------------------------------------------------------
    affiliate_pattern: str = field(
        default_factory=lambda: os.environ.get("AFFILIATE_PATTERN", DEFAULT_PATTERN)
    )
    fallback_url: str = field(
        default_factory=lambda: os.environ.get("AFFILIATE_FALLBACK_URL", DEFAULT_FALLBACK_URL)
    )
    fallback_label: str = field(
        default_factory=lambda: os.environ.get("AFFILIATE_FALLBACK_LABEL", DEFAULT_FALLBACK_LABEL)
    )

    # ------------------------------------------------------------------
    # Probe policy
    # ------------------------------------------------------------------
    timeout_ms: int = field(
        default_factory=lambda: int(os.environ.get("LINK_TIMEOUT_MS", "10000"))
    )
    retries: int = field(
        default_factory=lambda: int(os.environ.get("LINK_RETRIES", "2"))
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get("LINK_USER_AGENT", "AffiliateLinkMonitor/1.0")
    )

    # ------------------------------------------------------------------
    # Verdict
    # ------------------------------------------------------------------
    fail_on_broken: bool = field(
        default_factory=lambda: _env_bool("FAIL_ON_BROKEN", False)
    )
    # Accepted but inert: the extractor only matches affiliate links.
    check_external: bool = field(
        default_factory=lambda: _env_bool("CHECK_EXTERNAL", False)
    )

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000

    def validate(self) -> None:
        """Raise :class:`ConfigError` if the configuration cannot be used."""
        for name in _STR_FIELDS:
            if not isinstance(getattr(self, name), str):
                raise ConfigError(f"{name} must be a string, got {getattr(self, name)!r}")
        for name in _INT_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{name} must be an integer, got {value!r}")
        for name in _BOOL_FIELDS:
            if not isinstance(getattr(self, name), bool):
                raise ConfigError(f"{name} must be true or false, got {getattr(self, name)!r}")
        if not self.affiliate_pattern:
            raise ConfigError("affiliate_pattern must not be empty")
        try:
            re.compile(self.affiliate_pattern)
        except re.error as exc:
            raise ConfigError(
                f"affiliate_pattern {self.affiliate_pattern!r} is not a valid regex: {exc}"
            ) from exc
        if self.timeout_ms <= 0:
            raise ConfigError(f"timeout_ms must be positive, got {self.timeout_ms}")
        if self.retries < 0:
            raise ConfigError(f"retries must be zero or more, got {self.retries}")
        if not self.fallback_url:
            raise ConfigError("fallback_url must not be empty")

    def warnings(self) -> list[str]:
        """Return non-fatal problems worth showing to the operator."""
        found: list[str] = []
        if re.search(self.affiliate_pattern, self.fallback_url, re.IGNORECASE):
            found.append(
                f"fallback URL {self.fallback_url!r} matches the affiliate pattern; "
                "it will be extracted and re-checked on the next run"
            )
        if self.check_external:
            found.append("check_external is accepted but not implemented; only affiliate links are checked")
        return found


def _coerce(name: str, value: Any) -> Any:
    # Inputs files and env-style values arrive as strings.
    if not isinstance(value, str):
        return value
    if name in _BOOL_FIELDS:
        lowered = value.strip().lower()
        if lowered in _TRUTHY:
            return True
        if lowered in _FALSY:
            return False
        raise ConfigError(f"{name} must be true or false, got {value!r}")
    if name in _INT_FIELDS:
        try:
            return int(value.strip())
        except ValueError as exc:
            raise ConfigError(f"{name} must be an integer, got {value!r}") from exc
    return value


def _normalise_overrides(overrides: Mapping[str, Any]) -> dict[str, Any]:
    known = {f.name for f in fields(MonitorConfig)}
    result: dict[str, Any] = {}
    for key, value in overrides.items():
        if value is None:
            continue
        name = _CAMEL_KEYS.get(key, key)
        if name not in known:
            raise ConfigError(f"Unknown configuration option {key!r}")
        result[name] = _coerce(name, value)
    return result


def load_config(overrides: Mapping[str, Any] | None = None) -> MonitorConfig:
    """Build the run configuration: defaults ← environment ← *overrides*.

    Override keys may use either the Python field names or the camelCase input
    names (``affiliatePattern``, ``fallbackUrl``, …).  ``None`` values are
    skipped so unset CLI options fall through to the environment.

    Raises:
        ConfigError: If an override key is unknown or an env value is not a
            valid number.
    """
    try:
        base = MonitorConfig()
    except ValueError as exc:
        raise ConfigError(f"Invalid numeric setting in environment: {exc}") from exc
    if not overrides:
        return base
    return replace(base, **_normalise_overrides(overrides))


def load_inputs_file(path: str | Path) -> dict[str, Any]:
    """Read a JSON object of monitor inputs from *path*."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{path}: invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a JSON object of inputs")
    return data
