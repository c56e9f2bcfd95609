"""Normalized log entry dataclass: every grammar maps to this schema."""

from dataclasses import dataclass
from typing import Any

INFO = "INFO"
WARN = "WARN"
ERROR = "ERROR"
DEBUG = "DEBUG"

LEVELS = (INFO, WARN, ERROR, DEBUG)


@dataclass(frozen=True)
class UserAgent:
    browser: str = "Unknown"
    os: str = "Unknown"
    device: str = "Desktop"


@dataclass(frozen=True)
class GeoLocation:
    country: str
    city: str
    coordinates: tuple[float, float]


@dataclass(frozen=True)
class LogEntry:
    timestamp: str  # ISO 8601, UTC, "Z" suffix
    level: str      # INFO, WARN, ERROR, DEBUG
    message: str

    source: str | None = None
    ip_address: str | None = None
    user_agent: UserAgent | None = None
    # Populated by upstream enrichment only.
    geo_location: GeoLocation | None = None
    stack_trace: tuple[str, ...] | None = None


@dataclass(frozen=True)
class ParseResult:
    """Outcome of normalizing one line. Always carries an entry."""

    entry: LogEntry
    grammar: str  # "access", "error", "syslog", "ssh", "container", "fallback", "parser-error"
    error: str | None = None


def entry_to_dict(entry: LogEntry) -> dict[str, Any]:
    """Convert a LogEntry to its wire dict, dropping None values for cleaner JSON."""
    d: dict[str, Any] = {
        "timestamp": entry.timestamp,
        "level": entry.level,
        "message": entry.message,
        "source": entry.source,
        "ipAddress": entry.ip_address,
    }
    if entry.user_agent is not None:
        d["userAgent"] = {
            "browser": entry.user_agent.browser,
            "os": entry.user_agent.os,
            "device": entry.user_agent.device,
        }
    if entry.geo_location is not None:
        d["geoLocation"] = {
            "country": entry.geo_location.country,
            "city": entry.geo_location.city,
            "coordinates": list(entry.geo_location.coordinates),
        }
    if entry.stack_trace is not None:
        d["stackTrace"] = list(entry.stack_trace)
    return {k: v for k, v in d.items() if v is not None}
