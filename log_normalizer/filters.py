"""Filter predicates for normalized entries by level, search text, time range or IP."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable

from dateutil import parser as date_parser

from log_normalizer.models import LogEntry


def _entry_time(entry: LogEntry) -> datetime:
    return date_parser.isoparse(entry.timestamp)


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


@dataclass(frozen=True)
class LogFilter:
    """All set criteria must hold. An empty filter matches everything."""

    levels: frozenset[str] = field(default_factory=frozenset)
    search: str | None = None
    start: datetime | None = None
    end: datetime | None = None
    ip: str | None = None

    def matches(self, entry: LogEntry) -> bool:
        if self.levels and entry.level not in self.levels:
            return False
        if self.search and not self._matches_search(entry):
            return False
        if self.ip and entry.ip_address != self.ip:
            return False
        if self.start is not None or self.end is not None:
            ts = _entry_time(entry)
            if self.start is not None and ts < _as_utc(self.start):
                return False
            if self.end is not None and ts > _as_utc(self.end):
                return False
        return True

    def _matches_search(self, entry: LogEntry) -> bool:
        """Case-insensitive keyword in message, source or IP."""
        keyword = self.search.lower()
        haystacks = (entry.message, entry.source or "", entry.ip_address or "")
        return any(keyword in h.lower() for h in haystacks)


def build_filter(levels: Iterable[str] | None = None, search: str | None = None,
                 start: str | None = None, end: str | None = None,
                 ip: str | None = None) -> LogFilter:
    """Build a LogFilter from loosely typed (CLI / query string) values.

    Raises ValueError for a start/end that is not a parseable date.
    """
    return LogFilter(
        levels=frozenset(l.upper() for l in levels or () if l),
        search=search or None,
        start=date_parser.parse(start) if start else None,
        end=date_parser.parse(end) if end else None,
        ip=ip or None,
    )


def apply_filter(entries: Iterable[LogEntry], flt: LogFilter) -> list[LogEntry]:
    """Return the entries matching *flt*, in order."""
    return [e for e in entries if flt.matches(e)]
