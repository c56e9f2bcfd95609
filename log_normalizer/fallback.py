"""Salvage a timestamp and an IP from lines no grammar recognized."""

import re

from log_normalizer.models import LogEntry
from log_normalizer.severity import classify_severity
from log_normalizer.timestamps import normalize_timestamp, utc_now_iso

_TIMESTAMP_RE = re.compile(r"\d{4}-\d{2}-\d{2}[T\s]\d{2}:\d{2}:\d{2}(?:[.,]\d{3})?(?:Z)?", re.ASCII)
_IPV4_RE = re.compile(r"\b(?:\d{1,3}\.){3}\d{1,3}\b", re.ASCII)

FALLBACK_SOURCE = "unknown"


def salvage_entry(line: str) -> LogEntry:
    """Wrap the whole line, keeping any embedded timestamp and IPv4 address."""
    ts = _TIMESTAMP_RE.search(line)
    ip = _IPV4_RE.search(line)
    return LogEntry(
        timestamp=normalize_timestamp(ts.group(0)) if ts else utc_now_iso(),
        level=classify_severity(line),
        message=line,
        source=FALLBACK_SOURCE,
        ip_address=ip.group(0) if ip else None,
    )
