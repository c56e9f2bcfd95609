"""Timestamp repair: every grammar's native date becomes canonical ISO 8601 UTC.

Strategy order:
  1. Contains '/' → '14/Mar/2024:12:34:56 +0000' rewritten month-first
  2. 'Mar 14 12:34:56' (no year) → current year appended
  3. Direct generic parse
  4. Current wall-clock time
"""

import logging
import re
from datetime import datetime, timezone

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

_DAY_FIRST_RE = re.compile(r"(\d{2})/(\w{3})/(\d{4}):(\d{2}:\d{2}:\d{2})", re.ASCII)
_YEARLESS_RE = re.compile(r"^\w{3}\s+\d{1,2}\s+\d{2}:\d{2}:\d{2}", re.ASCII)
# datetime holds microseconds; container runtimes emit nanoseconds
_LONG_FRACTION_RE = re.compile(r"(\.\d{6})\d+", re.ASCII)
_COMMA_FRACTION_RE = re.compile(r"(:\d{2}),(\d)", re.ASCII)


def to_iso(dt: datetime) -> str:
    """Render an aware or naive datetime as '2024-03-14T12:34:56.000Z'.

    Naive datetimes are taken to be UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utc_now_iso() -> str:
    return to_iso(datetime.now(timezone.utc))


def _parse(text: str) -> datetime | None:
    """Generic, locale-independent parse. None for anything that isn't a real instant."""
    try:
        dt = date_parser.parse(text)
        # Offsets outside the representable range surface here, not in parse().
        to_iso(dt)
    except (ValueError, OverflowError, TypeError):
        return None
    return dt


def _day_first(raw: str) -> datetime | None:
    if "/" not in raw:
        return None
    return _parse(_DAY_FIRST_RE.sub(r"\2 \1 \3 \4", raw))


def _yearless(raw: str) -> datetime | None:
    if not _YEARLESS_RE.match(raw):
        return None
    # Known limitation: lines written last year are dated this year.
    year = datetime.now(timezone.utc).year
    return _parse(f"{raw} {year}")


def _direct(raw: str) -> datetime | None:
    text = _LONG_FRACTION_RE.sub(r"\1", raw.strip())
    text = _COMMA_FRACTION_RE.sub(r"\1.\2", text)
    if not text:
        return None
    return _parse(text)


_STRATEGIES = (_day_first, _yearless, _direct)


def normalize_timestamp(raw: str) -> str:
    """Convert a raw timestamp to canonical ISO 8601 UTC. Never raises."""
    for strategy in _STRATEGIES:
        dt = strategy(raw)
        if dt is not None:
            return to_iso(dt)
    logger.debug("Unparseable timestamp %r, using current time", raw)
    return utc_now_iso()
