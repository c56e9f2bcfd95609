"""Normalization entry point: one raw line in, exactly one LogEntry out.

Flow:
  1. Grammar cascade (see grammars.py), first full match wins
  2. No match → fallback salvage (timestamp / IP heuristics)
  3. Anything unexpected → ERROR entry tagged "parser-error"
"""

import logging
from typing import Iterable

from log_normalizer.fallback import salvage_entry
from log_normalizer.grammars import classify
from log_normalizer.models import ERROR, LogEntry, ParseResult
from log_normalizer.timestamps import utc_now_iso

logger = logging.getLogger(__name__)

PARSER_ERROR_SOURCE = "parser-error"


def _normalize(line: str) -> ParseResult:
    matched = classify(line)
    if matched is None:
        return ParseResult(entry=salvage_entry(line), grammar="fallback")
    grammar, m = matched
    return ParseResult(entry=grammar.extract(m), grammar=grammar.name)


def parse_line_result(line: str) -> ParseResult:
    """Normalize a line and report which grammar claimed it. Never raises."""
    line = line.rstrip("\r\n")
    try:
        return _normalize(line)
    except Exception as e:
        logger.warning("Error parsing log line %r: %s", line, e)
        entry = LogEntry(
            timestamp=utc_now_iso(),
            level=ERROR,
            message=line,
            source=PARSER_ERROR_SOURCE,
        )
        return ParseResult(entry=entry, grammar=PARSER_ERROR_SOURCE, error=str(e))


def parse_line(line: str) -> LogEntry:
    """Normalize a single raw log line into a LogEntry."""
    return parse_line_result(line).entry


def parse_lines(lines: Iterable[str]) -> list[LogEntry]:
    """Normalize every non-blank line, preserving input order."""
    return [parse_line(line) for line in lines if line.strip()]
