"""Normalize heterogeneous raw log lines into structured LogEntry records."""

from log_normalizer.models import LogEntry, ParseResult, UserAgent, entry_to_dict
from log_normalizer.parsers import parse_line, parse_line_result, parse_lines

__all__ = [
    "LogEntry",
    "ParseResult",
    "UserAgent",
    "entry_to_dict",
    "parse_line",
    "parse_line_result",
    "parse_lines",
]
