#!/usr/bin/env python3
"""log-normalizer: normalize heterogeneous log lines from files or stdin."""

import argparse
import json
import logging
import sys
from typing import Iterator

from log_normalizer.filters import apply_filter, build_filter
from log_normalizer.models import LogEntry, entry_to_dict
from log_normalizer.parsers import parse_lines
from log_normalizer.stats import compute_stats, format_stats_text, stats_to_dict

SAMPLE_LINES = [
    '192.168.1.1 - - [14/Mar/2024:12:34:56 +0000] "GET /api/users HTTP/1.1" 200 1234 "https://example.com" "Mozilla/5.0 (Windows NT 10.0) Chrome/99"',
    '[Thu Mar 14 12:34:56.789123 2024] [error] [pid 1234] [client 192.168.1.1] PHP Fatal error: Uncaught Error',
    'Mar 14 12:34:56 myhost CRON[4321]: (root) CMD (run-parts /etc/cron.hourly)',
    'Mar 14 12:34:56 myhost sshd[1234]: Failed password for invalid user admin from 10.0.0.5 port 22 ssh2',
    '2024-03-14T12:34:56.789123456Z stdout E Disk full',
    'random text here',
]


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="log-normalizer",
        description="Normalize access, error, syslog, SSH and container log lines.",
    )
    parser.add_argument(
        "files",
        nargs="*",
        help="Log file path(s); '-' or nothing reads stdin",
    )
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Normalize built-in sample lines instead of reading input",
    )
    parser.add_argument(
        "--level",
        action="append",
        help="Keep only this level (repeatable: INFO, WARN, ERROR, DEBUG)",
    )
    parser.add_argument(
        "--search",
        help="Keep entries whose message, source or IP contains this keyword",
    )
    parser.add_argument(
        "--output",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Show statistics instead of entries",
    )
    return parser


def read_input(paths: list[str]) -> Iterator[str]:
    """Yield raw lines from each path in order; '-' is stdin."""
    for path in paths or ["-"]:
        if path == "-":
            yield from sys.stdin
            continue
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            yield from f


def format_text(entry: LogEntry) -> str:
    parts = [entry.timestamp, f"{entry.level:5s}"]
    if entry.source:
        parts.append(f"[{entry.source}]")
    if entry.ip_address:
        parts.append(f"({entry.ip_address})")
    parts.append(entry.message)
    return " ".join(parts)


def run(args) -> int:
    lines = SAMPLE_LINES if args.demo else read_input(args.files)
    entries = parse_lines(lines)
    entries = apply_filter(entries, build_filter(levels=args.level, search=args.search))

    if args.stats:
        stats = compute_stats(entries)
        if args.output == "json":
            print(json.dumps(stats_to_dict(stats), indent=2))
        else:
            print(format_stats_text(stats))
        return 0

    for entry in entries:
        if args.output == "json":
            print(json.dumps(entry_to_dict(entry)))
        else:
            print(format_text(entry))
    return 0


def main():
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s [NORMALIZER] %(levelname)s %(message)s",
        stream=sys.stderr,
    )
    args = build_parser().parse_args()
    try:
        sys.exit(run(args))
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except (KeyboardInterrupt, BrokenPipeError):
        sys.exit(0)


if __name__ == "__main__":
    main()
