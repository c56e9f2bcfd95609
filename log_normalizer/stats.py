"""Statistics: level counts, hourly buckets, sources, IPs and browsers.

compute_stats() summarizes a batch of entries; StatsCollector keeps per-file
stats for the watcher and persists the aggregate atomically.
"""

import json
import os
import tempfile
import threading
from collections import Counter
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Iterable

from log_normalizer.models import ERROR, LEVELS, WARN, LogEntry, ParseResult

TOP_N = 10


@dataclass
class LogStats:
    total_entries: int = 0
    level_counts: dict[str, int] = field(default_factory=dict)
    hourly: dict[str, dict[str, int]] = field(default_factory=dict)
    source_counts: dict[str, int] = field(default_factory=dict)
    top_ips: dict[str, int] = field(default_factory=dict)
    browser_counts: dict[str, int] = field(default_factory=dict)


def compute_stats(entries: Iterable[LogEntry]) -> LogStats:
    """Consume an entry stream and produce aggregated statistics."""
    levels = Counter({level: 0 for level in LEVELS})
    hourly: dict[str, dict[str, int]] = {}
    sources = Counter()
    ips = Counter()
    browsers = Counter()
    total = 0

    for entry in entries:
        total += 1
        levels[entry.level] += 1

        # "2024-03-14T12:34:56.000Z" → "2024-03-14T12:00"
        hour_key = entry.timestamp[:13] + ":00"
        bucket = hourly.setdefault(hour_key, {"errors": 0, "warnings": 0, "info": 0})
        if entry.level == ERROR:
            bucket["errors"] += 1
        elif entry.level == WARN:
            bucket["warnings"] += 1
        else:
            bucket["info"] += 1

        if entry.source:
            sources[entry.source] += 1
        if entry.ip_address:
            ips[entry.ip_address] += 1
        if entry.user_agent:
            browsers[entry.user_agent.browser] += 1

    return LogStats(
        total_entries=total,
        level_counts=dict(levels),
        hourly=dict(sorted(hourly.items())),
        source_counts=dict(sources.most_common()),
        top_ips=dict(ips.most_common(TOP_N)),
        browser_counts=dict(browsers.most_common()),
    )


def stats_to_dict(stats: LogStats) -> dict:
    return asdict(stats)


def format_stats_text(stats: LogStats) -> str:
    """Human-readable stats summary."""
    lines = [f"Total entries: {stats.total_entries}", ""]

    lines.append("Level counts:")
    for level, count in stats.level_counts.items():
        lines.append(f"  {level:8s} {count}")
    lines.append("")

    lines.append("Entries per hour (errors/warnings/info):")
    for hour, bucket in stats.hourly.items():
        lines.append(f"  {hour}  {bucket['errors']}/{bucket['warnings']}/{bucket['info']}")
    lines.append("")

    lines.append("Sources:")
    for source, count in stats.source_counts.items():
        lines.append(f"  {source}  {count}")

    if stats.top_ips:
        lines.append("")
        lines.append("Top IPs:")
        for ip, count in stats.top_ips.items():
            lines.append(f"  {ip}  {count}")

    if stats.browser_counts:
        lines.append("")
        lines.append("Browsers:")
        for browser, count in stats.browser_counts.items():
            lines.append(f"  {browser}  {count}")

    return "\n".join(lines)


class StatsCollector:
    """Tracks normalization statistics per file. Re-processing replaces (not appends)."""

    def __init__(self, output_dir: str):
        self._output_dir = output_dir
        self._file_stats: dict[str, LogStats] = {}
        self._grammar_counts: dict[str, Counter] = {}
        self._ip_counts: dict[str, Counter] = {}
        self._lock = threading.Lock()

    def record_file(self, filepath: str, results: list[ParseResult]):
        """Record stats for all results from a single file, replacing any previous data."""
        file_stats = compute_stats(r.entry for r in results)
        grammars = Counter(r.grammar for r in results)
        ips = Counter(r.entry.ip_address for r in results if r.entry.ip_address)
        with self._lock:
            self._file_stats[filepath] = file_stats
            self._grammar_counts[filepath] = grammars
            self._ip_counts[filepath] = ips

    def aggregate(self) -> dict:
        with self._lock:
            return self._aggregate()

    def _aggregate(self) -> dict:
        total = 0
        levels = Counter()
        sources = Counter()
        ips = Counter()
        grammars = Counter()

        for fs in self._file_stats.values():
            total += fs.total_entries
            levels.update(fs.level_counts)
            sources.update(fs.source_counts)
        for counts in self._grammar_counts.values():
            grammars.update(counts)
        for counts in self._ip_counts.values():
            ips.update(counts)

        return {
            "total_entries": total,
            "level_counts": dict(levels),
            "grammar_counts": dict(grammars.most_common()),
            "source_counts": dict(sources.most_common()),
            "top_ips": dict(ips.most_common(TOP_N)),
            "files_processed": len(self._file_stats),
            "last_updated": datetime.now(timezone.utc).isoformat(),
        }

    def save(self):
        """Write parsing_stats.json atomically, under the collector lock."""
        with self._lock:
            self._write(self._aggregate())

    def _write(self, data: dict):
        os.makedirs(self._output_dir, exist_ok=True)
        target = os.path.join(self._output_dir, "parsing_stats.json")
        tmp_fd, tmp_path = tempfile.mkstemp(dir=self._output_dir, suffix=".tmp")
        try:
            with os.fdopen(tmp_fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
                f.write("\n")
            os.replace(tmp_path, target)
        except Exception:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
