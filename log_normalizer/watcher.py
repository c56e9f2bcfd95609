"""File monitoring: re-normalizes a watched log file whenever it changes."""

import json
import logging
import os
import tempfile
import threading
from typing import Callable

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.polling import PollingObserver

from log_normalizer.models import LogEntry, ParseResult, entry_to_dict
from log_normalizer.parsers import parse_line_result
from log_normalizer.stats import StatsCollector

logger = logging.getLogger(__name__)

DEBOUNCE_SECONDS = 0.5

Listener = Callable[[str, list[LogEntry]], None]


class FileWatcher(FileSystemEventHandler):
    """Watches one log file for creation/modification and normalizes the entire file."""

    def __init__(self, filepath: str, output_dir: str, stats: StatsCollector,
                 listener: Listener | None = None):
        super().__init__()
        self._filepath = os.path.abspath(filepath)
        self._output_dir = output_dir
        self._stats = stats
        self._listener = listener
        self._timer: threading.Timer | None = None
        self._timer_lock = threading.Lock()

    @property
    def filepath(self) -> str:
        return self._filepath

    def on_created(self, event):
        if not event.is_directory and os.path.abspath(event.src_path) == self._filepath:
            self._handle()

    def on_modified(self, event):
        if not event.is_directory and os.path.abspath(event.src_path) == self._filepath:
            self._handle()

    def _handle(self):
        """Re-arm the debounce timer. The file is processed once events go quiet."""
        with self._timer_lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(DEBOUNCE_SECONDS, self._process_pending)
            self._timer.daemon = True
            self._timer.start()

    def _process_pending(self):
        with self._timer_lock:
            self._timer = None
        try:
            self.process_file()
        except Exception:
            logger.exception("Failed to process %s", self._filepath)

    def cancel(self):
        """Drop any pending debounced processing."""
        with self._timer_lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def process_file(self) -> list[LogEntry] | None:
        """Read entire file, normalize every line, write output atomically, update stats.

        Returns the entries, or None if the file could not be read.
        """
        logger.info("Processing: %s", self._filepath)
        try:
            with open(self._filepath, "r", encoding="utf-8", errors="replace") as f:
                lines = f.readlines()
        except OSError as e:
            logger.error("Failed to read %s: %s", self._filepath, e)
            return None

        results: list[ParseResult] = [
            parse_line_result(line) for line in lines if line.strip()
        ]
        entries = [r.entry for r in results]

        self._stats.record_file(self._filepath, results)
        output_name = self._write_output(entries)
        self._stats.save()

        fallback = sum(1 for r in results if r.grammar in ("fallback", "parser-error"))
        logger.info("  -> %s: %d entries, %d unrecognized",
                    output_name, len(entries), fallback)

        if self._listener is not None:
            self._listener(self._filepath, entries)
        return entries

    def _write_output(self, entries: list[LogEntry]) -> str:
        basename = os.path.splitext(os.path.basename(self._filepath))[0]
        output_name = f"parsed_{basename}.json"

        os.makedirs(self._output_dir, exist_ok=True)
        target = os.path.join(self._output_dir, output_name)
        tmp_fd, tmp_path = tempfile.mkstemp(dir=self._output_dir, suffix=".tmp")
        try:
            with os.fdopen(tmp_fd, "w", encoding="utf-8") as f:
                json.dump([entry_to_dict(e) for e in entries], f, indent=2)
                f.write("\n")
            os.replace(tmp_path, target)
        except Exception:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
        return output_name


class LogMonitor:
    """Owns the watchdog observer and the currently watched log file.

    Switching files unwatches the previous one. The latest normalized entries
    are kept for readers on other threads (the HTTP API).
    """

    def __init__(self, output_dir: str, use_polling: bool = True,
                 poll_interval: float = 1.0, listener: Listener | None = None):
        self._output_dir = output_dir
        self._stats = StatsCollector(output_dir)
        self._listener = listener
        if use_polling:
            self._observer = PollingObserver(timeout=poll_interval)
        else:
            self._observer = Observer()
        self._lock = threading.Lock()
        self._switch_lock = threading.Lock()
        self._watcher: FileWatcher | None = None
        self._watch = None
        self._entries: list[LogEntry] = []

    @property
    def log_file(self) -> str | None:
        with self._lock:
            return self._watcher.filepath if self._watcher else None

    @property
    def entries(self) -> list[LogEntry]:
        with self._lock:
            return list(self._entries)

    def _on_update(self, filepath: str, entries: list[LogEntry]):
        with self._lock:
            # A late event from a file that was switched away from
            if self._watcher is None or self._watcher.filepath != filepath:
                return
            self._entries = entries
        if self._listener is not None:
            self._listener(filepath, entries)

    def set_log_file(self, filepath: str):
        """Watch *filepath* instead of the current file.

        Raises FileNotFoundError if the file does not exist.
        """
        if not os.path.isfile(filepath):
            raise FileNotFoundError(f"File not found: {filepath}")

        watcher = FileWatcher(filepath, self._output_dir, self._stats, self._on_update)
        # unschedule() waits on the observer's dispatch lock; keep it outside self._lock.
        with self._switch_lock:
            if self._watch is not None:
                self._observer.unschedule(self._watch)
                self._watcher.cancel()
                logger.info("Stopped watching: %s", self._watcher.filepath)
            watch = self._observer.schedule(
                watcher, os.path.dirname(watcher.filepath), recursive=False
            )
            with self._lock:
                self._watcher = watcher
                self._watch = watch
                self._entries = []
        logger.info("Watching: %s", watcher.filepath)

        # Content already on disk is normalized before any change event.
        watcher.process_file()

    def start(self):
        self._observer.start()

    def stop(self):
        with self._lock:
            watcher = self._watcher
        if watcher is not None:
            watcher.cancel()
        if self._observer.is_alive():
            self._observer.stop()
            self._observer.join(timeout=5)
