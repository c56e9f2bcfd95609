"""Flask HTTP API: choose the monitored file, read and filter normalized entries."""

import logging

from flask import Flask, jsonify, request

from log_normalizer.config import Config
from log_normalizer.filters import apply_filter, build_filter
from log_normalizer.models import entry_to_dict
from log_normalizer.parsers import parse_lines
from log_normalizer.stats import compute_stats, stats_to_dict
from log_normalizer.watcher import LogMonitor

logger = logging.getLogger(__name__)

MAX_PARSE_LINES = 10000


def create_app(config: Config, monitor: LogMonitor) -> Flask:
    """Flask application factory."""
    app = Flask(__name__)
    app.config["NORMALIZER"] = config
    app.config["MONITOR"] = monitor

    @app.route("/health")
    def health():
        return jsonify(status="ok", logFile=monitor.log_file)

    @app.route("/api/set-log-file", methods=["POST"])
    def set_log_file():
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            body = {}
        file_path = body.get("filePath")
        if not isinstance(file_path, str) or not file_path:
            return jsonify(message="File path is required"), 400
        try:
            monitor.set_log_file(file_path)
        except FileNotFoundError:
            logger.warning("Requested log file not found: %s", file_path)
            return jsonify(message=f"File not found: {file_path}"), 404
        return jsonify(message="Log file path set successfully")

    @app.route("/api/logs")
    def logs():
        try:
            flt = build_filter(
                levels=request.args.getlist("level"),
                search=request.args.get("search"),
                start=request.args.get("start"),
                end=request.args.get("end"),
                ip=request.args.get("ip"),
            )
        except (ValueError, OverflowError):
            return jsonify(message="Invalid time range"), 400
        limit = request.args.get("limit", type=int)

        entries = apply_filter(monitor.entries, flt)
        if limit is not None and limit >= 0:
            entries = entries[:limit]
        return jsonify(logs=[entry_to_dict(e) for e in entries], count=len(entries))

    @app.route("/api/parse", methods=["POST"])
    def parse():
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            body = {}
        lines = body.get("lines")
        if not isinstance(lines, list) or not all(isinstance(l, str) for l in lines):
            return jsonify(message="'lines' must be a list of strings"), 400
        if len(lines) > MAX_PARSE_LINES:
            return jsonify(message=f"At most {MAX_PARSE_LINES} lines per request"), 400

        entries = parse_lines(lines)
        return jsonify(logs=[entry_to_dict(e) for e in entries], count=len(entries))

    @app.route("/api/stats")
    def stats():
        return jsonify(stats_to_dict(compute_stats(monitor.entries)))

    return app
