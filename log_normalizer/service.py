#!/usr/bin/env python3
"""Log Normalizer Service: file monitor + HTTP API entry point."""

import logging
import signal
import sys
import threading

from werkzeug.serving import make_server

from log_normalizer.config import load_config
from log_normalizer.watcher import LogMonitor
from log_normalizer.web import create_app

logger = logging.getLogger(__name__)


def main():
    config = load_config()
    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(asctime)s [NORMALIZER] %(levelname)s %(message)s",
        stream=sys.stderr,
    )
    logger.info("Config: log_file=%s, output_dir=%s, port=%d",
                config.log_file, config.output_dir, config.port)

    monitor = LogMonitor(config.output_dir, config.use_polling, config.poll_interval)
    if config.log_file:
        try:
            monitor.set_log_file(config.log_file)
        except FileNotFoundError as e:
            logger.warning("%s, waiting for POST /api/set-log-file", e)
    monitor.start()

    app = create_app(config, monitor)
    server = make_server(config.host, config.port, app, threaded=True)

    def _signal_handler(sig, frame):
        logger.info("Shutdown signal received, stopping...")
        # shutdown() blocks until serve_forever() returns, so not from this thread
        threading.Thread(target=server.shutdown, daemon=True).start()

    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    logger.info("Log Normalizer running on %s:%d", config.host, config.port)
    server.serve_forever()

    logger.info("Shutting down...")
    monitor.stop()
    logger.info("Log Normalizer stopped.")


if __name__ == "__main__":
    main()
