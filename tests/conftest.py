import pytest

from log_normalizer.config import Config
from log_normalizer.watcher import LogMonitor
from log_normalizer.web import create_app


@pytest.fixture
def sample_log(tmp_path):
    path = tmp_path / "app.log"
    path.write_text(
        '192.168.1.1 - - [14/Mar/2024:12:34:56 +0000] "GET /api/users HTTP/1.1" 200 1234 '
        '"https://x.com" "Mozilla/5.0 (Windows NT 10.0) Chrome/99"\n'
        "Mar 14 12:34:56 myhost sshd[1234]: Failed password for invalid user admin "
        "from 10.0.0.5 port 22 ssh2\n"
        "2024-03-14T12:34:56.789123456Z stdout E Disk full\n"
        "random text here\n"
    )
    return path


@pytest.fixture
def monitor(tmp_path):
    mon = LogMonitor(str(tmp_path / "parsed"), use_polling=True, poll_interval=0.1)
    yield mon
    mon.stop()


@pytest.fixture
def app(tmp_path, monitor):
    """Create a Flask test app."""
    application = create_app(Config(output_dir=str(tmp_path / "parsed")), monitor)
    application.config["TESTING"] = True
    return application


@pytest.fixture
def client(app):
    """Create a Flask test client."""
    return app.test_client()
