"""Tests for log_normalizer/grammars.py"""

import unittest

from log_normalizer.grammars import GRAMMARS, classify
from log_normalizer.models import UserAgent

ACCESS_LINE = (
    '192.168.1.1 - - [14/Mar/2024:12:34:56 +0000] "GET /api/users HTTP/1.1" 200 1234 '
    '"https://x.com" "Mozilla/5.0 (Windows NT 10.0) Chrome/99"'
)
ERROR_LINE = (
    "[Thu Mar 14 12:34:56.789123 2024] [error] [pid 1234] [client 192.168.1.1:51234] "
    "PHP Fatal error: Uncaught Error"
)
SYSLOG_LINE = "Mar 14 12:34:56 myhost CRON[4321]: (root) CMD (run-parts /etc/cron.hourly)"
SSH_LINE = (
    "Mar 14 12:34:56 myhost sshd[1234]: Failed password for invalid user admin "
    "from 10.0.0.5 port 22 ssh2"
)
CONTAINER_LINE = "2024-03-14T12:34:56.789123456Z stdout E Disk full"


def _extract(line):
    grammar, m = classify(line)
    return grammar.name, grammar.extract(m)


class TestCascadeOrder(unittest.TestCase):
    def test_fixed_order(self):
        self.assertEqual([g.name for g in GRAMMARS],
                         ["access", "error", "syslog", "ssh", "container"])

    def test_each_line_claimed_by_its_grammar(self):
        cases = [
            (ACCESS_LINE, "access"),
            (ERROR_LINE, "error"),
            (SYSLOG_LINE, "syslog"),
            (SSH_LINE, "ssh"),
            (CONTAINER_LINE, "container"),
        ]
        for line, expected in cases:
            grammar, _ = classify(line)
            self.assertEqual(grammar.name, expected, line)

    def test_sshd_lines_skip_generic_syslog(self):
        grammar, _ = classify("Mar 14 12:34:56 myhost sshd[1]: Connection closed")
        self.assertEqual(grammar.name, "ssh")

    def test_no_match(self):
        self.assertIsNone(classify("random text here"))
        self.assertIsNone(classify(""))

    def test_anchored_not_substring(self):
        self.assertIsNone(classify("prefix " + CONTAINER_LINE))

    def test_common_log_format_without_agent_is_not_access(self):
        self.assertIsNone(classify(
            '10.0.0.1 - - [14/Mar/2024:12:34:56 +0000] "GET / HTTP/1.1" 200 100'
        ))

    def test_syslog_requires_pid(self):
        self.assertIsNone(classify("Mar 14 12:34:56 myhost kernel: eth0 link up"))


class TestAccessExtractor(unittest.TestCase):
    def test_fields(self):
        name, entry = _extract(ACCESS_LINE)
        self.assertEqual(name, "access")
        self.assertEqual(entry.timestamp, "2024-03-14T12:34:56.000Z")
        self.assertEqual(entry.level, "INFO")
        self.assertEqual(entry.message, "GET /api/users HTTP/1.1 - Status: 200, Size: 1234 bytes")
        self.assertEqual(entry.source, "web-access")
        self.assertEqual(entry.ip_address, "192.168.1.1")
        self.assertEqual(entry.user_agent, UserAgent("Chrome 99", "Windows NT 10.0", "Desktop"))

    def test_status_decides_level(self):
        cases = [("200", "INFO"), ("404", "WARN"), ("503", "ERROR")]
        for status, expected in cases:
            line = (f'10.0.0.1 - - [14/Mar/2024:12:34:56 +0000] "GET /error HTTP/1.1" '
                    f'{status} 12 "-" "curl/8.0"')
            _, entry = _extract(line)
            self.assertEqual(entry.level, expected, status)

    def test_non_browser_agent_defaults(self):
        line = ('10.0.0.1 - - [14/Mar/2024:12:34:56 +0000] "GET / HTTP/1.1" '
                '200 12 "-" "curl/8.0"')
        _, entry = _extract(line)
        self.assertEqual(entry.user_agent, UserAgent())


class TestErrorExtractor(unittest.TestCase):
    def test_fields(self):
        name, entry = _extract(ERROR_LINE)
        self.assertEqual(name, "error")
        self.assertEqual(entry.timestamp, "2024-03-14T12:34:56.789Z")
        self.assertEqual(entry.level, "ERROR")
        self.assertEqual(entry.message, "PHP Fatal error: Uncaught Error")
        self.assertEqual(entry.source, "web-error")
        self.assertEqual(entry.ip_address, "192.168.1.1")

    def test_optional_pid_and_client(self):
        _, entry = _extract(
            "[Thu Mar 14 12:34:56 2024] [notice] Apache configured -- resuming normal operations"
        )
        self.assertEqual(entry.level, "INFO")
        self.assertEqual(entry.message, "Apache configured -- resuming normal operations")
        self.assertIsNone(entry.ip_address)

    def test_severity_token_counts(self):
        _, entry = _extract("[Thu Mar 14 12:34:56 2024] [warn] [pid 7:tid 9] child exited")
        self.assertEqual(entry.level, "WARN")
        self.assertEqual(entry.message, "child exited")


class TestSyslogExtractor(unittest.TestCase):
    def test_fields(self):
        name, entry = _extract(SYSLOG_LINE)
        self.assertEqual(name, "syslog")
        self.assertEqual(entry.source, "myhost/CRON[4321]")
        self.assertEqual(entry.message, "(root) CMD (run-parts /etc/cron.hourly)")
        self.assertEqual(entry.level, "INFO")
        self.assertIsNone(entry.ip_address)
        self.assertTrue(entry.timestamp.endswith("-03-14T12:34:56.000Z"))

    def test_keyword_level(self):
        _, entry = _extract("Mar 14 12:34:56 web01 systemd[1]: Failed to start nginx.service")
        self.assertEqual(entry.level, "WARN")
        self.assertEqual(entry.source, "web01/systemd[1]")


class TestSshExtractor(unittest.TestCase):
    def test_fields(self):
        name, entry = _extract(SSH_LINE)
        self.assertEqual(name, "ssh")
        self.assertEqual(entry.level, "WARN")
        self.assertEqual(entry.source, "myhost/sshd")
        self.assertEqual(entry.ip_address, "10.0.0.5")

    def test_accepted_login(self):
        _, entry = _extract(
            "Mar 14 12:34:56 myhost sshd[99]: Accepted publickey for deploy from 192.168.1.50 port 22"
        )
        self.assertEqual(entry.level, "INFO")
        self.assertEqual(entry.ip_address, "192.168.1.50")

    def test_no_ip(self):
        _, entry = _extract("Mar 14 12:34:56 myhost sshd[99]: Server listening on :: port 22.")
        self.assertIsNone(entry.ip_address)


class TestContainerExtractor(unittest.TestCase):
    def test_fields(self):
        name, entry = _extract(CONTAINER_LINE)
        self.assertEqual(name, "container")
        self.assertEqual(entry.level, "ERROR")
        self.assertEqual(entry.source, "docker/stdout")
        self.assertEqual(entry.message, "Disk full")
        self.assertEqual(entry.timestamp, "2024-03-14T12:34:56.789Z")

    def test_type_code_decides_level(self):
        cases = [("E", "ERROR"), ("W", "WARN"), ("F", "INFO"), ("P", "INFO")]
        for code, expected in cases:
            _, entry = _extract(f"2024-03-14T12:34:56.1Z stderr {code} error connecting")
            self.assertEqual(entry.level, expected, code)
            self.assertEqual(entry.source, "docker/stderr")


if __name__ == "__main__":
    unittest.main()
