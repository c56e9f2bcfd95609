"""Ordered grammar cascade for access, error, syslog, SSH and container logs.

Grammars are tried in this fixed order, first full match wins:
  1. Web access  (combined log format with referer + user agent)
  2. Web error   ([time] [level] [pid N] [client IP] message)
  3. Syslog      (any program except sshd, which falls to 4)
  4. SSH daemon  (syslog layout, program sshd, IP pulled from the message)
  5. Container   (RFC 3339 nanosecond timestamp, stream, type code)
"""

import re
from dataclasses import dataclass
from typing import Callable

from log_normalizer.models import ERROR, INFO, WARN, LogEntry
from log_normalizer.severity import classify_severity
from log_normalizer.timestamps import normalize_timestamp
from log_normalizer.user_agent import decompose_user_agent

# ---------------------------------------------------------------------------
# Compiled regex patterns
# ---------------------------------------------------------------------------

_ACCESS_RE = re.compile(
    r'^(?P<host>\S+)\s+-\s+(?P<ident>\S+)\s+'
    r'\[(?P<time>[^\]]+)\]\s+'
    r'"(?P<request>[^"]*?)"\s+'
    r'(?P<status>\d{3})\s+'
    r'(?P<size>\d+)\s+'
    r'"(?P<referer>[^"]+)"\s+'
    r'"(?P<user_agent>[^"]+)"$',
    re.ASCII,
)

_ERROR_RE = re.compile(
    r'^\[(?P<time>[^\]]+)\]\s+'
    r'\[(?P<level>[^\]]+)\]\s+'
    r'(?:\[pid\s+(?P<pid>\d+)(?::tid\s+\d+)?\]\s+)?'
    r'(?:\[client\s+(?P<client>[^\]]+)\]\s+)?'
    r'(?P<message>.+)$',
    re.ASCII,
)

_SYSLOG_RE = re.compile(
    r'^(?P<time>\w{3}\s+\d{1,2}\s+\d{2}:\d{2}:\d{2})\s+'
    r'(?P<hostname>\S+)\s+'
    r'(?!sshd\[)(?P<program>[^:\s][^:]*)\[(?P<pid>\d+)\]:\s+'
    r'(?P<message>.+)$',
    re.ASCII,
)

_SSH_RE = re.compile(
    r'^(?P<time>\w{3}\s+\d{1,2}\s+\d{2}:\d{2}:\d{2})\s+'
    r'(?P<hostname>\S+)\s+'
    r'sshd\[(?P<pid>\d+)\]:\s+'
    r'(?P<message>.+)$',
    re.ASCII,
)

_CONTAINER_RE = re.compile(
    r'^(?P<time>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d+Z)\s+'
    r'(?P<stream>\w+)\s+'
    r'(?P<type>[A-Z])\s+'
    r'(?P<message>.+)$',
    re.ASCII,
)

_IPV4_RE = re.compile(r"\b(?:\d{1,3}\.){3}\d{1,3}\b", re.ASCII)
_SSH_PEER_RE = re.compile(r"(?:from|for)\s+(\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3})", re.ASCII)

# Container type code → level
_CONTAINER_LEVELS = {"E": ERROR, "W": WARN}


# ---------------------------------------------------------------------------
# Format-specific extractors
# ---------------------------------------------------------------------------


def _extract_access(m: re.Match) -> LogEntry:
    request = m.group("request")
    status = m.group("status")
    return LogEntry(
        timestamp=normalize_timestamp(m.group("time")),
        level=classify_severity(request, status),
        message=f"{request} - Status: {status}, Size: {m.group('size')} bytes",
        source="web-access",
        ip_address=m.group("host"),
        user_agent=decompose_user_agent(m.group("user_agent")),
    )


def _extract_error(m: re.Match) -> LogEntry:
    message = m.group("message")
    client = m.group("client")
    # Apache 2.4 writes "[client 10.0.0.1:51234]"
    ip = _IPV4_RE.search(client) if client else None
    return LogEntry(
        timestamp=normalize_timestamp(m.group("time")),
        level=classify_severity(f"{m.group('level')} {message}"),
        message=message,
        source="web-error",
        ip_address=ip.group(0) if ip else None,
    )


def _extract_syslog(m: re.Match) -> LogEntry:
    message = m.group("message")
    return LogEntry(
        timestamp=normalize_timestamp(m.group("time")),
        level=classify_severity(message),
        message=message,
        source=f"{m.group('hostname')}/{m.group('program')}[{m.group('pid')}]",
    )


def _extract_ssh(m: re.Match) -> LogEntry:
    message = m.group("message")
    peer = _SSH_PEER_RE.search(message)
    return LogEntry(
        timestamp=normalize_timestamp(m.group("time")),
        level=classify_severity(message),
        message=message,
        source=f"{m.group('hostname')}/sshd",
        ip_address=peer.group(1) if peer else None,
    )


def _extract_container(m: re.Match) -> LogEntry:
    return LogEntry(
        timestamp=normalize_timestamp(m.group("time")),
        level=_CONTAINER_LEVELS.get(m.group("type"), INFO),
        message=m.group("message"),
        source=f"docker/{m.group('stream')}",
    )


# ---------------------------------------------------------------------------
# Cascade
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Grammar:
    name: str
    pattern: re.Pattern
    extract: Callable[[re.Match], LogEntry]


GRAMMARS: tuple[Grammar, ...] = (
    Grammar("access", _ACCESS_RE, _extract_access),
    Grammar("error", _ERROR_RE, _extract_error),
    Grammar("syslog", _SYSLOG_RE, _extract_syslog),
    Grammar("ssh", _SSH_RE, _extract_ssh),
    Grammar("container", _CONTAINER_RE, _extract_container),
)


def classify(line: str) -> tuple[Grammar, re.Match] | None:
    """Return the first grammar whose full pattern matches, with its match."""
    for grammar in GRAMMARS:
        m = grammar.pattern.match(line)
        if m:
            return grammar, m
    return None
