"""Severity inference from HTTP status codes or message keywords."""

from log_normalizer.models import DEBUG, ERROR, INFO, WARN

# First matching tier wins; substring match, case-insensitive.
KEYWORD_TIERS = (
    (ERROR, ("error", "fatal", "emerg")),
    (WARN, ("warn", "failed", "invalid")),
    (DEBUG, ("debug",)),
)


def level_from_status(status_code: str) -> str:
    """5xx → ERROR, 4xx → WARN, anything else → INFO."""
    if status_code.startswith("5"):
        return ERROR
    if status_code.startswith("4"):
        return WARN
    return INFO


def classify_severity(message: str, status_code: str | None = None) -> str:
    """Derive a level. A status code, when present, overrides the message text."""
    if status_code:
        return level_from_status(status_code)

    lowered = message.lower()
    for level, keywords in KEYWORD_TIERS:
        if any(k in lowered for k in keywords):
            return level
    return INFO
