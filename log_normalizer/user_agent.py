"""Best-effort split of a raw User-Agent header into browser / OS / device."""

import re

from log_normalizer.models import UserAgent

_BROWSER_RE = re.compile(r"(Chrome|Firefox|Safari|Edge|MSIE|Trident)/?\s*(\d+)", re.IGNORECASE | re.ASCII)
_OS_RE = re.compile(r"(Windows|Mac|Linux|iOS|Android)\s*([^;)]*)", re.IGNORECASE | re.ASCII)
_DEVICE_RE = re.compile(r"(Mobile|Tablet|iPad|iPhone|Android|Windows Phone)", re.IGNORECASE | re.ASCII)


def decompose_user_agent(ua: str | None) -> UserAgent:
    """'Mozilla/5.0 (Windows NT 10.0) Chrome/99' → UserAgent('Chrome 99', 'Windows NT 10.0', 'Desktop')."""
    if not ua:
        return UserAgent()

    browser = _BROWSER_RE.search(ua)
    os_match = _OS_RE.search(ua)
    device = _DEVICE_RE.search(ua)

    return UserAgent(
        browser=f"{browser.group(1)} {browser.group(2)}" if browser else "Unknown",
        os=f"{os_match.group(1)} {os_match.group(2)}".strip() if os_match else "Unknown",
        device=device.group(1) if device else "Desktop",
    )
