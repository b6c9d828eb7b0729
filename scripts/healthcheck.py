"""
Container health probe for the account registry API.

Exit code 0 when GET /health answers with a 2xx/3xx status, 1 otherwise.
"""

from __future__ import annotations

import os
from urllib.error import URLError
from urllib.request import urlopen


def _health_url() -> str:
    explicit = os.getenv("HEALTHCHECK_URL", "").strip()
    if explicit:
        return explicit
    port = os.getenv("PORT", "8000")
    path = os.getenv("HEALTHCHECK_PATH", "/health")
    return f"http://127.0.0.1:{port}{path}"


def main() -> int:
    timeout = float(os.getenv("HEALTHCHECK_TIMEOUT_SECONDS", "2"))
    try:
        with urlopen(_health_url(), timeout=timeout) as response:
            return 0 if 200 <= response.status < 400 else 1
    except (URLError, TimeoutError, ValueError):
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
