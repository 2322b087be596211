"""Cache key builders for consistent namespacing."""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping


def request_key(
    method: str,
    url: str,
    headers: Mapping[str, str],
    body: str = "",
    *,
    prefix: str = "",
) -> str:
    """Build the cache key for an outgoing HTTP request.

    Identical requests (same method, URL, headers and body) always map to the
    same key; header order does not matter.
    """
    canonical = json.dumps(
        {
            "method": method.upper(),
            "url": url,
            "body": body,
            "headers": dict(sorted(headers.items())),
        },
        separators=(",", ":"),
    )
    digest = hashlib.md5(canonical.encode()).hexdigest()
    return f"{prefix}{digest}"
