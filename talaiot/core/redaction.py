from __future__ import annotations

import re
from typing import Any


_PATTERNS = [
    (re.compile(r"(://[^:/@\s]+:)[^@\s]+(@)"), r"\1[REDACTED]\2"),
    (re.compile(r"(Authorization\s*:\s*Token\s+)[^\s]+", re.IGNORECASE), r"\1[REDACTED]"),
    (re.compile(r"([?&](?:p|password|token)=)[^&\s]+", re.IGNORECASE), r"\1[REDACTED]"),
    (re.compile(r"(password\s*[:=])\s*[^\s,]+", re.IGNORECASE), r"\1 [REDACTED]"),
    (re.compile(r"(token\s*[:=])\s*[^\s,]+", re.IGNORECASE), r"\1 [REDACTED]"),
]


def redact_text(value: str) -> str:
    """Redact credentials from URLs and client error text.

    Notes:
        Store endpoints may embed user:password pairs and client exceptions
        can echo the request headers, so both pass through here before logging.
    """
    redacted = value
    for pattern, repl in _PATTERNS:
        redacted = pattern.sub(repl, redacted)
    return redacted


def redact_data(value: Any) -> Any:
    """Recursively redact credential patterns from structured data."""
    if isinstance(value, str):
        return redact_text(value)
    if isinstance(value, list):
        return [redact_data(item) for item in value]
    if isinstance(value, dict):
        return {key: redact_data(val) for key, val in value.items()}
    return value
