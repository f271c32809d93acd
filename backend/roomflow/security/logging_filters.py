"""Logging filters that scrub sensitive content."""

from __future__ import annotations

import logging
import re

_SENSITIVE_PATTERN = re.compile(
    r"(Authorization: Bearer\s+[\w\.-]+|password\"\s*:\s*\"[^\"]+\"|"
    r"(?:postgresql|mysql)(?:\+\w+)?://[^:\s]+:[^@\s]+@)",
    re.IGNORECASE,
)


class SensitiveFilter(logging.Filter):
    """Replace credentials in log messages with a redaction marker.

    Covers bearer tokens forwarded by the gateway, password fields in echoed
    payloads, and database URLs that embed a password.
    """

    def filter(
        self, record: logging.LogRecord
    ) -> bool:  # pragma: no cover - logging side effect
        if isinstance(record.msg, str):
            record.msg = _SENSITIVE_PATTERN.sub("**REDACTED**", record.msg)
        return True


def install_sensitive_filter(*logger_names: str) -> None:
    """Attach a single :class:`SensitiveFilter` to each named logger."""

    for name in logger_names:
        target = logging.getLogger(name)
        if not any(isinstance(flt, SensitiveFilter) for flt in target.filters):
            target.addFilter(SensitiveFilter())


__all__ = ["SensitiveFilter", "install_sensitive_filter"]
