"""Logging filters that scrub client contact details."""

from __future__ import annotations

import logging
import re

_EMAIL_PATTERN = re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)+")
_PHONE_PATTERN = re.compile(
    r"(?<![\w.])(?:\+\d{1,3}[\s-]?)?(?:\(?\d{3}\)?[\s.-]?\d{3}[\s.-]?\d{4}|\d{5}[\s-]?\d{5})(?![\w.])"
)

REDACTED = "**REDACTED**"


def redact(text: str) -> str:
    return _PHONE_PATTERN.sub(REDACTED, _EMAIL_PATTERN.sub(REDACTED, text))


class SensitiveFilter(logging.Filter):
    """Replace e-mail addresses and phone numbers with a redaction marker."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str) and not record.args:
            record.msg = redact(record.msg)
        elif record.args:
            record.msg = redact(record.getMessage())
            record.args = ()
        return True


__all__ = ["SensitiveFilter", "redact"]
