"""Canonical comparison keys for author names and emails."""

from __future__ import annotations

import re
from typing import Optional

_EMAIL_DOMAIN = re.compile(r"@.*$", re.DOTALL)
_SERVICE_PREFIX = re.compile(r"^svc[_-]", re.IGNORECASE)
_DISALLOWED = re.compile(r"[^A-Za-z0-9\s._-]")
_WHITESPACE = re.compile(r"\s+")


def normalize_name(raw: Optional[str]) -> str:
    """Reduce a raw author name or email to its identity key.

    Drops an email domain, any character outside ``[A-Za-z0-9 ._-]`` and a
    leading ``svc_``/``svc-`` service-account prefix, then collapses
    whitespace and lower-cases. The prefix is stripped until none is left,
    so normalizing a key again never changes it.

    >>> normalize_name("svc-Build.Bot@ci.example.com")
    'build.bot'
    >>> normalize_name("  Ada   Lovelace! ")
    'ada lovelace'
    """
    text = str(raw or "")
    text = _EMAIL_DOMAIN.sub("", text)
    text = _DISALLOWED.sub("", text)
    text = _WHITESPACE.sub(" ", text).strip()
    while True:
        stripped = _SERVICE_PREFIX.sub("", text).strip()
        if stripped == text:
            break
        text = stripped
    return text.lower()
