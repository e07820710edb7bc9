"""Redaction helpers for upstream URLs, parameters and error strings."""

from __future__ import annotations

import re
from typing import Any, Mapping

_URL_USERINFO_RE = re.compile(r"([a-z][a-z0-9+.-]*://)([^@/]+)@", re.IGNORECASE)
_QUERY_SECRET_RE = re.compile(r"(?i)(token|secret|password|api_key|apikey|access_token)=([^&\s]+)")
_BEARER_RE = re.compile(r"(?i)(bearer\s+)([A-Za-z0-9._~-]+)")
_OPENAI_KEY_RE = re.compile(r"sk-[A-Za-z0-9_-]{8,}")

SECRET_PARAM_NAMES = frozenset({"api_key", "apikey", "token", "access_token", "authorization"})


def redact_secrets(text: str) -> str:
    """Redact common secret patterns from a log string."""
    if not text:
        return text
    redacted = _URL_USERINFO_RE.sub(r"\1***@", text)
    redacted = _QUERY_SECRET_RE.sub(r"\1=***", redacted)
    redacted = _BEARER_RE.sub(r"\1***", redacted)
    redacted = _OPENAI_KEY_RE.sub("sk-***", redacted)
    return redacted


def redact_params(params: Mapping[str, Any] | None) -> dict[str, Any]:
    """Copy request parameters with credential values masked."""
    if not params:
        return {}
    return {key: "***" if key.lower() in SECRET_PARAM_NAMES else value for key, value in params.items()}
