"""JSON text helpers for cache entries.

Each entry stores an envelope ``{"id": <message id>, "content": <content>}``
encoded with :func:`json.dumps`. Both helpers return an
:class:`~msgcache.errors.Outcome` instead of raising.
"""

from __future__ import annotations

import json
from typing import Any

from msgcache.errors import DecodeFault, EncodeFault, Outcome


def encode(message_id: str, content: Any) -> Outcome:
    """Encode ``content`` stored under ``message_id`` into JSON text."""

    try:
        text = json.dumps({"id": message_id, "content": content}, ensure_ascii=False)
    except (TypeError, ValueError, RecursionError) as exc:
        # ValueError covers "Circular reference detected"
        fault = EncodeFault(f"Cannot encode message {message_id}: {exc}")
        fault.__cause__ = exc
        return Outcome.failure(fault)
    return Outcome.success(text)


def decode(payload: str) -> Outcome:
    """Decode JSON text produced by :func:`encode` and return its ``content``."""

    try:
        raw = json.loads(payload)
    except (TypeError, ValueError, RecursionError) as exc:
        fault = DecodeFault(f"Cannot decode cached payload: {exc}")
        fault.__cause__ = exc
        return Outcome.failure(fault)
    if not isinstance(raw, dict) or "content" not in raw:
        return Outcome.failure(DecodeFault("Cached payload is missing its content field"))
    return Outcome.success(raw["content"])
