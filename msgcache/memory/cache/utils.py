import textwrap
from collections.abc import Mapping
from typing import Any


def _field(obj: Any, name: str) -> Any:
    """Read ``name`` from a mapping or an attribute object; ``None`` if absent."""
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def _message_id(obj: Any) -> str | None:
    """Return the message id from ``obj.key.id`` or ``obj.id`` as a string."""
    key = _field(obj, "key")
    mid = _field(key, "id") if key is not None else _field(obj, "id")
    if mid is None or (isinstance(mid, str) and not mid):
        return None
    return str(mid)


def _payload_preview(payload: str, *, width: int = 80) -> str:
    """Return a one-line summary of an encoded payload for logs."""
    return textwrap.shorten(payload, width=width, placeholder="…")
