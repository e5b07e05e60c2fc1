"""
Deep value normalization.

:func:`normalize` rewrites a value tree into a form ``json.dumps`` accepts
without a ``default`` hook: only ``None``, ``str``, finite ``int``/``float``,
``bool``, ``list`` and ``dict`` with ``str`` keys remain.

Rewrite rules per node kind (see :mod:`.classifier` for precedence):

```
WIDE_INT      numpy scalar        -> int / float / bool
BYTES         bytes, bytearray    -> [0..255, ...]
FUNCTION      callable, class     -> dropped (None inside sequences)
BIG_INT       int beyond int64    -> "123456789012345678901234"
DATETIME      datetime / date     -> "2024-01-01T00:00:00.000Z"
HAS_HOOK      to_dict()/__json__  -> normalized hook result
SEQUENCE      list, tuple, ...    -> list (same length)
MAPPING       dict-like           -> dict with str keys
SET           set, frozenset      -> list in iteration order
PLAIN_OBJECT  dataclass, namespace-> dict of fields
OTHER_OBJECT  anything else       -> attribute dict or placeholder string
```

Normalization fails open: if any subtree faults, the caller gets the original
input back and the fault is logged.
"""

from __future__ import annotations

import dataclasses
import datetime
import json
import logging
import math
from typing import Any

from msgcache.config import sanitizer as sanitizer_cfg
from msgcache.errors import NormalizationFault, Outcome
from .classifier import INT64_MAX, INT64_MIN, Kind, classify, find_hook, is_plain_object

logger = logging.getLogger(__name__)


class _Drop:
    """Marker for a node that must be omitted from its parent."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "DROP"


DROP = _Drop()


# --------------------------------------------------------------------- #
#  Leaf conversions
# --------------------------------------------------------------------- #

def _finite_or_none(number: float) -> float | None:
    return number if math.isfinite(number) else None


def _from_numpy_scalar(value: Any) -> Any:
    native = value.item()
    if isinstance(native, bool):
        return native
    if isinstance(native, int):
        if INT64_MIN <= native <= INT64_MAX:
            return native
        # nearest representable; precision loss is accepted
        return float(native)
    return _finite_or_none(float(native))


def _from_big_number(value: Any) -> str | None:
    if not isinstance(value, int) and not value.is_finite():
        return None
    return str(value)


def to_iso_utc(value: datetime.date) -> str:
    """Format ``value`` as ISO-8601 UTC with milliseconds and a ``Z`` suffix."""

    if not isinstance(value, datetime.datetime):
        value = datetime.datetime(value.year, value.month, value.day)
    if value.tzinfo is None:
        # naive timestamps are taken as UTC
        value = value.replace(tzinfo=datetime.timezone.utc)
    value = value.astimezone(datetime.timezone.utc)
    # strftime does not zero-pad years below 1000
    return (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
        f".{value.microsecond // 1000:03d}Z"
    )


def _key_to_str(key: Any) -> str:
    if isinstance(key, str):
        return key
    if key is None or isinstance(key, bool):
        return json.dumps(key)
    if isinstance(key, datetime.date):
        return to_iso_utc(key)
    return str(key)


def _public_attributes(value: Any) -> dict[str, Any] | None:
    """Return the non-underscore attributes of ``value``, ``None`` if it has none to expose."""

    attrs: dict[str, Any] = {}
    found = False
    for klass in type(value).__mro__:
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            found = True
            if name.startswith("_") or name in attrs:
                continue
            try:
                attrs[name] = getattr(value, name)
            except AttributeError:
                continue
    try:
        namespace = vars(value)
    except TypeError:
        namespace = None
    if namespace is not None:
        found = True
        for name, attr in namespace.items():
            if not name.startswith("_"):
                attrs[name] = attr
    return attrs if found else None


# --------------------------------------------------------------------- #
#  Tree walk
# --------------------------------------------------------------------- #

class _Walker:
    """Single normalization pass with a depth guard."""

    def __init__(self, max_depth: int) -> None:
        self.max_depth = max_depth

    def visit(self, value: Any, depth: int = 0) -> Any:
        if depth > self.max_depth:
            raise NormalizationFault(f"Value nesting exceeds max depth {self.max_depth}")

        kind = classify(value)
        if kind is Kind.NULL:
            return None
        if kind is Kind.WIDE_INT:
            return _from_numpy_scalar(value)
        if kind is Kind.BYTES:
            return list(bytes(value))
        if kind is Kind.FUNCTION:
            return DROP
        if kind is Kind.BIG_INT:
            return _from_big_number(value)
        if kind is Kind.DATETIME:
            return to_iso_utc(value)
        if kind is Kind.HAS_HOOK:
            return self._visit_hooked(value, depth)
        if kind is Kind.SEQUENCE:
            items = value.tolist() if hasattr(value, "tolist") else value
            if not isinstance(items, list):
                # 0-d arrays collapse to a scalar
                return self.visit(items, depth + 1)
            return self._visit_sequence(items, depth)
        if kind is Kind.MAPPING:
            return self._visit_pairs(value.items(), depth, coerce_keys=True)
        if kind is Kind.SET:
            return self._visit_sequence(value, depth)
        if kind is Kind.PLAIN_OBJECT:
            return self._visit_plain(value, depth)
        if kind is Kind.OTHER_OBJECT:
            return self._visit_other(value, depth)
        if kind is Kind.TEXTUAL:
            return str(value)
        if isinstance(value, float):
            return _finite_or_none(value)
        return value

    def _visit_sequence(self, items, depth: int) -> list:
        out = []
        for item in items:
            normalized = self.visit(item, depth + 1)
            # dropped elements keep their slot so the length never changes
            out.append(None if normalized is DROP else normalized)
        return out

    def _visit_pairs(self, pairs, depth: int, *, coerce_keys: bool = False) -> dict:
        out: dict[str, Any] = {}
        for key, val in pairs:
            normalized = self.visit(val, depth + 1)
            if normalized is DROP:
                continue
            out[_key_to_str(key) if coerce_keys else key] = normalized
        return out

    def _visit_hooked(self, value: Any, depth: int) -> Any:
        hook = find_hook(value)
        try:
            result = hook()
        except Exception:
            logger.debug(
                "Serialization hook of %s failed; using generic handling",
                type(value).__name__,
                exc_info=True,
            )
        else:
            return self.visit(result, depth + 1)

        if is_plain_object(value):
            return self._visit_plain(value, depth)
        return self._visit_other(value, depth)

    def _visit_plain(self, value: Any, depth: int) -> dict:
        if dataclasses.is_dataclass(value):
            pairs = ((f.name, getattr(value, f.name)) for f in dataclasses.fields(value))
        else:
            pairs = vars(value).items()
        return self._visit_pairs(pairs, depth)

    def _visit_other(self, value: Any, depth: int) -> Any:
        try:
            json.dumps(value)
        except (TypeError, ValueError, RecursionError):
            pass
        else:
            return value

        attrs = _public_attributes(value)
        if attrs is None:
            return f"[Non-serializable object: {type(value).__name__}]"
        return self._visit_pairs(attrs.items(), depth)


# --------------------------------------------------------------------- #
#  Public API
# --------------------------------------------------------------------- #

def _resolve_depth(max_depth: int | None) -> int:
    if max_depth is not None:
        return max_depth
    return sanitizer_cfg.MAX_DEPTH


def try_normalize(value: Any, *, max_depth: int | None = None) -> Outcome:
    """
    Normalize ``value`` and report the result without logging.

    :param value: Any acyclic value tree.
    :param max_depth: Nesting limit; defaults to the configured ``MAX_DEPTH``.
    :returns: ``Outcome`` holding the normalized tree, or a
        :class:`NormalizationFault` describing why it could not be built.
    """
    walker = _Walker(_resolve_depth(max_depth))
    try:
        result = walker.visit(value)
    except NormalizationFault as fault:
        return Outcome.failure(fault)
    except Exception as exc:
        fault = NormalizationFault(f"Failed to normalize {type(value).__name__}: {exc!r}")
        fault.__cause__ = exc
        return Outcome.failure(fault)
    # a dropped root has nothing to stand in for it
    return Outcome.success(None if result is DROP else result)


def normalize(value: Any, *, max_depth: int | None = None) -> Any:
    """
    Return a JSON-safe copy of ``value``.

    Never raises: when normalization faults, the fault is logged and the
    original ``value`` is returned unchanged.
    """
    outcome = try_normalize(value, max_depth=max_depth)
    if not outcome.ok:
        logger.error(
            "Error normalizing %s; returning original value",
            type(value).__name__,
            exc_info=outcome.fault,
        )
        return value
    return outcome.value


def sanitize_message_content(content: Any) -> Any:
    """Prepare message content for persistence; fails open like :func:`normalize`."""

    if content is None:
        return content
    return normalize(content)
