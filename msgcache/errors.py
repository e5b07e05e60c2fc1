"""
Fault types and result values shared by the cache and the sanitizer.

Internal helpers never raise these to callers. They return an
:class:`Outcome` carrying either a value or a fault, and the public
operations (``MessageCache.save``/``get`` and ``normalize``) turn faults
into a log record plus a benign default.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class MessageCacheError(RuntimeError):
    """Base class for faults detected inside the message pipeline."""

    pass


class EncodeFault(MessageCacheError):
    """Raised when a payload cannot be converted to storable text."""

    pass


class DecodeFault(MessageCacheError):
    """Raised when stored text cannot be turned back into a value."""

    pass


class NormalizationFault(MessageCacheError):
    """Raised when a subtree cannot be normalized."""

    pass


@dataclass(slots=True)
class Outcome:
    """Result of an internal step: ``value`` on success, ``fault`` otherwise."""

    value: Any = None
    fault: MessageCacheError | None = None

    @property
    def ok(self) -> bool:
        return self.fault is None

    @classmethod
    def success(cls, value: Any) -> "Outcome":
        return cls(value=value)

    @classmethod
    def failure(cls, fault: MessageCacheError) -> "Outcome":
        return cls(fault=fault)


__all__ = [
    "MessageCacheError",
    "EncodeFault",
    "DecodeFault",
    "NormalizationFault",
    "Outcome",
]
