"""
Cache entry and settings records.

:class:`CacheEntry` is the unit stored by
:class:`~msgcache.memory.cache.manager.MessageCache`: the encoded message text
plus the absolute deadline after which it must never be served.
:class:`CacheSettings` carries the three tunables the cache is built with.
"""

from __future__ import annotations

from dataclasses import dataclass

from msgcache.config import cache as cache_cfg


@dataclass(slots=True)
class CacheEntry:
    """Encoded message held under ``id`` until ``expires_at``."""

    id: str
    payload: str
    created_at: float
    expires_at: float

    def is_expired(self, now: float) -> bool:
        """Return ``True`` once ``now`` is past the entry's deadline."""

        return now > self.expires_at


@dataclass(frozen=True, slots=True)
class CacheSettings:
    """Construction-time configuration for a message cache."""

    ttl: float = 60.0
    max_keys: int = 5000
    check_period: float = 300.0

    def __post_init__(self) -> None:
        if self.ttl <= 0:
            raise ValueError(f"ttl must be > 0, got {self.ttl}")
        if self.max_keys < 1:
            raise ValueError(f"max_keys must be >= 1, got {self.max_keys}")
        if self.check_period < 0:
            raise ValueError(f"check_period must be >= 0, got {self.check_period}")

    @classmethod
    def from_config(cls, cfg=None) -> "CacheSettings":
        """Build settings from the application ``cache`` config section."""

        cfg = cfg if cfg is not None else cache_cfg
        return cls(ttl=cfg.TTL, max_keys=cfg.MAX_KEYS, check_period=cfg.CHECK_PERIOD)


@dataclass(slots=True)
class CacheStats:
    """Counters mirroring what a caller can observe about cache behaviour."""

    keys: int = 0
    hits: int = 0
    misses: int = 0
    evictions: int = 0
    expirations: int = 0
    encode_faults: int = 0
    decode_faults: int = 0
