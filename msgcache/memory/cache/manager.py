"""
Volatile message store keyed by message id.

- Insertion-ordered map (``OrderedDict``) of :class:`CacheEntry`
    - Leftmost element  = oldest insertion (next to be evicted)
    - Rightmost element = newest insertion
- Each entry holds the message envelope encoded to JSON text, so the cache
  never aliases caller-owned objects.
- Expiry is absolute: ``expires_at = saved_at + ttl``; reads never renew it.
  Expired entries are purged on read and by an optional background sweep.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from typing import Any, Callable

from msgcache import maintenance
from . import codec
from .entry import CacheEntry, CacheSettings, CacheStats
from .utils import _message_id, _field, _payload_preview

logger = logging.getLogger(__name__)


class MessageCache:
    """Capacity- and TTL-bounded cache of message content."""

    def __init__(
        self,
        settings: CacheSettings | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.settings = settings if settings is not None else CacheSettings.from_config()
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.RLock()
        self._stats = CacheStats()
        self._sweeper: maintenance.PeriodicTask | None = None

    # ------------------------------------------------------------------ #
    # LIFECYCLE
    # ------------------------------------------------------------------ #

    @classmethod
    def create(
        cls,
        settings: CacheSettings | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> "MessageCache":
        """
        Build a cache and start its expiry sweeper.

        The sweeper only runs when ``settings.check_period > 0``; otherwise
        expired entries are purged lazily on read.

        :param settings: Cache tunables. Defaults to the application config.
        :param clock: Monotonic time source, injectable for tests.
        :returns: The running cache. Call :meth:`shutdown` when done.
        """
        instance = cls(settings, clock=clock)
        instance.start()
        return instance

    def start(self) -> None:
        """Start the background expiry sweep if configured and not running."""

        if self.settings.check_period <= 0:
            return
        if self._sweeper is not None and self._sweeper.is_alive():
            return
        self._sweeper = maintenance.startup(
            self.purge_expired,
            self.settings.check_period,
            name=f"msgcache-sweeper-{id(self):x}",
        )

    def shutdown(self) -> None:
        """Stop the background sweep. Safe to call more than once."""

        sweeper, self._sweeper = self._sweeper, None
        maintenance.shutdown(sweeper)

    def __enter__(self) -> "MessageCache":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown()

    # ------------------------------------------------------------------ #
    # WRITE helpers
    # ------------------------------------------------------------------ #

    def save(self, message: Any) -> None:
        """
        Store ``message``'s content under its id.

        Notes
        - The id is read from ``message.key.id`` (or ``message.id``); a message
          without one is ignored.
        - Encoding failures (cyclic or non-JSON content) are logged and
          swallowed; the cache is left untouched.
        - Saving an existing id replaces the entry and restarts its TTL.

        :param message: Mapping or object carrying ``key``/``id`` and ``content``.
        :returns: ``None``.
        """
        try:
            msg_id = _message_id(message)
            content = _field(message, "content") if msg_id is not None else None
        except Exception:
            logger.exception(
                "Failed to read id or content of %s; not caching", type(message).__name__
            )
            return
        if msg_id is None:
            logger.debug("Skipping cache save for message without id")
            return

        outcome = codec.encode(msg_id, content)
        if not outcome.ok:
            with self._lock:
                self._stats.encode_faults += 1
            logger.error("Failed to cache message %s: %s", msg_id, outcome.fault)
            return

        now = self._clock()
        entry = CacheEntry(
            id=msg_id,
            payload=outcome.value,
            created_at=now,
            expires_at=now + self.settings.ttl,
        )

        evicted: list[str] = []
        with self._lock:
            # Re-inserting moves the id to the newest position
            self._entries.pop(msg_id, None)
            self._entries[msg_id] = entry
            while len(self._entries) > self.settings.max_keys:
                old_id, _ = self._entries.popitem(last=False)
                evicted.append(old_id)
            self._stats.evictions += len(evicted)

        if evicted:
            logger.debug("Evicted %d message(s) over capacity: %s", len(evicted), evicted)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Cached msg %s | %s", msg_id, _payload_preview(entry.payload))

    def delete(self, key: Any) -> bool:
        """
        Remove an entry.

        :param key: A message id string, or a reference carrying ``id``.
        :returns: ``True`` if an entry was removed.
        """
        msg_id = key if isinstance(key, str) else _message_id(key)
        if not msg_id:
            return False
        with self._lock:
            return self._entries.pop(msg_id, None) is not None

    def clear(self) -> None:
        """Drop every entry (statistics counters are kept)."""

        with self._lock:
            self._entries.clear()

    def purge_expired(self) -> int:
        """
        Remove every entry whose TTL has elapsed.

        :returns: Number of entries removed.
        """
        now = self._clock()
        with self._lock:
            expired = [mid for mid, entry in self._entries.items() if entry.is_expired(now)]
            for mid in expired:
                del self._entries[mid]
            self._stats.expirations += len(expired)
        if expired:
            logger.debug("Purged %d expired message(s)", len(expired))
        return len(expired)

    # ------------------------------------------------------------------ #
    # READ helpers
    # ------------------------------------------------------------------ #

    def get(self, key: Any) -> Any | None:
        """
        Return the cached content for ``key``.

        Notes
        - Returns ``None`` when ``key`` has no id, nothing is cached for it,
          the entry has expired, or its stored text cannot be decoded.
        - Reading does not extend the entry's TTL.

        :param key: Reference carrying ``id`` (mapping or attribute object).
        :returns: The content saved with the message, or ``None``.
        """
        try:
            msg_id = _message_id(key)
        except Exception:
            logger.exception(
                "Failed to read id of %s; treating as a miss", type(key).__name__
            )
            return None
        if msg_id is None:
            return None

        now = self._clock()
        with self._lock:
            entry = self._entries.get(msg_id)
            if entry is not None and entry.is_expired(now):
                del self._entries[msg_id]
                self._stats.expirations += 1
                entry = None
            if entry is None:
                self._stats.misses += 1
                return None
            payload = entry.payload

        outcome = codec.decode(payload)
        with self._lock:
            if outcome.ok:
                self._stats.hits += 1
            else:
                self._stats.misses += 1
                self._stats.decode_faults += 1
        if not outcome.ok:
            logger.error("Failed to read cached message %s: %s", msg_id, outcome.fault)
            return None
        return outcome.value

    def __contains__(self, msg_id: object) -> bool:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(msg_id) if isinstance(msg_id, str) else None
            return entry is not None and not entry.is_expired(now)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def keys(self) -> list[str]:
        """Return resident ids ordered oldest -> newest insertion."""

        with self._lock:
            return list(self._entries)

    def stats(self) -> CacheStats:
        """Return a snapshot of the cache counters."""

        with self._lock:
            return CacheStats(
                keys=len(self._entries),
                hits=self._stats.hits,
                misses=self._stats.misses,
                evictions=self._stats.evictions,
                expirations=self._stats.expirations,
                encode_faults=self._stats.encode_faults,
                decode_faults=self._stats.decode_faults,
            )
