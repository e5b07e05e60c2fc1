"""
Short-lived message cache package.

Modules
=======

``manager``
    Defines :class:`~msgcache.memory.cache.manager.MessageCache`, the
    capacity- and TTL-bounded store that recovers message content by id.
``entry``
    Provides :class:`CacheEntry`, :class:`CacheSettings` and
    :class:`CacheStats`.
``codec``
    JSON helpers that turn message content into stored text and back,
    reporting failures as :class:`~msgcache.errors.Outcome` values.
``utils``
    Internal helpers for reading message ids and building log previews.
"""

from .entry import CacheEntry, CacheSettings, CacheStats
from .manager import MessageCache

__all__ = ["MessageCache", "CacheEntry", "CacheSettings", "CacheStats"]
