"""Short-lived message cache and message content sanitizer."""

from .memory.cache import CacheSettings, MessageCache
from .sanitizer import normalize, sanitize_message_content

__all__ = ["MessageCache", "CacheSettings", "normalize", "sanitize_message_content"]
