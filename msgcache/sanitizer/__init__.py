"""
Message content sanitizer.

``classifier``
    Sorts a single value into a :class:`~msgcache.sanitizer.classifier.Kind`,
    applying the dispatch precedence.
``normalizer``
    Walks a value tree and rewrites every node into its JSON-safe form,
    failing open when a subtree cannot be handled.
"""

from .classifier import Kind, classify
from .normalizer import DROP, normalize, sanitize_message_content, try_normalize

__all__ = ["Kind", "classify", "DROP", "normalize", "sanitize_message_content", "try_normalize"]
