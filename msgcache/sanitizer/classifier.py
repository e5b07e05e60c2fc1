import dataclasses
import datetime
import decimal
import enum
import functools
import inspect
import types
import uuid
from collections import deque
from collections.abc import Mapping
from pathlib import PurePath
from typing import Any

import numpy as np

# --------------------------------------------------------------------- #
#  Helpers
# --------------------------------------------------------------------- #

# Integers outside this range do not fit a signed 64-bit column
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_HOOK_NAMES = ("to_dict", "__json__")

_NUMPY_SCALARS = (np.integer, np.floating, np.bool_)


class Kind(enum.Enum):
    """Node categories, listed in dispatch precedence order."""

    NULL = "null"
    WIDE_INT = "wide_int"
    BYTES = "bytes"
    FUNCTION = "function"
    BIG_INT = "big_int"
    DATETIME = "datetime"
    HAS_HOOK = "has_hook"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    SET = "set"
    PLAIN_OBJECT = "plain_object"
    TEXTUAL = "textual"
    SCALAR = "scalar"
    OTHER_OBJECT = "other_object"


def _is_function(value: Any) -> bool:
    # classes are callables too and are dropped the same way
    return (
        inspect.isroutine(value)
        or isinstance(value, (functools.partial, type))
    )


def _is_big_int(value: Any) -> bool:
    if isinstance(value, decimal.Decimal):
        return True
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and not INT64_MIN <= value <= INT64_MAX
    )


def find_hook(value: Any):
    """
    Return the bound serialization hook of ``value`` or ``None``.

    Enum members expose their ``value`` as the hook result. Classes, and
    subclasses of ``str``/``int``/``float``/``date`` never count as hooked.
    """
    if isinstance(value, type):
        return None
    if isinstance(value, enum.Enum):
        return lambda: value.value
    if isinstance(value, (str, int, float, datetime.date)):
        return None
    for name in _HOOK_NAMES:
        hook = getattr(value, name, None)
        if callable(hook):
            return hook
    return None


def is_plain_object(value: Any) -> bool:
    if isinstance(value, type):
        return False
    return dataclasses.is_dataclass(value) or isinstance(value, types.SimpleNamespace)


# --------------------------------------------------------------------- #
#  Main entry
# --------------------------------------------------------------------- #

def classify(value: Any) -> Kind:
    """
    Classify one node of a value tree.

    The checks run in precedence order: specific recognised types before the
    generic hook, and the hook before the structural fallbacks. Only the node
    itself is inspected; children are classified when they are visited.

    :param value: Any Python value.
    :returns: The :class:`Kind` that decides how the node is rewritten.
    """
    if value is None:
        return Kind.NULL
    if isinstance(value, _NUMPY_SCALARS):
        return Kind.WIDE_INT
    if isinstance(value, (bytes, bytearray, memoryview)):
        return Kind.BYTES
    if _is_function(value):
        return Kind.FUNCTION
    if _is_big_int(value):
        return Kind.BIG_INT
    if isinstance(value, datetime.date):
        return Kind.DATETIME
    if find_hook(value) is not None:
        return Kind.HAS_HOOK
    if isinstance(value, (list, tuple, deque, np.ndarray)):
        return Kind.SEQUENCE
    if isinstance(value, Mapping):
        return Kind.MAPPING
    if isinstance(value, (set, frozenset)):
        return Kind.SET
    if is_plain_object(value):
        return Kind.PLAIN_OBJECT
    if isinstance(value, (uuid.UUID, PurePath)):
        return Kind.TEXTUAL
    if isinstance(value, (str, bool, int, float)):
        return Kind.SCALAR
    # callable instances only count as functions once nothing else matched
    if callable(value):
        return Kind.FUNCTION
    return Kind.OTHER_OBJECT
