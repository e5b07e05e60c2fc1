import datetime
import decimal
import enum
import functools
import types
import uuid
from collections import OrderedDict, deque
from dataclasses import dataclass
from pathlib import PurePosixPath

import numpy as np
import pytest

from msgcache.sanitizer.classifier import Kind, classify, find_hook


@dataclass
class _Point:
    x: int
    y: int


@dataclass
class _HookedPoint:
    x: int

    def to_dict(self):
        return {"x": self.x}


class _StrWithHook(str):
    def to_dict(self):
        return {"never": "used"}


class _Color(enum.Enum):
    RED = "red"


class _Opaque:
    __slots__ = ()


class _Handler:
    def __call__(self):
        return None


def _fn():
    return None


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, Kind.NULL),
        (np.int64(5), Kind.WIDE_INT),
        (np.uint64(2**64 - 1), Kind.WIDE_INT),
        (np.float32(1.5), Kind.WIDE_INT),
        (np.float64(1.5), Kind.WIDE_INT),
        (np.bool_(True), Kind.WIDE_INT),
        (b"\x01", Kind.BYTES),
        (bytearray(b"\x01"), Kind.BYTES),
        (memoryview(b"\x01"), Kind.BYTES),
        (_fn, Kind.FUNCTION),
        (len, Kind.FUNCTION),
        (lambda: 1, Kind.FUNCTION),
        (functools.partial(_fn), Kind.FUNCTION),
        ("abc".upper, Kind.FUNCTION),
        (2**64, Kind.BIG_INT),
        (-(2**63) - 1, Kind.BIG_INT),
        (decimal.Decimal("1.5"), Kind.BIG_INT),
        (datetime.datetime(2024, 1, 1), Kind.DATETIME),
        (datetime.date(2024, 1, 1), Kind.DATETIME),
        (_HookedPoint(1), Kind.HAS_HOOK),
        (_Color.RED, Kind.HAS_HOOK),
        ([1], Kind.SEQUENCE),
        ((1,), Kind.SEQUENCE),
        (deque([1]), Kind.SEQUENCE),
        (np.array([1, 2]), Kind.SEQUENCE),
        ({"a": 1}, Kind.MAPPING),
        (OrderedDict(a=1), Kind.MAPPING),
        (types.MappingProxyType({"a": 1}), Kind.MAPPING),
        ({1, 2}, Kind.SET),
        (frozenset([1]), Kind.SET),
        (_Point(1, 2), Kind.PLAIN_OBJECT),
        (types.SimpleNamespace(a=1), Kind.PLAIN_OBJECT),
        (uuid.UUID(int=1), Kind.TEXTUAL),
        (PurePosixPath("/tmp/x"), Kind.TEXTUAL),
        ("text", Kind.SCALAR),
        (_StrWithHook("text"), Kind.SCALAR),
        (True, Kind.SCALAR),
        (2**63 - 1, Kind.SCALAR),
        (1.5, Kind.SCALAR),
        (_Opaque(), Kind.OTHER_OBJECT),
        (object(), Kind.OTHER_OBJECT),
        (_Point, Kind.FUNCTION),
        (_Handler(), Kind.FUNCTION),
    ],
)
def test_classify(value, expected):
    assert classify(value) is expected


def test_datetime_wins_over_hook():
    class HookedDatetime(datetime.datetime):
        def to_dict(self):
            return {"hooked": True}

    value = HookedDatetime(2024, 1, 1)

    assert classify(value) is Kind.DATETIME
    assert find_hook(value) is None


def test_enum_hook_returns_member_value():
    assert find_hook(_Color.RED)() == "red"
