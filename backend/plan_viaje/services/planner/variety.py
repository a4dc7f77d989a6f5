"""Deterministic variety selector.

Shuffles a ranked pool with a generator seeded from "<request_id>|<tag>",
so two requests see different picks while a retried request with the
same id sees exactly the same ones.
"""

from typing import Sequence, TypeVar

T = TypeVar("T")

_MASK32 = 0xFFFFFFFF
_FNV_OFFSET = 0x811C9DC5
_FNV_PRIME = 0x01000193
_XORSHIFT_FALLBACK = 0x9E3779B9


def fnv1a_32(text: str) -> int:
    h = _FNV_OFFSET
    for byte in text.encode("utf-8"):
        h ^= byte
        h = (h * _FNV_PRIME) & _MASK32
    return h


class XorShift32:
    """32-bit xorshift generator yielding floats in [0, 1)."""

    def __init__(self, seed: int):
        # all-zero state would stay zero forever
        self.state = (seed & _MASK32) or _XORSHIFT_FALLBACK

    def next_uint32(self) -> int:
        x = self.state
        x ^= (x << 13) & _MASK32
        x ^= x >> 17
        x ^= (x << 5) & _MASK32
        self.state = x
        return x

    def random(self) -> float:
        return self.next_uint32() / 4294967296.0


def make_seed(request_id: str, tag: str) -> str:
    return f"{request_id}|{tag}"


def shuffle(pool: Sequence[T], seed: str) -> list[T]:
    """Fisher–Yates over a copy of pool; the input is left untouched."""
    items = list(pool)
    rng = XorShift32(fnv1a_32(seed))
    for i in range(len(items) - 1, 0, -1):
        j = int(rng.random() * (i + 1))
        items[i], items[j] = items[j], items[i]
    return items


def pick(pool: Sequence[T], seed: str, count: int) -> list[T]:
    return shuffle(pool, seed)[:max(0, count)]
