from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")

_MASK_32 = 0xFFFFFFFF


def simple_hash(text: object) -> int:
    # Order-sensitive, not cryptographic. Stable across runs, unlike hash().
    value = "" if text is None else str(text)
    acc = 0
    for char in value:
        acc = (acc * 31 + ord(char)) & _MASK_32
    return acc


def pick_deterministic(seed: str, salt: str, pool: Sequence[T]) -> T | None:
    if not pool:
        return None
    return pool[simple_hash(f"{seed}|{salt}") % len(pool)]
