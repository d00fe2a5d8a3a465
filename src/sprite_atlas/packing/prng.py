"""Deterministic 32-bit pseudo-random sequence used to vary packing order."""

from __future__ import annotations

from typing import List, Tuple

_MASK_32 = 0xFFFFFFFF
_SIGN_BIT = 0x80000000
_FEEDBACK = 0x88888EEF


def next_value(state: int) -> Tuple[int, int]:
    """Advance the generator and return ``(value, new_state)``.

    ``s' = (s << 1) + 1`` truncated to 32 bits; when ``s'`` is negative as a
    signed 32-bit integer it is XORed with ``0x88888EEF``. The value drawn is
    the new state itself, as an unsigned integer.
    """

    state = ((state << 1) + 1) & _MASK_32
    if state & _SIGN_BIT:
        state ^= _FEEDBACK
    return state, state


def sequence(seed: int, count: int) -> List[int]:
    """Return the first ``count`` values drawn from ``seed``."""

    values: List[int] = []
    state = seed & _MASK_32
    for _ in range(count):
        value, state = next_value(state)
        values.append(value)
    return values
