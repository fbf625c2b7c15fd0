"""
Checked counter arithmetic.

Counters never wrap: a result outside ``[0, limit]`` raises
``ArithmeticOverflow`` instead of being stored.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from device_ledger.services.errors import ArithmeticOverflow


def checked_add(value: int, delta: int, *, counter: str, limit: int) -> int:
    """Return ``value + delta`` or raise if it exceeds *limit*."""
    result = value + delta
    if result > limit:
        raise ArithmeticOverflow(counter, result, limit)
    return result


def checked_sub(value: int, delta: int, *, counter: str, limit: int) -> int:
    """Return ``value - delta`` or raise if it drops below zero."""
    result = value - delta
    if result < 0:
        raise ArithmeticOverflow(counter, result, limit)
    return result
