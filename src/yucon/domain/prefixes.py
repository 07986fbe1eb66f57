"""Single-character metric prefix codes."""

from __future__ import annotations

NO_PREFIX = ""

METRIC_PREFIXES: dict[str, float] = {
    "Y": 1.0e24,
    "Z": 1.0e21,
    "E": 1.0e18,
    "P": 1.0e15,
    "T": 1.0e12,
    "G": 1.0e9,
    "M": 1.0e6,
    "k": 1.0e3,
    "h": 1.0e2,
    "D": 1.0e1,
    NO_PREFIX: 1.0,
    "d": 1.0e-1,
    "c": 1.0e-2,
    "m": 1.0e-3,
    "u": 1.0e-6,
    "n": 1.0e-9,
    "p": 1.0e-12,
    "f": 1.0e-15,
    "a": 1.0e-18,
    "z": 1.0e-21,
    "y": 1.0e-24,
}


def prefix_factor(prefix: str) -> float | None:
    """Return the multiplier for *prefix*, or None if it is not a known code."""
    return METRIC_PREFIXES.get(prefix)


def is_prefix(prefix: str) -> bool:
    return prefix in METRIC_PREFIXES
