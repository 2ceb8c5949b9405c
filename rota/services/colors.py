"""Deterministic carer-name to colour mapping."""

from __future__ import annotations

from typing import NamedTuple, Optional


class ColorPair(NamedTuple):
    bg: str
    text: str


NO_COLOR = ColorPair("", "")

# Order is part of the mapping; reordering changes every carer's colour.
PALETTE = (
    ColorPair("bg-amber-200", "text-amber-800"),
    ColorPair("bg-cyan-200", "text-cyan-800"),
    ColorPair("bg-fuchsia-200", "text-fuchsia-800"),
    ColorPair("bg-emerald-200", "text-emerald-800"),
    ColorPair("bg-orange-200", "text-orange-800"),
    ColorPair("bg-violet-200", "text-violet-800"),
    ColorPair("bg-pink-200", "text-pink-800"),
    ColorPair("bg-lime-200", "text-lime-800"),
    ColorPair("bg-sky-200", "text-sky-800"),
    ColorPair("bg-rose-200", "text-rose-800"),
    ColorPair("bg-teal-200", "text-teal-800"),
    ColorPair("bg-indigo-200", "text-indigo-800"),
)


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def name_hash(name: str) -> int:
    """
    31-multiplier string hash with 32-bit signed wraparound.

    Folds UTF-16 code units of the lowercased name, so names outside the
    Basic Multilingual Plane hash the same way a browser client would.
    """
    encoded = name.lower().encode("utf-16-le")
    h = 0
    for i in range(0, len(encoded), 2):
        code_unit = encoded[i] | (encoded[i + 1] << 8)
        h = _to_int32(h * 31 + code_unit)
    return h


def color_for(name: Optional[str]) -> ColorPair:
    """Return the (bg, text) style pair for a carer name; empty names get no colour."""
    if not name:
        return NO_COLOR
    return PALETTE[abs(name_hash(name)) % len(PALETTE)]
