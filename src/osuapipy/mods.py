"""
mods.py

Gameplay modifier ("mods") bitfield helpers.

The osu! v1 API packs the enabled mods of a score/beatmap request into one
integer where each mod owns a single bit. This module converts between that
integer and a frozenset of `Mods` members.

Usage:
    >>> encode_mods({Mods.HIDDEN, Mods.HARDROCK})
    24
    >>> sorted(decode_mods(72))
    [<Mods.HIDDEN: 8>, <Mods.DOUBLETIME: 64>]
"""

from __future__ import annotations

from enum import IntEnum
from typing import *

__all__ = [
    "Mods",
    "ModSet",
    "MOD_ACRONYMS",
    "UNSUPPORTED_MODS",
    "LINKED_MODS",
    "to_modset",
    "decode_mods",
    "encode_mods",
    "remove_unsupported_mods",
    "mod_names",
]


class Mods(IntEnum):
    """
    Every mod known to the v1 API, bound to its bit value.

    NONE (0) denotes "explicitly no mods". NIGHTCORE is only ever set along
    with DOUBLETIME (NC alone is sent as 576), see LINKED_MODS.
    """
    NONE = 0
    NOFAIL = 1
    EASY = 2
    TOUCHDEVICE = 4
    HIDDEN = 8
    HARDROCK = 16
    SUDDENDEATH = 32
    DOUBLETIME = 64
    RELAX = 128
    HALFTIME = 256
    NIGHTCORE = 512
    FLASHLIGHT = 1024
    AUTOPLAY = 2048
    SPUNOUT = 4096
    AUTOPILOT = 8192
    PERFECT = 16384
    KEY4 = 32768
    KEY5 = 65536
    KEY6 = 131072
    KEY7 = 262144
    KEY8 = 524288
    FADEIN = 1048576
    RANDOM = 2097152
    CINEMA = 4194304
    TARGET = 8388608
    KEY9 = 16777216
    KEYCOOP = 33554432
    KEY1 = 67108864
    KEY3 = 134217728
    KEY2 = 268435456
    SCOREV2 = 536870912
    MIRROR = 1073741824


ModSet = FrozenSet[Mods]

# short names as displayed in-game
MOD_ACRONYMS: Dict[Mods, str] = {
    Mods.NONE: "NM",
    Mods.NOFAIL: "NF",
    Mods.EASY: "EZ",
    Mods.TOUCHDEVICE: "TD",
    Mods.HIDDEN: "HD",
    Mods.HARDROCK: "HR",
    Mods.SUDDENDEATH: "SD",
    Mods.DOUBLETIME: "DT",
    Mods.RELAX: "RX",
    Mods.HALFTIME: "HT",
    Mods.NIGHTCORE: "NC",
    Mods.FLASHLIGHT: "FL",
    Mods.AUTOPLAY: "AT",
    Mods.SPUNOUT: "SO",
    Mods.AUTOPILOT: "AP",
    Mods.PERFECT: "PF",
    Mods.KEY4: "4K",
    Mods.KEY5: "5K",
    Mods.KEY6: "6K",
    Mods.KEY7: "7K",
    Mods.KEY8: "8K",
    Mods.FADEIN: "FI",
    Mods.RANDOM: "RD",
    Mods.CINEMA: "CN",
    Mods.TARGET: "TP",
    Mods.KEY9: "9K",
    Mods.KEYCOOP: "CO",
    Mods.KEY1: "1K",
    Mods.KEY3: "3K",
    Mods.KEY2: "2K",
    Mods.SCOREV2: "V2",
    Mods.MIRROR: "MR",
}

# cosmetic variant -> primary mod it requires
LINKED_MODS: Dict[Mods, Mods] = {
    Mods.NIGHTCORE: Mods.DOUBLETIME,
}

# The API returns star rating / pp data as 0 or null when any of these is requested
UNSUPPORTED_MODS: FrozenSet[Mods] = frozenset({
    Mods.NOFAIL, Mods.HIDDEN, Mods.SPUNOUT, Mods.FADEIN, Mods.NIGHTCORE,
    Mods.SUDDENDEATH, Mods.PERFECT,
    Mods.RELAX, Mods.AUTOPLAY, Mods.AUTOPILOT, Mods.CINEMA,
    Mods.RANDOM, Mods.TARGET, Mods.SCOREV2, Mods.MIRROR,
    Mods.KEY1, Mods.KEY2, Mods.KEY3, Mods.KEY4, Mods.KEY5,
    Mods.KEY6, Mods.KEY7, Mods.KEY8, Mods.KEY9, Mods.KEYCOOP,
})

_HIGHEST_MOD = max(m.value for m in Mods)
_BY_VALUE: Dict[int, Mods] = {m.value: m for m in Mods}


def to_modset(mods: Union[int, Iterable[Union[Mods, int]], None]) -> ModSet:
    """Coerce a bitmask, a single Mods member or an iterable of mods into a frozenset."""
    if mods is None:
        return frozenset()
    if isinstance(mods, int):
        return decode_mods(mods)
    return frozenset(Mods(m) for m in mods)


def decode_mods(bits: Optional[int]) -> ModSet:
    """
    Convert a packed bitmask into a set of Mods.

    Walks every power of two from 1 up to the highest defined mod and stops
    right after it, so arbitrary (even huge) integers terminate. Bits that
    don't match a defined mod are ignored.

    Parameters
    ----------
    bits : Optional[int]
        Packed mods integer. 0 means "explicitly no mods" and yields {Mods.NONE};
        None means "unspecified" and yields an empty set.

    Returns
    -------
    frozenset[Mods]
    """
    if bits is None:
        return frozenset()
    bits = int(bits)
    if bits == 0:
        return frozenset({Mods.NONE})

    found = set()
    bit = 1
    while bit <= _HIGHEST_MOD:
        if bits & bit and bit in _BY_VALUE:
            found.add(_BY_VALUE[bit])
        bit <<= 1
    return frozenset(found)


def encode_mods(mods: Union[int, Iterable[Union[Mods, int]], None]) -> Optional[int]:
    """
    Pack a set of Mods into the integer the API expects.

    A linked cosmetic mod (NIGHTCORE) also sets its primary (DOUBLETIME).

    Returns
    -------
    Optional[int]
        The bitmask, or None when `mods` is empty/None so callers can tell
        "unspecified" (None) apart from "explicitly no mods" (0).
    """
    modset = to_modset(mods)
    if not modset:
        return None
    full = set(modset)
    for variant, primary in LINKED_MODS.items():
        if variant in full:
            full.add(primary)
    return sum(int(m) for m in full)


def remove_unsupported_mods(mods: Union[int, Iterable[Union[Mods, int]], None]) -> ModSet:
    """
    Strip the mods the API cannot compute difficulty for.

    NIGHTCORE is unsupported but still changes timing, so DOUBLETIME is added
    before it is removed. Never mutates the argument.
    """
    modset = set(to_modset(mods))
    for variant, primary in LINKED_MODS.items():
        if variant in modset:
            modset.add(primary)
    return frozenset(m for m in modset if m not in UNSUPPORTED_MODS)


def mod_names(mods: Union[int, Iterable[Union[Mods, int]], None], short: bool = False) -> List[str]:
    """
    Readable names of `mods`, ordered by bit value.

    Parameters
    ----------
    mods : int | Iterable[Mods]
        Bitmask or collection of mods.
    short : bool
        If True return acronyms ("HD", "DT"), else enum names ("HIDDEN").
    """
    ordered = sorted(to_modset(mods), key=int)
    if short:
        return [MOD_ACRONYMS[m] for m in ordered]
    return [m.name for m in ordered]
