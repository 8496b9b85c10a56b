"""
adjust.py

Recompute a beatmap's difficulty statistics as if mods were applied, without
asking the API. Mirrors the game's own formulas, including the stepwise
approach-rate-to-milliseconds conversion.

Only `diff_size`, `diff_approach`, `diff_overall`, `diff_drain`, `bpm`,
`total_length` and `hit_length` change. Star rating, aim and speed values need
a real request (see OsuApi.get_beatmap).
"""

from __future__ import annotations

import dataclasses
import logging
from typing import *

from .mods import Mods, to_modset

logger = logging.getLogger(__name__)

__all__ = ["ADJUSTED_FIELDS", "approach_rate_to_ms", "adjust_beatmap_stats_to_mods"]

ADJUSTED_FIELDS: Tuple[str, ...] = (
    "diff_size",
    "diff_approach",
    "diff_overall",
    "diff_drain",
    "bpm",
    "total_length",
    "hit_length",
)

T = TypeVar("T")


def approach_rate_to_ms(ar: float) -> float:
    """
    Convert an approach rate into its preempt window in milliseconds.

    Starts at 1800 ms (AR 0) and removes 12 ms per tenth of AR, 15 ms once
    past AR 5. Kept as a step loop: a fractional `ar * 10` counts as a full
    step, and that rounding is part of the result.
    """
    ar *= 10
    ms = 1800
    i = 0
    while i < ar:
        ms -= 15 if i >= 50 else 12
        i += 1
    return ms


def _read_stats(beatmap: Any) -> Dict[str, float]:
    if isinstance(beatmap, Mapping):
        return {name: beatmap[name] for name in ADJUSTED_FIELDS}
    return {name: getattr(beatmap, name) for name in ADJUSTED_FIELDS}


def adjust_beatmap_stats_to_mods(beatmap: T, mods: Union[int, Iterable[Mods], None]) -> T:
    """
    Return a copy of `beatmap` with its stats adjusted to `mods`.

    Parameters
    ----------
    beatmap : BEATMAP | Mapping
        A BEATMAP dataclass (or any dataclass / mapping with the adjusted
        field names). Never mutated.
    mods : int | Iterable[Mods]
        Bitmask or collection of mods.

    Returns
    -------
    Same type as `beatmap` (dataclasses.replace() copy, or a new dict).

    Notes
    -----
    Mods apply in a fixed order: EASY, HARDROCK, DOUBLETIME/NIGHTCORE,
    HALFTIME. Speed mods read the already EZ/HR-scaled approach and overall
    values. DT together with HT is not rejected.
    """
    modset = to_modset(mods)
    s = _read_stats(beatmap)

    if Mods.EASY in modset:
        s["diff_size"] /= 2
        s["diff_approach"] /= 2
        s["diff_overall"] /= 2
        s["diff_drain"] /= 2

    if Mods.HARDROCK in modset:
        s["diff_size"] = min(10, s["diff_size"] * 1.3)
        s["diff_approach"] = min(10, s["diff_approach"] * 1.4)
        s["diff_overall"] = min(10, s["diff_overall"] * 1.4)
        s["diff_drain"] = min(10, s["diff_drain"] * 1.4)

    if Mods.DOUBLETIME in modset or Mods.NIGHTCORE in modset:
        s["total_length"] /= 1.5
        s["hit_length"] /= 1.5
        s["bpm"] *= 1.5
        s["diff_approach"] = (1950 - (approach_rate_to_ms(s["diff_approach"]) / 1.5)) / 150
        s["diff_overall"] = (80 - ((80 - 6 * s["diff_overall"]) / 1.5)) / 6

    if Mods.HALFTIME in modset:
        s["total_length"] /= 0.75
        s["hit_length"] /= 0.75
        s["bpm"] *= 0.75
        ms = approach_rate_to_ms(s["diff_approach"])
        if s["diff_approach"] > 7:
            s["diff_approach"] = (1950 - (ms / 0.75)) / 150
        else:
            s["diff_approach"] = (1800 - (ms / 0.75)) / 120
        s["diff_overall"] = (80 - ((80 - 6 * s["diff_overall"]) / 0.75)) / 6

    logger.debug("adjusted stats for mods=%s: %s", sorted(m.name for m in modset), s)

    if isinstance(beatmap, Mapping):
        out = dict(beatmap)
        out.update(s)
        return out  # type: ignore[return-value]
    return dataclasses.replace(beatmap, **s)
