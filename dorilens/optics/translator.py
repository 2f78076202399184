# -*- coding: utf-8 -*-
"""
DORI Translator - Exact conversion between DORI levels and distances.

For a fixed configuration the field of view and pixel count do not
change, so pixel density is inversely proportional to distance.  One
known ``(level, distance)`` pair therefore fixes the distance of every
other level exactly:

    distance_B = distance_A * (density_A / density_B)

The product ``density * distance`` (the target's *demand*) ranks how
restrictive a target is for any configuration: the larger the demand,
the more pixels across the field of view it requires.

Author
------
Duane Smalley, PhD
duane.d.smalley@gmail.com

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-10-18

Modified
--------
2026-10-18
"""

# Standard library
from typing import Iterable, Optional, Union

# Third-party
import numpy as np

# DORILENS internal
from dorilens._validation import ArrayLike, to_output, validate_positive
from dorilens.models import DoriDistances, DoriTarget
from dorilens.vocabulary import CANONICAL_ORDER, PerformanceLevel

#: Relative tolerance under which two bounds or demands count as equal.
REL_TOL = 1e-9

LevelLike = Union[PerformanceLevel, str]


def translate_distance(
    distance_m: ArrayLike,
    from_level: LevelLike,
    to_level: LevelLike,
) -> ArrayLike:
    """Distance at ``to_level`` equivalent to ``distance_m`` at ``from_level``.

    Parameters
    ----------
    distance_m : float or np.ndarray
        Known distance(s) in meters; must be > 0.
    from_level, to_level : PerformanceLevel or str
        Source and destination DORI levels.

    Returns
    -------
    float or np.ndarray
        Equivalent distance(s) in meters.
    """
    dist = validate_positive(distance_m, 'distance_m')
    src = PerformanceLevel.parse(from_level)
    dst = PerformanceLevel.parse(to_level)
    return to_output(dist * (src.density / dst.density))


def dori_from_single_distance(distance_m: float, level: LevelLike) -> DoriDistances:
    """All four DORI distances implied by one known distance.

    Examples
    --------
    >>> dori_from_single_distance(5.0, 'identification').recognition_m
    10.0
    """
    source = PerformanceLevel.parse(level)
    distances = {
        f"{lv.value}_m": translate_distance(distance_m, source, lv)
        for lv in CANONICAL_ORDER
    }
    return DoriDistances(**distances)


def equivalent_demand(level: LevelLike, distance_m: float) -> float:
    """Demand ``density * distance`` of a target.

    Two targets with equal demand require exactly the same pixel count
    across the same field of view.
    """
    lv = PerformanceLevel.parse(level)
    return lv.density * float(validate_positive(distance_m, 'distance_m'))


def most_demanding(targets: Iterable[DoriTarget]) -> Optional[PerformanceLevel]:
    """Level of the most restrictive target.

    Demands equal within ``REL_TOL`` resolve to the level earliest in
    canonical order (detection first).

    Returns
    -------
    PerformanceLevel or None
        None if ``targets`` is empty.
    """
    best_level: Optional[PerformanceLevel] = None
    best_demand = 0.0
    for target in sorted(targets, key=lambda t: t.level.rank):
        demand = equivalent_demand(target.level, target.distance_m)
        if best_level is None or (
                demand > best_demand
                and not np.isclose(demand, best_demand, rtol=REL_TOL, atol=0.0)):
            best_level, best_demand = target.level, demand
    return best_level
