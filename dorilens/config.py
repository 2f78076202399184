# -*- coding: utf-8 -*-
"""
Resolver Configuration - Practical parameter limits for the DORI resolver.

The DORI inequality only bounds each free quantity from one side.  The
other side of every reported range comes from a practical floor or
ceiling: either supplied by the caller on the ``Free`` tag, or taken
from the ``ResolverLimits`` loaded here.  Overrides live in a small JSON
file shared with the other geoint tools::

    {
        "pixel_width": {"floor": 1280, "ceiling": 7680},
        "focal_length_mm": {"ceiling": 1000.0}
    }

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
import json
import logging
import math
import os
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple, Union

# DORILENS internal
from dorilens.exceptions import ConfigurationError
from dorilens.vocabulary import Quantity

logger = logging.getLogger(__name__)

# Default limits file path (repo-agnostic, shared across projects)
_LIMITS_PATH = Path.home() / ".config" / "geoint" / "dorilens.json"
_LIMITS_ENV = "DORILENS_LIMITS_FILE"

#: Circle of confusion for a full-frame (36 x 24 mm) sensor, in mm.
DEFAULT_COC_MM = 0.03

# (floor, ceiling) per quantity.  Heights follow the widths at 4:3.
DEFAULT_LIMITS: Mapping[Quantity, Tuple[float, float]] = MappingProxyType({
    Quantity.SENSOR_WIDTH_MM: (3.0, 50.0),
    Quantity.SENSOR_HEIGHT_MM: (2.25, 37.5),
    Quantity.PIXEL_WIDTH: (640.0, 8192.0),
    Quantity.PIXEL_HEIGHT: (480.0, 6144.0),
    Quantity.FOCAL_LENGTH_MM: (2.0, 400.0),
    Quantity.HORIZONTAL_FOV_DEG: (0.1, 175.0),
})


class ResolverLimits:
    """Practical floor and ceiling for every tunable quantity.

    Immutable after construction; a new instance is built for every
    override so that limits never leak between resolver calls.

    Parameters
    ----------
    overrides : Mapping, optional
        ``{quantity: (floor, ceiling)}``.  Keys may be ``Quantity``
        members or their string values.  Quantities not listed keep
        ``DEFAULT_LIMITS``.

    Raises
    ------
    ConfigurationError
        If a limit is non-finite, non-positive, or ``floor > ceiling``.
    """

    __slots__ = ('_limits',)

    def __init__(
        self,
        overrides: Optional[Mapping[Union[Quantity, str], Tuple[float, float]]] = None,
    ) -> None:
        limits: Dict[Quantity, Tuple[float, float]] = dict(DEFAULT_LIMITS)
        for key, pair in (overrides or {}).items():
            try:
                quantity = Quantity.parse(key)
            except ValueError as exc:
                raise ConfigurationError(str(exc)) from None
            try:
                floor, ceiling = pair
            except (TypeError, ValueError):
                raise ConfigurationError(
                    f"{quantity.value} limits must be a (floor, ceiling) "
                    f"pair, got {pair!r}"
                ) from None
            limits[quantity] = _check_pair(quantity, floor, ceiling)
        self._limits = MappingProxyType(limits)

    def floor(self, quantity: Quantity) -> float:
        """Practical lower limit for ``quantity``."""
        return self._limits[quantity][0]

    def ceiling(self, quantity: Quantity) -> float:
        """Practical upper limit for ``quantity``."""
        return self._limits[quantity][1]

    def as_dict(self) -> Dict[str, Dict[str, float]]:
        """Serialize to the JSON file layout."""
        return {
            q.value: {'floor': lo, 'ceiling': hi}
            for q, (lo, hi) in self._limits.items()
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ResolverLimits):
            return NotImplemented
        return dict(self._limits) == dict(other._limits)

    def __repr__(self) -> str:
        return f"ResolverLimits({self.as_dict()!r})"


def _check_pair(quantity: Quantity, floor: Any, ceiling: Any) -> Tuple[float, float]:
    try:
        lo, hi = float(floor), float(ceiling)
    except (TypeError, ValueError):
        raise ConfigurationError(
            f"{quantity.value} limits must be numeric, got "
            f"floor={floor!r}, ceiling={ceiling!r}"
        ) from None
    if not (math.isfinite(lo) and math.isfinite(hi)) or lo <= 0:
        raise ConfigurationError(
            f"{quantity.value} limits must be finite and > 0, got "
            f"({lo}, {hi})"
        )
    if lo > hi:
        raise ConfigurationError(
            f"{quantity.value} floor {lo} exceeds ceiling {hi}"
        )
    return lo, hi


def default_limits_path() -> Path:
    """Path consulted by ``load_limits`` when none is given.

    ``$DORILENS_LIMITS_FILE`` wins over ``~/.config/geoint/dorilens.json``.
    """
    env = os.environ.get(_LIMITS_ENV, "")
    return Path(env).expanduser() if env else _LIMITS_PATH


def load_limits(path: Optional[Union[str, Path]] = None) -> ResolverLimits:
    """Load resolver limits from a JSON override file.

    Parameters
    ----------
    path : str or Path, optional
        Limits file.  If None, uses ``default_limits_path()``.  A missing
        default file silently yields the built-in limits; a missing
        explicit file is an error.

    Returns
    -------
    ResolverLimits

    Raises
    ------
    ConfigurationError
        If the file cannot be read or parsed, or holds invalid limits.
    """
    explicit = path is not None
    limits_path = Path(path).expanduser() if explicit else default_limits_path()

    if not limits_path.exists():
        if explicit:
            raise ConfigurationError(f"Limits file not found: {limits_path}")
        logger.debug("No limits file at %s, using defaults", limits_path)
        return ResolverLimits()

    try:
        with open(limits_path, 'r', encoding='utf-8') as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(
            f"Cannot read limits file {limits_path}: {exc}"
        ) from exc

    if not isinstance(raw, dict):
        raise ConfigurationError(
            f"Limits file {limits_path} must hold a JSON object"
        )

    overrides = {}
    for key, entry in raw.items():
        if not isinstance(entry, dict):
            raise ConfigurationError(
                f"Limits entry {key!r} must be an object with "
                f"'floor' and/or 'ceiling'"
            )
        try:
            quantity = Quantity.parse(key)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from None
        default_lo, default_hi = DEFAULT_LIMITS[quantity]
        overrides[quantity] = (
            entry.get('floor', default_lo),
            entry.get('ceiling', default_hi),
        )

    logger.debug("Loaded %d limit override(s) from %s", len(overrides), limits_path)
    return ResolverLimits(overrides)
