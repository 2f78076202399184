# -*- coding: utf-8 -*-
"""
Vocabulary - Canonical enums and constant tables for DORILENS.

Defines the single source of truth for the controlled vocabularies used
across the optics model, resolver, API and CLI: DORI performance levels
and their required pixel densities, sensor axes, tunable design
quantities, and the kinds of bound the resolver can derive.

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
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Tuple, Union

# DORILENS internal
from dorilens.exceptions import InvalidInputError


class PerformanceLevel(Enum):
    """DORI surveillance performance tiers (EN 62676-4).

    Declaration order is the canonical order used for tie-breaking:
    detection, observation, recognition, identification.
    """

    DETECTION = "detection"
    OBSERVATION = "observation"
    RECOGNITION = "recognition"
    IDENTIFICATION = "identification"

    @property
    def density(self) -> float:
        """Required pixel density in px/m."""
        return DORI_DENSITY_PX_PER_M[self]

    @property
    def rank(self) -> int:
        """Position in the canonical order (0 = detection)."""
        return CANONICAL_ORDER.index(self)

    @classmethod
    def parse(cls, value: Union['PerformanceLevel', str]) -> 'PerformanceLevel':
        """Coerce a level name (case-insensitive) or member to a member.

        Raises
        ------
        InvalidInputError
            If ``value`` names no DORI level.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            for member in cls:
                if member.value == key:
                    return member
        raise InvalidInputError(
            f"Unknown DORI level {value!r}; expected one of "
            f"{[m.value for m in cls]}"
        )


# Required pixel density per level (pixels per meter of scene width).
DORI_DENSITY_PX_PER_M: Mapping[PerformanceLevel, float] = MappingProxyType({
    PerformanceLevel.DETECTION: 25.0,
    PerformanceLevel.OBSERVATION: 62.5,
    PerformanceLevel.RECOGNITION: 125.0,
    PerformanceLevel.IDENTIFICATION: 250.0,
})

CANONICAL_ORDER: Tuple[PerformanceLevel, ...] = tuple(PerformanceLevel)

# Label used wherever no target constrained a result.
NO_LIMIT = "none"


class Axis(Enum):
    """Sensor axis along which a density is evaluated."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class Quantity(Enum):
    """The six tunable design quantities of an optical configuration."""

    SENSOR_WIDTH_MM = "sensor_width_mm"
    SENSOR_HEIGHT_MM = "sensor_height_mm"
    PIXEL_WIDTH = "pixel_width"
    PIXEL_HEIGHT = "pixel_height"
    FOCAL_LENGTH_MM = "focal_length_mm"
    HORIZONTAL_FOV_DEG = "horizontal_fov_deg"

    @property
    def is_pixel_count(self) -> bool:
        """Whether the quantity is an integer pixel count."""
        return self in (Quantity.PIXEL_WIDTH, Quantity.PIXEL_HEIGHT)

    @classmethod
    def parse(cls, value: Union['Quantity', str]) -> 'Quantity':
        """Coerce a quantity name or member to a member.

        Raises
        ------
        InvalidInputError
            If ``value`` names no tunable quantity.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidInputError(
                f"Unknown design quantity {value!r}; expected one of "
                f"{[m.value for m in cls]}"
            ) from None


class BoundKind(Enum):
    """Which side of a parameter range was derived from the DORI targets.

    ``LOWER``
        ``min`` is derived, ``max`` is the caller ceiling.
    ``UPPER``
        ``max`` is derived, ``min`` is the caller floor.
    ``EXACT``
        The value is geometrically determined by other fixed values.
    ``COUPLED``
        A fixed horizontal field of view ties sensor width to focal
        length; both ends follow from the partner quantity's range.
    ``NONE``
        No target constrained the quantity; both ends are caller limits.
    """

    LOWER = "lower"
    UPPER = "upper"
    EXACT = "exact"
    COUPLED = "coupled"
    NONE = "none"
