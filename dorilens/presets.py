# -*- coding: utf-8 -*-
"""
Camera Presets - Common sensor formats for quick comparison.

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
from types import MappingProxyType
from typing import List, Mapping

# DORILENS internal
from dorilens.exceptions import InvalidInputError
from dorilens.models import OpticalConfiguration

CAMERA_PRESETS: Mapping[str, OpticalConfiguration] = MappingProxyType({
    'full-frame': OpticalConfiguration(
        sensor_width_mm=36.0, sensor_height_mm=24.0,
        pixel_width=6000, pixel_height=4000,
        focal_length_mm=50.0, name="Full Frame 50mm",
    ),
    'aps-c': OpticalConfiguration(
        sensor_width_mm=23.5, sensor_height_mm=15.6,
        pixel_width=6000, pixel_height=4000,
        focal_length_mm=35.0, name="APS-C 35mm",
    ),
    'micro43': OpticalConfiguration(
        sensor_width_mm=17.3, sensor_height_mm=13.0,
        pixel_width=5184, pixel_height=3888,
        focal_length_mm=25.0, name="Micro 4/3 25mm",
    ),
})


def get_preset(name: str) -> OpticalConfiguration:
    """Look up a preset by key (case-insensitive).

    Raises
    ------
    InvalidInputError
        If no preset has that key.
    """
    key = name.strip().lower()
    if key not in CAMERA_PRESETS:
        raise InvalidInputError(
            f"Unknown camera preset {name!r}; expected one of "
            f"{list(CAMERA_PRESETS)}"
        )
    return CAMERA_PRESETS[key]


def list_presets() -> List[OpticalConfiguration]:
    """All presets in declaration order."""
    return list(CAMERA_PRESETS.values())
