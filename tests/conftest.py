# -*- coding: utf-8 -*-
"""
Shared Test Fixtures - Reference configurations and DORI problems.

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

import pytest

from dorilens.config import ResolverLimits
from dorilens.models import Fixed, Free, OpticalConfiguration, ParameterAssignment


@pytest.fixture
def full_frame():
    """36 x 24 mm, 6000 x 4000 px, 50 mm lens."""
    return OpticalConfiguration(
        sensor_width_mm=36.0, sensor_height_mm=24.0,
        pixel_width=6000, pixel_height=4000,
        focal_length_mm=50.0, name="Full Frame 50mm",
    )


@pytest.fixture
def hd_assignment():
    """1920 px across a 6.4 mm sensor, focal length free."""
    return ParameterAssignment(
        pixel_width=Fixed(1920),
        sensor_width_mm=Fixed(6.4),
        focal_length_mm=Free(),
    )


@pytest.fixture
def default_limits():
    return ResolverLimits()


@pytest.fixture(autouse=True)
def _isolated_limits_file(tmp_path, monkeypatch):
    """Point the default limits file away from the user's home."""
    monkeypatch.setenv("DORILENS_LIMITS_FILE", str(tmp_path / "absent.json"))
