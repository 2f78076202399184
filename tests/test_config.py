# -*- coding: utf-8 -*-
"""
Configuration Tests - Resolver limits and the JSON override file.

Dependencies
------------
pytest

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

import json

import pytest

from dorilens.config import (
    DEFAULT_LIMITS,
    ResolverLimits,
    default_limits_path,
    load_limits,
)
from dorilens.exceptions import ConfigurationError
from dorilens.vocabulary import Quantity


# ---------------------------------------------------------------------------
# ResolverLimits
# ---------------------------------------------------------------------------

class TestResolverLimits:
    """Test defaults and overrides."""

    def test_defaults(self, default_limits):
        assert default_limits.floor(Quantity.PIXEL_WIDTH) == 640.0
        assert default_limits.ceiling(Quantity.FOCAL_LENGTH_MM) == 400.0
        assert default_limits.floor(Quantity.HORIZONTAL_FOV_DEG) == 0.1

    def test_every_quantity_has_limits(self):
        assert set(DEFAULT_LIMITS) == set(Quantity)

    def test_override_by_name(self):
        limits = ResolverLimits({'focal_length_mm': (4.0, 1000.0)})
        assert limits.ceiling(Quantity.FOCAL_LENGTH_MM) == 1000.0
        assert limits.ceiling(Quantity.PIXEL_WIDTH) == 8192.0

    def test_equality(self):
        assert ResolverLimits() == ResolverLimits({})
        assert ResolverLimits() != ResolverLimits({'pixel_width': (1, 2)})

    @pytest.mark.parametrize("pair", [(10.0, 5.0), (0.0, 5.0), ('a', 5.0),
                                      (1.0, float('inf'))])
    def test_bad_pair(self, pair):
        with pytest.raises(ConfigurationError):
            ResolverLimits({'focal_length_mm': pair})

    @pytest.mark.parametrize("pair", [5.0, (1.0, 2.0, 3.0), (1.0,)])
    def test_override_not_a_pair(self, pair):
        with pytest.raises(ConfigurationError, match="focal_length_mm"):
            ResolverLimits({'focal_length_mm': pair})

    def test_unknown_quantity(self):
        with pytest.raises(ConfigurationError, match="aperture"):
            ResolverLimits({'aperture': (1.0, 2.0)})

    def test_as_dict_layout(self, default_limits):
        data = default_limits.as_dict()
        assert data['sensor_width_mm'] == {'floor': 3.0, 'ceiling': 50.0}


# ---------------------------------------------------------------------------
# load_limits
# ---------------------------------------------------------------------------

class TestLoadLimits:
    """Test reading the JSON override file."""

    def test_missing_default_file_gives_defaults(self):
        assert load_limits() == ResolverLimits()

    def test_env_var_selects_file(self, tmp_path, monkeypatch):
        path = tmp_path / 'limits.json'
        path.write_text(json.dumps({'pixel_width': {'ceiling': 7680}}))
        monkeypatch.setenv('DORILENS_LIMITS_FILE', str(path))
        assert default_limits_path() == path
        limits = load_limits()
        assert limits.ceiling(Quantity.PIXEL_WIDTH) == 7680.0
        assert limits.floor(Quantity.PIXEL_WIDTH) == 640.0

    def test_explicit_path(self, tmp_path):
        path = tmp_path / 'limits.json'
        path.write_text(json.dumps({
            'focal_length_mm': {'floor': 4.0, 'ceiling': 1000.0},
        }))
        limits = load_limits(path)
        assert limits.floor(Quantity.FOCAL_LENGTH_MM) == 4.0

    def test_explicit_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_limits(tmp_path / 'nope.json')

    def test_bad_json(self, tmp_path):
        path = tmp_path / 'limits.json'
        path.write_text('{not json')
        with pytest.raises(ConfigurationError, match="Cannot read"):
            load_limits(path)

    def test_non_object(self, tmp_path):
        path = tmp_path / 'limits.json'
        path.write_text('[1, 2]')
        with pytest.raises(ConfigurationError, match="JSON object"):
            load_limits(path)

    def test_entry_not_object(self, tmp_path):
        path = tmp_path / 'limits.json'
        path.write_text(json.dumps({'pixel_width': 7680}))
        with pytest.raises(ConfigurationError, match="pixel_width"):
            load_limits(path)

    def test_inverted_limits(self, tmp_path):
        path = tmp_path / 'limits.json'
        path.write_text(json.dumps({'pixel_width': {'floor': 9000}}))
        with pytest.raises(ConfigurationError, match="exceeds"):
            load_limits(path)
