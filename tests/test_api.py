# -*- coding: utf-8 -*-
"""
API Tests - Plain-dict request/response entry points.

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

import logging
import math

import pytest

from dorilens import api
from dorilens.exceptions import ConfigurationError, InvalidInputError
from dorilens.models import Fixed, Free


FULL_FRAME = {
    'sensor_width_mm': 36.0, 'sensor_height_mm': 24.0,
    'pixel_width': 6000, 'pixel_height': 4000, 'focal_length_mm': 50.0,
}


# ---------------------------------------------------------------------------
# Forward model
# ---------------------------------------------------------------------------

class TestForwardEndpoints:
    """Test the forward-model payloads."""

    def test_compute_fov_from_mapping(self):
        data = api.compute_fov(FULL_FRAME, 5000.0)
        assert data['horizontal_fov_deg'] == pytest.approx(39.60, abs=0.01)
        assert data['ground_sample_distance'] == pytest.approx(0.6)
        assert data['dori']['detection_m'] == pytest.approx(333.333, abs=1e-3)

    def test_compute_fov_typed_matches_mapping(self, full_frame):
        assert api.compute_fov(full_frame, 5000.0) == api.compute_fov(FULL_FRAME, 5000.0)

    def test_compute_fov_rejects_other_types(self):
        with pytest.raises(InvalidInputError):
            api.compute_fov([36, 24], 5000.0)

    def test_focal_length_from_fov(self):
        hfov = api.compute_fov(FULL_FRAME, 5000.0)['horizontal_fov_deg']
        assert api.compute_focal_length_from_fov(36.0, hfov) == pytest.approx(50.0)

    def test_compare(self, full_frame):
        rows = api.compare_configurations([full_frame, FULL_FRAME], 10000.0)
        assert len(rows) == 2
        assert rows[0]['result'] == rows[1]['result']
        assert rows[0]['camera']['name'] == 'Full Frame 50mm'

    def test_depth_of_field_keys(self):
        assert set(api.compute_depth_of_field(5000.0, 50.0, 2.8)) == {
            'near_mm', 'far_mm', 'total_dof_mm'}

    def test_hyperfocal_default_coc(self):
        assert api.compute_hyperfocal_distance(50.0, 2.8) == pytest.approx(
            50.0 ** 2 / (2.8 * 0.03) + 50.0)

    def test_validate_configuration(self):
        findings = api.validate_configuration(dict(FULL_FRAME, pixel_height=6000))
        assert any(f['severity'] == 'error' for f in findings)


# ---------------------------------------------------------------------------
# DORI ranges
# ---------------------------------------------------------------------------

class TestDoriRangesEndpoint:
    """Test compute_dori_ranges payloads."""

    def test_fixed_free_mapping(self):
        payload = api.compute_dori_ranges(
            {'identification_m': 50.0},
            {'fixed': {'pixel_width': 1920, 'sensor_width_mm': 6.4},
             'free': ['focal_length_mm']},
        )
        focal = payload['focal_length_mm']
        assert focal['min'] == pytest.approx(41.6667, abs=1e-4)
        assert focal['max'] == 400.0
        assert focal['bound'] == 'lower'
        assert focal['limiting_requirement'] == 'identification'
        assert payload['failures'] == {}
        assert payload['limiting_requirement'] == 'identification'

    def test_tag_mapping(self):
        payload = api.compute_dori_ranges(
            [('identification', 50.0)],
            {'pixel_width': Fixed(1920), 'sensor_width_mm': Fixed(6.4),
             'focal_length_mm': Free()},
        )
        assert payload['focal_length_mm']['min'] == pytest.approx(41.6667, abs=1e-4)

    def test_idempotent(self):
        args = ({'detection': 100.0, 'identification': 10.0},
                {'fixed': {'pixel_width': 1920, 'sensor_width_mm': 6.4},
                 'free': ['focal_length_mm']})
        first = api.compute_dori_ranges(*args)
        assert first == api.compute_dori_ranges(*args)
        assert first['focal_length_mm']['limiting_requirement'] == 'detection'

    def test_limits_mapping(self):
        payload = api.compute_dori_ranges(
            {'identification': 50.0},
            {'fixed': {'pixel_width': 1920, 'sensor_width_mm': 6.4},
             'free': ['focal_length_mm']},
            limits={'focal_length_mm': (2.0, 30.0)},
        )
        assert 'focal_length_mm' not in payload
        assert payload['failures']['focal_length_mm']['kind'] == 'unsatisfiable'

    def test_target_with_extra_item(self):
        with pytest.raises(InvalidInputError, match="distance_m"):
            api.compute_dori_ranges(
                [('identification', 50.0, 1.0)],
                {'fixed': {'pixel_width': 1920, 'sensor_width_mm': 6.4},
                 'free': ['focal_length_mm']},
            )

    def test_free_range_with_extra_item(self):
        with pytest.raises(InvalidInputError, match="focal_length_mm"):
            api.compute_dori_ranges(
                {'identification': 50.0},
                {'fixed': {'pixel_width': 1920, 'sensor_width_mm': 6.4},
                 'free': {'focal_length_mm': (2.0, 10.0, 3.0)}},
            )

    def test_limits_entry_not_a_pair(self):
        with pytest.raises(ConfigurationError, match="focal_length_mm"):
            api.compute_dori_ranges(
                {'identification': 50.0},
                {'fixed': {'pixel_width': 1920, 'sensor_width_mm': 6.4},
                 'free': ['focal_length_mm']},
                limits={'focal_length_mm': 5.0},
            )

    def test_rejects_non_mapping_constraints(self):
        with pytest.raises(InvalidInputError):
            api.compute_dori_ranges({'identification': 50.0}, ['focal_length_mm'])


# ---------------------------------------------------------------------------
# Single-distance translation
# ---------------------------------------------------------------------------

class TestSingleDistanceEndpoint:
    """Test compute_dori_from_single_distance payloads."""

    def test_other_three_levels(self):
        payload = api.compute_dori_from_single_distance(5.0, 'Identification')
        assert payload == pytest.approx({
            'detection_m': 50.0, 'observation_m': 20.0, 'recognition_m': 10.0})

    def test_with_configuration_adds_coverage(self):
        payload = api.compute_dori_from_single_distance(5.0, 'identification', FULL_FRAME)
        # tan(hfov / 2) = 18 / 50
        assert payload['recognition_coverage_m'] == pytest.approx(2 * 10.0 * 0.36)
        assert 'identification_coverage_m' not in payload

    def test_mismatched_aspect_is_logged_not_raised(self, caplog):
        uhd = dict(FULL_FRAME, pixel_width=3840, pixel_height=2160)
        with caplog.at_level(logging.WARNING, logger='dorilens.api'):
            payload = api.compute_dori_from_single_distance(5.0, 'identification', uhd)
        assert payload['detection_m'] == pytest.approx(50.0)
        assert payload['detection_coverage_m'] == pytest.approx(2 * 50.0 * 0.36)
        assert 'aspect ratio' in caplog.text

    def test_bad_distance(self):
        with pytest.raises(InvalidInputError):
            api.compute_dori_from_single_distance(math.nan, 'detection')
