# -*- coding: utf-8 -*-
"""
Forward Optics Tests - Field of view, coverage, density, GSD, depth of field.

Checks the pinhole relations against hand-computed reference values,
their monotonicity and round-trip properties, and that degenerate
geometry raises typed errors instead of producing NaN or infinity.

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

import math

import numpy as np
import pytest

from dorilens.exceptions import DegenerateGeometryError, InvalidInputError
from dorilens.models import OpticalConfiguration, Severity
from dorilens.optics.forward import (
    angular_fov,
    compare_configurations,
    compute_fov,
    compute_multiple_fov,
    depth_of_field,
    derive_dori_distances,
    focal_length_from_fov,
    ground_sample_distance,
    hyperfocal_distance,
    linear_coverage,
    pixel_density,
)
from dorilens.presets import list_presets
from dorilens.vocabulary import Axis


# ---------------------------------------------------------------------------
# Elementary relations
# ---------------------------------------------------------------------------

class TestAngularFov:
    """Test angular_fov values, monotonicity and failure modes."""

    def test_full_frame_horizontal(self):
        assert angular_fov(36.0, 50.0) == pytest.approx(39.5978, abs=1e-3)

    def test_scalar_returns_float(self):
        assert isinstance(angular_fov(36.0, 50.0), float)

    def test_dimension_twice_focal_is_90_deg(self):
        """A dimension equal to twice the focal length gives 90 degrees."""
        assert angular_fov(100.0, 50.0) == pytest.approx(90.0)

    def test_increasing_in_dimension(self):
        dims = np.linspace(0.5, 200.0, 50)
        fovs = angular_fov(dims, 25.0)
        assert np.all(np.diff(fovs) > 0)

    def test_decreasing_in_focal_length(self):
        focals = np.logspace(-1, 4, 50)
        fovs = angular_fov(36.0, focals)
        assert np.all(np.diff(fovs) < 0)

    def test_open_interval(self):
        fovs = angular_fov(np.logspace(-1, 2.3, 20), np.logspace(-1, 4, 20))
        assert np.all(fovs > 0.0)
        assert np.all(fovs < 180.0)

    @pytest.mark.parametrize("focal", [0.0, -5.0, float('nan'), float('inf')])
    def test_bad_focal_length_raises(self, focal):
        with pytest.raises(InvalidInputError, match="focal_length_mm"):
            angular_fov(36.0, focal)

    def test_zero_dimension_raises(self):
        with pytest.raises(InvalidInputError, match="dimension_mm"):
            angular_fov(0.0, 50.0)

    def test_vanishing_focal_length_degenerates(self):
        """Focal length -> 0 drives the field of view to 180 degrees."""
        with pytest.raises(DegenerateGeometryError):
            angular_fov(36.0, 1e-300)

    @pytest.mark.parametrize("width", [1e-200, 1e-12, np.nextafter(0.0, 1.0)])
    def test_vanishing_dimension_degenerates(self, width):
        """Sensor width -> 0 collapses the field of view to 0 degrees."""
        with pytest.raises(DegenerateGeometryError):
            angular_fov(width, 50.0)

    def test_narrow_but_regular_field_of_view(self):
        assert 0.0 < angular_fov(1e-6, 400.0) < 1e-6


class TestFocalLengthFromFov:
    """Test the inverse relation."""

    def test_full_frame(self):
        assert focal_length_from_fov(36.0, 39.5978) == pytest.approx(50.0, rel=1e-4)

    def test_round_trip_grid(self):
        """focal_length_from_fov(d, angular_fov(d, f)) == f within 1e-6."""
        focals = np.logspace(-1, 4, 41)
        dims = np.logspace(-1, math.log10(200.0), 37)
        f_grid, d_grid = np.meshgrid(focals, dims)
        fov = angular_fov(d_grid, f_grid)
        recovered = focal_length_from_fov(d_grid, fov)
        np.testing.assert_allclose(recovered, f_grid, rtol=1e-6)

    @pytest.mark.parametrize("fov", [0.0, 180.0, 200.0, -10.0])
    def test_out_of_range_fov_degenerates(self, fov):
        with pytest.raises(DegenerateGeometryError):
            focal_length_from_fov(36.0, fov)

    def test_nan_fov_invalid(self):
        with pytest.raises(InvalidInputError):
            focal_length_from_fov(36.0, float('nan'))


class TestCoverageDensityGsd:
    """Test linear_coverage, pixel_density and ground_sample_distance."""

    def test_coverage_right_angle(self):
        assert linear_coverage(90.0, 10.0) == pytest.approx(20.0)

    def test_coverage_zero_distance(self):
        assert linear_coverage(40.0, 0.0) == 0.0

    def test_coverage_array_distance(self):
        cov = linear_coverage(90.0, np.array([1.0, 2.0, 3.0]))
        np.testing.assert_allclose(cov, [2.0, 4.0, 6.0])

    @pytest.mark.parametrize("fov", [0.0, 180.0])
    def test_coverage_degenerate_fov(self, fov):
        with pytest.raises(DegenerateGeometryError):
            linear_coverage(fov, 10.0)

    def test_coverage_negative_distance(self):
        with pytest.raises(InvalidInputError):
            linear_coverage(40.0, -1.0)

    def test_density(self):
        assert pixel_density(6000, 3.6) == pytest.approx(1666.667, rel=1e-6)

    def test_density_zero_coverage_degenerates(self):
        with pytest.raises(DegenerateGeometryError):
            pixel_density(1920, 0.0)

    def test_gsd(self):
        assert ground_sample_distance(3600.0, 6000) == pytest.approx(0.6)

    def test_gsd_zero_pixels(self):
        with pytest.raises(InvalidInputError):
            ground_sample_distance(3600.0, 0)


# ---------------------------------------------------------------------------
# Configuration-level results
# ---------------------------------------------------------------------------

class TestComputeFov:
    """Test compute_fov on the full-frame reference camera."""

    def test_full_frame_at_5m(self, full_frame):
        result = compute_fov(full_frame, 5000.0)
        assert result.horizontal_fov_deg == pytest.approx(39.60, abs=0.01)
        assert result.vertical_fov_deg == pytest.approx(26.99, abs=0.01)
        assert result.horizontal_coverage_m == pytest.approx(3.600, abs=1e-3)
        assert result.vertical_coverage_m == pytest.approx(2.400, abs=1e-3)
        assert result.horizontal_density == pytest.approx(1666.7, abs=0.1)
        assert result.vertical_density == pytest.approx(1666.7, abs=0.1)
        assert result.ground_sample_distance_mm == pytest.approx(0.6, abs=1e-6)
        assert result.distance_m == pytest.approx(5.0)

    def test_dori_attached(self, full_frame):
        result = compute_fov(full_frame, 5000.0)
        assert result.dori.detection_m == pytest.approx(6000 / (2 * 25 * 0.36))
        assert result.dori.identification_m == pytest.approx(6000 / (2 * 250 * 0.36))

    def test_payload_keys(self, full_frame):
        data = compute_fov(full_frame, 5000.0).to_dict()
        assert set(data) == {
            'horizontal_fov_deg', 'vertical_fov_deg', 'horizontal_coverage_m',
            'vertical_coverage_m', 'horizontal_density', 'vertical_density',
            'ground_sample_distance', 'distance_m', 'dori',
        }

    def test_plausible_result_has_no_findings(self, full_frame):
        assert compute_fov(full_frame, 5000.0).validate() == []

    def test_zero_distance_raises(self, full_frame):
        with pytest.raises(InvalidInputError, match="distance_mm"):
            compute_fov(full_frame, 0.0)

    def test_multiple_and_compare(self):
        presets = list_presets()
        results = compute_multiple_fov(presets, 10000.0)
        assert len(results) == len(presets)
        pairs = compare_configurations(presets, 10000.0)
        assert [c for c, _ in pairs] == presets
        assert pairs[0][1] == results[0]


class TestDeriveDoriDistances:
    """Test the per-level maximum distances."""

    def test_strictly_decreasing(self, full_frame):
        distances = [d for _, d in derive_dori_distances(full_frame).items()]
        assert all(a > b for a, b in zip(distances, distances[1:]))

    def test_ratios_follow_densities(self, full_frame):
        dori = derive_dori_distances(full_frame)
        assert dori.detection_m / dori.identification_m == pytest.approx(10.0)
        assert dori.observation_m / dori.recognition_m == pytest.approx(2.0)

    def test_vertical_axis(self, full_frame):
        dori = derive_dori_distances(full_frame, Axis.VERTICAL)
        # tan(vfov / 2) = 12 / 50
        assert dori.detection_m == pytest.approx(4000 / (2 * 25 * 0.24))


# ---------------------------------------------------------------------------
# Configuration plausibility
# ---------------------------------------------------------------------------

class TestConfigurationValidate:
    """Test OpticalConfiguration.validate findings."""

    @pytest.mark.parametrize("preset", list_presets(), ids=lambda c: c.name)
    def test_presets_are_plausible(self, preset):
        assert preset.validate() == []

    def test_aspect_mismatch_is_error(self):
        config = OpticalConfiguration(36.0, 24.0, 1920, 1920, 50.0)
        findings = config.validate()
        assert any(f.severity is Severity.ERROR and 'aspect' in f.message
                   for f in findings)
        assert any(f.severity is Severity.WARNING and 'square' in f.message
                   for f in findings)

    def test_tiny_pitch_is_error(self):
        config = OpticalConfiguration(1.2, 0.9, 6000, 4500, 4.0)
        messages = [f.message for f in config.validate()
                    if f.severity is Severity.ERROR]
        assert any('pitch' in m for m in messages)


# ---------------------------------------------------------------------------
# Depth of field
# ---------------------------------------------------------------------------

class TestDepthOfField:
    """Test hyperfocal distance and near/far limits."""

    def test_hyperfocal(self):
        expected = 50.0 ** 2 / (2.8 * 0.03) + 50.0
        assert hyperfocal_distance(50.0, 2.8, 0.03) == pytest.approx(expected)

    def test_hyperfocal_invalid_aperture(self):
        with pytest.raises(InvalidInputError, match="f_number"):
            hyperfocal_distance(50.0, 0.0, 0.03)

    def test_limits_bracket_subject(self):
        h = hyperfocal_distance(50.0, 2.8, 0.03)
        dof = depth_of_field(5000.0, 50.0, 2.8, 0.03)
        assert dof.near_mm == pytest.approx(h * 5000.0 / (h + 4950.0))
        assert dof.far_mm == pytest.approx(h * 5000.0 / (h - 4950.0))
        assert dof.near_mm < 5000.0 < dof.far_mm
        assert dof.total_mm == pytest.approx(dof.far_mm - dof.near_mm)

    def test_beyond_hyperfocal_is_infinite(self):
        dof = depth_of_field(40000.0, 50.0, 2.8, 0.03)
        assert math.isinf(dof.far_mm)
        assert math.isinf(dof.total_mm)
        assert dof.to_dict()['total_dof_mm'] == math.inf
