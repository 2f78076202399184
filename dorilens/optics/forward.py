# -*- coding: utf-8 -*-
"""
Forward Optics Model - Field of view, coverage and pixel density.

Pure algebraic functions that take a concrete optical configuration and a
working distance to angular field of view, linear scene coverage, pixel
density, ground sample distance and DORI distances.  The camera is an
ideal pinhole over a flat rectangular sensor:

    fov      = 2 * atan(sensor_dim / (2 * focal_length))
    coverage = 2 * distance * tan(fov / 2)
    density  = pixel_count / coverage

Also provides the thin-lens hyperfocal distance and depth of field.

The elementary functions accept scalars or numpy arrays (e.g. a sweep of
distances) and return a Python ``float`` for scalar input.  Angles are
carried in radians internally; degrees only appear at the function
boundaries.

Dependencies
------------
numpy

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
import logging
import math
from typing import List, Sequence, Tuple

# Third-party
import numpy as np

# DORILENS internal
from dorilens._validation import (
    ArrayLike,
    FOV_EPS_DEG,
    check_finite,
    to_output,
    validate_fov,
    validate_non_negative,
    validate_positive,
)
from dorilens.exceptions import DegenerateGeometryError
from dorilens.models import (
    DepthOfField,
    DoriDistances,
    FovResult,
    OpticalConfiguration,
)
from dorilens.vocabulary import CANONICAL_ORDER, Axis

logger = logging.getLogger(__name__)

_MM_PER_M = 1000.0


# ------------------------------------------------------------------
# Elementary relations
# ------------------------------------------------------------------

def angular_fov(dimension_mm: ArrayLike, focal_length_mm: ArrayLike) -> ArrayLike:
    """Angular field of view along one sensor axis.

    Parameters
    ----------
    dimension_mm : float or np.ndarray
        Sensor extent along the axis, in millimeters.
    focal_length_mm : float or np.ndarray
        Lens focal length in millimeters.

    Returns
    -------
    float or np.ndarray
        Field of view in degrees, strictly inside (0, 180).

    Raises
    ------
    InvalidInputError
        If either input is non-finite or <= 0.
    DegenerateGeometryError
        If the ratio is so extreme that the field of view comes within
        ``FOV_EPS_DEG`` of 0 or 180 degrees.
    """
    dim = validate_positive(dimension_mm, 'dimension_mm')
    focal = validate_positive(focal_length_mm, 'focal_length_mm')
    fov = np.degrees(2.0 * np.arctan(dim / (2.0 * focal)))
    if np.any(fov <= FOV_EPS_DEG) or np.any(fov >= 180.0 - FOV_EPS_DEG):
        raise DegenerateGeometryError(
            f"Field of view degenerates for dimension {dimension_mm!r} mm "
            f"and focal length {focal_length_mm!r} mm"
        )
    return to_output(fov)


def focal_length_from_fov(dimension_mm: ArrayLike, fov_deg: ArrayLike) -> ArrayLike:
    """Focal length producing ``fov_deg`` over ``dimension_mm``.

    Inverse of ``angular_fov`` for one axis:
    ``focal = (dimension / 2) / tan(fov / 2)``.

    Raises
    ------
    InvalidInputError
        If ``dimension_mm`` is non-finite or <= 0.
    DegenerateGeometryError
        If ``fov_deg`` is not strictly inside (0, 180).
    """
    dim = validate_positive(dimension_mm, 'dimension_mm')
    fov = validate_fov(fov_deg)
    focal = (dim / 2.0) / np.tan(np.radians(fov) / 2.0)
    check_finite(focal, 'focal length')
    return to_output(focal)


def linear_coverage(fov_deg: ArrayLike, distance: ArrayLike) -> ArrayLike:
    """Linear scene extent covered by ``fov_deg`` at ``distance``.

    ``coverage = 2 * distance * tan(fov / 2)``, in the unit of
    ``distance``.

    Raises
    ------
    InvalidInputError
        If ``distance`` is non-finite or negative.
    DegenerateGeometryError
        If ``fov_deg`` is not strictly inside (0, 180).
    """
    fov = validate_fov(fov_deg)
    dist = validate_non_negative(distance, 'distance')
    coverage = 2.0 * dist * np.tan(np.radians(fov) / 2.0)
    check_finite(coverage, 'coverage')
    return to_output(coverage)


def pixel_density(pixel_count: ArrayLike, coverage_m: ArrayLike) -> ArrayLike:
    """Pixels per meter of scene: ``pixel_count / coverage_m``.

    Raises
    ------
    InvalidInputError
        If ``pixel_count`` is non-finite or <= 0.
    DegenerateGeometryError
        If ``coverage_m`` is <= 0 or not finite.
    """
    pixels = validate_positive(pixel_count, 'pixel_count')
    coverage = np.asarray(coverage_m, dtype=np.float64)
    if not np.all(np.isfinite(coverage)) or np.any(coverage <= 0.0):
        raise DegenerateGeometryError(
            f"Pixel density undefined for coverage {coverage_m!r} m"
        )
    return to_output(pixels / coverage)


def ground_sample_distance(coverage: ArrayLike, pixel_count: ArrayLike) -> ArrayLike:
    """Scene size represented by one pixel: ``coverage / pixel_count``."""
    cov = validate_non_negative(coverage, 'coverage')
    pixels = validate_positive(pixel_count, 'pixel_count')
    return to_output(cov / pixels)


# ------------------------------------------------------------------
# Configuration-level results
# ------------------------------------------------------------------

def derive_dori_distances(
    configuration: OpticalConfiguration,
    axis: Axis = Axis.HORIZONTAL,
) -> DoriDistances:
    """Maximum distance at which each DORI level is met along ``axis``.

    ``distance = pixel_count / (2 * density * tan(fov / 2))``.

    Parameters
    ----------
    configuration : OpticalConfiguration
    axis : Axis, default=Axis.HORIZONTAL
        DORI densities are conventionally quoted across the horizontal.

    Returns
    -------
    DoriDistances
        Distances in meters, strictly decreasing from detection to
        identification.
    """
    fov = angular_fov(configuration.sensor_dimension(axis),
                      configuration.focal_length_mm)
    tan_half = math.tan(math.radians(fov) / 2.0)
    pixels = configuration.pixel_count(axis)
    distances = {
        f"{level.value}_m": pixels / (2.0 * level.density * tan_half)
        for level in CANONICAL_ORDER
    }
    return DoriDistances(**distances)


def compute_fov(configuration: OpticalConfiguration, distance_mm: float) -> FovResult:
    """Field of view, coverage, density and DORI distances at one distance.

    Parameters
    ----------
    configuration : OpticalConfiguration
    distance_mm : float
        Working distance in millimeters; must be > 0.

    Returns
    -------
    FovResult
    """
    distance_mm = float(validate_positive(distance_mm, 'distance_mm'))
    h_fov = angular_fov(configuration.sensor_width_mm, configuration.focal_length_mm)
    v_fov = angular_fov(configuration.sensor_height_mm, configuration.focal_length_mm)

    h_cov_mm = linear_coverage(h_fov, distance_mm)
    v_cov_mm = linear_coverage(v_fov, distance_mm)
    h_cov_m = h_cov_mm / _MM_PER_M
    v_cov_m = v_cov_mm / _MM_PER_M

    result = FovResult(
        horizontal_fov_deg=h_fov,
        vertical_fov_deg=v_fov,
        horizontal_coverage_m=h_cov_m,
        vertical_coverage_m=v_cov_m,
        horizontal_density=pixel_density(configuration.pixel_width, h_cov_m),
        vertical_density=pixel_density(configuration.pixel_height, v_cov_m),
        ground_sample_distance_mm=ground_sample_distance(
            h_cov_mm, configuration.pixel_width),
        distance_m=distance_mm / _MM_PER_M,
        dori=derive_dori_distances(configuration, Axis.HORIZONTAL),
    )
    logger.debug("compute_fov(%s, %g mm): %.3f x %.3f deg", configuration,
                 distance_mm, h_fov, v_fov)
    return result


def compute_multiple_fov(
    configurations: Sequence[OpticalConfiguration],
    distance_mm: float,
) -> List[FovResult]:
    """``compute_fov`` for several configurations at a shared distance."""
    return [compute_fov(c, distance_mm) for c in configurations]


def compare_configurations(
    configurations: Sequence[OpticalConfiguration],
    distance_mm: float,
) -> List[Tuple[OpticalConfiguration, FovResult]]:
    """Pair each configuration with its result for side-by-side display."""
    return list(zip(configurations, compute_multiple_fov(configurations, distance_mm)))


# ------------------------------------------------------------------
# Depth of field
# ------------------------------------------------------------------

def hyperfocal_distance(focal_length_mm: float, f_number: float, coc_mm: float) -> float:
    """Hyperfocal distance ``H = f^2 / (N * c) + f`` in millimeters.

    Parameters
    ----------
    focal_length_mm : float
        Lens focal length.
    f_number : float
        Aperture f-number ``N``.
    coc_mm : float
        Circle of confusion diameter ``c``.
    """
    f = float(validate_positive(focal_length_mm, 'focal_length_mm'))
    n = float(validate_positive(f_number, 'f_number'))
    c = float(validate_positive(coc_mm, 'coc_mm'))
    return f * f / (n * c) + f


def depth_of_field(
    object_distance_mm: float,
    focal_length_mm: float,
    f_number: float,
    coc_mm: float,
) -> DepthOfField:
    """Near and far limits of acceptable sharpness.

    Near: ``H * s / (H + (s - f))``.  Far: ``H * s / (H - (s - f))``
    for ``s < H``, infinite otherwise.

    Returns
    -------
    DepthOfField
        Limits and total depth in millimeters.
    """
    s = float(validate_positive(object_distance_mm, 'object_distance_mm'))
    f = float(focal_length_mm)
    h = hyperfocal_distance(focal_length_mm, f_number, coc_mm)

    near = h * s / (h + (s - f))
    if s < h:
        far = h * s / (h - (s - f))
    else:
        far = math.inf
    return DepthOfField(near_mm=near, far_mm=far, total_mm=far - near)
