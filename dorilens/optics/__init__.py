# -*- coding: utf-8 -*-
"""
Optics Sub-module - Forward pinhole model, DORI translator and resolver.

Provides the numerical core of DORILENS.  ``forward`` evaluates a
concrete configuration; ``translator`` converts between DORI levels at a
fixed configuration; ``resolver`` inverts the model to admissible design
ranges.

Key Functions
-------------
compute_fov
    Field of view, coverage, density, GSD and DORI distances for one
    configuration at one distance.
derive_dori_distances
    Maximum distance per DORI level for one configuration.
focal_length_from_fov
    Focal length producing a field of view over a sensor dimension.
hyperfocal_distance, depth_of_field
    Thin-lens sharpness limits.
translate_distance, dori_from_single_distance
    Exact level-to-level distance conversion.
compute_dori_ranges
    Admissible range of each free design quantity under 1-4 DORI
    targets.

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
from dorilens.optics.translator import (
    dori_from_single_distance,
    equivalent_demand,
    most_demanding,
    translate_distance,
)
from dorilens.optics.resolver import compute_dori_ranges

__all__ = [
    'angular_fov',
    'compare_configurations',
    'compute_fov',
    'compute_multiple_fov',
    'depth_of_field',
    'derive_dori_distances',
    'focal_length_from_fov',
    'ground_sample_distance',
    'hyperfocal_distance',
    'linear_coverage',
    'pixel_density',
    'dori_from_single_distance',
    'equivalent_demand',
    'most_demanding',
    'translate_distance',
    'compute_dori_ranges',
]
