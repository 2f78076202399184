# -*- coding: utf-8 -*-
"""
DORILENS - DORI surveillance optics calculator.

Forward pinhole optics (field of view, coverage, pixel density, ground
sample distance, depth of field), exact translation between DORI
(Detection, Observation, Recognition, Identification) distances, and
inversion of DORI targets into admissible camera design ranges.

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

__version__ = "0.1.0"
__author__ = "Duane Smalley"

from dorilens.exceptions import (
    DoriLensError,
    InvalidInputError,
    DegenerateGeometryError,
    UnsatisfiableError,
    InternalError,
    ConfigurationError,
)
from dorilens.vocabulary import (
    PerformanceLevel,
    Axis,
    Quantity,
    BoundKind,
    DORI_DENSITY_PX_PER_M,
    CANONICAL_ORDER,
)
from dorilens.models import (
    OpticalConfiguration,
    DoriDistances,
    FovResult,
    DepthOfField,
    DoriTarget,
    TargetSet,
    Fixed,
    Free,
    ParameterAssignment,
    ParameterRange,
    DoriRanges,
)
from dorilens.config import ResolverLimits, load_limits
from dorilens.optics import (
    compute_fov,
    derive_dori_distances,
    focal_length_from_fov,
    translate_distance,
    dori_from_single_distance,
    compute_dori_ranges,
)

__all__ = [
    'DoriLensError',
    'InvalidInputError',
    'DegenerateGeometryError',
    'UnsatisfiableError',
    'InternalError',
    'ConfigurationError',
    'PerformanceLevel',
    'Axis',
    'Quantity',
    'BoundKind',
    'DORI_DENSITY_PX_PER_M',
    'CANONICAL_ORDER',
    'OpticalConfiguration',
    'DoriDistances',
    'FovResult',
    'DepthOfField',
    'DoriTarget',
    'TargetSet',
    'Fixed',
    'Free',
    'ParameterAssignment',
    'ParameterRange',
    'DoriRanges',
    'ResolverLimits',
    'load_limits',
    'compute_fov',
    'derive_dori_distances',
    'focal_length_from_fov',
    'translate_distance',
    'dori_from_single_distance',
    'compute_dori_ranges',
]
