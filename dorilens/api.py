# -*- coding: utf-8 -*-
"""
DORILENS API - Request/response entry points with plain-dict payloads.

Thin adapters between callers that speak JSON-like mappings (the CLI, a
GUI shell, a web handler) and the typed optics core.  Every function
accepts either the typed objects of ``dorilens.models`` or equivalent
plain mappings, and returns ``dict`` / ``float`` payloads.  Level names
are case-insensitive.

All operations are idempotent and raise ``DoriLensError`` subclasses.

Examples
--------
>>> from dorilens import api
>>> payload = api.compute_dori_ranges(
...     {'identification': 50.0},
...     {'fixed': {'pixel_width': 1920, 'sensor_width_mm': 6.4},
...      'free': ['focal_length_mm']},
... )
>>> round(payload['focal_length_mm']['min'], 3)
41.667

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
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

# DORILENS internal
from dorilens.config import DEFAULT_COC_MM, ResolverLimits
from dorilens.exceptions import InvalidInputError
from dorilens.models import (
    OpticalConfiguration,
    ParameterAssignment,
    TargetSet,
)
from dorilens.optics import forward, resolver, translator
from dorilens.vocabulary import CANONICAL_ORDER, PerformanceLevel

logger = logging.getLogger(__name__)

ConfigurationLike = Union[OpticalConfiguration, Mapping[str, Any]]
_ASSIGNMENT_KEYS = frozenset({'fixed', 'free'})


# ------------------------------------------------------------------
# Coercion
# ------------------------------------------------------------------

def _configuration(value: ConfigurationLike) -> OpticalConfiguration:
    if isinstance(value, OpticalConfiguration):
        return value
    if isinstance(value, Mapping):
        return OpticalConfiguration.from_mapping(value)
    raise InvalidInputError(
        f"Expected an optical configuration or mapping, got "
        f"{type(value).__name__}"
    )


def _assignment(value: Union[ParameterAssignment, Mapping]) -> ParameterAssignment:
    """Accept a ParameterAssignment, ``{'fixed': ..., 'free': ...}`` or tags."""
    if isinstance(value, ParameterAssignment):
        return value
    if not isinstance(value, Mapping):
        raise InvalidInputError(
            f"Expected a parameter assignment or mapping, got "
            f"{type(value).__name__}"
        )
    if value and set(value) <= _ASSIGNMENT_KEYS:
        return ParameterAssignment.from_mapping(value.get('fixed'), value.get('free'))
    return ParameterAssignment(value)


def _limits(value: Optional[Union[ResolverLimits, Mapping]]) -> ResolverLimits:
    if value is None:
        return ResolverLimits()
    if isinstance(value, ResolverLimits):
        return value
    return ResolverLimits(value)


# ------------------------------------------------------------------
# Forward model
# ------------------------------------------------------------------

def compute_fov(configuration: ConfigurationLike, distance_mm: float) -> Dict[str, Any]:
    """Field of view, coverage, density, GSD and DORI distances.

    Parameters
    ----------
    configuration : OpticalConfiguration or Mapping
    distance_mm : float
        Working distance in millimeters.

    Returns
    -------
    Dict[str, Any]
        ``horizontal_fov_deg``, ``vertical_fov_deg``,
        ``horizontal_coverage_m``, ``vertical_coverage_m``,
        ``horizontal_density``, ``vertical_density``,
        ``ground_sample_distance`` (mm/px), ``distance_m`` and ``dori``.
    """
    return forward.compute_fov(_configuration(configuration), distance_mm).to_dict()


def compare_configurations(
    configurations: Sequence[ConfigurationLike],
    distance_mm: float,
) -> List[Dict[str, Any]]:
    """``compute_fov`` for several configurations, paired with each one."""
    configs = [_configuration(c) for c in configurations]
    return [
        {'camera': camera.to_dict(), 'result': result.to_dict()}
        for camera, result in forward.compare_configurations(configs, distance_mm)
    ]


def compute_focal_length_from_fov(sensor_dimension_mm: float, fov_deg: float) -> float:
    """Focal length in mm giving ``fov_deg`` over ``sensor_dimension_mm``."""
    return float(forward.focal_length_from_fov(sensor_dimension_mm, fov_deg))


def compute_hyperfocal_distance(
    focal_length_mm: float,
    f_number: float,
    coc_mm: float = DEFAULT_COC_MM,
) -> float:
    """Hyperfocal distance in millimeters."""
    return forward.hyperfocal_distance(focal_length_mm, f_number, coc_mm)


def compute_depth_of_field(
    object_distance_mm: float,
    focal_length_mm: float,
    f_number: float,
    coc_mm: float = DEFAULT_COC_MM,
) -> Dict[str, float]:
    """Near limit, far limit and total depth of field in millimeters."""
    return forward.depth_of_field(
        object_distance_mm, focal_length_mm, f_number, coc_mm).to_dict()


def validate_configuration(configuration: ConfigurationLike) -> List[Dict[str, str]]:
    """Plausibility findings for a configuration, empty if none."""
    return [w.to_dict() for w in _configuration(configuration).validate()]


# ------------------------------------------------------------------
# DORI
# ------------------------------------------------------------------

def compute_dori_ranges(
    targets: Union[TargetSet, Mapping, Sequence],
    constraints: Union[ParameterAssignment, Mapping],
    limits: Optional[Union[ResolverLimits, Mapping]] = None,
) -> Dict[str, Any]:
    """Admissible range of every Free quantity under the DORI targets.

    Parameters
    ----------
    targets : TargetSet, Mapping or Sequence
        ``{level: distance_m}`` (an ``_m`` suffix on the key and ``None``
        values are accepted) or ``(level, distance_m)`` pairs.
    constraints : ParameterAssignment or Mapping
        Either ``{'fixed': {name: value}, 'free': [name, ...]}`` or
        ``{name: Fixed(...) | Free(...)}``.
    limits : ResolverLimits or Mapping, optional
        Practical limits, or ``{name: (floor, ceiling)}`` overrides.

    Returns
    -------
    Dict[str, Any]
        One ``{'min', 'max', 'bound', 'limiting_requirement'}`` entry per
        resolved Free quantity, a ``failures`` mapping of
        ``{'kind', 'message'}`` and the overall ``limiting_requirement``.
    """
    result = resolver.compute_dori_ranges(
        targets, _assignment(constraints), _limits(limits))
    return result.to_dict()


def compute_dori_from_single_distance(
    distance_m: float,
    originating_level: Union[PerformanceLevel, str],
    configuration: Optional[ConfigurationLike] = None,
) -> Dict[str, float]:
    """The other three DORI distances implied by one known distance.

    Parameters
    ----------
    distance_m : float
        Known distance in meters for ``originating_level``.
    originating_level : PerformanceLevel or str
    configuration : OpticalConfiguration or Mapping, optional
        Reference configuration.  When given, its plausibility findings
        are logged and the horizontal scene coverage at each translated
        distance is added as ``<level>_coverage_m``.

    Returns
    -------
    Dict[str, float]
        ``<level>_m`` for the three levels other than the originating one.

    Raises
    ------
    InvalidInputError
        If the distance, level or configuration values are invalid.
    """
    source = PerformanceLevel.parse(originating_level)
    distances = translator.dori_from_single_distance(distance_m, source)
    payload: Dict[str, float] = {
        f"{level.value}_m": d for level, d in distances.items() if level is not source
    }
    if configuration is None:
        return payload

    config = _configuration(configuration)
    for finding in config.validate():
        logger.warning("%s (%s): %s", config.name or "configuration",
                       finding.severity.value, finding.message)

    hfov = forward.angular_fov(config.sensor_width_mm, config.focal_length_mm)
    for level in CANONICAL_ORDER:
        if level is source:
            continue
        payload[f"{level.value}_coverage_m"] = forward.linear_coverage(
            hfov, distances.distance(level))
    return payload
