# -*- coding: utf-8 -*-
"""
Constraint Range Resolver - Admissible design ranges for DORI targets.

Inverts the forward optics model.  Given one to four DORI targets and an
explicit Fixed / Free tag per design quantity, computes for every free
quantity the closed interval of values that still meets every target,
and names the target that binds.

Every target reduces to one inequality per sensor axis::

    pixel_count >= 2 * density * distance * tan(fov / 2)
    fov = 2 * atan(sensor_dim / (2 * focal_length))

which is monotonic in each quantity:

==================  ==========  =====================================
Quantity            Derived     Favorable direction
==================  ==========  =====================================
pixel_width/height  lower       more pixels raise density
focal_length_mm     lower       longer focal narrows the field of view
sensor_width/height upper       smaller sensor narrows the field of view
horizontal_fov_deg  upper       narrower field of view raises density
==================  ==========  =====================================

Each free quantity is solved with every other quantity held at its Fixed
value, or, if free or unset, at its most favorable practical limit.  The
result is the projection of the admissible region onto that quantity's
axis; the joint region of several free quantities is not computed.

Failures are collected per quantity: a degenerate or unsatisfiable
quantity does not prevent the others from resolving.

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
from typing import Dict, List, Mapping, Optional, Tuple, Union

# Third-party
import numpy as np

# DORILENS internal
from dorilens._validation import FOV_EPS_DEG, check_finite
from dorilens.config import ResolverLimits
from dorilens.exceptions import (
    DegenerateGeometryError,
    InternalError,
    InvalidInputError,
    UnsatisfiableError,
)
from dorilens.models import (
    DoriRanges,
    DoriTarget,
    ParameterAssignment,
    ParameterRange,
    TargetSet,
)
from dorilens.optics.forward import (
    angular_fov,
    focal_length_from_fov,
    linear_coverage,
)
from dorilens.optics.translator import REL_TOL, most_demanding
from dorilens.vocabulary import Axis, BoundKind, PerformanceLevel, Quantity

logger = logging.getLogger(__name__)

# Quantities whose tightest DORI bound is a minimum (favored at ceiling).
_LOWER_BOUNDED = frozenset({
    Quantity.PIXEL_WIDTH,
    Quantity.PIXEL_HEIGHT,
    Quantity.FOCAL_LENGTH_MM,
})

_HORIZONTAL_QUANTITIES = (
    Quantity.SENSOR_WIDTH_MM,
    Quantity.PIXEL_WIDTH,
    Quantity.HORIZONTAL_FOV_DEG,
)
_VERTICAL_QUANTITIES = (
    Quantity.SENSOR_HEIGHT_MM,
    Quantity.PIXEL_HEIGHT,
)

# Fixed FOV, sensor width and focal length must agree this closely.
_CONSISTENCY_RTOL = 1e-6

_Candidate = Tuple[float, PerformanceLevel]


def compute_dori_ranges(
    targets: Union[TargetSet, Mapping, List],
    assignment: ParameterAssignment,
    limits: Optional[ResolverLimits] = None,
) -> DoriRanges:
    """Admissible range of every free quantity under the DORI targets.

    Parameters
    ----------
    targets : TargetSet, Mapping or list
        One to four targets.  A mapping is read as ``{level: distance_m}``
        and a list as ``(level, distance_m)`` pairs.
    assignment : ParameterAssignment
        Explicit Fixed / Free tag per quantity; at least one Free.
    limits : ResolverLimits, optional
        Practical floors and ceilings for free and unset quantities.
        Defaults to ``ResolverLimits()``.

    Returns
    -------
    DoriRanges
        One ``ParameterRange`` or failure per free quantity and the
        overall limiting requirement.

    Raises
    ------
    InvalidInputError
        If the targets or assignment are malformed, no quantity is free,
        a free floor exceeds its ceiling, or a Fixed horizontal field of
        view contradicts a Fixed sensor width and focal length.
    """
    target_set = _coerce_targets(targets)
    if not isinstance(assignment, ParameterAssignment):
        raise InvalidInputError(
            f"assignment must be a ParameterAssignment, got "
            f"{type(assignment).__name__}"
        )
    free = assignment.free_quantities
    if not free:
        raise InvalidInputError(
            "No free quantity requested; tag at least one quantity Free()"
        )

    problem = _Problem(target_set, assignment, limits or ResolverLimits())
    _check_horizontal_consistency(assignment)
    _warn_fixed_violations(problem)

    ranges: Dict[Quantity, ParameterRange] = {}
    failures = {}
    for quantity in free:
        try:
            ranges[quantity] = _resolve(problem, quantity)
        except (DegenerateGeometryError, UnsatisfiableError, InternalError) as exc:
            logger.debug("%s failed: %s", quantity.value, exc)
            failures[quantity] = exc
        else:
            logger.debug("%s -> [%g, %g] (%s, %s)", quantity.value,
                         ranges[quantity].min, ranges[quantity].max,
                         ranges[quantity].bound.value,
                         ranges[quantity].limiting_requirement)

    # A target that binds a quantity past its limits still constrains it.
    constrained = (
        any(r.limiting_level is not None for r in ranges.values())
        or any(getattr(e, 'level', None) is not None for e in failures.values())
    )
    limiting = most_demanding(target_set) if constrained else None
    return DoriRanges(ranges=ranges, failures=failures, limiting_level=limiting)


# ------------------------------------------------------------------
# Problem setup
# ------------------------------------------------------------------

class _Problem:
    """Per-call view of the targets, tags, limits and held values."""

    __slots__ = ('targets', 'assignment', 'limits', 'held', 'axes', 'hfov')

    def __init__(
        self,
        targets: TargetSet,
        assignment: ParameterAssignment,
        limits: ResolverLimits,
    ) -> None:
        self.targets = targets
        self.assignment = assignment
        self.limits = {q: _caller_limits(q, assignment, limits) for q in Quantity}
        self.held = {q: self._held_value(q) for q in Quantity}
        self.axes = _participating_axes(assignment)
        self.hfov = assignment.fixed_value(Quantity.HORIZONTAL_FOV_DEG)

    def _held_value(self, quantity: Quantity) -> float:
        fixed = self.assignment.fixed_value(quantity)
        if fixed is not None:
            return fixed
        floor, ceiling = self.limits[quantity]
        return ceiling if quantity in _LOWER_BOUNDED else floor

    def horizontal_fov(self) -> float:
        """Horizontal field of view at the held values, degrees."""
        if self.hfov is not None:
            return self.hfov
        return angular_fov(self.held[Quantity.SENSOR_WIDTH_MM],
                           self.held[Quantity.FOCAL_LENGTH_MM])

    def vertical_fov(self) -> float:
        """Vertical field of view at the held values, degrees."""
        return angular_fov(self.held[Quantity.SENSOR_HEIGHT_MM],
                           self.held[Quantity.FOCAL_LENGTH_MM])


def _coerce_targets(targets: Union[TargetSet, Mapping, List]) -> TargetSet:
    if isinstance(targets, TargetSet):
        return targets
    if isinstance(targets, Mapping):
        return TargetSet.from_mapping(targets)
    return TargetSet(targets or [])


def _caller_limits(
    quantity: Quantity,
    assignment: ParameterAssignment,
    limits: ResolverLimits,
) -> Tuple[float, float]:
    """Practical ``(floor, ceiling)``: Free overrides, else configured."""
    floor, ceiling = limits.floor(quantity), limits.ceiling(quantity)
    tag = assignment.tag(quantity)
    if assignment.is_free(quantity):
        if tag.floor is not None:
            floor = tag.floor
        if tag.ceiling is not None:
            ceiling = tag.ceiling
    if quantity.is_pixel_count:
        floor, ceiling = float(math.ceil(floor)), float(math.floor(ceiling))
    if floor > ceiling:
        raise InvalidInputError(
            f"{quantity.value} floor {floor:g} exceeds ceiling {ceiling:g}"
        )
    return floor, ceiling


def _participating_axes(assignment: ParameterAssignment) -> Tuple[Axis, ...]:
    vertical = any(assignment.is_tagged(q) for q in _VERTICAL_QUANTITIES)
    horizontal = (
        any(assignment.is_tagged(q) for q in _HORIZONTAL_QUANTITIES)
        or not vertical
    )
    axes = []
    if horizontal:
        axes.append(Axis.HORIZONTAL)
    if vertical:
        axes.append(Axis.VERTICAL)
    return tuple(axes)


def _check_horizontal_consistency(assignment: ParameterAssignment) -> None:
    hfov = assignment.fixed_value(Quantity.HORIZONTAL_FOV_DEG)
    width = assignment.fixed_value(Quantity.SENSOR_WIDTH_MM)
    focal = assignment.fixed_value(Quantity.FOCAL_LENGTH_MM)
    if hfov is None or width is None or focal is None:
        return
    implied = angular_fov(width, focal)
    if not math.isclose(implied, hfov, rel_tol=_CONSISTENCY_RTOL):
        raise InvalidInputError(
            f"horizontal_fov_deg {hfov:g} contradicts sensor_width_mm "
            f"{width:g} and focal_length_mm {focal:g} (implies {implied:.6g})"
        )


def _warn_fixed_violations(problem: _Problem) -> None:
    """Log targets that the Fixed values alone already miss."""
    a = problem.assignment
    checks = []
    if (Axis.HORIZONTAL in problem.axes and a.is_fixed(Quantity.PIXEL_WIDTH)
            and (problem.hfov is not None
                 or (a.is_fixed(Quantity.SENSOR_WIDTH_MM)
                     and a.is_fixed(Quantity.FOCAL_LENGTH_MM)))):
        checks.append((Axis.HORIZONTAL, problem.held[Quantity.PIXEL_WIDTH],
                       problem.horizontal_fov))
    if (Axis.VERTICAL in problem.axes and a.is_fixed(Quantity.PIXEL_HEIGHT)
            and a.is_fixed(Quantity.SENSOR_HEIGHT_MM)
            and a.is_fixed(Quantity.FOCAL_LENGTH_MM)):
        checks.append((Axis.VERTICAL, problem.held[Quantity.PIXEL_HEIGHT],
                       problem.vertical_fov))

    for axis, pixels, fov_of in checks:
        try:
            fov = fov_of()
        except DegenerateGeometryError as exc:
            logger.debug("Skipping %s feasibility check: %s", axis.value, exc)
            continue
        for target in problem.targets:
            needed = target.level.density * linear_coverage(fov, target.distance_m)
            if pixels < needed and not math.isclose(pixels, needed, rel_tol=REL_TOL):
                logger.warning(
                    "Fixed %s values miss %s at %g m: %d px available, "
                    "%.1f px needed", axis.value, target.level.value,
                    target.distance_m, int(pixels), needed)


# ------------------------------------------------------------------
# Per-target bounds
# ------------------------------------------------------------------

def _max_fov(pixels: float, target: DoriTarget) -> float:
    """Widest field of view (degrees) at which ``pixels`` meet ``target``.

    ``fov <= 2 * atan(pixels / (2 * density * distance))``.
    """
    ratio = pixels / (2.0 * target.level.density * target.distance_m)
    fov = math.degrees(2.0 * math.atan(ratio))
    if not FOV_EPS_DEG < fov < 180.0 - FOV_EPS_DEG:
        raise DegenerateGeometryError(
            f"Admissible field of view for {target.level.value} at "
            f"{target.distance_m:g} m with {pixels:g} px degenerates "
            f"(tan(fov/2) = {ratio:g})"
        )
    return fov


def _target_bound(
    problem: _Problem,
    quantity: Quantity,
    target: DoriTarget,
) -> Optional[float]:
    """Bound on ``quantity`` imposed by one target, None if unconstrained."""
    held = problem.held
    horizontal = Axis.HORIZONTAL in problem.axes
    vertical = Axis.VERTICAL in problem.axes
    density = target.level.density

    if quantity is Quantity.PIXEL_WIDTH:
        if not horizontal:
            return None
        return density * linear_coverage(problem.horizontal_fov(), target.distance_m)

    if quantity is Quantity.PIXEL_HEIGHT:
        if not vertical:
            return None
        return density * linear_coverage(problem.vertical_fov(), target.distance_m)

    if quantity is Quantity.FOCAL_LENGTH_MM:
        bounds = []
        # With a fixed horizontal FOV the focal length cancels horizontally.
        if horizontal and problem.hfov is None:
            fov = _max_fov(held[Quantity.PIXEL_WIDTH], target)
            bounds.append(focal_length_from_fov(held[Quantity.SENSOR_WIDTH_MM], fov))
        if vertical:
            fov = _max_fov(held[Quantity.PIXEL_HEIGHT], target)
            bounds.append(focal_length_from_fov(held[Quantity.SENSOR_HEIGHT_MM], fov))
        return max(bounds) if bounds else None

    if quantity is Quantity.SENSOR_WIDTH_MM:
        if not horizontal or problem.hfov is not None:
            return None
        fov = _max_fov(held[Quantity.PIXEL_WIDTH], target)
        return linear_coverage(fov, held[Quantity.FOCAL_LENGTH_MM])

    if quantity is Quantity.SENSOR_HEIGHT_MM:
        if not vertical:
            return None
        fov = _max_fov(held[Quantity.PIXEL_HEIGHT], target)
        return linear_coverage(fov, held[Quantity.FOCAL_LENGTH_MM])

    # Horizontal FOV treated as directly free.
    if not horizontal:
        return None
    return _max_fov(held[Quantity.PIXEL_WIDTH], target)


def _tightest(
    candidates: List[_Candidate],
    lower: bool,
) -> Tuple[Optional[float], Optional[PerformanceLevel]]:
    """Most restrictive bound and its level.

    Bounds equal within ``REL_TOL`` keep the level earliest in canonical
    order.
    """
    best_value: Optional[float] = None
    best_level: Optional[PerformanceLevel] = None
    for value, level in sorted(candidates, key=lambda c: c[1].rank):
        if best_value is None:
            best_value, best_level = value, level
            continue
        tighter = value > best_value if lower else value < best_value
        if tighter and not np.isclose(value, best_value, rtol=REL_TOL, atol=0.0):
            best_value, best_level = value, level
    return best_value, best_level


def _tightest_for(
    problem: _Problem,
    quantity: Quantity,
) -> Tuple[Optional[float], Optional[PerformanceLevel]]:
    candidates = []
    for target in problem.targets:
        bound = _target_bound(problem, quantity, target)
        if bound is not None:
            check_finite(bound, f"{quantity.value} bound")
            candidates.append((bound, target.level))
    return _tightest(candidates, quantity in _LOWER_BOUNDED)


# ------------------------------------------------------------------
# Range assembly
# ------------------------------------------------------------------

def _ceil_count(value: float) -> float:
    """Smallest whole pixel count >= ``value``, tolerant of rounding."""
    n = math.floor(value)
    if math.isclose(value, n, rel_tol=REL_TOL):
        return float(max(n, 1))
    return float(n + 1)


def _unsatisfiable(
    quantity: Quantity,
    derived: float,
    floor: float,
    ceiling: float,
    level: Optional[PerformanceLevel],
) -> UnsatisfiableError:
    by = f" by {level.value}" if level is not None else ""
    return UnsatisfiableError(
        f"{quantity.value}: value {derived:g} required{by} lies outside the "
        f"admissible limits [{floor:g}, {ceiling:g}]",
        level=level,
    )


def _resolve(problem: _Problem, quantity: Quantity) -> ParameterRange:
    floor, ceiling = problem.limits[quantity]
    value, level = _tightest_for(problem, quantity)

    if problem.hfov is not None and quantity in (
            Quantity.FOCAL_LENGTH_MM, Quantity.SENSOR_WIDTH_MM):
        return _coupled_range(problem, quantity, value, level)

    if value is None:
        return ParameterRange(quantity, floor, ceiling, BoundKind.NONE)

    if quantity in _LOWER_BOUNDED:
        derived = _ceil_count(value) if quantity.is_pixel_count else value
        if math.isclose(derived, ceiling, rel_tol=REL_TOL):
            derived = ceiling
        if derived > ceiling:
            raise _unsatisfiable(quantity, derived, floor, ceiling, level)
        return ParameterRange(quantity, max(derived, floor), ceiling,
                              BoundKind.LOWER, level)

    if math.isclose(value, floor, rel_tol=REL_TOL):
        value = floor
    if value < floor:
        raise _unsatisfiable(quantity, value, floor, ceiling, level)
    return ParameterRange(quantity, floor, min(value, ceiling),
                          BoundKind.UPPER, level)


def _coupled_range(
    problem: _Problem,
    quantity: Quantity,
    value: Optional[float],
    level: Optional[PerformanceLevel],
) -> ParameterRange:
    """Range of focal length or sensor width under a fixed horizontal FOV.

    ``sensor_width = 2 * focal_length * tan(hfov / 2)`` ties the two, so
    each one's range is the image of its partner's admissible range.
    Only the vertical axis can still bound the focal length from below.
    """
    hfov = problem.hfov
    a = problem.assignment
    f_floor, f_ceiling = problem.limits[Quantity.FOCAL_LENGTH_MM]
    w_floor, w_ceiling = problem.limits[Quantity.SENSOR_WIDTH_MM]

    if quantity is Quantity.FOCAL_LENGTH_MM:
        focal_min = f_floor if value is None else max(f_floor, value)
        width = a.fixed_value(Quantity.SENSOR_WIDTH_MM)
        if width is not None:
            exact = focal_length_from_fov(width, hfov)
            return _exact_range(quantity, exact, focal_min, f_ceiling, level)
        lo = max(focal_min, focal_length_from_fov(w_floor, hfov))
        hi = min(f_ceiling, focal_length_from_fov(w_ceiling, hfov))
        return _bounded_range(quantity, lo, hi, level)

    # Sensor width: image of the focal length's admissible range.
    focal = a.fixed_value(Quantity.FOCAL_LENGTH_MM)
    if focal is not None:
        exact = linear_coverage(hfov, focal)
        return _exact_range(quantity, exact, w_floor, w_ceiling, None)
    focal_bound, focal_level = _tightest_for(problem, Quantity.FOCAL_LENGTH_MM)
    focal_min = f_floor if focal_bound is None else max(f_floor, focal_bound)
    lo = max(w_floor, linear_coverage(hfov, focal_min))
    hi = min(w_ceiling, linear_coverage(hfov, f_ceiling))
    return _bounded_range(quantity, lo, hi, focal_level)


def _exact_range(
    quantity: Quantity,
    exact: float,
    floor: float,
    ceiling: float,
    level: Optional[PerformanceLevel],
) -> ParameterRange:
    within = (
        (exact >= floor or math.isclose(exact, floor, rel_tol=REL_TOL))
        and (exact <= ceiling or math.isclose(exact, ceiling, rel_tol=REL_TOL))
    )
    if not within:
        raise _unsatisfiable(quantity, exact, floor, ceiling, level)
    return ParameterRange(quantity, exact, exact, BoundKind.EXACT, level)


def _bounded_range(
    quantity: Quantity,
    lo: float,
    hi: float,
    level: Optional[PerformanceLevel],
) -> ParameterRange:
    if math.isclose(lo, hi, rel_tol=REL_TOL):
        lo = hi
    if lo > hi:
        raise UnsatisfiableError(
            f"{quantity.value}: the fixed horizontal field of view leaves "
            f"no value between {lo:g} and {hi:g}",
            level=level,
        )
    return ParameterRange(quantity, lo, hi, BoundKind.COUPLED, level)
