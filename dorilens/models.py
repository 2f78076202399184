# -*- coding: utf-8 -*-
"""
Data Models - Typed inputs and results for the DORILENS optics model.

Provides the value types exchanged by the forward model, the DORI
translator and the constraint range resolver:

- ``OpticalConfiguration``: an ideal pinhole camera over a flat
  rectangular sensor.
- ``FovResult``, ``DoriDistances``, ``DepthOfField``: forward model
  outputs.
- ``DoriTarget``, ``TargetSet``: requested performance targets.
- ``Fixed``, ``Free``, ``ParameterAssignment``: explicit per-quantity
  tags for the resolver.
- ``ParameterRange``, ``DoriRanges``: resolver outputs.

Every instance is built fresh per call and is immutable; nothing here
caches state between calls.

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
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import (
    Any,
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Tuple,
    Union,
)

# DORILENS internal
from dorilens._validation import (
    validate_fov,
    validate_pixel_count,
    validate_positive,
)
from dorilens.exceptions import DoriLensError, InvalidInputError
from dorilens.vocabulary import (
    CANONICAL_ORDER,
    NO_LIMIT,
    Axis,
    BoundKind,
    PerformanceLevel,
    Quantity,
)


# ===================================================================
# Validation warnings
# ===================================================================

class Severity(Enum):
    """Severity of a plausibility warning."""

    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class ValidationWarning:
    """A plausibility finding about a configuration or result.

    Warnings never block computation; they flag values outside the
    range of real surveillance hardware.
    """

    message: str
    severity: Severity

    def to_dict(self) -> Dict[str, str]:
        return {'message': self.message, 'severity': self.severity.value}


# ===================================================================
# Optical configuration
# ===================================================================

@dataclass(frozen=True)
class OpticalConfiguration:
    """Ideal pinhole camera over a flat rectangular sensor.

    Parameters
    ----------
    sensor_width_mm : float
        Horizontal sensor dimension in millimeters.
    sensor_height_mm : float
        Vertical sensor dimension in millimeters.
    pixel_width : int
        Horizontal pixel count.
    pixel_height : int
        Vertical pixel count.
    focal_length_mm : float
        Lens focal length in millimeters.
    name : str, optional
        Label for display and comparison tables.

    Raises
    ------
    InvalidInputError
        If any dimension is non-finite or <= 0, or a pixel count is not a
        positive whole number.
    """

    sensor_width_mm: float
    sensor_height_mm: float
    pixel_width: int
    pixel_height: int
    focal_length_mm: float
    name: Optional[str] = None

    def __post_init__(self) -> None:
        for attr in ('sensor_width_mm', 'sensor_height_mm', 'focal_length_mm'):
            value = validate_positive(getattr(self, attr), attr)
            object.__setattr__(self, attr, float(value))
        for attr in ('pixel_width', 'pixel_height'):
            value = validate_pixel_count(getattr(self, attr), attr)
            object.__setattr__(self, attr, int(value))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> 'OpticalConfiguration':
        """Build a configuration from a plain mapping.

        Raises
        ------
        InvalidInputError
            If a required key is missing or a value is invalid.
        """
        if isinstance(data, cls):
            return data
        missing = [
            key for key in (
                'sensor_width_mm', 'sensor_height_mm', 'pixel_width',
                'pixel_height', 'focal_length_mm',
            )
            if data.get(key) is None
        ]
        if missing:
            raise InvalidInputError(
                f"Optical configuration is missing {', '.join(missing)}"
            )
        return cls(
            sensor_width_mm=data['sensor_width_mm'],
            sensor_height_mm=data['sensor_height_mm'],
            pixel_width=data['pixel_width'],
            pixel_height=data['pixel_height'],
            focal_length_mm=data['focal_length_mm'],
            name=data.get('name'),
        )

    def sensor_dimension(self, axis: Axis) -> float:
        """Sensor extent in millimeters along ``axis``."""
        if axis is Axis.HORIZONTAL:
            return self.sensor_width_mm
        return self.sensor_height_mm

    def pixel_count(self, axis: Axis) -> int:
        """Pixel count along ``axis``."""
        if axis is Axis.HORIZONTAL:
            return self.pixel_width
        return self.pixel_height

    def pixel_pitch_um(self) -> Tuple[float, float]:
        """Pixel pitch ``(horizontal, vertical)`` in micrometers."""
        return (
            self.sensor_width_mm * 1000.0 / self.pixel_width,
            self.sensor_height_mm * 1000.0 / self.pixel_height,
        )

    def aspect_ratio(self) -> Tuple[float, float]:
        """Aspect ratios ``(sensor, pixel grid)`` as width / height."""
        return (
            self.sensor_width_mm / self.sensor_height_mm,
            self.pixel_width / self.pixel_height,
        )

    def validate(self) -> List[ValidationWarning]:
        """Check the configuration against typical hardware ranges.

        Sensor dimensions are expected in 1-100 mm, focal length in
        1-2000 mm, pixel counts in 100-50000 and pixel pitch in
        0.5-20 um.  Sensor and pixel-grid aspect ratios must agree within
        5 %, and pixels should be square within 5 %.

        Returns
        -------
        List[ValidationWarning]
            Empty if the configuration is plausible.
        """
        warnings: List[ValidationWarning] = []
        err, warn = Severity.ERROR, Severity.WARNING

        for label, value in (('Sensor width', self.sensor_width_mm),
                             ('Sensor height', self.sensor_height_mm)):
            if value < 1.0:
                warnings.append(ValidationWarning(
                    f"{label} ({value:.2f} mm) is unrealistically small", err))
            if value > 100.0:
                warnings.append(ValidationWarning(
                    f"{label} ({value:.2f} mm) is unrealistically large", warn))

        if self.focal_length_mm < 1.0:
            warnings.append(ValidationWarning(
                f"Focal length ({self.focal_length_mm:.2f} mm) is "
                f"unrealistically short", err))
        if self.focal_length_mm > 2000.0:
            warnings.append(ValidationWarning(
                f"Focal length ({self.focal_length_mm:.0f} mm) is "
                f"extremely long", warn))

        for label, value in (('Pixel width', self.pixel_width),
                             ('Pixel height', self.pixel_height)):
            if value < 100:
                warnings.append(ValidationWarning(
                    f"{label} ({value} px) is unrealistically low", err))
            if value > 50000:
                warnings.append(ValidationWarning(
                    f"{label} ({value} px) is unrealistically high", warn))

        h_pitch, v_pitch = self.pixel_pitch_um()
        for label, pitch in (('Horizontal', h_pitch), ('Vertical', v_pitch)):
            if pitch < 0.5:
                warnings.append(ValidationWarning(
                    f"{label} pixel pitch ({pitch:.2f} um) is "
                    f"unrealistically small", err))
            if pitch > 20.0:
                warnings.append(ValidationWarning(
                    f"{label} pixel pitch ({pitch:.2f} um) is "
                    f"unusually large", warn))

        sensor_aspect, pixel_aspect = self.aspect_ratio()
        aspect_diff = abs(sensor_aspect - pixel_aspect) / sensor_aspect
        if aspect_diff > 0.05:
            warnings.append(ValidationWarning(
                f"Sensor aspect ratio ({sensor_aspect:.3f}:1) doesn't match "
                f"pixel aspect ratio ({pixel_aspect:.3f}:1) - difference: "
                f"{aspect_diff * 100.0:.1f}%", err))

        pitch_diff = abs(h_pitch - v_pitch) / h_pitch * 100.0
        if pitch_diff > 5.0:
            warnings.append(ValidationWarning(
                f"Pixels are not square: horizontal pitch ({h_pitch:.2f} um) "
                f"differs from vertical pitch ({v_pitch:.2f} um) by "
                f"{pitch_diff:.1f}%", warn))

        return warnings

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            'sensor_width_mm': self.sensor_width_mm,
            'sensor_height_mm': self.sensor_height_mm,
            'pixel_width': self.pixel_width,
            'pixel_height': self.pixel_height,
            'focal_length_mm': self.focal_length_mm,
        }
        if self.name is not None:
            data['name'] = self.name
        return data

    def __str__(self) -> str:
        h_pitch, v_pitch = self.pixel_pitch_um()
        return (
            f"{self.name or 'Unnamed'}: {self.sensor_width_mm:g}x"
            f"{self.sensor_height_mm:g} mm sensor, {self.pixel_width}x"
            f"{self.pixel_height} px ({h_pitch:.2f}x{v_pitch:.2f} um), "
            f"{self.focal_length_mm:g} mm lens"
        )


# ===================================================================
# Forward model results
# ===================================================================

@dataclass(frozen=True)
class DoriDistances:
    """Maximum distance in meters at which each DORI level is met."""

    detection_m: float
    observation_m: float
    recognition_m: float
    identification_m: float

    def distance(self, level: Union[PerformanceLevel, str]) -> float:
        """Distance for one level."""
        level = PerformanceLevel.parse(level)
        return getattr(self, f"{level.value}_m")

    def items(self) -> Iterator[Tuple[PerformanceLevel, float]]:
        """Iterate ``(level, distance_m)`` in canonical order."""
        for level in CANONICAL_ORDER:
            yield level, self.distance(level)

    def to_dict(self) -> Dict[str, float]:
        return {f"{level.value}_m": d for level, d in self.items()}


@dataclass(frozen=True)
class FovResult:
    """Field of view and sampling of a configuration at one distance.

    Attributes
    ----------
    horizontal_fov_deg, vertical_fov_deg : float
        Angular field of view in degrees.
    horizontal_coverage_m, vertical_coverage_m : float
        Linear scene extent at ``distance_m``.
    horizontal_density, vertical_density : float
        Pixels per meter of scene at ``distance_m``.
    ground_sample_distance_mm : float
        Scene size of one horizontal pixel in millimeters.
    distance_m : float
        Working distance in meters.
    dori : DoriDistances, optional
        Horizontal DORI distances of the configuration.
    """

    horizontal_fov_deg: float
    vertical_fov_deg: float
    horizontal_coverage_m: float
    vertical_coverage_m: float
    horizontal_density: float
    vertical_density: float
    ground_sample_distance_mm: float
    distance_m: float
    dori: Optional[DoriDistances] = None

    def validate(self) -> List[ValidationWarning]:
        """Check the result for physically implausible values."""
        warnings: List[ValidationWarning] = []
        err, warn = Severity.ERROR, Severity.WARNING

        for label, fov in (('Horizontal', self.horizontal_fov_deg),
                           ('Vertical', self.vertical_fov_deg)):
            if fov > 180.0:
                warnings.append(ValidationWarning(
                    f"{label} FOV ({fov:.1f} deg) exceeds 180 deg - "
                    f"physically impossible", err))
            if fov < 0.1:
                warnings.append(ValidationWarning(
                    f"{label} FOV ({fov:.2f} deg) is extremely narrow - "
                    f"may be unrealistic", warn))

        h, v = self.horizontal_density, self.vertical_density
        if h > 100000.0 or v > 100000.0:
            warnings.append(ValidationWarning(
                f"Pixels per meter ({h:.1f} x {v:.1f} px/m) is "
                f"unrealistically high", warn))
        if h < 0.001 or v < 0.001:
            warnings.append(ValidationWarning(
                f"Pixels per meter ({h:.6f} x {v:.6f} px/m) is "
                f"unrealistically low", warn))

        if self.dori is not None:
            if not 0.1 <= self.dori.detection_m <= 10000.0:
                warnings.append(ValidationWarning(
                    f"Detection distance ({self.dori.detection_m:.0f} m) "
                    f"seems unrealistic", warn))
            ordered = [d for _, d in self.dori.items()]
            names = [level.value.capitalize() for level in CANONICAL_ORDER]
            for i in range(len(ordered) - 1):
                if ordered[i] < ordered[i + 1]:
                    warnings.append(ValidationWarning(
                        f"{names[i]} distance should be greater than "
                        f"{names[i + 1]} distance", err))

        return warnings

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            'horizontal_fov_deg': self.horizontal_fov_deg,
            'vertical_fov_deg': self.vertical_fov_deg,
            'horizontal_coverage_m': self.horizontal_coverage_m,
            'vertical_coverage_m': self.vertical_coverage_m,
            'horizontal_density': self.horizontal_density,
            'vertical_density': self.vertical_density,
            'ground_sample_distance': self.ground_sample_distance_mm,
            'distance_m': self.distance_m,
        }
        if self.dori is not None:
            data['dori'] = self.dori.to_dict()
        return data

    def __str__(self) -> str:
        return (
            f"FOV: {self.horizontal_fov_deg:.2f} x {self.vertical_fov_deg:.2f} deg "
            f"({self.horizontal_coverage_m:.3f} x {self.vertical_coverage_m:.3f} m "
            f"@ {self.distance_m:.2f} m)\n"
            f"Resolution: {self.horizontal_density:.1f} x "
            f"{self.vertical_density:.1f} px/m, "
            f"GSD {self.ground_sample_distance_mm:.3f} mm/px"
        )


@dataclass(frozen=True)
class DepthOfField:
    """Thin-lens depth of field limits in millimeters.

    ``far_mm`` and ``total_mm`` are ``inf`` when focused at or beyond the
    hyperfocal distance.
    """

    near_mm: float
    far_mm: float
    total_mm: float

    def to_dict(self) -> Dict[str, float]:
        return {
            'near_mm': self.near_mm,
            'far_mm': self.far_mm,
            'total_dof_mm': self.total_mm,
        }


# ===================================================================
# Targets
# ===================================================================

@dataclass(frozen=True)
class DoriTarget:
    """One requested performance level at one distance.

    Parameters
    ----------
    level : PerformanceLevel or str
        DORI level (name is case-insensitive).
    distance_m : float
        Subject distance in meters; finite and > 0.
    """

    level: PerformanceLevel
    distance_m: float

    def __post_init__(self) -> None:
        object.__setattr__(self, 'level', PerformanceLevel.parse(self.level))
        object.__setattr__(
            self, 'distance_m',
            float(validate_positive(self.distance_m, 'distance_m')),
        )


class TargetSet:
    """One to four DORI targets, at most one per level.

    Targets are kept in canonical level order regardless of input order.

    Parameters
    ----------
    targets : Iterable
        ``DoriTarget`` instances or ``(level, distance_m)`` pairs.

    Raises
    ------
    InvalidInputError
        If empty, longer than four, or a level repeats.
    """

    MAX_TARGETS = len(CANONICAL_ORDER)

    __slots__ = ('_targets',)

    def __init__(
        self,
        targets: Iterable[Union[DoriTarget, Tuple[Union[PerformanceLevel, str], float]]],
    ) -> None:
        parsed = [
            t if isinstance(t, DoriTarget)
            else DoriTarget(*_pair(t, "DORI target", "(level, distance_m)"))
            for t in targets
        ]
        if not parsed:
            raise InvalidInputError("At least one DORI target must be specified")
        if len(parsed) > self.MAX_TARGETS:
            raise InvalidInputError(
                f"At most {self.MAX_TARGETS} DORI targets may be specified, "
                f"got {len(parsed)}"
            )
        levels = [t.level for t in parsed]
        if len(set(levels)) != len(levels):
            raise InvalidInputError(
                f"Each DORI level may be targeted once, got "
                f"{[lv.value for lv in levels]}"
            )
        self._targets = tuple(sorted(parsed, key=lambda t: t.level.rank))

    @classmethod
    def from_mapping(
        cls, data: Mapping[Union[PerformanceLevel, str], Optional[float]]
    ) -> 'TargetSet':
        """Build from ``{level: distance_m}``.

        Keys may carry an ``_m`` suffix (``'identification_m'``) and
        ``None`` values are skipped.
        """
        pairs = []
        for key, distance in data.items():
            if distance is None:
                continue
            if isinstance(key, str) and key.lower().endswith('_m'):
                key = key[:-2]
            pairs.append((key, distance))
        return cls(pairs)

    @property
    def levels(self) -> Tuple[PerformanceLevel, ...]:
        return tuple(t.level for t in self._targets)

    def __iter__(self) -> Iterator[DoriTarget]:
        return iter(self._targets)

    def __len__(self) -> int:
        return len(self._targets)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TargetSet):
            return NotImplemented
        return self._targets == other._targets

    def __repr__(self) -> str:
        inner = ', '.join(f"{t.level.value}={t.distance_m:g} m" for t in self._targets)
        return f"TargetSet({inner})"


# ===================================================================
# Parameter tags
# ===================================================================

@dataclass(frozen=True)
class Fixed:
    """Tag holding a quantity at an exact value."""

    value: float


@dataclass(frozen=True)
class Free:
    """Tag requesting an admissible range for a quantity.

    Parameters
    ----------
    floor : float, optional
        Caller-supplied practical minimum.  Defaults to the resolver
        limits.
    ceiling : float, optional
        Caller-supplied practical maximum.  Defaults to the resolver
        limits.

    Notes
    -----
    A caller range is intersected with the derived DORI bound; it is
    never collapsed to its midpoint.
    """

    floor: Optional[float] = None
    ceiling: Optional[float] = None

    def __post_init__(self) -> None:
        for attr in ('floor', 'ceiling'):
            value = getattr(self, attr)
            if value is not None:
                object.__setattr__(
                    self, attr, float(validate_positive(value, attr)))
        if (self.floor is not None and self.ceiling is not None
                and self.floor > self.ceiling):
            raise InvalidInputError(
                f"Free floor {self.floor} exceeds ceiling {self.ceiling}"
            )


Tag = Union[Fixed, Free]


class ParameterAssignment:
    """Explicit Fixed / Free tag for each tunable quantity.

    Quantities that are not tagged are *unset*: they are never reported
    and, when another quantity's bound depends on them, they are held at
    their most favorable practical limit.

    Parameters
    ----------
    tags : Mapping, optional
        ``{quantity: Fixed(...) | Free(...)}``; keys may be ``Quantity``
        members or their names.
    **kwargs
        Same tags keyed by quantity name, e.g.
        ``ParameterAssignment(pixel_width=Fixed(1920))``.

    Raises
    ------
    InvalidInputError
        If a tag is of the wrong type or a Fixed value is non-physical.
    DegenerateGeometryError
        If a Fixed ``horizontal_fov_deg`` is 180 degrees or more.
    """

    __slots__ = ('_tags',)

    def __init__(
        self,
        tags: Optional[Mapping[Union[Quantity, str], Tag]] = None,
        **kwargs: Tag,
    ) -> None:
        merged: Dict[Quantity, Tag] = {}
        for key, tag in list((tags or {}).items()) + list(kwargs.items()):
            quantity = Quantity.parse(key)
            if not isinstance(tag, (Fixed, Free)):
                raise InvalidInputError(
                    f"{quantity.value} must be tagged Fixed(value) or Free(), "
                    f"got {tag!r}"
                )
            if isinstance(tag, Fixed):
                tag = Fixed(_validate_fixed(quantity, tag.value))
            merged[quantity] = tag
        self._tags = {q: merged[q] for q in Quantity if q in merged}

    @classmethod
    def from_mapping(
        cls,
        fixed: Optional[Mapping[Union[Quantity, str], float]] = None,
        free: Optional[Union[Iterable[Union[Quantity, str]],
                             Mapping[Union[Quantity, str], Any]]] = None,
    ) -> 'ParameterAssignment':
        """Build from plain ``fixed`` values and ``free`` names.

        ``free`` may be an iterable of names or a mapping of name to
        ``None``, ``(floor, ceiling)`` or ``{'floor': ..., 'ceiling': ...}``.
        """
        tags: Dict[Union[Quantity, str], Tag] = {}
        for key, value in (fixed or {}).items():
            tags[key] = Fixed(value)
        if isinstance(free, Mapping):
            items = free.items()
        else:
            items = ((key, None) for key in (free or ()))
        for key, entry in items:
            if entry is None:
                tags[key] = Free()
            elif isinstance(entry, Mapping):
                tags[key] = Free(entry.get('floor'), entry.get('ceiling'))
            else:
                floor, ceiling = _pair(entry, f"Free range for {key}",
                                       "(floor, ceiling)")
                tags[key] = Free(floor, ceiling)
        return cls(tags)

    def tag(self, quantity: Quantity) -> Optional[Tag]:
        """Tag of ``quantity``, or None if unset."""
        return self._tags.get(quantity)

    def is_fixed(self, quantity: Quantity) -> bool:
        return isinstance(self._tags.get(quantity), Fixed)

    def is_free(self, quantity: Quantity) -> bool:
        return isinstance(self._tags.get(quantity), Free)

    def is_tagged(self, quantity: Quantity) -> bool:
        return quantity in self._tags

    def fixed_value(self, quantity: Quantity) -> Optional[float]:
        """Fixed value of ``quantity``, or None if not Fixed."""
        tag = self._tags.get(quantity)
        return tag.value if isinstance(tag, Fixed) else None

    @property
    def free_quantities(self) -> Tuple[Quantity, ...]:
        """Free quantities in declaration order of ``Quantity``."""
        return tuple(q for q, t in self._tags.items() if isinstance(t, Free))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParameterAssignment):
            return NotImplemented
        return self._tags == other._tags

    def __repr__(self) -> str:
        inner = ', '.join(f"{q.value}={t!r}" for q, t in self._tags.items())
        return f"ParameterAssignment({inner})"


def _validate_fixed(quantity: Quantity, value: Any) -> float:
    if quantity.is_pixel_count:
        return float(validate_pixel_count(value, quantity.value))
    checked = float(validate_positive(value, quantity.value))
    if quantity is Quantity.HORIZONTAL_FOV_DEG:
        validate_fov(checked, quantity.value)
    return checked


def _pair(value: Any, what: str, layout: str) -> Tuple[Any, Any]:
    """Unpack a two-item sequence or raise ``InvalidInputError``."""
    if isinstance(value, (str, bytes)):
        items = None
    else:
        try:
            items = tuple(value)
        except TypeError:
            items = None
    if items is None or len(items) != 2:
        raise InvalidInputError(f"{what} must be a {layout} pair, got {value!r}")
    return items


# ===================================================================
# Resolver results
# ===================================================================

@dataclass(frozen=True)
class ParameterRange:
    """Admissible closed interval for one free quantity.

    Attributes
    ----------
    quantity : Quantity
    min, max : float
        Inclusive interval ends.  One end is usually a practical limit
        rather than derived; ``bound`` says which.
    bound : BoundKind
        Which end was derived from the targets.
    limiting_level : PerformanceLevel, optional
        Target level that produced the tightest bound, None if no target
        constrained the quantity.
    """

    quantity: Quantity
    min: float
    max: float
    bound: BoundKind
    limiting_level: Optional[PerformanceLevel] = None

    @property
    def limiting_requirement(self) -> str:
        """Limiting level name, or ``"none"``."""
        return self.limiting_level.value if self.limiting_level else NO_LIMIT

    def contains(self, value: float, rel_tol: float = 1e-9) -> bool:
        """Whether ``value`` lies in the interval (with tolerance)."""
        return (
            (value >= self.min or math.isclose(value, self.min, rel_tol=rel_tol))
            and (value <= self.max or math.isclose(value, self.max, rel_tol=rel_tol))
        )

    def to_dict(self) -> Dict[str, Any]:
        lo, hi = self.min, self.max
        if self.quantity.is_pixel_count:
            lo, hi = int(lo), int(hi)
        return {
            'min': lo,
            'max': hi,
            'bound': self.bound.value,
            'limiting_requirement': self.limiting_requirement,
        }


@dataclass(frozen=True)
class DoriRanges:
    """Resolver output: one range or failure per free quantity.

    This value is the caller's record of the last resolution; the core
    keeps no copy.

    Attributes
    ----------
    ranges : Dict[Quantity, ParameterRange]
        Successfully resolved free quantities.
    failures : Dict[Quantity, DoriLensError]
        Free quantities that could not be resolved
        (``DegenerateGeometryError``, ``UnsatisfiableError``,
        ``InternalError``).
    limiting_level : PerformanceLevel, optional
        Most restrictive requested target, None when no target
        constrained any free quantity.
    """

    ranges: Dict[Quantity, ParameterRange] = field(default_factory=dict)
    failures: Dict[Quantity, DoriLensError] = field(default_factory=dict)
    limiting_level: Optional[PerformanceLevel] = None

    @property
    def limiting_requirement(self) -> str:
        return self.limiting_level.value if self.limiting_level else NO_LIMIT

    @property
    def ok(self) -> bool:
        """True when every free quantity resolved."""
        return not self.failures

    def __getitem__(self, quantity: Union[Quantity, str]) -> ParameterRange:
        """Range of ``quantity``; re-raises its failure if it failed."""
        quantity = Quantity.parse(quantity)
        if quantity in self.failures:
            raise self.failures[quantity]
        return self.ranges[quantity]

    def __contains__(self, quantity: object) -> bool:
        try:
            quantity = Quantity.parse(quantity)
        except InvalidInputError:
            return False
        return quantity in self.ranges or quantity in self.failures

    def raise_for_failures(self) -> None:
        """Raise the first recorded failure, if any."""
        for quantity in Quantity:
            if quantity in self.failures:
                raise self.failures[quantity]

    def to_configuration(
        self,
        assignment: ParameterAssignment,
        choices: Optional[Mapping[Union[Quantity, str], float]] = None,
        name: Optional[str] = None,
    ) -> OpticalConfiguration:
        """Turn the ranges into a concrete configuration for export.

        Fixed values are taken as-is.  A free quantity takes the value in
        ``choices`` (which must lie in its range) or else the favorable
        end of its range: the maximum for pixel counts and focal length,
        the minimum for sensor dimensions.  All favorable ends together
        meet every target whenever every range resolved.  With a Fixed
        ``horizontal_fov_deg``, whichever of sensor width and focal length
        is not Fixed is derived from the other.

        Raises
        ------
        InvalidInputError
            If a chosen value lies outside its range, or a quantity
            needed by the configuration is unset.
        DoriLensError
            The recorded failure of a needed quantity.
        """
        # Local import: the forward model depends on this module.
        from dorilens.optics.forward import focal_length_from_fov, linear_coverage

        chosen = {Quantity.parse(k): float(v) for k, v in (choices or {}).items()}
        hfov = assignment.fixed_value(Quantity.HORIZONTAL_FOV_DEG)
        width_fixed = assignment.is_fixed(Quantity.SENSOR_WIDTH_MM)
        focal_fixed = assignment.is_fixed(Quantity.FOCAL_LENGTH_MM)

        values: Dict[Quantity, float] = {}
        for quantity in (Quantity.SENSOR_WIDTH_MM, Quantity.SENSOR_HEIGHT_MM,
                         Quantity.PIXEL_WIDTH, Quantity.PIXEL_HEIGHT,
                         Quantity.FOCAL_LENGTH_MM):
            fixed = assignment.fixed_value(quantity)
            if fixed is not None:
                values[quantity] = fixed
                continue
            # A fixed horizontal FOV ties sensor width to focal length.
            if hfov is not None and (
                    quantity is Quantity.SENSOR_WIDTH_MM
                    or (quantity is Quantity.FOCAL_LENGTH_MM and width_fixed)):
                continue
            if quantity in self.failures:
                raise self.failures[quantity]
            rng = self.ranges.get(quantity)
            if rng is None:
                continue
            if quantity in chosen:
                if not rng.contains(chosen[quantity]):
                    raise InvalidInputError(
                        f"Chosen {quantity.value} {chosen[quantity]:g} lies "
                        f"outside [{rng.min:g}, {rng.max:g}]"
                    )
                values[quantity] = chosen[quantity]
            elif quantity in (Quantity.SENSOR_WIDTH_MM, Quantity.SENSOR_HEIGHT_MM):
                values[quantity] = rng.min
            else:
                values[quantity] = rng.max

        if hfov is not None:
            if width_fixed and not focal_fixed:
                values[Quantity.FOCAL_LENGTH_MM] = focal_length_from_fov(
                    values[Quantity.SENSOR_WIDTH_MM], hfov)
            elif not width_fixed and Quantity.FOCAL_LENGTH_MM in values:
                values[Quantity.SENSOR_WIDTH_MM] = linear_coverage(
                    hfov, values[Quantity.FOCAL_LENGTH_MM])

        missing = [
            q.value for q in (Quantity.SENSOR_WIDTH_MM, Quantity.SENSOR_HEIGHT_MM,
                              Quantity.PIXEL_WIDTH, Quantity.PIXEL_HEIGHT,
                              Quantity.FOCAL_LENGTH_MM)
            if q not in values
        ]
        if missing:
            raise InvalidInputError(
                f"Cannot build a configuration: {', '.join(missing)} "
                f"neither fixed nor resolved"
            )
        return OpticalConfiguration(
            sensor_width_mm=values[Quantity.SENSOR_WIDTH_MM],
            sensor_height_mm=values[Quantity.SENSOR_HEIGHT_MM],
            pixel_width=int(values[Quantity.PIXEL_WIDTH]),
            pixel_height=int(values[Quantity.PIXEL_HEIGHT]),
            focal_length_mm=values[Quantity.FOCAL_LENGTH_MM],
            name=name,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the request/response payload layout."""
        data: Dict[str, Any] = {
            q.value: r.to_dict() for q, r in self.ranges.items()
        }
        data['failures'] = {
            q.value: {'kind': exc.kind, 'message': str(exc)}
            for q, exc in self.failures.items()
        }
        data['limiting_requirement'] = self.limiting_requirement
        return data
