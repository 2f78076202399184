# -*- coding: utf-8 -*-
"""
Validation Helpers - Shared positivity and angle checks.

Provides reusable validation functions for DORILENS. The data models,
forward model, translator and resolver call these helpers so that every
entry point rejects non-physical input with the same messages.

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
from typing import Union

# Third-party
import numpy as np

# DORILENS internal
from dorilens.exceptions import (
    DegenerateGeometryError,
    InternalError,
    InvalidInputError,
)

ArrayLike = Union[float, int, np.ndarray]

# Fields of view within this many degrees of 0 or 180 are degenerate.
FOV_EPS_DEG = 1e-9


def validate_positive(value: ArrayLike, name: str) -> np.ndarray:
    """Validate that a scalar or array is finite and strictly positive.

    Parameters
    ----------
    value : float, int or np.ndarray
        Value(s) to validate.
    name : str
        Parameter name for error messages.

    Returns
    -------
    np.ndarray
        ``value`` as a float64 array (0-d for scalars).

    Raises
    ------
    InvalidInputError
        If any element is non-numeric, non-finite, or <= 0.
    """
    if isinstance(value, bool):
        raise InvalidInputError(f"{name} must be numeric, got bool")
    try:
        arr = np.asarray(value, dtype=np.float64)
    except (TypeError, ValueError):
        raise InvalidInputError(
            f"{name} must be numeric, got {type(value).__name__}"
        ) from None
    if not np.all(np.isfinite(arr)):
        raise InvalidInputError(f"{name} must be finite, got {value!r}")
    if np.any(arr <= 0):
        raise InvalidInputError(f"{name} must be > 0, got {value!r}")
    return arr


def validate_non_negative(value: ArrayLike, name: str) -> np.ndarray:
    """Validate that a scalar or array is finite and >= 0.

    Raises
    ------
    InvalidInputError
        If any element is non-numeric, non-finite, or < 0.
    """
    if isinstance(value, bool):
        raise InvalidInputError(f"{name} must be numeric, got bool")
    try:
        arr = np.asarray(value, dtype=np.float64)
    except (TypeError, ValueError):
        raise InvalidInputError(
            f"{name} must be numeric, got {type(value).__name__}"
        ) from None
    if not np.all(np.isfinite(arr)):
        raise InvalidInputError(f"{name} must be finite, got {value!r}")
    if np.any(arr < 0):
        raise InvalidInputError(f"{name} must be >= 0, got {value!r}")
    return arr


def validate_pixel_count(value: ArrayLike, name: str) -> np.ndarray:
    """Validate that pixel counts are positive whole numbers.

    Raises
    ------
    InvalidInputError
        If any element is not a positive integer value.
    """
    arr = validate_positive(value, name)
    if np.any(arr != np.floor(arr)):
        raise InvalidInputError(f"{name} must be a whole number, got {value!r}")
    return arr


def validate_fov(fov_deg: ArrayLike, name: str = 'fov_deg') -> np.ndarray:
    """Validate that angular fields of view lie strictly inside (0, 180).

    Raises
    ------
    InvalidInputError
        If any element is non-numeric or non-finite.
    DegenerateGeometryError
        If any element is within ``FOV_EPS_DEG`` of 0 or 180 degrees,
        where ``tan(fov / 2)`` vanishes or diverges.
    """
    if isinstance(fov_deg, bool):
        raise InvalidInputError(f"{name} must be numeric, got bool")
    try:
        arr = np.asarray(fov_deg, dtype=np.float64)
    except (TypeError, ValueError):
        raise InvalidInputError(
            f"{name} must be numeric, got {type(fov_deg).__name__}"
        ) from None
    if not np.all(np.isfinite(arr)):
        raise InvalidInputError(f"{name} must be finite, got {fov_deg!r}")
    if np.any(arr <= FOV_EPS_DEG) or np.any(arr >= 180.0 - FOV_EPS_DEG):
        raise DegenerateGeometryError(
            f"{name} must lie strictly between 0 and 180 degrees, "
            f"got {fov_deg!r}"
        )
    return arr


def check_finite(value: ArrayLike, what: str) -> None:
    """Raise ``InternalError`` if a computed result is NaN or infinite."""
    if not np.all(np.isfinite(value)):
        raise InternalError(f"Non-finite {what} computed: {value!r}")


def to_output(arr: np.ndarray) -> ArrayLike:
    """Return a Python float for 0-d results, the array otherwise."""
    if np.ndim(arr) == 0:
        return float(arr)
    return arr
