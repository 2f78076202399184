# -*- coding: utf-8 -*-
"""
DORILENS Exception Hierarchy - Domain-specific exceptions for optics design.

Provides a small exception hierarchy that lets callers catch optics-model
failures distinctly from Python built-in exceptions. All DORILENS
exceptions subclass both ``DoriLensError`` and the appropriate built-in
exception so that generic ``except ValueError`` handlers keep working.

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
from typing import Any, Optional


class DoriLensError(Exception):
    """Base exception for all DORILENS errors."""

    #: Short machine-readable tag used in serialized failure payloads.
    kind = 'error'


class InvalidInputError(DoriLensError, ValueError):
    """Malformed or non-physical input values.

    Raised for non-positive dimensions, focal lengths, pixel counts or
    distances, empty or oversized target sets, and requests that name no
    free quantity.
    """

    kind = 'invalid_input'


class DegenerateGeometryError(DoriLensError, ArithmeticError):
    """Trigonometric singularity in the pinhole model.

    Raised when a field of view reaches 0 or 180 degrees, so that
    ``tan(fov / 2)`` is zero or infinite, or when a linear coverage
    collapses to zero.
    """

    kind = 'degenerate_geometry'


class UnsatisfiableError(DoriLensError, ValueError):
    """No admissible value exists for a free quantity.

    Raised when the fixed values and the caller's practical limits leave
    an empty interval for a free quantity under at least one target.

    Parameters
    ----------
    message : str
    level : PerformanceLevel, optional
        Target level whose bound could not be met, None when no single
        target is to blame.
    """

    kind = 'unsatisfiable'

    def __init__(self, message: str, level: Optional[Any] = None) -> None:
        super().__init__(message)
        self.level = level


class InternalError(DoriLensError, RuntimeError):
    """Unexpected numeric failure, e.g. NaN propagated from upstream misuse."""

    kind = 'internal'


class ConfigurationError(DoriLensError, ValueError):
    """Unreadable or malformed resolver limits configuration."""

    kind = 'configuration'
