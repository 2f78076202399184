# -*- coding: utf-8 -*-
"""
DORILENS CLI - Command-line front end for the optics calculator.

Subcommands::

    dorilens fov -W 36 -H 24 -x 6000 -y 4000 -f 50 -d 5000
    dorilens focal-length -s 36 --fov 39.6
    dorilens hyperfocal -f 50 -a 2.8
    dorilens dof -d 5000 -f 50 -a 2.8
    dorilens compare -d 10000 --presets
    dorilens dori --distance 5 --level identification --preset full-frame
    dorilens ranges --target identification=50 \\
        --fixed pixel_width=1920 --fixed sensor_width_mm=6.4 \\
        --free focal_length_mm

``--json`` prints the API payload instead of the text report.  Exits 0 on
success and 2 when the calculation raises a ``DoriLensError``.

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
import argparse
import json
import logging
import math
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

# DORILENS internal
from dorilens import __version__, api
from dorilens.config import DEFAULT_COC_MM, load_limits
from dorilens.exceptions import DoriLensError, InvalidInputError
from dorilens.models import OpticalConfiguration
from dorilens.optics import forward
from dorilens.presets import get_preset, list_presets

logger = logging.getLogger(__name__)

_RULE = '=' * 70


# ------------------------------------------------------------------
# Argument helpers
# ------------------------------------------------------------------

def _split_pair(text: str, option: str) -> Tuple[str, str]:
    name, sep, value = text.partition('=')
    if not sep or not name.strip() or not value.strip():
        raise InvalidInputError(f"{option} expects NAME=VALUE, got {text!r}")
    return name.strip(), value.strip()


def _number(text: str, option: str) -> float:
    try:
        return float(text)
    except ValueError:
        raise InvalidInputError(f"{option} value {text!r} is not a number") from None


def _parse_targets(items: Sequence[str]) -> List[Tuple[str, float]]:
    pairs = []
    for item in items:
        level, value = _split_pair(item, '--target')
        pairs.append((level, _number(value, '--target')))
    return pairs


def _parse_fixed(items: Sequence[str]) -> Dict[str, float]:
    fixed = {}
    for item in items:
        name, value = _split_pair(item, '--fixed')
        fixed[name] = _number(value, '--fixed')
    return fixed


def _parse_free(items: Sequence[str]) -> Dict[str, Any]:
    """``name`` or ``name=floor:ceiling``; either end may be empty."""
    free: Dict[str, Any] = {}
    for item in items:
        name, sep, span = item.partition('=')
        if not sep:
            free[name.strip()] = None
            continue
        lo, colon, hi = span.partition(':')
        if not colon:
            raise InvalidInputError(
                f"--free expects NAME or NAME=FLOOR:CEILING, got {item!r}")
        free[name.strip()] = {
            'floor': _number(lo, '--free') if lo.strip() else None,
            'ceiling': _number(hi, '--free') if hi.strip() else None,
        }
    return free


def _print_json(payload: Any) -> None:
    # JSON has no infinity; far limits beyond the hyperfocal print as null.
    def _clean(value: Any) -> Any:
        if isinstance(value, float) and not math.isfinite(value):
            return None
        if isinstance(value, dict):
            return {k: _clean(v) for k, v in value.items()}
        if isinstance(value, list):
            return [_clean(v) for v in value]
        return value
    print(json.dumps(_clean(payload), indent=2))


def _mm_and_m(value_mm: float) -> str:
    if math.isinf(value_mm):
        return 'infinity'
    return f'{value_mm:.2f} mm ({value_mm / 1000.0:.2f} m)'


# ------------------------------------------------------------------
# Subcommand handlers
# ------------------------------------------------------------------

def _cmd_fov(args: argparse.Namespace) -> int:
    if args.preset:
        config = get_preset(args.preset)
    else:
        missing = [
            flag for flag, value in (
                ('--sensor-width', args.sensor_width),
                ('--sensor-height', args.sensor_height),
                ('--pixel-width', args.pixel_width),
                ('--pixel-height', args.pixel_height),
                ('--focal-length', args.focal_length),
            ) if value is None
        ]
        if missing:
            raise InvalidInputError(
                f"fov needs --preset or {', '.join(missing)}")
        config = OpticalConfiguration(
            sensor_width_mm=args.sensor_width,
            sensor_height_mm=args.sensor_height,
            pixel_width=args.pixel_width,
            pixel_height=args.pixel_height,
            focal_length_mm=args.focal_length,
            name=args.name,
        )

    result = forward.compute_fov(config, args.distance)
    if args.json:
        _print_json(result.to_dict())
        return 0

    print(config)
    print()
    print(result)
    if result.dori is not None:
        print()
        print('DORI distances (horizontal):')
        for level, distance in result.dori.items():
            print(f'  {level.value.capitalize():<16} {distance:10.1f} m')
    for finding in config.validate() + result.validate():
        print(f'[{finding.severity.value}] {finding.message}')
    return 0


def _cmd_focal_length(args: argparse.Namespace) -> int:
    focal = api.compute_focal_length_from_fov(args.sensor_size, args.fov)
    if args.json:
        _print_json({'focal_length_mm': focal})
        return 0
    fov_type = 'Vertical' if args.vertical else 'Horizontal'
    print('Focal Length Calculation')
    print(_RULE)
    print(f'Sensor Size: {args.sensor_size:g} mm')
    print(f'{fov_type} FOV: {args.fov:g} deg')
    print()
    print(f'Calculated Focal Length: {focal:.2f} mm')
    return 0


def _cmd_hyperfocal(args: argparse.Namespace) -> int:
    hyperfocal = api.compute_hyperfocal_distance(args.focal_length, args.f_number, args.coc)
    if args.json:
        _print_json({'hyperfocal_mm': hyperfocal})
        return 0
    print(f'Hyperfocal Distance: {_mm_and_m(hyperfocal)}')
    print(f'Focal Length: {args.focal_length:g} mm')
    print(f'F-number: f/{args.f_number:g}')
    print(f'Circle of Confusion: {args.coc:g} mm')
    return 0


def _cmd_dof(args: argparse.Namespace) -> int:
    dof = api.compute_depth_of_field(args.distance, args.focal_length,
                                     args.f_number, args.coc)
    if args.json:
        _print_json(dof)
        return 0
    print('Depth of Field Calculation')
    print(_RULE)
    print(f'Object Distance: {_mm_and_m(args.distance)}')
    print(f'Focal Length: {args.focal_length:g} mm')
    print(f'F-number: f/{args.f_number:g}')
    print(f'Circle of Confusion: {args.coc:g} mm')
    print()
    print(f"Near Limit: {_mm_and_m(dof['near_mm'])}")
    print(f"Far Limit: {_mm_and_m(dof['far_mm'])}")
    print(f"Total DOF: {_mm_and_m(dof['total_dof_mm'])}")
    return 0


def _cmd_compare(args: argparse.Namespace) -> int:
    if not args.presets:
        print('Use --presets to compare common sensor formats')
        return 0
    pairs = forward.compare_configurations(list_presets(), args.distance)
    if args.json:
        _print_json([
            {'camera': camera.to_dict(), 'result': result.to_dict()}
            for camera, result in pairs
        ])
        return 0
    print(f'Comparing camera systems at {_mm_and_m(args.distance)} distance:')
    print()
    for camera, result in pairs:
        print(camera)
        print(result)
        print(_RULE)
        print()
    return 0


def _cmd_dori(args: argparse.Namespace) -> int:
    config = get_preset(args.preset) if args.preset else None
    payload = api.compute_dori_from_single_distance(args.distance, args.level, config)
    if args.json:
        _print_json(payload)
        return 0
    print(f'{args.level.capitalize()} at {args.distance:g} m implies:')
    for key, value in payload.items():
        if key.endswith('_coverage_m'):
            continue
        level = key[:-2]
        line = f'  {level.capitalize():<16} {value:10.2f} m'
        coverage = payload.get(f'{level}_coverage_m')
        if coverage is not None:
            line += f'   (scene width {coverage:.2f} m)'
        print(line)
    return 0


def _cmd_ranges(args: argparse.Namespace) -> int:
    limits = load_limits(args.limits)
    constraints = {
        'fixed': _parse_fixed(args.fixed),
        'free': _parse_free(args.free),
    }
    payload = api.compute_dori_ranges(_parse_targets(args.target), constraints, limits)
    if args.json:
        _print_json(payload)
        return 0 if not payload['failures'] else 2

    failures = payload.pop('failures')
    limiting = payload.pop('limiting_requirement')
    print(f'Limiting requirement: {limiting}')
    print()
    print(f"  {'quantity':<20} {'min':>12} {'max':>12}  {'bound':<8} limiting")
    for name, rng in payload.items():
        print(f"  {name:<20} {rng['min']:>12.6g} {rng['max']:>12.6g}  "
              f"{rng['bound']:<8} {rng['limiting_requirement']}")
    for name, failure in failures.items():
        print(f"  {name:<20} FAILED ({failure['kind']}): {failure['message']}")
    return 0 if not failures else 2


# ------------------------------------------------------------------
# Parser
# ------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='dorilens',
        description='Camera optics calculator - FOV, resolution, depth of '
                    'field and DORI design ranges.',
    )
    parser.add_argument('--version', action='version',
                        version=f'%(prog)s {__version__}')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='Increase log verbosity (-v info, -vv debug).')
    sub = parser.add_subparsers(dest='command', required=True)

    def _add(name: str, handler, help_text: str) -> argparse.ArgumentParser:
        p = sub.add_parser(name, help=help_text, description=help_text)
        p.add_argument('--json', action='store_true',
                       help='Print the JSON payload instead of a report.')
        p.set_defaults(handler=handler)
        return p

    p = _add('fov', _cmd_fov, 'Calculate field of view and spatial resolution.')
    p.add_argument('-W', '--sensor-width', type=float, help='Sensor width in mm.')
    p.add_argument('-H', '--sensor-height', type=float, help='Sensor height in mm.')
    p.add_argument('-x', '--pixel-width', type=int, help='Horizontal pixel count.')
    p.add_argument('-y', '--pixel-height', type=int, help='Vertical pixel count.')
    p.add_argument('-f', '--focal-length', type=float, help='Focal length in mm.')
    p.add_argument('-d', '--distance', type=float, required=True,
                   help='Working distance in mm.')
    p.add_argument('-n', '--name', default=None, help='Camera system label.')
    p.add_argument('--preset', default=None,
                   help='Use a camera preset instead of explicit values.')

    p = _add('focal-length', _cmd_focal_length,
             'Calculate focal length from field of view.')
    p.add_argument('-s', '--sensor-size', type=float, required=True,
                   help='Sensor dimension in mm along the FOV axis.')
    p.add_argument('--fov', type=float, required=True,
                   help='Field of view in degrees.')
    p.add_argument('--vertical', action='store_true',
                   help='Label the FOV as vertical (default horizontal).')

    p = _add('hyperfocal', _cmd_hyperfocal, 'Calculate hyperfocal distance.')
    p.add_argument('-f', '--focal-length', type=float, required=True,
                   help='Focal length in mm.')
    p.add_argument('-a', '--f-number', type=float, required=True,
                   help='Aperture f-number.')
    p.add_argument('-c', '--coc', type=float, default=DEFAULT_COC_MM,
                   help=f'Circle of confusion in mm (default {DEFAULT_COC_MM}).')

    p = _add('dof', _cmd_dof, 'Calculate depth of field.')
    p.add_argument('-d', '--distance', type=float, required=True,
                   help='Object distance in mm.')
    p.add_argument('-f', '--focal-length', type=float, required=True,
                   help='Focal length in mm.')
    p.add_argument('-a', '--f-number', type=float, required=True,
                   help='Aperture f-number.')
    p.add_argument('-c', '--coc', type=float, default=DEFAULT_COC_MM,
                   help=f'Circle of confusion in mm (default {DEFAULT_COC_MM}).')

    p = _add('compare', _cmd_compare, 'Compare camera presets at one distance.')
    p.add_argument('-d', '--distance', type=float, required=True,
                   help='Working distance in mm.')
    p.add_argument('--presets', action='store_true',
                   help='Compare full-frame, APS-C and Micro 4/3 presets.')

    p = _add('dori', _cmd_dori, 'Translate one DORI distance to the others.')
    p.add_argument('--distance', type=float, required=True,
                   help='Known distance in meters.')
    p.add_argument('--level', required=True,
                   help='DORI level of the known distance.')
    p.add_argument('--preset', default=None,
                   help='Reference camera preset; adds scene widths.')

    p = _add('ranges', _cmd_ranges,
             'Admissible design ranges for one to four DORI targets.')
    p.add_argument('--target', action='append', required=True, metavar='LEVEL=M',
                   help='DORI target distance in meters (repeatable).')
    p.add_argument('--fixed', action='append', default=[], metavar='NAME=VALUE',
                   help='Hold a design quantity at a value (repeatable).')
    p.add_argument('--free', action='append', default=[],
                   metavar='NAME[=FLOOR:CEILING]',
                   help='Request a range for a design quantity (repeatable).')
    p.add_argument('--limits', type=Path, default=None,
                   help='JSON limits file (default ~/.config/geoint/dorilens.json).')
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format='%(levelname)s %(name)s: %(message)s')

    try:
        return args.handler(args)
    except DoriLensError as exc:
        logger.debug("%s failed", args.command, exc_info=True)
        print(f'error ({exc.kind}): {exc}', file=sys.stderr)
        return 2


if __name__ == '__main__':
    sys.exit(main())
