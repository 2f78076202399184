# -*- coding: utf-8 -*-
"""
CLI Tests - Subcommand output and exit status.

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

import json

import pytest

from dorilens.cli import main


RANGES_ARGS = [
    'ranges', '--target', 'identification=50',
    '--fixed', 'pixel_width=1920', '--fixed', 'sensor_width_mm=6.4',
    '--free', 'focal_length_mm',
]


# ---------------------------------------------------------------------------
# Forward subcommands
# ---------------------------------------------------------------------------

class TestForwardCommands:
    """Test fov, focal-length, hyperfocal, dof and compare."""

    def test_fov_report(self, capsys):
        code = main(['fov', '-W', '36', '-H', '24', '-x', '6000', '-y', '4000',
                     '-f', '50', '-d', '5000', '-n', 'Test Cam'])
        out = capsys.readouterr().out
        assert code == 0
        assert 'Test Cam' in out
        assert '39.60 x 26.99 deg' in out
        assert 'Identification' in out

    def test_fov_json_preset(self, capsys):
        code = main(['fov', '--preset', 'full-frame', '-d', '5000', '--json'])
        data = json.loads(capsys.readouterr().out)
        assert code == 0
        assert data['horizontal_density'] == pytest.approx(1666.667, abs=1e-3)

    def test_fov_missing_values(self, capsys):
        code = main(['fov', '-W', '36', '-d', '5000'])
        assert code == 2
        assert '--sensor-height' in capsys.readouterr().err

    def test_focal_length(self, capsys):
        assert main(['focal-length', '-s', '36', '--fov', '39.5978']) == 0
        assert 'Calculated Focal Length: 50.00 mm' in capsys.readouterr().out

    def test_focal_length_degenerate(self, capsys):
        assert main(['focal-length', '-s', '36', '--fov', '180']) == 2
        assert 'degenerate_geometry' in capsys.readouterr().err

    def test_hyperfocal(self, capsys):
        assert main(['hyperfocal', '-f', '50', '-a', '2.8']) == 0
        out = capsys.readouterr().out
        assert 'Hyperfocal Distance: 29811.90 mm' in out
        assert 'Circle of Confusion: 0.03 mm' in out

    def test_dof_beyond_hyperfocal(self, capsys):
        assert main(['dof', '-d', '40000', '-f', '50', '-a', '2.8']) == 0
        out = capsys.readouterr().out
        assert 'Far Limit: infinity' in out

    def test_dof_json_infinite_is_null(self, capsys):
        assert main(['dof', '-d', '40000', '-f', '50', '-a', '2.8', '--json']) == 0
        data = json.loads(capsys.readouterr().out)
        assert data['far_mm'] is None

    def test_compare_presets(self, capsys):
        assert main(['compare', '-d', '10000', '--presets']) == 0
        out = capsys.readouterr().out
        assert 'APS-C 35mm' in out
        assert 'Micro 4/3 25mm' in out

    def test_compare_without_presets(self, capsys):
        assert main(['compare', '-d', '10000']) == 0
        assert '--presets' in capsys.readouterr().out


# ---------------------------------------------------------------------------
# DORI subcommands
# ---------------------------------------------------------------------------

class TestDoriCommands:
    """Test dori and ranges."""

    def test_dori_translation(self, capsys):
        assert main(['dori', '--distance', '5', '--level', 'identification',
                     '--json']) == 0
        data = json.loads(capsys.readouterr().out)
        assert data['detection_m'] == pytest.approx(50.0)

    def test_dori_with_preset(self, capsys):
        assert main(['dori', '--distance', '5', '--level', 'identification',
                     '--preset', 'full-frame']) == 0
        assert 'scene width 7.20 m' in capsys.readouterr().out

    def test_dori_unknown_level(self, capsys):
        assert main(['dori', '--distance', '5', '--level', 'spotting']) == 2
        assert 'invalid_input' in capsys.readouterr().err

    def test_ranges_report(self, capsys):
        assert main(RANGES_ARGS) == 0
        out = capsys.readouterr().out
        assert 'Limiting requirement: identification' in out
        assert 'focal_length_mm' in out
        assert '41.6667' in out

    def test_ranges_json(self, capsys):
        assert main(RANGES_ARGS + ['--json']) == 0
        data = json.loads(capsys.readouterr().out)
        assert data['focal_length_mm']['min'] == pytest.approx(41.6667, abs=1e-4)

    def test_ranges_free_with_limits(self, capsys):
        args = RANGES_ARGS[:-1] + ['focal_length_mm=:30']
        assert main(args) == 2
        assert 'FAILED (unsatisfiable)' in capsys.readouterr().out

    def test_ranges_limits_file(self, tmp_path, capsys):
        path = tmp_path / 'limits.json'
        path.write_text(json.dumps({'focal_length_mm': {'ceiling': 1000.0}}))
        assert main(RANGES_ARGS + ['--limits', str(path), '--json']) == 0
        data = json.loads(capsys.readouterr().out)
        assert data['focal_length_mm']['max'] == 1000.0

    def test_ranges_bad_target(self, capsys):
        assert main(['ranges', '--target', 'identification',
                     '--free', 'focal_length_mm']) == 2
        assert 'NAME=VALUE' in capsys.readouterr().err

    def test_missing_subcommand_exits(self):
        with pytest.raises(SystemExit):
            main([])
