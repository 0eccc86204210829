"""Tests for the ctb-stars command line interface."""

import json

import pytest

from ctb_stars.cli import build_parser, main


def _write_map(tmp_path, hit_objects=None):
    if hit_objects is None:
        hit_objects = [
            {'type': 'circle', 'x': 100 if i % 2 == 0 else 350, 'y': 192, 'time': i * 300}
            for i in range(40)
        ]
        hit_objects.append({'type': 'slider', 'x': 100, 'y': 192, 'time': 13000, 'repeats': 1,
                            'pixel_length': 300, 'curve_points': [[100, 192], [400, 192]],
                            'path_type': 'L'})
    path = tmp_path / 'map.json'
    path.write_text(json.dumps({
        'cs': 4.0,
        'ar': 9.0,
        'slider_multiplier': 1.0,
        'timing_points': [{'time': 0, 'beat_length': 500}],
        'hit_objects': hit_objects,
    }), encoding='utf-8')
    return path


def test_parser_defaults():
    args = build_parser().parse_args(['map.json'])

    assert args.mods == 'NM'
    assert args.accuracy is None
    assert args.misses == 0
    assert args.combo is None
    assert not args.json


def test_text_output(tmp_path, capsys):
    assert main([str(_write_map(tmp_path)), '--mods', 'HDHR', '--accuracy', '98.5']) == 0

    out = capsys.readouterr().out
    assert 'Stars:' in out
    assert 'mods=HDHR' in out
    assert 'Max combo: 44 (42 fruits, 2 droplets)' in out


def test_json_output(tmp_path, capsys):
    assert main([str(_write_map(tmp_path)), '--json', '--misses', '1']) == 0

    result = json.loads(capsys.readouterr().out)
    assert set(result) == {'stars', 'pp', 'accuracy', 'max_combo', 'n_fruits', 'n_droplets', 'mods'}
    assert result['stars'] > 0.0
    assert result['pp'] > 0.0
    assert result['max_combo'] == 44
    assert result['mods'] == 'NM'
    # One droplet missed out of 44 objects.
    assert result['accuracy'] == pytest.approx(100.0 * 43 / 44)


def test_unreachable_accuracy_is_reported(tmp_path, capsys):
    assert main([str(_write_map(tmp_path)), '--accuracy', '95']) == 0

    out = capsys.readouterr().out
    assert '[WARN] Requested 95% accuracy cannot be applied' in out
    assert '(100.00% acc, 0 miss(es))' in out


def test_full_accuracy_is_not_reported(tmp_path, capsys):
    assert main([str(_write_map(tmp_path)), '--accuracy', '100']) == 0

    assert '[WARN]' not in capsys.readouterr().out


def test_mod_bitmask(tmp_path, capsys):
    assert main([str(_write_map(tmp_path)), '--json', '--mods', '64']) == 0

    assert json.loads(capsys.readouterr().out)['mods'] == 'DT'


def test_verbose_output(tmp_path, capsys):
    assert main([str(_write_map(tmp_path)), '--verbose']) == 0

    out = capsys.readouterr().out
    assert '[INFO] Loading beatmap' in out
    assert 'strain sections' in out


def test_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / 'missing.json')]) == 1

    assert '[ERROR]' in capsys.readouterr().out


@pytest.mark.parametrize('argv_tail', [['--mods', 'XY'], []])
def test_invalid_input_is_reported(tmp_path, capsys, argv_tail):
    if argv_tail:
        path = _write_map(tmp_path)
    else:
        path = _write_map(tmp_path, hit_objects=[
            {'type': 'circle', 'x': 0, 'y': 0, 'time': 0},
            {'type': 'slider', 'x': 0, 'y': 0, 'time': 500, 'pixel_length': 100,
             'curve_points': [[0, 0]]},
        ])

    assert main([str(path)] + argv_tail) == 1
    assert '[ERROR]' in capsys.readouterr().out
