"""Test saving and loading segment dumps."""

import pytest
import yaml

from wavesvg.data_model import Toggle, Undetermined, VectorBlock
from wavesvg.persistence import dump_segments, load_segments, save_segments, segments_to_dict


def test_dict_skips_silent_signals(counter_result):
    data = segments_to_dict(counter_result)
    assert data['end_time'] == 40
    assert '%' not in data['signals']
    assert sorted(data['signals']) == sorted(['!', '"', '#', '$', '&'])
    assert 'bits' not in data['signals']['!']
    assert len(data['signals']['$']['bits']) == 8


def test_dump_is_plain_yaml(counter_result, tmp_path):
    path = tmp_path / "segments.yaml"
    save_segments(counter_result, path)
    raw = yaml.safe_load(path.read_text())
    assert raw['signals']['#']['segments'][1] == {'kind': 'vector', 'start': 10, 'end': 15, 'label': '0x0'}
    assert raw['signals']['"']['segments'][0] == {'kind': 'toggle', 'points': [[0, 1], [10, 0]], 'end': 40}


def test_save_and_load(counter_result, tmp_path):
    path = tmp_path / "segments.yaml"
    save_segments(counter_result, path)
    loaded = load_segments(path)

    assert loaded['end_time'] == 40
    count = loaded['signals']['#']
    assert count['name'] == 'count'
    assert count['width'] == 4
    assert count['segments'] == [
        Undetermined(0, 10),
        VectorBlock(10, 15, "0x0"),
        VectorBlock(15, 25, "0x1"),
        VectorBlock(25, 40, "0x2"),
    ]
    assert count['bits'] == counter_result.store['#'].bit_segments
    assert loaded['signals']['"']['segments'] == [Toggle(points=((0, True), (10, False)), end=40)]
    assert loaded['signals']['!']['bits'] == []


def test_load_rejects_other_yaml(tmp_path):
    path = tmp_path / "other.yaml"
    path.write_text("just: a mapping\n")
    with pytest.raises(ValueError):
        load_segments(path)


def test_load_rejects_unknown_segment_kind(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text(
        "end_time: 10\n"
        "signals:\n"
        "  '!':\n"
        "    name: clk\n"
        "    width: 1\n"
        "    segments:\n"
        "    - kind: ramp\n"
    )
    with pytest.raises(ValueError, match="ramp"):
        load_segments(path)


def test_dump_text_matches_saved_file(counter_result, tmp_path):
    path = tmp_path / "segments.yaml"
    save_segments(counter_result, path)
    assert path.read_text() == dump_segments(counter_result)
