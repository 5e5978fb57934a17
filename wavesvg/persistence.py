"""Persistence module for saving and loading compacted segments as YAML."""

import pathlib
from typing import Any, Dict, List, Union

import yaml

from .data_model import Segment, SignalId, Time, Toggle, Undetermined, VectorBlock
from .pipeline import RenderResult


def _serialize_segment(segment: Segment) -> Dict[str, Any]:
    """Serialize a Segment to a dictionary tagged with its kind."""
    if isinstance(segment, Undetermined):
        return {'kind': 'undetermined', 'start': segment.start, 'end': segment.end}
    if isinstance(segment, Toggle):
        return {
            'kind': 'toggle',
            'points': [[time, int(level)] for time, level in segment.points],
            'end': segment.end,
        }
    if isinstance(segment, VectorBlock):
        return {'kind': 'vector', 'start': segment.start, 'end': segment.end, 'label': segment.label}
    raise TypeError(f"Unsupported segment: {segment!r}")


def _deserialize_segment(data: Dict[str, Any]) -> Segment:
    kind = data.get('kind')
    if kind == 'undetermined':
        return Undetermined(int(data['start']), int(data['end']))
    if kind == 'toggle':
        points = tuple((int(time), bool(level)) for time, level in data['points'])
        return Toggle(points=points, end=int(data['end']))
    if kind == 'vector':
        return VectorBlock(int(data['start']), int(data['end']), str(data['label']))
    raise ValueError(f"Unknown segment kind: {kind!r}")


def segments_to_dict(result: RenderResult) -> Dict[str, Any]:
    """Serialize every compacted waveform of a run."""
    signals: Dict[str, Any] = {}
    for wave in result.store.changed_waveforms():
        entry: Dict[str, Any] = {
            'name': wave.signal.name,
            'width': wave.signal.width,
            'segments': [_serialize_segment(s) for s in wave.segments or []],
        }
        if wave.bit_segments:
            entry['bits'] = [[_serialize_segment(s) for s in bit] for bit in wave.bit_segments]
        signals[wave.identifier] = entry
    return {'end_time': result.end_time, 'signals': signals}


def dump_segments(result: RenderResult) -> str:
    """YAML text of the compacted segments of a run."""
    return yaml.safe_dump(segments_to_dict(result), default_flow_style=False, sort_keys=False)


def save_segments(result: RenderResult, path: Union[str, pathlib.Path]) -> None:
    """Write the compacted segments of a run to a YAML file."""
    text = dump_segments(result)
    with open(path, "w") as f:
        f.write(text)


def load_segments(path: Union[str, pathlib.Path]) -> Dict[str, Any]:
    """Read a segment dump written by save_segments.

    Returns:
        {'end_time': int, 'signals': {identifier: {'name', 'width',
        'segments': [Segment], 'bits': [[Segment]]}}}
    """
    with open(path, "r") as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict) or 'end_time' not in data:
        raise ValueError(f"Not a segment dump: {path}")

    signals: Dict[SignalId, Dict[str, Any]] = {}
    for identifier, entry in (data.get('signals') or {}).items():
        bits: List[List[Segment]] = [
            [_deserialize_segment(s) for s in bit] for bit in entry.get('bits', [])
        ]
        signals[str(identifier)] = {
            'name': entry['name'],
            'width': int(entry['width']),
            'segments': [_deserialize_segment(s) for s in entry['segments']],
            'bits': bits,
        }
    end_time: Time = int(data['end_time'])
    return {'end_time': end_time, 'signals': signals}
