"""Segment compactor: fold a signal's value changes into drawable segments.

Two separate state machines are used, one for single-bit signals and one for
buses, so a vector can never reach the scalar machine and vice versa:

    scalar:  Unknown(start) <-> Binary(points)
    bus:     Unknown(start) <-> Vector(start, value)

Both start in Unknown(0) and, once the changes are exhausted, flush their
current state up to the global end time. The resulting segments are ordered,
do not overlap and cover [0, end_time), except for empty undetermined spans
which are dropped.
"""

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple, Union

from .data_model import (
    Segment, Time, Toggle, TriState, Undetermined, Vector, VectorBlock, Waveform
)
from .values import format_vector_label, is_driven, is_fully_driven


@dataclass
class UnknownState:
    """Value unknown or high impedance since `start`."""
    start: Time


@dataclass
class BinaryState:
    """Driven single-bit value; points hold only level changes."""
    points: List[Tuple[Time, bool]] = field(default_factory=list)


@dataclass
class VectorState:
    """Fully driven bus value held since `start`."""
    start: Time
    value: Vector


ScalarState = Union[UnknownState, BinaryState]
BusState = Union[UnknownState, VectorState]


def _add_undetermined(segments: List[Segment], start: Time, end: Time) -> None:
    if end > start:
        segments.append(Undetermined(start, end))


def _add_toggle(segments: List[Segment], state: BinaryState, end: Time) -> None:
    segments.append(Toggle(points=tuple(state.points), end=end))


def _add_block(segments: List[Segment], state: VectorState, end: Time) -> None:
    segments.append(VectorBlock(state.start, end, format_vector_label(state.value)))


def compact_scalar(changes: Sequence[Tuple[Time, TriState]], end_time: Time) -> List[Segment]:
    """Compact the changes of a single-bit signal.

    Args:
        changes: Time-ordered (time, bit) pairs
        end_time: Global right edge of the drawing

    Returns:
        Ordered list of Undetermined and Toggle segments
    """
    segments: List[Segment] = []
    state: ScalarState = UnknownState(0)

    for time, bit in changes:
        if isinstance(state, UnknownState):
            if is_driven(bit):
                _add_undetermined(segments, state.start, time)
                state = BinaryState([(time, bit is TriState.V1)])
        elif is_driven(bit):
            level = bit is TriState.V1
            # Only a level change draws a corner
            if level != state.points[-1][1]:
                state.points.append((time, level))
        else:
            _add_toggle(segments, state, time)
            state = UnknownState(time)

    if isinstance(state, UnknownState):
        _add_undetermined(segments, state.start, end_time)
    else:
        _add_toggle(segments, state, end_time)
    return segments


def compact_vector(changes: Sequence[Tuple[Time, Vector]], end_time: Time) -> List[Segment]:
    """Compact the changes of a multi-bit signal.

    A value containing any X or Z bit makes the whole bus undetermined.
    Repeated identical values are coalesced into one block.

    Args:
        changes: Time-ordered (time, vector) pairs
        end_time: Global right edge of the drawing

    Returns:
        Ordered list of Undetermined and VectorBlock segments
    """
    segments: List[Segment] = []
    state: BusState = UnknownState(0)

    for time, value in changes:
        driven = is_fully_driven(value)
        if isinstance(state, UnknownState):
            if driven:
                _add_undetermined(segments, state.start, time)
                state = VectorState(time, value)
        elif not driven:
            _add_block(segments, state, time)
            state = UnknownState(time)
        elif value != state.value:
            _add_block(segments, state, time)
            state = VectorState(time, value)

    if isinstance(state, UnknownState):
        _add_undetermined(segments, state.start, end_time)
    else:
        _add_block(segments, state, end_time)
    return segments


def compact_waveform(wave: Waveform, end_time: Time) -> List[Segment]:
    """Compact a validated waveform with the machine matching its width."""
    if wave.signal.is_bus:
        return compact_vector(wave.values, end_time)  # type: ignore[arg-type]
    return compact_scalar(wave.values, end_time)  # type: ignore[arg-type]
