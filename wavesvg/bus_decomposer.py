"""Bus decomposer: per-bit traces of a multi-bit signal."""

from typing import List, Sequence, Tuple

from .data_model import Segment, Time, TriState, Vector, Waveform
from .segment_compactor import compact_scalar
from .values import project_bit


def project_changes(changes: Sequence[Tuple[Time, Vector]], index: int) -> List[Tuple[Time, TriState]]:
    """Select bit `index` (0 = most significant) of every change."""
    return [(time, project_bit(value, index)) for time, value in changes]


def decompose_bit(wave: Waveform, index: int, end_time: Time) -> List[Segment]:
    """Run the scalar compactor on one projected bit of a bus."""
    if not 0 <= index < wave.signal.width:
        raise IndexError(f"bit {index} out of range for {wave.signal.name} (width {wave.signal.width})")
    return compact_scalar(project_changes(wave.values, index), end_time)  # type: ignore[arg-type]


def decompose_bus(wave: Waveform, end_time: Time) -> List[List[Segment]]:
    """Segment lists for every bit of a bus, indexed like the vector.

    Single-bit signals have no decomposition and yield an empty list.
    """
    if not wave.signal.is_bus:
        return []
    return [decompose_bit(wave, index, end_time) for index in range(wave.signal.width)]


def bit_number(width: int, index: int) -> int:
    """Conventional bit number of a vector position (MSB = width - 1)."""
    return width - 1 - index
