"""Primitive emitter: turn segment lists into SVG fragments.

Each trace is an <svg class="wave"> element whose user space is one unit per
time step horizontally and RENDERING.WAVE_HEIGHT units vertically; the page
scales it with the wrapper's transform. Primitives:

- Undetermined  -> highlighted <rect class="x">
- Toggle        -> one <polyline> through all retained corners
- VectorBlock   -> <rect class="vec"> plus a nested <svg> holding the label

Elements are built with svgwrite with debug=False: the traces carry data-*
attributes outside the SVG profile.
"""

from typing import List, Optional, Sequence, Tuple

from svgwrite.base import BaseElement
from svgwrite.container import SVG
from svgwrite.shapes import Polyline, Rect
from svgwrite.text import Text

from .config import RENDERING, RenderingConfig
from .data_model import (
    RenderedWave, Segment, Signal, Time, Toggle, Undetermined, VectorBlock, Waveform
)


def _level_y(level: bool, config: RenderingConfig) -> int:
    return config.HIGH_Y if level else config.LOW_Y


def undetermined_shape(segment: Undetermined, config: RenderingConfig = RENDERING) -> Rect:
    return Rect(
        insert=(segment.start, 0),
        size=(segment.end - segment.start, config.WAVE_HEIGHT),
        rx=config.CORNER_RADIUS,
        ry=config.CORNER_RADIUS,
        class_="x",
        debug=False,
    )


def vector_block_shapes(segment: VectorBlock, config: RenderingConfig = RENDERING) -> List[BaseElement]:
    """Block outline plus a label box stretched over the same span."""
    width = segment.end - segment.start
    outline = Rect(
        insert=(segment.start, 0),
        size=(width, config.WAVE_HEIGHT),
        rx=config.CORNER_RADIUS,
        ry=config.CORNER_RADIUS,
        class_="vec",
        debug=False,
    )
    label_box = SVG(insert=(segment.start, 0), size=(width, config.WAVE_HEIGHT), debug=False)
    label_box.viewbox(0, 0, width, config.WAVE_HEIGHT)
    label_box.stretch()
    label_box.add(Text(segment.label, insert=(width // 2, config.LABEL_BASELINE), debug=False))
    return [outline, label_box]


def toggle_points(segment: Toggle, config: RenderingConfig = RENDERING) -> List[Tuple[Time, int]]:
    """Square wave corners; every level change adds a vertical edge."""
    if not segment.points:
        raise ValueError("Toggle segment without points")
    first_time, first_level = segment.points[0]
    y = _level_y(first_level, config)
    points = [(first_time, y)]
    for time, level in segment.points[1:]:
        new_y = _level_y(level, config)
        points.append((time, y))
        points.append((time, new_y))
        y = new_y
    points.append((segment.end, y))
    return points


def toggle_shape(segment: Toggle, config: RenderingConfig = RENDERING) -> Polyline:
    return Polyline(points=toggle_points(segment, config), debug=False)


def segment_shapes(segment: Segment, config: RenderingConfig = RENDERING) -> List[BaseElement]:
    if isinstance(segment, Undetermined):
        return [undetermined_shape(segment, config)]
    if isinstance(segment, Toggle):
        return [toggle_shape(segment, config)]
    if isinstance(segment, VectorBlock):
        return vector_block_shapes(segment, config)
    raise TypeError(f"Unsupported segment: {segment!r}")


def render_trace(
    signal: Signal,
    segments: Sequence[Segment],
    end_time: Time,
    bit: Optional[int] = None,
    config: RenderingConfig = RENDERING,
) -> str:
    """Wrap a segment list in the <svg> element of one trace.

    Args:
        signal: Signal the segments belong to
        segments: Output of the compactor or the bus decomposer
        end_time: Global right edge, used as the element width
        bit: Vector position for a decomposed bit trace, None for the full trace
        config: Rendering constants

    Returns:
        SVG text of the trace, on a single line
    """
    trace = SVG(
        class_="wave" if bit is None else "wave bit",
        data_id=signal.identifier,
        data_size=signal.width,
        transform=f"scale({config.SCALE_X} {config.SCALE_Y})",
        width=end_time,
        debug=False,
    )
    if bit is not None:
        trace['data-bit'] = bit
    for segment in segments:
        for shape in segment_shapes(segment, config):
            trace.add(shape)
    return trace.tostring()


def render_waveform(wave: Waveform, end_time: Time, config: RenderingConfig = RENDERING) -> Optional[RenderedWave]:
    """Render a compacted waveform and its bit traces.

    Returns None, and leaves wave.rendered unset, when the signal never changed.
    """
    if not wave.values or wave.segments is None:
        return None
    bits: List[str] = [
        render_trace(wave.signal, segments, end_time, bit=index, config=config)
        for index, segments in enumerate(wave.bit_segments)
    ]
    wave.rendered = RenderedWave(
        wave=render_trace(wave.signal, wave.segments, end_time, config=config),
        bits=bits,
    )
    return wave.rendered
