"""Test SVG primitives produced by the emitter."""

import xml.etree.ElementTree as ET

import pytest

from wavesvg.config import RenderingConfig
from wavesvg.data_model import Signal, Toggle, TriState, Undetermined, VectorBlock, Waveform
from wavesvg.svg_emitter import (
    render_trace, render_waveform, segment_shapes, toggle_points, toggle_shape,
    undetermined_shape, vector_block_shapes
)


def shapes_of(text):
    """Parse a trace and return its drawn children (the empty <defs> skipped)."""
    root = ET.fromstring(text)
    return root, [child for child in root if child.tag != "defs"]


def test_undetermined_rect():
    rect = ET.fromstring(undetermined_shape(Undetermined(10, 25)).tostring())
    assert rect.tag == "rect"
    assert rect.attrib == {
        "class": "x", "rx": "1", "ry": "1", "x": "10", "y": "0", "width": "15", "height": "10",
    }


def test_toggle_polyline():
    segment = Toggle(points=((0, False), (5, True)), end=10)
    assert toggle_points(segment) == [(0, 10), (5, 10), (5, 0), (10, 0)]
    polyline = ET.fromstring(toggle_shape(segment).tostring())
    assert polyline.tag == "polyline"
    assert polyline.get("points") == "0,10 5,10 5,0 10,0"


def test_single_point_toggle_ends_at_its_level():
    assert toggle_points(Toggle(points=((4, False),), end=10)) == [(4, 10), (10, 10)]
    assert toggle_points(Toggle(points=((4, True),), end=10)) == [(4, 0), (10, 0)]


def test_toggle_without_points_is_rejected():
    with pytest.raises(ValueError):
        toggle_points(Toggle(points=(), end=10))


def test_vector_block_with_centered_label():
    outline, label_box = vector_block_shapes(VectorBlock(7, 17, "0xc"))
    rect = ET.fromstring(outline.tostring())
    assert rect.get("class") == "vec"
    assert (rect.get("x"), rect.get("width"), rect.get("height")) == ("7", "10", "10")

    box = ET.fromstring(label_box.tostring())
    assert box.tag == "svg"
    assert box.get("viewBox") == "0 0 10 10"
    assert box.get("preserveAspectRatio") == "none"
    label = box.find("text")
    assert label.text == "0xc"
    assert (label.get("x"), label.get("y")) == ("5", "8")


def test_segment_shapes_dispatch():
    assert [s.elementname for s in segment_shapes(Undetermined(0, 1))] == ["rect"]
    assert [s.elementname for s in segment_shapes(VectorBlock(0, 1, "0x0"))] == ["rect", "svg"]
    assert [s.elementname for s in segment_shapes(Toggle(points=((0, True),), end=1))] == ["polyline"]
    with pytest.raises(TypeError):
        segment_shapes("not a segment")


def test_trace_wrapper():
    signal = Signal(identifier="#", name="bus", width=4)
    text = render_trace(signal, [Undetermined(0, 20), VectorBlock(20, 30, "0x3")], end_time=30)
    assert "\n" not in text
    root, shapes = shapes_of(text)
    assert root.tag == "svg"
    assert root.get("class") == "wave"
    assert root.get("data-id") == "#"
    assert root.get("data-size") == "4"
    assert root.get("transform") == "scale(10 2)"
    assert root.get("width") == "30"
    assert root.get("data-bit") is None
    assert [shape.tag for shape in shapes] == ["rect", "rect", "svg"]

    bit, _ = shapes_of(render_trace(signal, [Undetermined(0, 30)], end_time=30, bit=2))
    assert bit.get("class") == "wave bit"
    assert bit.get("data-bit") == "2"


def test_identifier_is_escaped():
    signal = Signal(identifier='"<', name="odd", width=1)
    text = render_trace(signal, [], end_time=10)
    assert '"<' not in text
    root, _ = shapes_of(text)
    assert root.get("data-id") == '"<'


def test_custom_rendering_config():
    config = RenderingConfig(HIGH_Y=2, LOW_Y=8)
    segment = Toggle(points=((0, True), (3, False)), end=6)
    assert toggle_points(segment, config) == [(0, 2), (3, 2), (3, 8), (6, 8)]


def test_silent_waveform_renders_nothing():
    wave = Waveform(signal=Signal(identifier="%", name="unused", width=1))
    assert render_waveform(wave, end_time=40) is None
    assert wave.rendered is None


def test_render_waveform_with_bits():
    wave = Waveform(
        signal=Signal(identifier="#", name="bus", width=2),
        values=[(0, (TriState.V1, TriState.V0))],
        segments=[VectorBlock(0, 10, "0x2")],
        bit_segments=[
            [Toggle(points=((0, True),), end=10)],
            [Toggle(points=((0, False),), end=10)],
        ],
    )
    rendered = render_waveform(wave, end_time=10)
    assert rendered is wave.rendered
    _, shapes = shapes_of(rendered.wave)
    assert shapes[1].find("text").text == "0x2"
    assert len(rendered.bits) == 2
    low, low_shapes = shapes_of(rendered.bits[1])
    assert low.get("data-bit") == "1"
    assert low_shapes[0].get("points") == "0,10 10,10"
