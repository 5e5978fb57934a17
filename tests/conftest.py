"""Common test fixtures for wavesvg tests."""

import pytest

from wavesvg.data_model import Header, Scope, Signal
from wavesvg.pipeline import render
from wavesvg.vcd_parser import VCDParser
from .test_utils import get_test_input_path, TestFiles


@pytest.fixture
def counter_vcd():
    """Path to the small counter trace."""
    return get_test_input_path(TestFiles.COUNTER_VCD)


@pytest.fixture
def counter_result(counter_vcd):
    """Render result of the counter trace."""
    parser = VCDParser.from_path(counter_vcd)
    header = parser.parse_header()
    return render(header, parser.iter_commands())


@pytest.fixture
def simple_header():
    """Two signals in one scope: a 1-bit 'clk' (!) and a 4-bit 'bus' (#)."""
    return Header(items=[
        Scope(name="top", children=[
            Signal(identifier="!", name="clk", width=1),
            Signal(identifier="#", name="bus", width=4),
        ])
    ])
