"""Test the pure-Python VCD decoder."""

import pytest

from wavesvg.data_model import ChangeScalar, ChangeVector, Scope, Signal, Timestamp, TriState
from wavesvg.errors import MalformedTraceError
from wavesvg.values import parse_bits
from wavesvg.vcd_parser import VCDParser
from .test_utils import get_test_input_path, parse_vcd_text, TestFiles

HEADER = """
$timescale 1 ns $end
$scope module top $end
$var wire 1 ! clk $end
$var wire 4 # bus [3:0] $end
$upscope $end
$enddefinitions $end
"""


def test_counter_header(counter_vcd):
    header = VCDParser.from_path(counter_vcd).parse_header()
    assert header.timescale == "1ns"
    assert header.date == "Mon Oct 12 10:00:00 2026"
    assert header.version == "wavesvg test generator"

    assert len(header.items) == 1
    top = header.items[0]
    assert isinstance(top, Scope)
    assert (top.name, top.scope_type) == ("top", "module")
    names = [child.name for child in top.children]
    assert names == ["clk", "rst", "count", "data", "unused", "core"]

    count = top.children[2]
    assert count == Signal(identifier="#", name="count", width=4, var_type="reg", index="[3:0]")
    assert count.display_name == "count [3:0]"

    core = top.children[5]
    assert [s.identifier for s in core.children] == ["!", "&"]
    assert [s.name for s in header.iter_signals()] == [
        "clk", "rst", "count", "data", "unused", "clk", "state"
    ]


def test_commands():
    header, commands = parse_vcd_text(HEADER + """
#0
$dumpvars
0!
bxx01 #
$end
#5
1!
B1010 #
#12
z!
""")
    assert header.timescale == "1ns"
    assert commands == [
        Timestamp(0),
        ChangeScalar("!", TriState.V0),
        ChangeVector("#", parse_bits("xx01")),
        Timestamp(5),
        ChangeScalar("!", TriState.V1),
        ChangeVector("#", parse_bits("1010")),
        Timestamp(12),
        ChangeScalar("!", TriState.Z),
    ]


def test_iter_commands_parses_header_first():
    parser = VCDParser.from_path(get_test_input_path(TestFiles.UNKNOWN_SIGNAL_VCD))
    commands = list(parser)
    assert parser.header is not None
    assert commands[-1] == ChangeScalar("?", TriState.V1)


def test_real_and_string_changes_are_skipped():
    header, commands = parse_vcd_text(HEADER + """
#0
r1.25 !
sHELLO #
1!
""")
    assert commands == [Timestamp(0), ChangeScalar("!", TriState.V1)]


def test_comments_and_unknown_directives():
    header, commands = parse_vcd_text("""
$comment written by hand $end
$attrbegin misc 07 clk 1 $end
$scope module top $end
$var wire 1 ! clk $end
$upscope $end
$enddefinitions $end
$comment body comment $end
#1
1!
""")
    assert [s.name for s in header.iter_signals()] == ["clk"]
    assert commands == [Timestamp(1), ChangeScalar("!", TriState.V1)]


def test_top_level_var_without_scope():
    header, _ = parse_vcd_text("$var wire 1 ! lonely $end\n$enddefinitions $end\n")
    assert header.items == [Signal(identifier="!", name="lonely", width=1)]


@pytest.mark.parametrize("text,message", [
    (HEADER + "#abc\n", "invalid timestamp"),
    (HEADER + "#0\n2!\n", "invalid value change"),
    (HEADER + "#0\nb10u1 #\n", "invalid value character"),
    (HEADER + "#0\n1\n", "without identifier"),
    (HEADER + "#0\nb1010\n", "unexpected end of file"),
    (HEADER + "$scope module late $end\n", "unexpected '$scope'"),
    ("$scope module top $end\n$var wire 1 ! clk $end\n", "missing $enddefinitions"),
    ("$var wire four ! clk $end\n$enddefinitions $end\n", "invalid width"),
    ("$var wire 0 ! clk $end\n$enddefinitions $end\n", "invalid width"),
    ("$var wire 1 ! $end\n$enddefinitions $end\n", "$var needs"),
    ("$upscope $end\n$enddefinitions $end\n", "$upscope without"),
    ("$date today\n", "unterminated $date"),
    ("clk\n$enddefinitions $end\n", "unexpected 'clk' in header"),
])
def test_malformed_input(text, message):
    with pytest.raises(MalformedTraceError) as excinfo:
        parse_vcd_text(text)
    assert message in str(excinfo.value)
    assert excinfo.value.line is not None
