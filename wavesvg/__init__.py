"""wavesvg - render digital signal traces as SVG waveform pages."""

__version__ = "0.1.0"

from .data_model import (
    TriState, Signal, Scope, Header, Timestamp, ChangeScalar, ChangeVector,
    Waveform, Undetermined, Toggle, VectorBlock, RenderedWave
)
from .errors import (
    WaveformError, MalformedTraceError, UnknownSignalReferenceError, WidthMismatchError
)
from .values import normalize, validate, format_vector_label
from .waveform_store import WaveformStore
from .segment_compactor import compact_scalar, compact_vector, compact_waveform
from .bus_decomposer import decompose_bus
from .svg_emitter import render_trace, render_waveform
from .pipeline import RenderResult, render
from .vcd_parser import VCDParser
from .page import build_page
from .persistence import save_segments, load_segments
from .config import RENDERING, PAGE, CLI

__all__ = [
    'TriState', 'Signal', 'Scope', 'Header', 'Timestamp', 'ChangeScalar', 'ChangeVector',
    'Waveform', 'Undetermined', 'Toggle', 'VectorBlock', 'RenderedWave',
    'WaveformError', 'MalformedTraceError', 'UnknownSignalReferenceError', 'WidthMismatchError',
    'normalize', 'validate', 'format_vector_label',
    'WaveformStore', 'compact_scalar', 'compact_vector', 'compact_waveform', 'decompose_bus',
    'render_trace', 'render_waveform', 'RenderResult', 'render',
    'VCDParser', 'build_page', 'save_segments', 'load_segments',
    'RENDERING', 'PAGE', 'CLI',
]
