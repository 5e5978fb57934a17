"""Core data structures for wavesvg.

This module defines everything that flows through the rendering pipeline:
the declaration tree produced by a trace decoder, the commands replayed into
the waveform store, and the segments derived from each waveform.

    Header
    ├── items: [Scope | Signal]
    │   └── Scope (module "top")
    │       ├── Signal(identifier="!", name="clk", width=1)
    │       └── Signal(identifier="#", name="data", width=8)
    └── timescale: "1ns"

    Waveform (one per identifier)
    ├── signal: Signal
    ├── values: [(time, value)]          filled by replay
    └── rendered: Optional[RenderedWave] filled by the emitter

Values are tri-state bits. A scalar is a single TriState, a vector is a tuple
of TriState, most significant bit first.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union

Time = int  # In timescale units

# Identifier of a signal as written by the decoder (VCD short code, or the
# backend's signal reference rendered as text). Aliased declarations share it.
SignalId = str


class TriState(Enum):
    """A single four-valued bit."""
    V0 = "0"   # driven low
    V1 = "1"   # driven high
    X = "x"    # unknown
    Z = "z"    # high impedance

    @classmethod
    def from_char(cls, char: str) -> Optional['TriState']:
        """Convert a value character to a TriState, None if not a bit character."""
        return _CHAR_TO_TRISTATE.get(char)

    def __str__(self) -> str:
        return self.value


_CHAR_TO_TRISTATE = {
    '0': TriState.V0,
    '1': TriState.V1,
    'x': TriState.X,
    'X': TriState.X,
    'z': TriState.Z,
    'Z': TriState.Z,
}

Vector = Tuple[TriState, ...]
Value = Union[TriState, Vector]


@dataclass(frozen=True)
class Signal:
    """A declared variable of the trace."""
    identifier: SignalId
    name: str                  # Reference name inside its scope (e.g., "data")
    width: int                 # Declared bit width, >= 1
    var_type: str = "wire"
    index: Optional[str] = None  # Optional bit range suffix as declared, e.g. "[7:0]"

    @property
    def display_name(self) -> str:
        if self.index:
            return f"{self.name} {self.index}"
        return self.name

    @property
    def is_bus(self) -> bool:
        return self.width > 1


@dataclass
class Scope:
    """A scope of the declaration tree (module, task, function, ...)."""
    name: str
    scope_type: str = "module"
    children: List[Union['Scope', Signal]] = field(default_factory=list)


ScopeItem = Union[Scope, Signal]


@dataclass
class Header:
    """Declaration tree plus file metadata."""
    items: List[ScopeItem] = field(default_factory=list)
    timescale: Optional[str] = None
    date: Optional[str] = None
    version: Optional[str] = None

    def iter_signals(self):
        """Yield every declared Signal in depth-first declaration order."""
        stack = list(reversed(self.items))
        while stack:
            item = stack.pop()
            if isinstance(item, Signal):
                yield item
            else:
                stack.extend(reversed(item.children))


# Commands produced by a decoder and replayed into the WaveformStore.

@dataclass(frozen=True)
class Timestamp:
    time: Time


@dataclass(frozen=True)
class ChangeScalar:
    identifier: SignalId
    value: TriState


@dataclass(frozen=True)
class ChangeVector:
    identifier: SignalId
    value: Vector


Command = Union[Timestamp, ChangeScalar, ChangeVector]


# Segments derived by the compactor.

@dataclass(frozen=True)
class Undetermined:
    """Value is unknown or high impedance throughout [start, end)."""
    start: Time
    end: Time


@dataclass(frozen=True)
class Toggle:
    """Square wave through (time, level) points, drawn up to `end`.

    Adjacent points never share a level.
    """
    points: Tuple[Tuple[Time, bool], ...]
    end: Time

    @property
    def start(self) -> Time:
        return self.points[0][0]


@dataclass(frozen=True)
class VectorBlock:
    """Constant bus value held over [start, end), shown with `label`."""
    start: Time
    end: Time
    label: str


Segment = Union[Undetermined, Toggle, VectorBlock]


@dataclass
class RenderedWave:
    """Drawables of one waveform: the full trace plus one per bus bit."""
    wave: str
    bits: List[str] = field(default_factory=list)


@dataclass
class Waveform:
    """One signal's recorded history and its derived outputs."""
    signal: Signal
    values: List[Tuple[Time, Value]] = field(default_factory=list)
    segments: Optional[List[Segment]] = None
    bit_segments: List[List[Segment]] = field(default_factory=list)
    rendered: Optional[RenderedWave] = None

    @property
    def identifier(self) -> SignalId:
        return self.signal.identifier

    @property
    def last_time(self) -> Time:
        """Time of the last recorded change, 0 if the signal never changed."""
        if not self.values:
            return 0
        return self.values[-1][0]
