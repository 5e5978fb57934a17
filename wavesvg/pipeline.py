"""Batch pipeline: replay, validate, compact, decompose and emit.

The run is single-threaded and all-or-nothing: any WaveformError raised by
one stage propagates to the caller and nothing is rendered.
"""

import logging
import time
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional

from .bus_decomposer import decompose_bus
from .config import RENDERING, RenderingConfig
from .data_model import Command, Header, RenderedWave, SignalId, Time, Waveform
from .segment_compactor import compact_waveform
from .svg_emitter import render_waveform
from .waveform_store import WaveformStore

logger = logging.getLogger(__name__)


@dataclass
class RenderResult:
    """Output of one run, consumed by the page assembler."""
    header: Header
    store: WaveformStore
    end_time: Time

    def rendered(self, identifier: SignalId) -> Optional[RenderedWave]:
        wave = self.store.get(identifier)
        return wave.rendered if wave else None

    def rendered_waveforms(self) -> Iterator[Waveform]:
        """Waveforms that produced a drawable, in identifier order."""
        return (wave for wave in self.store if wave.rendered is not None)

    def fragments(self) -> List[str]:
        """Every SVG fragment: each full trace followed by its bit traces."""
        parts: List[str] = []
        for wave in self.store:
            rendered = wave.rendered
            if rendered is None:
                continue
            parts.append(rendered.wave)
            parts.extend(rendered.bits)
        return parts


def compact_store(store: WaveformStore, end_time: Time) -> None:
    """Attach segments (and bus bit segments) to every changed waveform."""
    for wave in store.changed_waveforms():
        wave.segments = compact_waveform(wave, end_time)
        wave.bit_segments = decompose_bus(wave, end_time)
        logger.debug(
            "%s: %d changes -> %d segments, %d bit traces",
            wave.signal.name, len(wave.values), len(wave.segments), len(wave.bit_segments),
        )


def render(header: Header, commands: Iterable[Command], config: RenderingConfig = RENDERING) -> RenderResult:
    """Turn a decoded trace into drawables.

    Args:
        header: Declaration tree of the trace
        commands: Timestamp and change commands in file order
        config: Rendering constants

    Returns:
        RenderResult holding the filled store and the shared end time

    Raises:
        MalformedTraceError: If the command stream is not time ordered
        UnknownSignalReferenceError: If a change names an undeclared signal
        WidthMismatchError: If a value's width differs from its declaration
    """
    start = time.time()
    store = WaveformStore.from_header(header)
    store.replay(commands)
    store.validate()
    end_time = store.end_time(config.END_TIME_PADDING)
    logger.info("Replayed %d changes into %d signals, end time %d", store.num_events, len(store), end_time)

    compact_store(store, end_time)
    rendered = 0
    for wave in store:
        if render_waveform(wave, end_time, config) is not None:
            rendered += 1

    logger.info("Rendered %d of %d signals in %.2f seconds", rendered, len(store), time.time() - start)
    return RenderResult(header=header, store=store, end_time=end_time)
