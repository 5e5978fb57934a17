"""Waveform store: one Waveform per declared signal identifier.

The store is created once from the declaration tree, filled by a single
sequential replay of the decoder's commands and validated before any
compaction starts. After validation every Waveform is read-only for the
compactor and can be processed independently.
"""

import logging
from typing import Dict, Iterable, Iterator, List, Optional

from .config import RENDERING
from .data_model import (
    ChangeScalar, ChangeVector, Command, Header, ScopeItem, Signal, SignalId,
    Time, Timestamp, Value, Waveform
)
from .errors import MalformedTraceError, UnknownSignalReferenceError
from .values import validate

logger = logging.getLogger(__name__)


def identifier_sort_key(identifier: SignalId) -> tuple[int, str]:
    """Shorter identifiers first, then lexicographic (VCD code allocation order)."""
    return (len(identifier), identifier)


class WaveformStore:
    """Mapping from signal identifier to Waveform, iterated in identifier order."""

    def __init__(self) -> None:
        self._waves: Dict[SignalId, Waveform] = {}
        self._time: Time = 0
        self._num_events = 0

    @classmethod
    def from_header(cls, header: Header) -> 'WaveformStore':
        """Create an empty store from the declaration tree.

        The scope hierarchy is flattened: scopes only matter for display.
        """
        store = cls()
        store.add_items(header.items)
        return store

    def add_items(self, items: Iterable[ScopeItem]) -> None:
        for item in items:
            if isinstance(item, Signal):
                self.add_signal(item)
            else:
                self.add_items(item.children)

    def add_signal(self, signal: Signal) -> None:
        if signal.identifier in self._waves:
            # Alias of an already declared signal; it shares the recorded values
            logger.debug("Signal '%s' aliases identifier %s", signal.name, signal.identifier)
            return
        self._waves[signal.identifier] = Waveform(signal=signal)

    def __len__(self) -> int:
        return len(self._waves)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._waves

    def __getitem__(self, identifier: SignalId) -> Waveform:
        return self._waves[identifier]

    def __iter__(self) -> Iterator[Waveform]:
        for identifier in sorted(self._waves, key=identifier_sort_key):
            yield self._waves[identifier]

    def get(self, identifier: SignalId) -> Optional[Waveform]:
        return self._waves.get(identifier)

    @property
    def num_events(self) -> int:
        return self._num_events

    def record(self, time: Time, identifier: SignalId, value: Value) -> None:
        """Append one change to the signal's history."""
        wave = self._waves.get(identifier)
        if wave is None:
            raise UnknownSignalReferenceError(identifier, time)
        wave.values.append((time, value))
        self._num_events += 1

    def replay(self, commands: Iterable[Command]) -> None:
        """Apply decoder commands in order.

        Timestamp commands set the time of the following changes.
        """
        for command in commands:
            if isinstance(command, Timestamp):
                if command.time < self._time:
                    raise MalformedTraceError(
                        f"timestamp #{command.time} is earlier than #{self._time}"
                    )
                self._time = command.time
            elif isinstance(command, (ChangeScalar, ChangeVector)):
                self.record(self._time, command.identifier, command.value)
            else:
                raise TypeError(f"Unsupported command: {command!r}")

    def validate(self) -> None:
        """Normalize every recorded value and check its width.

        Raises:
            WidthMismatchError: On the first value whose width differs
                from its signal's declared width
        """
        for wave in self:
            wave.values = [
                (time, validate(wave.signal, time, value))
                for time, value in wave.values
            ]

    def end_time(self, padding: int = RENDERING.END_TIME_PADDING) -> Time:
        """Right edge shared by every drawable of the run."""
        last_times = [wave.last_time for wave in self._waves.values()]
        return max(last_times, default=0) + padding

    def changed_waveforms(self) -> List[Waveform]:
        return [wave for wave in self if wave.values]
