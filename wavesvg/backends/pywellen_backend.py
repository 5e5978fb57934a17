"""Pywellen backend: decode VCD, FST and GHW files with the wellen library."""

import heapq
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from .base import BackendFactory, BackendType, TraceBackend
from ..data_model import (
    ChangeScalar, ChangeVector, Command, Header, Scope, Signal, Time, Timestamp, TriState
)
from ..errors import MalformedTraceError
from ..values import bits_from_int, parse_bits

logger = logging.getLogger(__name__)

Change = Tuple[Time, int, Command]  # (time, declaration order, command)


def convert_value(identifier: str, width: int, value: Any) -> Command:
    """Convert a pywellen change value to a change command.

    Pywellen returns int for fully driven bit vectors, str for values that
    contain X/Z bits and None for undefined values.
    """
    if value is None:
        if width == 1:
            return ChangeScalar(identifier, TriState.X)
        return ChangeVector(identifier, (TriState.X,) * width)
    if isinstance(value, int):
        if width == 1:
            return ChangeScalar(identifier, TriState.V1 if value else TriState.V0)
        return ChangeVector(identifier, bits_from_int(int(value), width))
    if isinstance(value, str):
        bits = parse_bits(value)
        if len(bits) == 1 and width == 1:
            return ChangeScalar(identifier, bits[0])
        return ChangeVector(identifier, bits)
    raise MalformedTraceError(f"unsupported value {value!r} for signal {identifier}")


class PywellenBackend(TraceBackend):
    """Backend implementation using the pywellen library.

    The wellen library loads signals one at a time, so the per-signal change
    lists are merged back into one time-ordered command stream.
    """

    def __init__(self, file_path: str):
        if file_path == "-":
            raise ValueError("The pywellen backend reads files only; use the vcd backend for stdin")
        super().__init__(file_path)
        self._backend_type = BackendType.PYWELLEN
        self._waveform: Any = None
        self._vars: Dict[str, Any] = {}  # identifier -> first pywellen Var

    def _open(self) -> Any:
        try:
            import pywellen
        except ImportError:
            raise ImportError("pywellen is required for the pywellen backend. Install it with: pip install wavesvg[wellen]")
        return pywellen.Waveform(
            self.file_path,
            multi_threaded=True,
            remove_scopes_with_empty_name=False,
            load_body=True,
        )

    def load(self) -> Tuple[Header, Iterable[Command]]:
        self._waveform = self._open()
        hierarchy = self._waveform.hierarchy
        header = Header(
            items=[self._convert_scope(scope, hierarchy) for scope in hierarchy.top_scopes()],
            timescale=self._timescale_str(hierarchy),
            date=hierarchy.date(),
            version=hierarchy.version(),
        )
        return header, self._iter_commands(header)

    @staticmethod
    def _timescale_str(hierarchy: Any) -> Optional[str]:
        timescale = hierarchy.timescale()
        if timescale is None:
            return None
        factor = getattr(timescale, 'factor', 1)
        unit = getattr(timescale, 'unit', '')
        return f"{factor}{unit}"

    def _convert_scope(self, scope: Any, hierarchy: Any) -> Scope:
        result = Scope(name=scope.name(hierarchy), scope_type=str(scope.scope_type()))
        for var in scope.vars(hierarchy):
            result.children.append(self._convert_var(var, hierarchy))
        for child in scope.scopes(hierarchy):
            result.children.append(self._convert_scope(child, hierarchy))
        return result

    def _convert_var(self, var: Any, hierarchy: Any) -> Signal:
        identifier = str(var.signal_ref())
        index = var.index()
        signal = Signal(
            identifier=identifier,
            name=var.name(hierarchy),
            width=var.bitwidth() or 1,
            var_type=str(var.var_type()),
            index=f"[{index.msb()}:{index.lsb()}]" if index is not None else None,
        )
        if var.is_real() or var.is_string():
            logger.debug("Skipping changes of non-bit variable %s", signal.name)
        else:
            self._vars.setdefault(identifier, var)
        return signal

    def _signal_changes(self, order: int, signal: Signal, var: Any) -> Iterator[Change]:
        for time, value in self._waveform.get_signal(var).all_changes():
            yield time, order, convert_value(signal.identifier, signal.width, value)

    def _iter_commands(self, header: Header) -> Iterator[Command]:
        signals = {signal.identifier: signal for signal in reversed(list(header.iter_signals()))}
        streams: List[Iterator[Change]] = [
            self._signal_changes(order, signals[identifier], var)
            for order, (identifier, var) in enumerate(self._vars.items())
        ]
        current: Optional[Time] = None
        for time, _, command in heapq.merge(*streams, key=lambda change: (change[0], change[1])):
            if time != current:
                current = time
                yield Timestamp(time)
            yield command

    def supports_file_format(self, file_path: str) -> bool:
        return Path(file_path).suffix.lower() in ('.vcd', '.fst', '.ghw')


BackendFactory.register_backend(BackendType.PYWELLEN, PywellenBackend)
