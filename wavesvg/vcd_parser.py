"""
This module provides a pure-Python VCD (Value Change Dump) decoder.

The header is turned into a declaration tree (Header of Scope/Signal items)
and the body into a stream of Timestamp / ChangeScalar / ChangeVector
commands, ready to be replayed into a WaveformStore.
"""

import io
import logging
from pathlib import Path
from typing import IO, Iterator, List, Optional, Tuple, Union

from .data_model import (
    ChangeScalar, ChangeVector, Command, Header, Scope, Signal, Timestamp, TriState
)
from .errors import MalformedTraceError
from .values import parse_bits

logger = logging.getLogger(__name__)

# Body keywords that only bracket value changes
_DUMP_KEYWORDS = {"$dumpvars", "$dumpall", "$dumpon", "$dumpoff", "$end"}

Token = Tuple[str, int]  # (text, line number)


class VCDParser:
    """
    Streaming VCD decoder.

    Parameters:
        stream: Text stream positioned at the start of the VCD file.

    Usage:
        parser = VCDParser.from_path("trace.vcd")
        header = parser.parse_header()
        for command in parser.iter_commands():
            ...
    """
    def __init__(self, stream: IO[str]):
        self._tokens = self._tokenize(stream)
        self._line = 0
        self.header: Optional[Header] = None

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> 'VCDParser':
        """Read the whole file into memory and create a parser over it."""
        with open(path, "rb") as f:
            content = f.read().decode("utf-8", errors="ignore")
        return cls(io.StringIO(content))

    @staticmethod
    def _tokenize(stream: IO[str]) -> Iterator[Token]:
        for line_no, line in enumerate(stream, start=1):
            for token in line.split():
                yield token, line_no

    def _next(self) -> Optional[str]:
        try:
            token, self._line = next(self._tokens)
        except StopIteration:
            return None
        return token

    def _expect(self, what: str) -> str:
        token = self._next()
        if token is None:
            raise MalformedTraceError(f"unexpected end of file, expected {what}", self._line)
        return token

    def _until_end(self, directive: str) -> List[str]:
        """Collect tokens up to the closing $end."""
        tokens = []
        while True:
            token = self._next()
            if token is None:
                raise MalformedTraceError(f"unterminated {directive}", self._line)
            if token == "$end":
                return tokens
            tokens.append(token)

    # ------------------------------------------------------------------
    # Header
    # ------------------------------------------------------------------
    def parse_header(self) -> Header:
        """
        Parse declarations up to and including "$enddefinitions $end".

        Returns:
            The declaration tree and file metadata.
        """
        header = Header()
        scope_stack: List[Scope] = []

        def add_item(item: Union[Scope, Signal]) -> None:
            if scope_stack:
                scope_stack[-1].children.append(item)
            else:
                header.items.append(item)

        while True:
            token = self._next()
            if token is None:
                raise MalformedTraceError("missing $enddefinitions", self._line)
            if not token.startswith("$"):
                raise MalformedTraceError(f"unexpected {token!r} in header", self._line)

            if token == "$enddefinitions":
                self._until_end(token)
                break
            elif token == "$date":
                header.date = " ".join(self._until_end(token))
            elif token == "$version":
                header.version = " ".join(self._until_end(token))
            elif token == "$timescale":
                header.timescale = "".join(self._until_end(token)) or None
            elif token == "$scope":
                args = self._until_end(token)
                if len(args) < 2:
                    raise MalformedTraceError("$scope needs a type and a name", self._line)
                scope = Scope(name=args[1], scope_type=args[0])
                add_item(scope)
                scope_stack.append(scope)
            elif token == "$upscope":
                self._until_end(token)
                if not scope_stack:
                    raise MalformedTraceError("$upscope without matching $scope", self._line)
                scope_stack.pop()
            elif token == "$var":
                add_item(self._parse_var())
            else:
                # $comment, $attrbegin and other vendor extensions
                self._until_end(token)

        if scope_stack:
            logger.debug("Header ends with %d open scope(s)", len(scope_stack))
        self.header = header
        return header

    def _parse_var(self) -> Signal:
        # Format: "$var <type> <width> <id> <reference> [index] $end"
        args = self._until_end("$var")
        if len(args) < 4:
            raise MalformedTraceError("$var needs a type, width, identifier and reference", self._line)
        var_type, width_text, identifier, reference = args[:4]
        try:
            width = int(width_text)
        except ValueError:
            raise MalformedTraceError(f"invalid width {width_text!r} for {reference}", self._line) from None
        if width < 1:
            raise MalformedTraceError(f"invalid width {width} for {reference}", self._line)
        index = " ".join(args[4:]) or None
        return Signal(identifier=identifier, name=reference, width=width, var_type=var_type, index=index)

    # ------------------------------------------------------------------
    # Body
    # ------------------------------------------------------------------
    def iter_commands(self) -> Iterator[Command]:
        """
        Yield the commands of the value change section.

        parse_header() is called first if it has not been yet.
        """
        if self.header is None:
            self.parse_header()

        while True:
            token = self._next()
            if token is None:
                return
            c = token[0]
            if c == '#':
                try:
                    time = int(token[1:])
                except ValueError:
                    raise MalformedTraceError(f"invalid timestamp {token!r}", self._line) from None
                yield Timestamp(time)
            elif c == '$':
                if token == "$comment":
                    self._until_end(token)
                elif token not in _DUMP_KEYWORDS:
                    raise MalformedTraceError(f"unexpected {token!r} in value changes", self._line)
            elif c in 'bB':
                line = self._line
                identifier = self._expect("identifier after vector value")
                yield ChangeVector(identifier, parse_bits(token[1:], line))
            elif c in 'rRsS':
                # Real and string values are not drawn
                identifier = self._expect("identifier after real/string value")
                logger.debug("Ignoring %s change of %s", "real" if c in 'rR' else "string", identifier)
            else:
                bit = TriState.from_char(c)
                if bit is None:
                    raise MalformedTraceError(f"invalid value change {token!r}", self._line)
                identifier = token[1:]
                if not identifier:
                    raise MalformedTraceError(f"value change {token!r} without identifier", self._line)
                yield ChangeScalar(identifier, bit)

    def __iter__(self) -> Iterator[Command]:
        return self.iter_commands()
