"""Built-in VCD backend based on wavesvg.vcd_parser."""

import sys
from pathlib import Path
from typing import Iterable, Tuple

from .base import BackendFactory, BackendType, TraceBackend
from ..data_model import Command, Header
from ..vcd_parser import VCDParser


class VcdBackend(TraceBackend):
    """Decode VCD text from a file, or from stdin when the path is "-"."""

    def __init__(self, file_path: str):
        super().__init__(file_path)
        self._backend_type = BackendType.VCD

    def load(self) -> Tuple[Header, Iterable[Command]]:
        if self.file_path == "-":
            parser = VCDParser(sys.stdin)
        else:
            parser = VCDParser.from_path(self.file_path)
        header = parser.parse_header()
        return header, parser.iter_commands()

    def supports_file_format(self, file_path: str) -> bool:
        return file_path == "-" or Path(file_path).suffix.lower() == ".vcd"


BackendFactory.register_backend(BackendType.VCD, VcdBackend)
