"""Base classes and factory for trace decoder backends."""

from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from ..data_model import Command, Header


class BackendType(Enum):
    """Supported trace decoder backends."""
    VCD = "vcd"
    PYWELLEN = "pywellen"


class TraceBackend(ABC):
    """Abstract base class for trace decoders.

    A backend turns one input into the declaration tree and the time-ordered
    command stream consumed by the rendering pipeline.
    """

    def __init__(self, file_path: str):
        """Initialize the backend with a trace file path.

        Args:
            file_path: Path to the trace file
        """
        self.file_path = file_path

    @abstractmethod
    def load(self) -> Tuple[Header, Iterable[Command]]:
        """Decode the trace.

        Returns:
            (header, commands); commands may be a lazy iterator that raises
            MalformedTraceError while being consumed
        """
        ...

    @abstractmethod
    def supports_file_format(self, file_path: str) -> bool:
        """Check if this backend can read the given file."""
        ...

    @property
    def backend_type(self) -> BackendType:
        return self._backend_type


class BackendFactory:
    """Factory for creating trace backend instances."""

    _backends: dict[BackendType, type[TraceBackend]] = {}

    @classmethod
    def register_backend(cls, backend_type: BackendType, backend_class: type[TraceBackend]) -> None:
        cls._backends[backend_type] = backend_class

    @classmethod
    def create_backend(cls, file_path: str, backend_type: Optional[BackendType] = None) -> TraceBackend:
        """Create a backend instance for the given file.

        Args:
            file_path: Path to the trace file ("-" for stdin)
            backend_type: Explicitly specify which backend to use

        Returns:
            Backend instance appropriate for the file

        Raises:
            ValueError: If no suitable backend is found
        """
        if backend_type:
            if backend_type not in cls._backends:
                raise ValueError(f"Backend {backend_type} not registered")
            return cls._backends[backend_type](file_path)

        # VCD files and stdin use the built-in decoder
        ext = Path(file_path).suffix.lower()
        if file_path == "-" or ext == ".vcd":
            return cls._backends[BackendType.VCD](file_path)

        for backend_class in cls._backends.values():
            backend = backend_class(file_path)
            if backend.supports_file_format(file_path):
                return backend

        raise ValueError(f"No suitable backend found for file: {file_path}")

    @classmethod
    def get_available_backends(cls) -> List[BackendType]:
        return list(cls._backends.keys())
