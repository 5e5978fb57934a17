"""Trace decoder backends.

This package provides the decoders that turn a trace file into a declaration
tree and a command stream: the built-in pure-Python VCD decoder and an
adapter over the optional pywellen library.
"""

from .base import TraceBackend, BackendFactory, BackendType

# Import backend implementations to trigger their registration
from . import vcd_backend
from . import pywellen_backend

__all__ = [
    'TraceBackend',
    'BackendFactory',
    'BackendType',
]
