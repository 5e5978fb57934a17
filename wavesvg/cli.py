"""Command line entry point: render a trace file into an HTML waveform page."""

import argparse
import logging
import sys
from typing import List, Optional

from .backends import BackendFactory, BackendType
from .config import CLI
from .errors import WaveformError
from .page import build_page
from .persistence import dump_segments
from .pipeline import RenderResult, render

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wavesvg",
        description="Render a digital signal trace (VCD) into a scrollable SVG waveform page",
    )
    parser.add_argument("input", help="The trace file to read. Use - for stdin.")
    parser.add_argument(
        "-o", "--output",
        default=CLI.STDIO_MARKER,
        help="The output file. Use - for stdout (default).",
    )
    parser.add_argument(
        "--backend",
        choices=[backend.value for backend in BackendType],
        default=None,
        help=f"Trace decoder to use (default: {CLI.DEFAULT_BACKEND} for .vcd and stdin)",
    )
    parser.add_argument(
        "--fragments",
        action="store_true",
        help="Write only the SVG fragments, one per line, instead of the HTML page",
    )
    parser.add_argument("--dump-segments", metavar="FILE", help="Also save the compacted segments as YAML")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log per-signal details")
    return parser


def run(input_path: str, backend: Optional[str] = None) -> RenderResult:
    """Decode and render one trace file."""
    backend_type = BackendType(backend) if backend else None
    trace_backend = BackendFactory.create_backend(input_path, backend_type)
    logger.info("Loading %s with the %s backend", input_path, trace_backend.backend_type.value)
    header, commands = trace_backend.load()
    return render(header, commands)


def write_output(text: str, output: str) -> None:
    if output == CLI.STDIO_MARKER:
        sys.stdout.write(text)
        sys.stdout.flush()
    else:
        with open(output, "w", encoding="utf-8") as f:
            f.write(text)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=CLI.LOG_FORMAT,
        stream=sys.stderr,
    )

    try:
        result = run(args.input, args.backend)
        if args.fragments:
            text = "\n".join(result.fragments()) + "\n"
        else:
            text = build_page(result)
        dump_text = dump_segments(result) if args.dump_segments else None
        # Nothing is written until every text is ready, and the page goes first
        write_output(text, args.output)
        if dump_text is not None:
            with open(args.dump_segments, "w", encoding="utf-8") as f:
                f.write(dump_text)
    except WaveformError as e:
        logger.error("Invalid trace: %s", e)
        return 1
    except (ValueError, OSError, ImportError) as e:
        # Unsupported file type, unreadable file or missing optional backend
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
