"""Command-line interface for cbd."""

import argparse
import logging
import sys
from collections.abc import Sequence
from typing import BinaryIO, Optional

from . import __version__
from .convert import decode, decode_to_diagnostic, encode
from .errors import CbdError

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="cbd",
        description=(
            "Convert CBOR (raw or base64) from stdin to JSON, "
            "or JSON to CBOR with --encode"
        ),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--encode", "-e", action="store_true", help="Encode JSON input as CBOR"
    )
    parser.add_argument(
        "--base64",
        "-b",
        action="store_true",
        help="With --encode, write URL-safe unpadded base64 instead of raw CBOR",
    )
    parser.add_argument(
        "--diagnostic",
        "-d",
        action="store_true",
        help="Write CBOR diagnostic notation instead of JSON",
    )
    parser.add_argument("--input", "-i", help="Input file (default: stdin)")
    parser.add_argument("--output", "-o", help="Output file (default: stdout)")
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Log debug information to stderr"
    )
    return parser


def _read_input(path: Optional[str]) -> bytes:
    if path is None:
        return sys.stdin.buffer.read()
    with open(path, "rb") as f:
        return f.read()


def _write_output(path: Optional[str], data: bytes) -> None:
    if path is None:
        stream: BinaryIO = sys.stdout.buffer
        stream.write(data)
        stream.flush()
        return
    with open(path, "wb") as f:
        f.write(data)


def run(args: argparse.Namespace) -> bytes:
    """Run the selected conversion and return the bytes to write."""
    data = _read_input(args.input)
    logger.debug("Read %d bytes of input", len(data))
    if args.encode:
        return encode(data, base64=args.base64)
    if args.diagnostic:
        return (decode_to_diagnostic(data) + "\n").encode("utf-8")
    return (decode(data) + "\n").encode("utf-8")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.base64 and not args.encode:
        parser.error("--base64 requires --encode")
    if args.diagnostic and args.encode:
        parser.error("--diagnostic cannot be combined with --encode")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        output = run(args)
    except CbdError as e:
        print(f"cbd: {e.describe()}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"cbd: failed to read input: {e}", file=sys.stderr)
        return 1

    try:
        _write_output(args.output, output)
    except OSError as e:
        print(f"cbd: failed to write output: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
