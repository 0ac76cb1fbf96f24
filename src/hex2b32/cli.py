"""
Command line front end

Reads hexadecimal text from stdin and writes its RFC4648 base32 encoding,
followed by a newline, to stdout.
"""

import argparse
import logging
import sys
from typing import BinaryIO, List, Optional, TextIO, Union

from . import __version__
from .base32 import Base32Encoder
from .config import CaseMode, EncoderConfig
from .hexsrc import HexDecodeError, iter_hex_bytes, iter_stream_chars

logger = logging.getLogger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    """Usage errors exit with status 1 and point at --help"""

    def error(self, message: str) -> None:
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n"
                     "Please run with --help for usage options.\n")


def build_parser() -> argparse.ArgumentParser:
    p = _ArgumentParser(
        prog="hex2b32",
        description="Converts hexadecimal data from STDIN and outputs the data "
                    "in base32 (RFC 3548) to STDOUT",
    )
    p.add_argument(
        "-e", "--input-errors",
        action="store_true",
        help="display the first input error and exit with failure "
             "(default behavior is to ignore invalid input)",
    )
    p.add_argument(
        "-n", "--no-padding",
        action="store_true",
        help="omit trailing '=' symbols",
    )
    p.add_argument(
        "-l", "--lower",
        action="store_true",
        help="output lower case letters",
    )
    p.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="log debugging information to STDERR",
    )
    p.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return p


def config_from_args(args: argparse.Namespace) -> EncoderConfig:
    return EncoderConfig(
        case=CaseMode.LOWER if args.lower else CaseMode.UPPER,
        padding=not args.no_padding,
    )


def run(stdin: Union[TextIO, BinaryIO], stdout: TextIO, config: EncoderConfig, ignore_errors: bool = True) -> None:
    """
    Encode all hex read from stdin and write the base32 text to stdout

    Output is written as it is produced. On a HexDecodeError the symbols for
    bytes decoded so far have already been written, and nothing is finalized.
    """
    encoder = Base32Encoder(config)
    for byte in iter_hex_bytes(iter_stream_chars(stdin), ignore_errors=ignore_errors):
        stdout.write(encoder.consume(byte))
    logger.debug("End of input in phase %d", encoder.phase)
    stdout.write(encoder.finalize())
    stdout.write("\n")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        # Raw bytes, so input that is not valid text is still just invalid hex
        stdin = getattr(sys.stdin, "buffer", sys.stdin)
        run(stdin, sys.stdout, config_from_args(args), ignore_errors=not args.input_errors)
    except HexDecodeError as exc:
        sys.stdout.flush()
        logger.debug("Input rejected: %s", exc.error_type.name)
        print(f"hex2b32: {exc}", file=sys.stderr)
        return 1
    return 0
