import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .errors import JfifError
from .json_format import JsonFormat
from .reader import read
from .text import TextFormat

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jfifdump",
        description="Dump the segments of a JFIF/JPEG file without decoding the image",
    )
    parser.add_argument("path", type=Path, help="Jpeg file to use")
    parser.add_argument("-f", "--format", choices=["text", "json"], default="text",
                        help="Output format")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Make output more verbose")
    parser.add_argument("-d", "--debug", action="store_true",
                        help="Log every marker found to stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        f = open(args.path, "rb")
    except OSError as err:
        print(f"Unable to open file {args.path}: {err}", file=sys.stderr)
        return 1

    with f:
        try:
            if args.format == "json":
                handler = JsonFormat(args.verbose)
                read(f, handler)
                print(handler.stringify())
            else:
                read(f, TextFormat(args.verbose))
        except JfifError as err:
            logger.debug("Parsing %s failed", args.path, exc_info=True)
            print(f"Error reading file: {err}", file=sys.stderr)
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
