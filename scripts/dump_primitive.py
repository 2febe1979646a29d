#!/usr/bin/env python
"""
Dump a binary PrimitiveState stream as text (or export it to HDF5)

Usage:
    python scripts/dump_primitive.py state.bin --species 2
    python scripts/dump_primitive.py field.bin --shape 10 4 --species 5 --format .8e
    python scripts/dump_primitive.py field.bin --shape 10 4 --species 5 --h5 out.h5 --name step_0001

Binary streams carry no header: shape and species count must be known.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from fluidprim.lifecycle import empty_collection, init_state
from fluidprim.primitive import PrimitiveState
from fluidprim.storage import read_binary, write_formatted
from fluidprim.storage.h5store import H5PrimitiveStore

logger = logging.getLogger("dump_primitive")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Convert a binary primitive-state stream to text or HDF5",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Single state with 2 species, list-directed output
  python scripts/dump_primitive.py state.bin --species 2

  # 2D field 10x4, 5 species, scientific notation
  python scripts/dump_primitive.py field.bin --shape 10 4 --species 5 --format .8e
        """,
    )

    parser.add_argument("input", type=str, help="Binary stream written by write_binary()")

    parser.add_argument(
        "--shape",
        type=int,
        nargs="*",
        default=None,
        help="Collection shape (1 to 3 extents). Omit for a single state",
    )

    parser.add_argument(
        "--species",
        type=int,
        required=True,
        help="Number of species Ns of every element",
    )

    parser.add_argument(
        "--format",
        type=str,
        default="*",
        help="Text format: '*' (list-directed, default) or a format spec such as .8e",
    )

    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Text output file (default: stdout)",
    )

    parser.add_argument(
        "--h5",
        type=str,
        default=None,
        help="Export to this HDF5 file instead of text",
    )

    parser.add_argument(
        "--name",
        type=str,
        default="state",
        help="Entry name inside the HDF5 file (default: state)",
    )

    parser.add_argument("--quiet", action="store_true", help="Only report errors")

    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    logging.basicConfig(level=logging.WARNING if args.quiet else logging.INFO)

    if args.species < 0:
        logger.error("--species must be >= 0")
        return 1
    if args.shape is not None and not (1 <= len(args.shape) <= 3):
        logger.error("--shape takes 1 to 3 extents, got %d", len(args.shape))
        return 1

    prim = PrimitiveState() if not args.shape else empty_collection(tuple(args.shape))
    init_state(prim, args.species)

    with open(args.input, "rb") as f:
        status = read_binary(f, prim)
    if status != 0:
        logger.error("Reading %s failed: %s", args.input, status.name)
        return 1
    logger.info("Read %s (shape=%s, Ns=%d)", args.input, args.shape or "scalar", args.species)

    if args.h5:
        with H5PrimitiveStore(args.h5, "a") as store:
            status = store.write(args.name, prim)
        target = f"{args.h5}:{args.name}"
    elif args.output:
        Path(args.output).parent.mkdir(parents=True, exist_ok=True)
        with open(args.output, "w", encoding="utf-8") as f:
            status = write_formatted(f, args.format, prim)
        target = args.output
    else:
        status = write_formatted(sys.stdout, args.format, prim)
        target = "stdout"

    if status != 0:
        logger.error("Writing %s failed: %s", target, status.name)
        return 1
    logger.info("Wrote %s", target)
    return 0


if __name__ == "__main__":
    sys.exit(main())
