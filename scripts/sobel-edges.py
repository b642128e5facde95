#!/usr/bin/env python3
"""
Edge map of a grayscale image

Example
-------
    > sobel-edges.py input.pgm -o edges.pgm -j 4 --strategy tiled --tile-size 32

Notes
-----
Only binary PGM (P5) images are supported.
"""


import argparse
import logging
import sys

import sobeledge as se
from sobeledge.errors import FormatError, GeometryError, SourceError


def parse_args():
    parser = argparse.ArgumentParser(description="Sobel edge detection")
    parser.add_argument("input", type=str, help="Input PGM image")
    parser.add_argument("-o", "--output", type=str, default="output.pgm", help="Output PGM image")
    parser.add_argument("-j", "--workers", type=int, default=se.default_opts["workers"], help="Number of worker threads")
    parser.add_argument("--strategy", choices=["rows", "tiled"], default=se.default_opts["strategy"], help="Partitioning of the image")
    parser.add_argument("--tile-size", type=int, default=se.default_opts["tile_size"], help="Tile size for tiled strategy")
    parser.add_argument("--no-unroll", dest="unroll", action="store_false", help="Use plain 3x3 loop")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug output")
    return parser.parse_args()


if __name__ == "__main__":
    args = parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    logger = logging.getLogger("sobel-edges")

    opts = dict(workers=args.workers, strategy=args.strategy, tile_size=args.tile_size, unroll=args.unroll)
    logger.info(f"# threads: {args.workers}")

    try:
        stats = se.process_file(args.input, args.output, opts)
    except SourceError as e:
        logger.error(str(e))
        sys.exit(1)
    except FormatError as e:
        logger.error(f"Unsupported image: {e}")
        sys.exit(1)
    except GeometryError as e:
        logger.error(f"Invalid image geometry: {e}")
        sys.exit(1)
    except ValueError as e:
        logger.error(f"Invalid options: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        sys.exit(1)

    logger.info(f"Sobel filter execution time: {1000*stats['gradient_time']:.2f} ms")
    logger.info(f"Normalization time: {1000*stats['normalize_time']:.2f} ms")
    logger.info("Done")
