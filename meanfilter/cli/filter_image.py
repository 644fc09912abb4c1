#!/usr/bin/env python3
"""
Box-filter an image with a pool of worker threads.

    meanfilter photo.png 8 --kernel-size 7 --output filtered_output.jpg
"""
import os
import sys
import argparse
import logging
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from ..exceptions import MeanFilterError
from ..pipeline.mean_filter import apply_mean_filter
from ..services.partition_service import STRATEGIES

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="meanfilter",
        description="Apply a box (mean) filter to an image using parallel workers.",
    )
    parser.add_argument("input", help="path to the input image (JPEG, PNG, ...)")
    parser.add_argument("workers", type=int, help="number of workers / regions")
    parser.add_argument("-k", "--kernel-size", type=int, default=None,
                        help="odd side length of the square kernel (default: $MEANFILTER_KERNEL_SIZE or 7)")
    parser.add_argument("-o", "--output", default=None,
                        help="output JPEG path (default: $MEANFILTER_OUTPUT_PATH or filtered_output.jpg)")
    parser.add_argument("--strategy", choices=STRATEGIES, default=None,
                        help="how the image is split between workers (default: $MEANFILTER_STRATEGY or rows)")
    parser.add_argument("--quality", type=int, default=None,
                        help="JPEG quality 1-95 (default: $JPEG_QUALITY or 95)")
    parser.add_argument("--progress", action="store_true",
                        help="show a progress bar while regions complete")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def _configure_logging(verbose: bool) -> None:
    # --- Centralized Logging Configuration ---
    level = logging.DEBUG if verbose else os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    try:
        written = apply_mean_filter(
            args.input,
            args.workers,
            kernel_size=args.kernel_size,
            output_path=args.output,
            strategy=args.strategy,
            quality=args.quality,
            show_progress=args.progress,
        )
    except MeanFilterError as err:
        logger.error(f"{err.stage} stage failed: {err}")
        return 1

    print(f"Filtered image written to {written}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
