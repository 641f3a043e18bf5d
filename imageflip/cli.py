"""Command-line entry point."""
import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from imageflip import __version__
from imageflip.batch import BatchCoordinator, BatchReport
from imageflip.config import LOG_LEVEL, MAX_WORKERS, configure_logging
from imageflip.conversion import ConversionError, ConversionRequest, formats
from imageflip.conversion.selection import select_candidates

logger = logging.getLogger("imageflip.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="imageflip",
        description="Convert images between PNG, JPEG, WebP, BMP, TIFF, GIF and ICO.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--file", type=Path, help="Convert a single file")
    parser.add_argument("--folder", type=Path, help="Convert files in a directory (non-recursive)")
    parser.add_argument("--from", dest="from_ext", help="Source extension to convert from (with --folder)")
    parser.add_argument("--to", dest="to_ext", required=True, help="Target format extension")
    parser.add_argument(
        "--all",
        dest="convert_all",
        action="store_true",
        help="With --folder, convert every image not already in the target format",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Output directory; a relative path is resolved against each source file's folder",
    )
    parser.add_argument("--workers", type=int, default=MAX_WORKERS, help="Maximum parallel conversions")
    parser.add_argument(
        "--fail-on-error",
        action="store_true",
        help="Exit with status 1 if any file failed to convert",
    )
    parser.add_argument("--log-level", default=LOG_LEVEL, help="Logging level (default: %(default)s)")
    return parser


def convert_file(coordinator: BatchCoordinator, request: ConversionRequest):
    """Single-file conversion goes through the same worker path as batches."""
    return coordinator.run([request.source_path], request.target_ext, request.output_root)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.file is None and args.folder is None:
        parser.error("one of --file or --folder is required")
    if args.folder is not None and not args.convert_all and args.from_ext is None:
        parser.error("--folder requires --from or --all")
    if args.workers < 1:
        parser.error("--workers must be >= 1")

    try:
        formats.lookup(args.to_ext)
        folder_candidates = None
        if args.folder is not None:
            folder_candidates = select_candidates(
                args.folder, args.to_ext, from_ext=args.from_ext, convert_all=args.convert_all
            )
    except ConversionError as e:
        logger.error("%s", e)
        return 1
    except OSError as e:
        logger.error("Failed to read directory: %s", e)
        return 1

    coordinator = BatchCoordinator(max_workers=args.workers)
    report = BatchReport()
    try:
        if args.file is not None:
            request = ConversionRequest(args.file, args.to_ext, args.output)
            report.outcomes.extend(convert_file(coordinator, request))
        if folder_candidates is not None:
            report.outcomes.extend(coordinator.run(folder_candidates, args.to_ext, args.output))
    except KeyboardInterrupt:
        logger.warning("Interrupted; remaining files were skipped")
        return 130

    logger.info("Converted %s of %s file(s), %s failed", report.succeeded, report.total, report.failed)
    if args.fail_on_error and report.failed:
        return 1
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
