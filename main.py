#!/usr/bin/env python3
"""
Logo Finishing CLI Pipeline

Finishes a batch of logos: Analyze background → Key out → Trim → Vectorize or embed PNG → Export SVG
"""

import argparse
import sys
from pathlib import Path

from logo_cruncher.config import DEFAULT_KEY_TOLERANCE, DEFAULT_MAX_WORKERS, Settings
from logo_cruncher.errors import BatchError
from logo_cruncher.jobs import jobs_from_directory, load_json_jobs
from logo_cruncher.logging_setup import setup_logging
from logo_cruncher.orchestrator import run_batch
from logo_cruncher.pipeline import crop_logo, process_logo

WORKERS = {
    "finish": process_logo,
    "crop": crop_logo,
}


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Finish downloaded and upscaled logos into centered SVG files",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "command",
        nargs="?",
        choices=sorted(WORKERS),
        default="finish",
        help="finish: build SVGs in Result/; crop: save keyed and trimmed PNGs in Crop/",
    )
    parser.add_argument(
        "--job",
        default=None,
        help="JSON file with a list of {id, url} logo jobs",
    )
    parser.add_argument(
        "--from-dir",
        action="store_true",
        help="Build jobs from the images found in the raw (or upscale, for crop) directory",
    )
    parser.add_argument(
        "--data-dir",
        default=None,
        help="Working directory holding Raw/, Upscale/, Result/ and Crop/ (default: data/)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help=f"Maximum number of logos processed at once (default: {DEFAULT_MAX_WORKERS})",
    )
    parser.add_argument(
        "--tolerance",
        type=int,
        default=None,
        help=f"Per-channel background key tolerance (default: {DEFAULT_KEY_TOLERANCE})",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Log file path (default: <data-dir>/logo.log)",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Hide the progress bar",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    try:
        settings = Settings.from_env().override(
            data_dir=Path(args.data_dir) if args.data_dir else None,
            max_workers=args.workers,
            tolerance=args.tolerance,
        )
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    if settings.max_workers < 1:
        print(f"Error: --workers must be at least 1, got {settings.max_workers}", file=sys.stderr)
        return 2
    if not 0 <= settings.tolerance <= 255:
        print(f"Error: --tolerance must be within 0..255, got {settings.tolerance}", file=sys.stderr)
        return 2
    settings.ensure_dirs()
    setup_logging(args.log_file or settings.log_file)

    try:
        if args.job:
            jobs = load_json_jobs(args.job)
        elif args.from_dir:
            source = settings.upscale_dir if args.command == "crop" else settings.raw_dir
            jobs = jobs_from_directory(source)
        else:
            print("Error: pass --job <file.json> or --from-dir", file=sys.stderr)
            return 2
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    print(f"Processing {len(jobs)} logos with {settings.max_workers} workers")
    try:
        reports = run_batch(
            jobs,
            worker=WORKERS[args.command],
            settings=settings,
            max_concurrency=settings.max_workers,
            show_progress=not args.no_progress,
        )
    except BatchError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    print(f"\nDone! Generated {len(reports)} files.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
