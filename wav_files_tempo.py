#!/usr/bin/env python3
"""
Batch tempo change for mono 16 kHz 16-bit WAV files, pitch unchanged:
 - walk --input_dir recursively for *.wav
 - time-stretch each file by 1/--tempo (phase vocoder)
 - write it to the same relative path under --output_dir
Files that fail are reported on stderr; the rest of the batch still runs.
"""
import argparse
import math
import sys

from tempo_batch.batch_walker import run, summarize
from tempo_batch.settings import load_settings
from tempo_utils.errors import IoError
from tempo_utils.log_utils import setup_logger


def positive_float(value: str) -> float:
    try:
        tempo = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}") from None
    if not (math.isfinite(tempo) and tempo > 0):
        raise argparse.ArgumentTypeError(f"must be a positive number, got {value!r}")
    return tempo


def positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from None
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {value!r}")
    return n


def build_parser(settings=None) -> argparse.ArgumentParser:
    settings = settings or load_settings()
    ap = argparse.ArgumentParser(
        prog="wav-files-tempo",
        description="Adjusts playback tempo of mono 16kHz 16-bit WAV files without altering pitch using time-stretching.",
    )
    ap.add_argument("-i", "--input_dir", "--input-dir", required=True, help="Input directory containing WAV files (processed recursively)")
    ap.add_argument("-o", "--output_dir", "--output-dir", required=True, help="Output directory for processed files (preserves relative paths)")
    ap.add_argument("-t", "--tempo", type=positive_float, default=1.0, help="Tempo multiplier (e.g. 1.2 for 120%% speed; default 1.0 = no change)")
    ap.add_argument("--workers", type=positive_int, default=settings.workers, help="Files converted in parallel (env WAV_TEMPO_WORKERS)")
    ap.add_argument("--ignore_case", action="store_true", help="Also match .WAV / .Wav extensions")
    ap.add_argument("--log_level", default=settings.log_level, help="Logging level (env WAV_TEMPO_LOG_LEVEL)")
    ap.add_argument("--log_file", default=settings.log_file, help="Also log to this file (env WAV_TEMPO_LOG_FILE)")
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logger = setup_logger(args.log_level, args.log_file)

    try:
        results = run(
            args.input_dir,
            args.output_dir,
            tempo=args.tempo,
            workers=args.workers,
            ignore_case=args.ignore_case,
        )
    except IoError as exc:
        logger.error("%s", exc)
        return 1

    counts = summarize(results)
    print(f"Processed {counts['total']} file(s): {counts['succeeded']} ok, {counts['failed']} failed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
