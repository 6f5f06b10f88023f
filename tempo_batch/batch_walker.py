#!/usr/bin/env python3
"""Recursive WAV discovery and best-effort batch conversion."""

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

from tempo_batch.file_pipeline import process
from tempo_utils.audio_time_stretch_util import Stretcher
from tempo_utils.errors import IoError, PipelineError

logger = logging.getLogger(__name__)

WAV_EXTENSION = ".wav"


@dataclass(frozen=True)
class FileTask:
    input_path: Path
    output_path: Path


@dataclass
class FileResult:
    task: FileTask
    error: Optional[PipelineError] = None
    frames_written: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


def is_wav(path: Path, ignore_case: bool = False) -> bool:
    if ignore_case:
        return path.suffix.lower() == WAV_EXTENSION
    return path.suffix == WAV_EXTENSION


def discover_wav_files(input_dir: Union[str, Path], ignore_case: bool = False) -> List[Path]:
    """
    All regular *.wav files below `input_dir`, sorted. Symlinks are not followed.
    A missing input directory is logged and walks nothing.
    """
    input_dir = Path(input_dir)
    if not input_dir.is_dir():
        logger.error("Input directory not found: %s", input_dir)
        return []
    files = [
        p
        for p in input_dir.rglob("*")
        if not p.is_symlink() and p.is_file() and is_wav(p, ignore_case)
    ]
    files.sort()
    return files


def derive_output_path(input_dir: Union[str, Path], input_path: Union[str, Path], output_dir: Union[str, Path]) -> Path:
    """Re-root `input_path` from `input_dir` onto `output_dir`."""
    rel = Path(input_path).relative_to(Path(input_dir))
    return Path(output_dir) / rel


def plan_tasks(input_dir: Union[str, Path], output_dir: Union[str, Path], ignore_case: bool = False) -> Iterator[FileTask]:
    for path in discover_wav_files(input_dir, ignore_case=ignore_case):
        yield FileTask(path, derive_output_path(input_dir, path, output_dir))


def run_task(task: FileTask, tempo: float, stretcher: Optional[Stretcher] = None) -> FileResult:
    """Convert one file, turning any per-file failure into a FileResult."""
    try:
        task.output_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        err = IoError(f"failed to create output directory: {exc}", task.output_path.parent)
        logger.error("Error processing %s: %s", task.input_path, err)
        return FileResult(task, error=err)

    try:
        frames = process(task.input_path, task.output_path, tempo, stretcher=stretcher)
    except PipelineError as err:
        logger.error("Error processing %s: %s", task.input_path, err)
        return FileResult(task, error=err)
    return FileResult(task, frames_written=frames)


def run(
    input_dir: Union[str, Path],
    output_dir: Union[str, Path],
    tempo: float = 1.0,
    workers: int = 1,
    stretcher: Optional[Stretcher] = None,
    ignore_case: bool = False,
) -> List[FileResult]:
    """
    Convert every WAV under `input_dir` into the mirrored path under `output_dir`.

    One result per discovered file, in discovery order. Per-file failures are
    logged and recorded; they never stop the batch. The only fatal error is
    failing to create `output_dir` itself (IoError).
    """
    if not (math.isfinite(tempo) and tempo > 0):
        raise ValueError(f"tempo must be a positive number, got {tempo}")
    if workers < 1:
        raise ValueError(f"workers must be >= 1, got {workers}")

    output_dir = Path(output_dir)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise IoError(f"failed to create output directory: {exc}", output_dir) from exc

    tasks = list(plan_tasks(input_dir, output_dir, ignore_case=ignore_case))
    logger.info("Found %d WAV file(s) under %s", len(tasks), input_dir)

    if workers == 1 or len(tasks) < 2:
        return [run_task(t, tempo, stretcher) for t in tasks]

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="tempo") as pool:
        return list(pool.map(lambda t: run_task(t, tempo, stretcher), tasks))


def summarize(results: List[FileResult]) -> Dict[str, int]:
    failed = sum(1 for r in results if not r.ok)
    return {
        "total": len(results),
        "succeeded": len(results) - failed,
        "failed": failed,
    }
