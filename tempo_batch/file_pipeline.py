#!/usr/bin/env python3
"""
Single-file tempo change:
 - decode the WAV and check it is mono / 16 kHz / 16-bit integer PCM
 - int16 -> float, stretch by 1/tempo, float -> int16
 - write the result with the input's own format fields
"""
import logging
import math
from pathlib import Path
from typing import Optional, Union

from tempo_utils.audio_time_stretch_util import Stretcher, stretch_samples
from tempo_utils.errors import FormatError
from tempo_utils.sample_utils import to_float, to_int
from tempo_utils.wav_io_utils import AudioFormat, decode, encode

logger = logging.getLogger(__name__)

REQUIRED_FORMAT = AudioFormat(channels=1, sample_rate=16000, bits_per_sample=16, is_integer=True)


def check_format(fmt: AudioFormat, path: Optional[Union[str, Path]] = None):
    """Raise FormatError unless `fmt` is exactly the accepted input profile."""
    if fmt != REQUIRED_FORMAT:
        raise FormatError(
            f"unsupported format {fmt.describe()}: expected mono 16-bit PCM at 16000 Hz",
            path,
        )


def process(
    input_path: Union[str, Path],
    output_path: Union[str, Path],
    tempo: float,
    stretcher: Optional[Stretcher] = None,
) -> int:
    """
    Convert one file. Returns the number of frames written.
    Raises a PipelineError subclass on failure; nothing is written in that case.
    """
    if not (math.isfinite(tempo) and tempo > 0):
        raise ValueError(f"tempo must be a positive number, got {tempo}")
    input_path = Path(input_path)
    output_path = Path(output_path)

    fmt, samples = decode(input_path)
    check_format(fmt, input_path)

    stretched = stretch_samples(to_float(samples), fmt.sample_rate, tempo, stretcher=stretcher)
    out_samples = to_int(stretched)

    encode(output_path, fmt, out_samples)
    logger.info(
        "Wrote %s (%d -> %d frames, tempo %.3g)",
        output_path, len(samples), len(out_samples), tempo,
    )
    return len(out_samples)
