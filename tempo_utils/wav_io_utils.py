#!/usr/bin/env python3
"""WAV read/write helpers built on soundfile (libsndfile)."""

import logging
import os
import struct
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple, Union

import numpy as np
import soundfile as sf

from tempo_utils.errors import DecodeError, IoError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

WAV_CONTAINERS = ("WAV", "WAVEX")

# libsndfile subtype -> (bits per sample, integer PCM?)
SUBTYPE_LAYOUT = {
    "PCM_U8": (8, True),
    "PCM_S8": (8, True),
    "PCM_16": (16, True),
    "PCM_24": (24, True),
    "PCM_32": (32, True),
    "FLOAT": (32, False),
    "DOUBLE": (64, False),
    "ULAW": (8, False),
    "ALAW": (8, False),
}

# Encoding direction; 8-bit WAV is always unsigned.
LAYOUT_SUBTYPE = {
    (8, True): "PCM_U8",
    (16, True): "PCM_16",
    (24, True): "PCM_24",
    (32, True): "PCM_32",
    (32, False): "FLOAT",
    (64, False): "DOUBLE",
}


@dataclass(frozen=True)
class AudioFormat:
    channels: int
    sample_rate: int
    bits_per_sample: int
    is_integer: bool
    container: str = field(default="WAV", compare=False)

    @property
    def subtype(self) -> str:
        try:
            return LAYOUT_SUBTYPE[(self.bits_per_sample, self.is_integer)]
        except KeyError:
            raise ValueError(
                f"no WAV subtype for {self.bits_per_sample}-bit "
                f"{'integer' if self.is_integer else 'non-integer'} samples"
            ) from None

    def describe(self) -> str:
        kind = "int" if self.is_integer else "float"
        return f"{self.channels}ch {self.sample_rate}Hz {self.bits_per_sample}-bit {kind}"


def format_from_subtype(container: str, subtype: str, channels: int, sample_rate: int) -> AudioFormat:
    bits, is_integer = SUBTYPE_LAYOUT.get(subtype, (0, False))
    return AudioFormat(
        channels=int(channels),
        sample_rate=int(sample_rate),
        bits_per_sample=bits,
        is_integer=is_integer,
        container=container,
    )


def declared_data_frames(path: PathLike) -> Optional[int]:
    """
    Frame count the RIFF `data` chunk header promises, or None when the header
    doesn't say (not RIFF/WAVE, no fmt before data, streaming size 0 or 0xFFFFFFFF).
    libsndfile clamps its own frame count to the bytes on disk, so this is the
    only way to tell a truncated data chunk from a short recording.
    """
    block_align = None
    with open(path, "rb") as f:
        riff = f.read(12)
        if len(riff) < 12 or riff[:4] != b"RIFF" or riff[8:12] != b"WAVE":
            return None
        while True:
            header = f.read(8)
            if len(header) < 8:
                return None
            chunk_id, size = struct.unpack("<4sI", header)
            if chunk_id == b"data":
                if not block_align or size in (0, 0xFFFFFFFF):
                    return None
                return size // block_align
            if chunk_id == b"fmt ":
                body = f.read(size)
                if len(body) >= 14:
                    block_align = struct.unpack("<H", body[12:14])[0]
                if size % 2:
                    f.seek(1, os.SEEK_CUR)
            else:
                f.seek(size + size % 2, os.SEEK_CUR)


def decode(path: PathLike) -> Tuple[AudioFormat, np.ndarray]:
    """
    Read a WAV file as int16 samples.
    Returns (format, samples); samples are 1-D for mono, (frames, channels) otherwise.
    Raises IoError when the file can't be opened or isn't a WAV container,
    DecodeError when the sample stream is short or unreadable.
    """
    path = Path(path)
    try:
        snd = sf.SoundFile(str(path), mode="r")
    except (sf.SoundFileError, OSError) as exc:
        raise IoError(f"failed to open input WAV: {exc}", path) from exc

    with snd:
        if snd.format not in WAV_CONTAINERS:
            raise IoError(f"not a WAV container: {snd.format}", path)
        fmt = format_from_subtype(snd.format, snd.subtype, snd.channels, snd.samplerate)
        expected = snd.frames
        try:
            declared = declared_data_frames(path)
        except OSError as exc:
            raise IoError(f"failed to read WAV header: {exc}", path) from exc
        if declared is not None and declared != expected:
            raise DecodeError(
                f"truncated sample data: header declares {declared} frames, file holds {expected}",
                path,
            )
        try:
            samples = snd.read(dtype="int16", always_2d=False)
        except (sf.SoundFileError, OSError) as exc:
            raise DecodeError(f"invalid sample data: {exc}", path) from exc

    if len(samples) != expected:
        raise DecodeError(f"truncated sample data: read {len(samples)} of {expected} frames", path)
    logger.debug("Decoded %s: %s, %d frames", path, fmt.describe(), expected)
    return fmt, samples


def _discard(tmp_path: Path):
    try:
        tmp_path.unlink()
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.warning("Could not remove temporary file %s: %s", tmp_path, exc)


def encode(path: PathLike, fmt: AudioFormat, samples: np.ndarray):
    """
    Write int16 samples to `path` with the given format.
    The data goes to a temporary sibling first and is renamed into place only
    after libsndfile has finalized the header, so `path` is never left holding
    a half-written file. Any failure raises IoError.
    """
    path = Path(path)
    data = np.asarray(samples, dtype=np.int16)
    subtype = fmt.subtype
    tmp_path = path.with_name(f".{path.name}.{uuid.uuid4().hex}.part")

    moved = False
    try:
        with sf.SoundFile(
            str(tmp_path),
            mode="w",
            samplerate=fmt.sample_rate,
            channels=fmt.channels,
            subtype=subtype,
            format="WAV",
        ) as out:
            out.write(data)
        os.replace(tmp_path, path)
        moved = True
    except (sf.SoundFileError, OSError) as exc:
        raise IoError(f"failed to write output WAV: {exc}", path) from exc
    finally:
        if not moved:
            _discard(tmp_path)
    logger.debug("Encoded %s: %s, %d frames", path, fmt.describe(), len(data))
