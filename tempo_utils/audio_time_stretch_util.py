# audio_time_stretch_util.py

import logging
import math
from typing import Optional, Protocol

import librosa
import numpy as np

from tempo_utils.errors import EngineError

logger = logging.getLogger(__name__)

FRAME_SECONDS = 0.064  # ~1024 samples at 16 kHz


class Stretcher(Protocol):
    """Pitch-preserving time-stretch capability."""

    def stretch(self, samples: np.ndarray, sample_rate: int, ratio: float) -> np.ndarray:
        """Return `samples` stretched to roughly len(samples) * ratio frames."""
        ...


class LibrosaStretcher:
    """
    Phase-vocoder stretch via librosa.effects.time_stretch.

    `ratio` is the duration scale (2.0 = twice as long); librosa's `rate` is
    its inverse. Output length is fixed to int(len(samples) * ratio).
    """

    def __init__(self, n_fft: Optional[int] = None, hop_length: Optional[int] = None):
        self.n_fft = n_fft
        self.hop_length = hop_length

    def fft_size(self, sample_rate: int) -> int:
        if self.n_fft:
            return int(self.n_fft)
        return 2 ** int(math.ceil(math.log2(sample_rate * FRAME_SECONDS)))

    def stretch(self, samples: np.ndarray, sample_rate: int, ratio: float) -> np.ndarray:
        if sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {sample_rate}")
        if not ratio > 0:
            raise ValueError(f"stretch ratio must be positive, got {ratio}")

        y = np.asarray(samples, dtype=np.float32)
        target_len = int(len(y) * ratio)
        if len(y) == 0 or target_len == 0:
            return np.zeros(target_len, dtype=np.float32)

        n_fft = self.fft_size(sample_rate)
        hop_length = self.hop_length or n_fft // 4
        logger.debug(
            "time_stretch: rate=%.4f n_fft=%d hop=%d in=%d target=%d",
            1.0 / ratio, n_fft, hop_length, len(y), target_len,
        )
        y_stretched = librosa.effects.time_stretch(
            y,
            rate=1.0 / ratio,
            n_fft=n_fft,
            hop_length=hop_length,
        )
        return librosa.util.fix_length(y_stretched, size=target_len).astype(np.float32, copy=False)


def stretch_samples(
    samples: np.ndarray,
    sample_rate: int,
    tempo: float,
    stretcher: Optional[Stretcher] = None,
) -> np.ndarray:
    """
    Change duration by 1/tempo without changing pitch.

    tempo > 1 gives a shorter buffer, tempo < 1 a longer one. tempo == 1.0
    returns a copy of the input without touching the engine.
    Raises ValueError for a non-positive tempo, EngineError when the engine
    fails or hands back something that isn't a finite 1-D buffer.
    """
    if not (math.isfinite(tempo) and tempo > 0):
        raise ValueError(f"tempo must be a positive number, got {tempo}")
    samples = np.asarray(samples, dtype=np.float32)
    if tempo == 1.0:
        return samples.copy()

    stretcher = stretcher or LibrosaStretcher()
    ratio = 1.0 / tempo
    try:
        out = stretcher.stretch(samples, sample_rate, ratio)
    except Exception as exc:
        raise EngineError(f"time-stretch failed: {exc}") from exc

    if out is None:
        raise EngineError("time-stretch returned no data")
    out = np.asarray(out, dtype=np.float32)
    if out.ndim != 1:
        raise EngineError(f"time-stretch returned shape {out.shape}, expected a mono buffer")
    if not np.all(np.isfinite(out)):
        raise EngineError("time-stretch returned non-finite samples")
    return out
