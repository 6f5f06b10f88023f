#!/usr/bin/env python3
"""Fixed-point <-> float sample conversion."""

import numpy as np

INT16_MIN = -32768.0
INT16_MAX = 32767.0


def to_float(samples: np.ndarray) -> np.ndarray:
    """int16 samples -> float32 in [-1.0, 1.0) (divide by 32768)."""
    return np.asarray(samples, dtype=np.float32) / np.float32(32768.0)


def to_int(samples: np.ndarray) -> np.ndarray:
    """
    float samples -> int16.
    Scales by 32767, clamps to the int16 range, then rounds to nearest, so
    out-of-range values saturate instead of wrapping. NaN becomes 0.
    """
    values = np.asarray(samples, dtype=np.float64)
    scaled = np.where(np.isnan(values), 0.0, values) * INT16_MAX
    clamped = np.clip(scaled, INT16_MIN, INT16_MAX)
    return np.rint(clamped).astype(np.int16)
