from pathlib import Path

import numpy as np
import pytest
import soundfile as sf

SR = 16000


def sine_wave(freq=440.0, duration=1.0, sr=SR, amplitude=10000.0 / 32768.0):
    t = np.arange(int(sr * duration)) / sr
    return (amplitude * np.sin(2 * np.pi * freq * t)).astype(np.float32)


def sine_int16(freq=440.0, duration=1.0, sr=SR, amplitude=10000):
    t = np.arange(int(sr * duration)) / sr
    return (amplitude * np.sin(2 * np.pi * freq * t)).astype(np.int16)


def chop_tail(path, n_bytes):
    """Cut the last n_bytes off a file, leaving its header claiming the old size."""
    data = Path(path).read_bytes()
    Path(path).write_bytes(data[:-n_bytes])
    return path


def dominant_freq(y, sr=SR):
    spectrum = np.abs(np.fft.rfft(y * np.hanning(len(y))))
    freqs = np.fft.rfftfreq(len(y), d=1.0 / sr)
    return float(freqs[np.argmax(spectrum)])


@pytest.fixture
def write_wav():
    """Write int16/float data as a WAV with an explicit libsndfile subtype."""

    def _write(path: Path, data=None, sr=SR, subtype="PCM_16"):
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        if data is None:
            data = sine_int16(sr=sr)
        sf.write(str(path), data, sr, subtype=subtype, format="WAV")
        return path

    return _write
