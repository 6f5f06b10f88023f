"""Per-file failure kinds raised by the tempo pipeline."""

from pathlib import Path
from typing import Optional, Union


class PipelineError(Exception):
    """Base for every failure that is local to a single file."""

    kind = "pipeline"

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        super().__init__(message)
        self.message = message
        self.path = Path(path) if path is not None else None

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.message} ({self.path})"


class IoError(PipelineError):
    """Open/read/write/create failure on the filesystem or WAV container."""

    kind = "io"


class FormatError(PipelineError):
    """Input WAV is not mono 16 kHz 16-bit integer PCM."""

    kind = "format"


class DecodeError(PipelineError):
    """Sample stream is truncated or corrupt behind a valid-looking header."""

    kind = "decode"


class EngineError(PipelineError):
    """Time-stretch transform failed or returned an unusable buffer."""

    kind = "engine"
