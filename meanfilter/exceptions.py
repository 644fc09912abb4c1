"""Exceptions raised by the mean filter, one per pipeline stage."""

from pathlib import Path
from typing import Optional, Sequence, Union


class MeanFilterError(Exception):
    """Base exception for all mean filter errors."""

    stage = "filter"


class DecodeError(MeanFilterError):
    """
    Raised when the input image cannot be read.

    Covers a missing path, an unreadable file and a file OpenCV cannot decode.
    """

    stage = "decode"

    def __init__(self, path: Union[str, Path], message: Optional[str] = None):
        self.path = Path(path)

        if message is None:
            message = f"Image not found or unreadable: {self.path}"

        super().__init__(message)


class ConfigurationError(MeanFilterError):
    """Raised for an invalid kernel size, strategy, buffer pair or partition."""

    stage = "configuration"


class ProcessingError(MeanFilterError):
    """
    Raised after the worker pool has joined if one or more regions failed.

    The first underlying worker exception is chained as ``__cause__``.
    """

    stage = "processing"

    def __init__(self, failed_regions: Sequence, message: Optional[str] = None):
        self.failed_regions = list(failed_regions)

        if message is None:
            message = (
                f"{len(self.failed_regions)} region(s) failed: "
                + ", ".join(str(r) for r in self.failed_regions)
            )

        super().__init__(message)


class EncodeError(MeanFilterError):
    """Raised when the filtered image cannot be written."""

    stage = "encode"

    def __init__(self, path: Union[str, Path], message: Optional[str] = None):
        self.path = Path(path)

        if message is None:
            message = f"Could not write image: {self.path}"

        super().__init__(message)
