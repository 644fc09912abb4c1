"""
Environment-backed settings.

Values may come from the process environment or a `.env` file. Malformed
values raise ConfigurationError when they are read, not at import time.
"""
from __future__ import annotations

import os

from dotenv import load_dotenv

from .exceptions import ConfigurationError

# Load environment variables
load_dotenv()


def env_int(name: str, default: int | None, minimum: int | None = None) -> int | None:
    """Read integer setting *name*; unset or blank returns *default*."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError as err:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from err
    if minimum is not None and value < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got {value}")
    return value


def kernel_size() -> int:
    return env_int("MEANFILTER_KERNEL_SIZE", 7, minimum=1)


def output_path() -> str:
    return os.getenv("MEANFILTER_OUTPUT_PATH", "filtered_output.jpg")


def strategy() -> str:
    return os.getenv("MEANFILTER_STRATEGY", "rows")


def max_threads() -> int | None:
    return env_int("MEANFILTER_MAX_THREADS", None, minimum=1)


def jpeg_quality() -> int:
    return env_int("JPEG_QUALITY", 95, minimum=1)


def read_timeout() -> int:
    return env_int("MEANFILTER_READ_TIMEOUT", 5, minimum=0)
