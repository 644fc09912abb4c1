from __future__ import annotations
from pathlib import Path
from typing import Union
import signal
import threading
import logging

import numpy as np
import cv2
from PIL import Image as PILImage

from .. import config
from ..exceptions import DecodeError, EncodeError
from ..models.image import Image

logger = logging.getLogger(__name__)


class ImageRepository:
    """
    Handles file I/O for Image entities.
    OpenCV decodes, Pillow encodes.
    """
    def __init__(self):
        self.read_timeout = config.read_timeout()
        self.jpeg_quality = config.jpeg_quality()

    @staticmethod
    def create_image(pixels: np.ndarray, path: Union[str, Path] = None) -> Image:
        if path is None:
            return Image(pixels)
        return Image(pixels=pixels, path=Path(path))

    def load(self, path: Union[str, Path], rgb: bool = True) -> Image:
        path = Path(path)
        if not path.is_file():
            raise DecodeError(path, f"Image not found: {path}")

        # ─── timeout wrapper (SIGALRM only works on the main thread) ──────
        on_main = threading.current_thread() is threading.main_thread()
        timeout = self.read_timeout

        def _handler(signum, frame):
            raise TimeoutError(f"cv2.imread timed-out after {timeout}s: {path}")

        if on_main and timeout > 0:
            previous = signal.signal(signal.SIGALRM, _handler)
            signal.alarm(timeout)
        try:
            arr_bgr = cv2.imread(str(path), cv2.IMREAD_COLOR)
        except TimeoutError as err:
            raise DecodeError(path, str(err)) from err
        finally:
            if on_main and timeout > 0:
                signal.alarm(0)  # always disarm
                signal.signal(signal.SIGALRM, previous)
        # ──────────────────────────────────────────────────────────────────

        if arr_bgr is None:
            raise DecodeError(path, f"Unsupported or corrupt image: {path}")

        arr = arr_bgr[:, :, ::-1] if rgb else arr_bgr
        logger.debug(f"Loaded {path}: {arr.shape[1]}x{arr.shape[0]}")
        return Image(pixels=np.ascontiguousarray(arr), path=path)

    def save(
        self,
        image: Image,
        path: Union[str, Path, None] = None,
        *,
        format: str = "JPEG",
        quality: int | None = None,
    ) -> Path:
        """Encode *image* to *path* (defaults to image.path). Returns the path written."""
        target = Path(path) if path is not None else image.path
        if target is None:
            raise EncodeError("<unset>", "No output path given and image has no path")

        pixels = image.pixels
        if not pixels.flags['C_CONTIGUOUS']:
            pixels = np.ascontiguousarray(pixels)

        format = "JPEG" if format.upper() == "JPG" else format.upper()
        params = {}
        if format == "JPEG":
            params["quality"] = quality if quality is not None else self.jpeg_quality

        try:
            PILImage.fromarray(pixels).save(target, format=format, **params)
        except (OSError, ValueError, KeyError) as err:
            raise EncodeError(target, f"Could not write {target}: {err}") from err

        logger.debug(f"Saved {target} as {format}")
        return target
