from __future__ import annotations
from pathlib import Path
from typing import Union

import numpy as np

from ..models.image import Image
from ..repositories.image_repository import ImageRepository


class ImageService:
    """I/O helpers and buffer allocation.  No filtering logic."""
    def __init__(self, image_repository: ImageRepository | None = None):
        self.image_repository = image_repository or ImageRepository()

    def create_image(self, pixels: np.ndarray, path: Union[str, Path] = None) -> Image:
        return self.image_repository.create_image(pixels, path)

    def load(self, path: str | Path) -> Image:
        """Load a single image from disk into an Image object."""
        return self.image_repository.load(path)

    def save(self, image: Image, path: str | Path | None = None, quality: int | None = None) -> Path:
        """
        Business-level method to save the image as JPEG, whatever the input format was.
        """
        return self.image_repository.save(image, path, format="JPEG", quality=quality)

    def allocate_destination(self, source: Image) -> Image:
        """
        Fresh zeroed buffer with the same shape as *source*; never a view of it.
        """
        return self.create_image(np.zeros_like(source.pixels, dtype=np.uint8))
