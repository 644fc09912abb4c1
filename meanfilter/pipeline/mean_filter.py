# pipeline/mean_filter.py
from __future__ import annotations
from pathlib import Path
import time
import logging

from .. import config
from ..exceptions import ConfigurationError
from ..models.image import Image
from ..models.kernel import Kernel
from ..services.averaging_service import KernelLike
from ..services.filter_worker_pool import FilterWorkerPool
from ..services.image_service import ImageService
from ..services.partition_service import STRATEGIES, partition

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
def filter_image(
    image: Image,
    worker_count: int,
    kernel_size: KernelLike | None = None,
    *,
    strategy: str | None = None,
    pool: FilterWorkerPool | None = None,
    image_service: ImageService | None = None,
) -> Image:
    """
    Box-filter *image* in memory and return a new Image.

    Workers read through a read-only view of image.pixels, so the caller's
    array and its flags are never touched. If any region fails the whole
    call raises ProcessingError and the partially written destination is
    dropped. Unset kernel_size / strategy fall back to the environment.
    """
    kernel = Kernel.coerce(kernel_size if kernel_size is not None else config.kernel_size())
    strategy = strategy or config.strategy()
    pool = pool or FilterWorkerPool()
    image_service = image_service or ImageService()

    regions = partition(image.width, image.height, worker_count, strategy)
    destination = image_service.allocate_destination(image)

    source = image.pixels.view()
    source.setflags(write=False)
    pool.run(source, destination.pixels, regions, kernel)

    return destination


def apply_mean_filter(
    input_path: str | Path,
    worker_count: int,
    *,
    kernel_size: KernelLike | None = None,
    output_path: str | Path | None = None,
    strategy: str | None = None,
    quality: int | None = None,
    show_progress: bool = False,
    max_threads: int | None = None,
    image_service: ImageService | None = None,
) -> Path:
    """
    Load *input_path*, box-filter it with *worker_count* workers and write
    the result to *output_path* as JPEG.
        • configuration is validated before any file is touched
        • nothing is written unless every region succeeded
    Returns the path written.
    """
    kernel = Kernel.coerce(kernel_size if kernel_size is not None else config.kernel_size())
    output_path = output_path or config.output_path()
    strategy = strategy or config.strategy()
    if strategy not in STRATEGIES:
        raise ConfigurationError(
            f"Unknown partition strategy {strategy!r}; expected one of {STRATEGIES}")
    image_service = image_service or ImageService()
    pool = FilterWorkerPool(max_workers=max_threads, show_progress=show_progress)

    # 1. decode
    start = time.perf_counter()
    source = image_service.load(input_path)
    logger.info(f"Loaded {input_path} ({source.width}x{source.height})")

    # 2. partition + dispatch + join
    filtered = filter_image(source, worker_count, kernel,
                            strategy=strategy, pool=pool,
                            image_service=image_service)

    # 3. encode
    written = image_service.save(filtered, output_path, quality=quality)
    logger.info(f"Wrote {written} in {time.perf_counter() - start:.3f}s")
    return written
