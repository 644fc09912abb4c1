from __future__ import annotations

import time
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed, wait, ALL_COMPLETED
from typing import Callable, Dict, List, Sequence

import numpy as np
from tqdm import tqdm

from .. import config
from ..exceptions import ConfigurationError, ProcessingError
from ..models.kernel import Kernel
from ..models.region import Region
from .averaging_service import KernelLike, filter_region
from .partition_service import validate_partition

logger = logging.getLogger(__name__)


class FilterWorkerPool:
    """
    Runs one box-filter task per Region on a thread pool.

    *   The source buffer is shared read-only by all workers.
    *   Each worker writes only destination[region]; regions must partition
        the image exactly, which is checked before anything is dispatched.
    *   `run` returns only after every task has finished.
    """

    def __init__(self,
                 max_workers: int | None = None,
                 show_progress: bool = False,
                 region_filter: Callable[..., None] = filter_region):
        """
        Args:
            max_workers: upper bound on concurrent threads. Defaults to the
                MEANFILTER_MAX_THREADS env var, else one thread per region.
            show_progress: display a tqdm bar over completed regions.
            region_filter: per-region worker body.
        """
        if max_workers is None:
            max_workers = config.max_threads()
        if max_workers is not None and max_workers < 1:
            raise ConfigurationError(f"max_workers must be >= 1, got {max_workers}")

        self.max_workers = max_workers
        self.show_progress = show_progress
        self.region_filter = region_filter

    # ─── Public API ────────────────────────────────────────────────
    def run(self,
            source: np.ndarray,
            destination: np.ndarray,
            regions: Sequence[Region],
            kernel_size: KernelLike) -> None:
        kernel = Kernel.coerce(kernel_size)
        self._check_buffers(source, destination)
        height, width = source.shape[:2]
        validate_partition(regions, width, height)

        pool_size = len(regions) if self.max_workers is None \
            else min(len(regions), self.max_workers)
        logger.info(f"Dispatching {len(regions)} region(s) on {pool_size} thread(s), "
                    f"kernel {kernel.size}x{kernel.size}")

        failures: Dict[Region, BaseException] = {}
        start = time.perf_counter()
        with ThreadPoolExecutor(max_workers=pool_size,
                                thread_name_prefix="meanfilter") as executor:
            # submit everything before waiting on anything
            futures = {
                executor.submit(self._work, source, destination, region, kernel): region
                for region in regions
            }
            for future in tqdm(as_completed(futures), total=len(futures),
                               desc="Filtering", unit="region",
                               disable=not self.show_progress):
                region = futures[future]
                err = future.exception()
                if err is not None:
                    logger.error(f"Region {region} failed: {err!r}")
                    failures[region] = err
            wait(futures, return_when=ALL_COMPLETED)

        elapsed = time.perf_counter() - start
        if failures:
            failed = self._in_order(regions, failures)
            raise ProcessingError(failed) from failures[failed[0]]
        logger.info(f"All {len(regions)} region(s) joined in {elapsed:.3f}s")

    # ─── Internal helpers ──────────────────────────────────────────
    def _work(self, source, destination, region: Region, kernel: Kernel) -> None:
        self.region_filter(source, destination, region, kernel)
        logger.debug(f"Region {region} done")

    @staticmethod
    def _check_buffers(source: np.ndarray, destination: np.ndarray) -> None:
        if source.ndim != 3 or source.shape[2] != 3:
            raise ConfigurationError(f"Source must be (H, W, 3), got {source.shape}")
        if source.dtype != np.uint8 or destination.dtype != np.uint8:
            raise ConfigurationError(
                f"Buffers must be uint8, got {source.dtype} and {destination.dtype}")
        if source.shape != destination.shape:
            raise ConfigurationError(
                f"Source {source.shape} and destination {destination.shape} differ in shape")
        if np.shares_memory(source, destination):
            raise ConfigurationError("Source and destination buffers must not alias")
        if not destination.flags.writeable:
            raise ConfigurationError("Destination buffer is read-only")

    @staticmethod
    def _in_order(regions: Sequence[Region], failures: Dict[Region, BaseException]) -> List[Region]:
        return [r for r in regions if r in failures]
