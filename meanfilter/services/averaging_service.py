from __future__ import annotations

from typing import Tuple, Union

import numpy as np

from ..models.kernel import Kernel
from ..models.region import Region

KernelLike = Union[int, Kernel]


def average(
    source: np.ndarray,
    center_x: int,
    center_y: int,
    kernel_size: KernelLike,
) -> Tuple[int, int, int]:
    """
    Mean color of the k x k neighborhood centred on (center_x, center_y).

    Offsets falling outside the image are skipped, so edge and corner pixels
    average over fewer neighbours. Each channel is floor-divided by the
    number of in-bounds pixels, which is never zero since the centre
    itself is in bounds.
    """
    kernel = Kernel.coerce(kernel_size)
    height, width = source.shape[:2]

    red = green = blue = 0
    count = 0
    for dx, dy in kernel.offsets():
        x = center_x + dx
        y = center_y + dy
        if 0 <= x < width and 0 <= y < height:
            r, g, b = source[y, x, :3]
            red += int(r)
            green += int(g)
            blue += int(b)
            count += 1

    return red // count, green // count, blue // count


def filter_region(
    source: np.ndarray,
    destination: np.ndarray,
    region: Region,
    kernel_size: KernelLike,
) -> None:
    """
    Write the box-filtered pixels of *region* into *destination*.

    Equivalent to calling `average` for every coordinate of the region,
    but evaluated with a summed-area table built over the region plus a
    `pad`-wide halo (clipped at the image border). Only
    destination[region] is written.
    """
    kernel = Kernel.coerce(kernel_size)
    pad = kernel.pad
    height, width = source.shape[:2]

    # halo window of the source that any pixel in the region can reach
    win_y0, win_y1 = max(0, region.y0 - pad), min(height, region.y1 + pad)
    win_x0, win_x1 = max(0, region.x0 - pad), min(width, region.x1 + pad)
    window = source[win_y0:win_y1, win_x0:win_x1, :3].astype(np.int64)

    sat = np.zeros((window.shape[0] + 1, window.shape[1] + 1, 3), dtype=np.int64)
    sat[1:, 1:] = window.cumsum(axis=0).cumsum(axis=1)

    ys = np.arange(region.y0, region.y1)
    xs = np.arange(region.x0, region.x1)
    top = (np.maximum(ys - pad, 0) - win_y0)[:, None]
    bottom = (np.minimum(ys + pad + 1, height) - win_y0)[:, None]
    left = (np.maximum(xs - pad, 0) - win_x0)[None, :]
    right = (np.minimum(xs + pad + 1, width) - win_x0)[None, :]

    sums = sat[bottom, right] - sat[top, right] - sat[bottom, left] + sat[top, left]
    counts = ((bottom - top) * (right - left))[..., None]

    destination[region.slices()] = (sums // counts).astype(np.uint8)
