import logging
import math
from collections.abc import Iterator
from dataclasses import dataclass

from codeart.buffer import PixelBuffer
from codeart.errors import InvalidPixelBuffer

logger = logging.getLogger(__name__)

# Longest side of the output canvas, in canvas pixels
TARGET_MAX = 400


@dataclass(frozen=True)
class GridParams:
    width: int
    height: int
    scale: float
    scaled_width: int
    scaled_height: int
    step: int
    cell_size: int

    @classmethod
    def compute(cls, width: int, height: int, base_step: int, target_max: int = TARGET_MAX) -> "GridParams":
        """Derive canvas scale and sampling stride for a source image.

        The image is fitted inside a ``target_max`` square, and ``base_step``
        canvas pixels are converted back into a source-pixel stride.
        """
        if width <= 0 or height <= 0:
            raise InvalidPixelBuffer(f"Cannot generate from a {width}x{height} image")
        if target_max <= 0:
            raise InvalidPixelBuffer(f"Canvas bound must be positive, got {target_max}")
        if base_step < 1:
            raise ValueError(f"Base step must be at least 1, got {base_step}")
        scale = min(target_max / width, target_max / height)
        step = max(1, math.floor(base_step / scale))
        return cls(
            width=width,
            height=height,
            scale=scale,
            scaled_width=math.floor(width * scale),
            scaled_height=math.floor(height * scale),
            step=step,
            cell_size=math.ceil(step * scale),
        )


@dataclass(frozen=True)
class Sample:
    source_x: int
    source_y: int
    r: int
    g: int
    b: int
    a: int
    dest_x: int
    dest_y: int


def count_cells(width: int, height: int, step: int) -> int:
    """Number of grid cells visited for an image at the given stride."""
    return math.ceil(height / step) * math.ceil(width / step)


def sample(buffer: PixelBuffer, step: int, scale: float = 1.0, start_row: int = 0) -> Iterator[Sample]:
    """Yield every grid cell of ``buffer`` in row-major order.

    ``start_row`` is a grid row index, so a scan interrupted after row N can
    be resumed with ``start_row=N + 1``. Nothing is filtered here; alpha
    acceptance is left to the caller.
    """
    if step < 1:
        raise ValueError(f"Step must be at least 1, got {step}")
    pixels = buffer.pixels
    for y in range(start_row * step, buffer.height, step):
        dest_y = math.floor(y * scale)
        # One conversion per row keeps channel arithmetic in Python ints
        row = pixels[y, ::step].tolist()
        for i, (r, g, b, a) in enumerate(row):
            x = i * step
            yield Sample(
                source_x=x,
                source_y=y,
                r=r,
                g=g,
                b=b,
                a=a,
                dest_x=math.floor(x * scale),
                dest_y=dest_y,
            )


def sample_chunks(
    buffer: PixelBuffer, step: int, scale: float = 1.0, rows_per_chunk: int = 16
) -> Iterator[list[Sample]]:
    """Yield samples in bands of ``rows_per_chunk`` grid rows.

    Concatenating the chunks gives exactly the sequence produced by
    :func:`sample`.
    """
    if step < 1:
        raise ValueError(f"Step must be at least 1, got {step}")
    if rows_per_chunk < 1:
        raise ValueError(f"rows_per_chunk must be at least 1, got {rows_per_chunk}")
    if buffer.is_empty:
        return
    grid_rows = math.ceil(buffer.height / step)
    cols = math.ceil(buffer.width / step)
    for first in range(0, grid_rows, rows_per_chunk):
        band = sample(buffer, step, scale=scale, start_row=first)
        band_rows = min(rows_per_chunk, grid_rows - first)
        chunk = [s for _, s in zip(range(band_rows * cols), band)]
        logger.debug("Sampled grid rows %d-%d (%d cells)", first, first + band_rows - 1, len(chunk))
        yield chunk
