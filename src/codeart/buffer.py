from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
from PIL import Image

from codeart.errors import InvalidPixelBuffer

CHANNELS = 4


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """Decoded RGBA image, row-major with the origin at the top left.

    ``pixels`` has shape (height, width, 4) and is never written to.
    """

    width: int
    height: int
    pixels: np.ndarray

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise InvalidPixelBuffer(f"Negative dimensions: {self.width}x{self.height}")
        expected = (self.height, self.width, CHANNELS)
        if self.pixels.shape != expected:
            raise InvalidPixelBuffer(f"Pixel array has shape {self.pixels.shape}, expected {expected}")
        if self.pixels.dtype != np.uint8:
            raise InvalidPixelBuffer(f"Pixel array has dtype {self.pixels.dtype}, expected uint8")
        # Own a read-only copy; the caller's array is left untouched
        frozen = self.pixels.copy()
        frozen.setflags(write=False)
        object.__setattr__(self, "pixels", frozen)

    @classmethod
    def from_bytes(cls, width: int, height: int, data: bytes | Sequence[int]) -> "PixelBuffer":
        """Build a buffer from a flat RGBA sequence of ``width * height * 4`` values."""
        if width < 0 or height < 0:
            raise InvalidPixelBuffer(f"Negative dimensions: {width}x{height}")
        expected = width * height * CHANNELS
        if len(data) != expected:
            raise InvalidPixelBuffer(f"Expected {expected} values for {width}x{height} RGBA, got {len(data)}")
        if isinstance(data, (bytes, bytearray, memoryview)):
            flat = np.frombuffer(bytes(data), dtype=np.uint8)
        else:
            raw = np.asarray(data, dtype=np.int64)
            if raw.size and (raw.min() < 0 or raw.max() > 255):
                raise InvalidPixelBuffer("Pixel values must be in the range 0-255")
            flat = raw.astype(np.uint8)
        return cls(width=width, height=height, pixels=flat.reshape(height, width, CHANNELS))

    @classmethod
    def from_image(cls, image: Image.Image) -> "PixelBuffer":
        rgba = image.convert("RGBA")
        arr = np.array(rgba, dtype=np.uint8)
        return cls(width=rgba.width, height=rgba.height, pixels=arr)

    @classmethod
    def from_pixels(cls, width: int, height: int, pixels: Sequence[tuple[int, int, int, int]]) -> "PixelBuffer":
        """Build a buffer from a row-major list of (r, g, b, a) tuples."""
        return cls.from_bytes(width, height, [v for pixel in pixels for v in pixel])

    def pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        r, g, b, a = self.pixels[y, x].tolist()
        return r, g, b, a

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0
