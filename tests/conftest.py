import numpy as np
import pytest

from codeart.buffer import PixelBuffer
from codeart.program import Call


def _cairosvg_available():
    """cairosvg needs the native cairo library, which may be missing."""
    try:
        import cairosvg  # noqa: F401
    except (ImportError, OSError):
        return False
    return True


needs_cairosvg = pytest.mark.skipif(not _cairosvg_available(), reason="cairosvg or libcairo not available")


def solid(width, height, colour=(0, 0, 0, 255)):
    """Buffer filled with a single RGBA colour."""
    return PixelBuffer.from_pixels(width, height, [colour] * (width * height))


def random_buffer(width, height, seed=42):
    rng = np.random.default_rng(seed)
    pixels = rng.integers(0, 256, size=(height, width, 4), dtype=np.uint8)
    return PixelBuffer(width=width, height=height, pixels=pixels)


def calls(program, name):
    """Body calls with the given name, in emission order."""
    return [s for s in program.statements if isinstance(s, Call) and s.name == name]
