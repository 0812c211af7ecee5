import io
import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from codeart.buffer import PixelBuffer
from codeart.errors import ImageDecodeError

logger = logging.getLogger(__name__)

SVG_SUFFIXES = {".svg", ".svgz"}

DECODE_ERRORS = (UnidentifiedImageError, Image.DecompressionBombError, OSError)


def _looks_like_svg(data: bytes) -> bool:
    head = data[:1024].lstrip()
    return head.startswith(b"<svg") or (head.startswith(b"<?xml") and b"<svg" in data[:4096])


def _open(data: bytes, name: str) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except DECODE_ERRORS as e:
        raise ImageDecodeError(f"Could not decode {name}: {e}") from e
    return image


def _rasterize_svg(data: bytes, name: str) -> Image.Image:
    try:
        # cairosvg loads the native cairo library on import
        import cairosvg
    except (ImportError, OSError) as e:
        raise ImageDecodeError(f"SVG support unavailable for {name}: {e}") from e
    try:
        png = cairosvg.svg2png(bytestring=data)
    except Exception as e:
        raise ImageDecodeError(f"Could not rasterize {name}: {e}") from e
    return _open(png, name)


def load_image(source: str | Path | bytes) -> PixelBuffer:
    """Decode a raster or SVG image into an RGBA pixel buffer.

    Raises :class:`ImageDecodeError` when the data is not a readable image.
    """
    if isinstance(source, bytes):
        data = source
        name = "<bytes>"
        is_svg = _looks_like_svg(data)
    else:
        path = Path(source)
        name = str(path)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise ImageDecodeError(f"Could not read {path}: {e}") from e
        is_svg = path.suffix.lower() in SVG_SUFFIXES or _looks_like_svg(data)

    image = _rasterize_svg(data, name) if is_svg else _open(data, name)
    buffer = PixelBuffer.from_image(image)
    logger.debug("Decoded %s: %dx%d", name, buffer.width, buffer.height)
    return buffer
