class CodeArtError(Exception):
    """Base class for errors raised by codeart."""


class InvalidPixelBuffer(CodeArtError, ValueError):
    """Raised when pixel data cannot describe a valid image."""


class ImageDecodeError(CodeArtError):
    """Raised when an image file cannot be decoded into pixels."""
