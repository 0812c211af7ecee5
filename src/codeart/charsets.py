import math

# Glyph ramp for the ascii style, darkest to lightest
ASCII_RAMP = "@%#*+=-:. "


def ramp_index(brightness: float, ramp: str = ASCII_RAMP) -> int:
    """Index into ``ramp`` for a 0-255 brightness value; dark pixels get dense glyphs."""
    return math.floor(brightness / 255 * (len(ramp) - 1))
