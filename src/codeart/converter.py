import logging
from pathlib import Path

from PIL import Image

from codeart.buffer import PixelBuffer
from codeart.loader import load_image
from codeart.program import Program, render
from codeart.sampling import TARGET_MAX, GridParams, count_cells, sample
from codeart.styles import STYLE_CONFIGS, Style, StyleConfig, build_program as _build

logger = logging.getLogger(__name__)


def build_program(
    buffer: PixelBuffer,
    style: Style | str,
    config: StyleConfig | None = None,
    target_max: int = TARGET_MAX,
) -> Program:
    style = Style(style)
    config = config or STYLE_CONFIGS[style]
    grid = GridParams.compute(buffer.width, buffer.height, config.base_step, target_max)
    logger.debug(
        "%s: %dx%d -> %dx%d canvas, scale %.4f, step %d, %d cells",
        style.value,
        buffer.width,
        buffer.height,
        grid.scaled_width,
        grid.scaled_height,
        grid.scale,
        grid.step,
        count_cells(buffer.width, buffer.height, grid.step),
    )
    program = _build(style, grid, sample(buffer, grid.step, scale=grid.scale), config)
    logger.debug("%s: emitted %d statements", style.value, len(program.statements))
    return program


def generate(
    buffer: PixelBuffer,
    style: Style | str,
    config: StyleConfig | None = None,
    target_max: int = TARGET_MAX,
) -> str:
    """Compile ``buffer`` into drawing-program source text in ``style``.

    ``config`` overrides the style's grid density and alpha threshold; pass
    :data:`codeart.styles.LEGACY_CONFIG` for the original single-style
    behaviour.
    """
    return render(build_program(buffer, style, config=config, target_max=target_max))


def image_to_code(
    image: Image.Image | PixelBuffer | str | Path | bytes,
    style: Style | str = Style.PIXELS,
    config: StyleConfig | None = None,
    target_max: int = TARGET_MAX,
) -> str:
    if isinstance(image, Image.Image):
        buffer = PixelBuffer.from_image(image)
    elif isinstance(image, PixelBuffer):
        buffer = image
    else:
        buffer = load_image(image)
    return generate(buffer, style, config=config, target_max=target_max)
