import enum
import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from codeart.charsets import ASCII_RAMP, ramp_index
from codeart.program import (
    Call,
    Declare,
    Expr,
    Fn,
    Function,
    Increment,
    Program,
    Return,
    Statement,
    Str,
    Var,
    add,
    cos,
    div,
    mod,
    mul,
    sin,
    sub,
)
from codeart.sampling import GridParams, Sample


class Style(str, enum.Enum):
    PIXELS = "pixels"
    CIRCLES = "circles"
    TRIANGLES = "triangles"
    LINES = "lines"
    DOTS = "dots"
    ASCII = "ascii"
    PSYCHEDELIC = "psychedelic"
    STATUE = "statue"
    ANIMATION = "animation"


class Canvas(enum.Enum):
    STATIC = "static"
    ANIMATED = "animated"


@dataclass(frozen=True)
class StyleConfig:
    """Grid density and alpha acceptance for one style.

    A sample is kept when its alpha is strictly greater than
    ``alpha_threshold``. ``include_alpha`` passes the sample's alpha through
    as a fourth fill/stroke channel.
    """

    base_step: int = 8
    alpha_threshold: int = 128
    include_alpha: bool = False

    def accepts(self, sample: Sample) -> bool:
        return sample.a > self.alpha_threshold


DEFAULT_CONFIG = StyleConfig()

# Behaviour of the original single-style pixel converter
LEGACY_CONFIG = StyleConfig(base_step=4, alpha_threshold=0, include_alpha=True)

STYLE_CONFIGS: dict[Style, StyleConfig] = {style: DEFAULT_CONFIG for style in Style}

CANVAS: dict[Style, Canvas] = {
    style: Canvas.ANIMATED if style in (Style.PSYCHEDELIC, Style.ANIMATION) else Canvas.STATIC for style in Style
}

LERP_HELPER = Function(
    "lerpValue",
    ("a", "b", "amount"),
    (Return(add(Var("a"), mul(sub(Var("b"), Var("a")), Var("amount")))),),
)


@dataclass(frozen=True)
class Cell:
    """Quantities derived once from an accepted sample."""

    sample: Sample
    brightness: float
    cell_size: int
    variable_size: float
    include_alpha: bool = False

    @classmethod
    def from_sample(cls, sample: Sample, cell_size: int, include_alpha: bool = False) -> "Cell":
        brightness = (sample.r + sample.g + sample.b) / 3
        return cls(
            sample=sample,
            brightness=brightness,
            cell_size=cell_size,
            variable_size=brightness / 255 * (cell_size - 1) + 1,
            include_alpha=include_alpha,
        )

    @property
    def x(self) -> int:
        return self.sample.dest_x

    @property
    def y(self) -> int:
        return self.sample.dest_y

    @property
    def center(self) -> tuple[float, float]:
        half = self.cell_size / 2
        return self.x + half, self.y + half

    @property
    def colour(self) -> tuple[int, ...]:
        s = self.sample
        if self.include_alpha:
            return s.r, s.g, s.b, s.a
        return s.r, s.g, s.b


def _pixels(cell: Cell) -> list[Statement]:
    return [
        Call("fill", cell.colour),
        Call("rect", (cell.x, cell.y, cell.cell_size, cell.cell_size)),
    ]


def _circles(cell: Cell) -> list[Statement]:
    cx, cy = cell.center
    return [Call("fill", cell.colour), Call("circle", (cx, cy, cell.cell_size))]


def _triangles(cell: Cell) -> list[Statement]:
    size = cell.cell_size
    apex_x = cell.x + size / 2
    return [
        Call("fill", cell.colour),
        Call("triangle", (apex_x, cell.y, cell.x, cell.y + size, cell.x + size, cell.y + size)),
    ]


def _lines(cell: Cell) -> list[Statement]:
    return [
        Call("stroke", cell.colour),
        Call("strokeWeight", (math.ceil(cell.cell_size * 0.8),)),
        Call("line", (cell.x, cell.y, cell.x, cell.y + cell.variable_size)),
    ]


def _dots(cell: Cell) -> list[Statement]:
    cx, cy = cell.center
    return [Call("fill", cell.colour), Call("circle", (cx, cy, cell.variable_size))]


def _ascii(cell: Cell) -> list[Statement]:
    cx, cy = cell.center
    glyph = ASCII_RAMP[ramp_index(cell.brightness)]
    return [Call("text", (Str(glyph), cx, cy))]


def _psychedelic(cell: Cell) -> list[Statement]:
    t = Var("t")
    x, y = cell.x, cell.y
    cx, cy = cell.center
    # Offset by a full turn so the hue stays positive under JS's remainder
    hue_seed = cell.brightness / 255 * 360 + 360
    hue = mod(add(add(hue_seed, mul(t, 40)), mul(sin(add(t, mul(x, 0.01))), 60)), 360)
    saturation = add(70, mul(sin(add(t, mul(y, 0.02))), 30))
    value = add(80, mul(cos(add(t, mul(x, 0.03))), 20))
    pulse = div(add(sin(add(t, add(mul(x, 0.02), mul(y, 0.01)))), 1), 2)
    size = Fn("lerpValue", (cell.cell_size * 0.5, cell.cell_size * 1.5, pulse))
    return [Call("fill", (hue, saturation, value)), Call("ellipse", (cx, cy, size, size))]


def _statue(cell: Cell) -> list[Statement]:
    marble = math.floor(cell.brightness * 0.8 + 40)
    return [
        Call("fill", (marble - 20, marble - 10, marble + 15)),
        Call("rect", (cell.x, cell.y, cell.cell_size, cell.cell_size)),
    ]


def _animation(cell: Cell) -> list[Statement]:
    frame = Var("frame")
    s = cell.sample
    cx, cy = cell.center
    phase = add(mul(cell.x, 0.05), mul(cell.y, 0.05))
    wave = mul(sin(add(frame, phase)), 5)
    alpha = add(155, mul(sin(add(mul(frame, 2), phase)), 100))
    return [
        Call("fill", (s.r, s.g, s.b, alpha)),
        Call("circle", (add(cx, wave), add(cy, wave), cell.cell_size)),
    ]


EMITTERS: dict[Style, Callable[[Cell], list[Statement]]] = {
    Style.PIXELS: _pixels,
    Style.CIRCLES: _circles,
    Style.TRIANGLES: _triangles,
    Style.LINES: _lines,
    Style.DOTS: _dots,
    Style.ASCII: _ascii,
    Style.PSYCHEDELIC: _psychedelic,
    Style.STATUE: _statue,
    Style.ANIMATION: _animation,
}

# Clock variable and per-frame increment for animated styles
CLOCKS: dict[Style, tuple[str, float]] = {
    Style.PSYCHEDELIC: ("t", 0.05),
    Style.ANIMATION: ("frame", 0.1),
}


def emit(style: Style, cell: Cell) -> list[Statement]:
    """Statements drawing one cell in the given style."""
    return EMITTERS[style](cell)


def _style_prologue(style: Style, grid: GridParams) -> list[Statement]:
    if style is Style.ASCII:
        return [
            Call("fill", (0,)),
            Call("textSize", (math.ceil(grid.cell_size * 0.8),)),
            Call("textAlign", (Var("CENTER"), Var("CENTER"))),
        ]
    return []


def frame(style: Style, grid: GridParams) -> Program:
    """An empty program with the canvas setup and draw loop for ``style``."""
    create = Call("createCanvas", (grid.scaled_width, grid.scaled_height))
    if CANVAS[style] is Canvas.STATIC:
        return Program(
            setup=[create, Call("noLoop"), Call("background", (255,))],
            prologue=[Call("noStroke"), *_style_prologue(style, grid)],
            helpers=[LERP_HELPER],
        )

    clock, tick = CLOCKS[style]
    setup: list[Statement] = [create]
    background: Expr = 255
    if style is Style.PSYCHEDELIC:
        setup.append(Call("colorMode", (Var("HSB"), 360, 100, 100, 100)))
        background = 0
    return Program(
        globals=[Declare(clock, 0)],
        setup=setup,
        prologue=[Call("background", (background,)), Call("noStroke"), *_style_prologue(style, grid)],
        epilogue=[Increment(clock, tick)],
        helpers=[LERP_HELPER],
    )


def build_program(
    style: Style, grid: GridParams, samples: Iterable[Sample], config: StyleConfig | None = None
) -> Program:
    """Assemble the full program for ``samples`` in scan order."""
    style = Style(style)
    config = config or STYLE_CONFIGS[style]
    program = frame(style, grid)
    for s in samples:
        if not config.accepts(s):
            continue
        cell = Cell.from_sample(s, grid.cell_size, include_alpha=config.include_alpha)
        program.statements.extend(emit(style, cell))
    return program
