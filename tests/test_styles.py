import pytest

from codeart.charsets import ASCII_RAMP, ramp_index
from codeart.program import Call, Declare, Increment, Str, render_expr
from codeart.sampling import GridParams, Sample
from codeart.styles import (
    CANVAS,
    DEFAULT_CONFIG,
    LEGACY_CONFIG,
    STYLE_CONFIGS,
    Canvas,
    Cell,
    Style,
    StyleConfig,
    build_program,
    emit,
    frame,
)
from tests.conftest import calls

GRID = GridParams.compute(1, 1, base_step=8)  # 400x400 canvas, one 400px cell


def make_sample(r=0, g=0, b=0, a=255, x=0, y=0):
    return Sample(source_x=x, source_y=y, r=r, g=g, b=b, a=a, dest_x=x, dest_y=y)


def make_cell(r=0, g=0, b=0, a=255, cell_size=10, x=0, y=0):
    return Cell.from_sample(make_sample(r, g, b, a, x, y), cell_size)


def test_every_style_has_default_config():
    assert set(STYLE_CONFIGS) == set(Style)
    for config in STYLE_CONFIGS.values():
        assert config.base_step == 8
        assert config.alpha_threshold == 128


def test_style_names():
    assert [s.value for s in Style] == [
        "pixels",
        "circles",
        "triangles",
        "lines",
        "dots",
        "ascii",
        "psychedelic",
        "statue",
        "animation",
    ]


def test_default_alpha_threshold_is_exclusive():
    assert not DEFAULT_CONFIG.accepts(make_sample(a=128))
    assert DEFAULT_CONFIG.accepts(make_sample(a=129))


def test_legacy_alpha_threshold():
    assert not LEGACY_CONFIG.accepts(make_sample(a=0))
    assert LEGACY_CONFIG.accepts(make_sample(a=1))


def test_cell_derived_quantities():
    cell = make_cell(30, 60, 90, cell_size=10)
    assert cell.brightness == 60
    assert cell.variable_size == pytest.approx(60 / 255 * 9 + 1)


def test_variable_size_spans_one_to_cell_size():
    assert make_cell(0, 0, 0, cell_size=10).variable_size == 1
    assert make_cell(255, 255, 255, cell_size=10).variable_size == 10


def test_pixels():
    cell = make_cell(1, 2, 3, x=20, y=30, cell_size=10)
    assert emit(Style.PIXELS, cell) == [Call("fill", (1, 2, 3)), Call("rect", (20, 30, 10, 10))]


def test_circles():
    cell = make_cell(1, 2, 3, x=20, y=30, cell_size=10)
    assert emit(Style.CIRCLES, cell) == [Call("fill", (1, 2, 3)), Call("circle", (25, 35, 10))]


def test_triangles():
    cell = make_cell(1, 2, 3, x=20, y=30, cell_size=10)
    assert emit(Style.TRIANGLES, cell) == [
        Call("fill", (1, 2, 3)),
        Call("triangle", (25, 30, 20, 40, 30, 40)),
    ]


def test_lines():
    cell = make_cell(255, 255, 255, x=20, y=30, cell_size=10)
    assert emit(Style.LINES, cell) == [
        Call("stroke", (255, 255, 255)),
        Call("strokeWeight", (8,)),
        Call("line", (20, 30, 20, 40)),
    ]


def test_dots_scale_with_brightness():
    dark = emit(Style.DOTS, make_cell(0, 0, 0, cell_size=10))
    light = emit(Style.DOTS, make_cell(255, 255, 255, cell_size=10))
    assert dark[1] == Call("circle", (5, 5, 1))
    assert light[1] == Call("circle", (5, 5, 10))


def test_ascii_ramp_index_extremes_and_midpoint():
    assert ramp_index(0) == 0
    assert ramp_index(255) == 9
    assert ramp_index(127.5) == 4
    assert ASCII_RAMP[ramp_index(0)] == "@"
    assert ASCII_RAMP[ramp_index(20)] == "@"
    assert ASCII_RAMP[ramp_index(255)] == " "
    assert ASCII_RAMP[ramp_index(127.5)] == "+"


def test_ascii_emits_centered_glyph():
    statements = emit(Style.ASCII, make_cell(10, 20, 30, x=20, y=30, cell_size=10))
    # brightness 20 -> floor(0.078 * 9) = 0
    assert statements == [Call("text", (Str("@"), 25, 35))]


def test_ascii_light_pixel_gets_sparse_glyph():
    statements = emit(Style.ASCII, make_cell(240, 240, 240, cell_size=10))
    # brightness 240 -> floor(0.94 * 9) = 8
    assert statements == [Call("text", (Str("."), 5, 5))]


def test_ascii_prologue_sets_black_text():
    program = frame(Style.ASCII, GRID)
    assert Call("fill", (0,)) in program.prologue
    assert Call("textSize", (320,)) in program.prologue


def test_statue_marble_tint():
    statements = emit(Style.STATUE, make_cell(200, 200, 200, cell_size=10))
    assert statements[0] == Call("fill", (180, 190, 215))
    assert statements[1] == Call("rect", (0, 0, 10, 10))


def test_statue_dark_pixel():
    # marble = floor(0 * 0.8 + 40) = 40
    assert emit(Style.STATUE, make_cell(0, 0, 0))[0] == Call("fill", (20, 30, 55))


def test_psychedelic_is_symbolic_in_time():
    fill, ellipse = emit(Style.PSYCHEDELIC, make_cell(0, 0, 0, x=100, y=50, cell_size=10))
    hue, saturation, value = (render_expr(a) for a in fill.args)
    assert "sin(t + (100 * 0.01))" in hue
    assert hue.endswith("% 360")
    assert saturation == "70 + (sin(t + (50 * 0.02)) * 30)"
    assert value == "80 + (cos(t + (100 * 0.03)) * 20)"
    assert ellipse.name == "ellipse"
    assert ellipse.args[:2] == (105, 55)
    assert render_expr(ellipse.args[2]).startswith("lerpValue(5, 15, ")


def test_psychedelic_hue_seeded_by_brightness():
    dark, _ = emit(Style.PSYCHEDELIC, make_cell(0, 0, 0))
    light, _ = emit(Style.PSYCHEDELIC, make_cell(255, 255, 255))
    assert render_expr(dark.args[0]) != render_expr(light.args[0])


def test_animation_wave_and_alpha():
    fill, circle = emit(Style.ANIMATION, make_cell(1, 2, 3, x=0, y=0, cell_size=10))
    assert fill.args[:3] == (1, 2, 3)
    assert "sin((frame * 2) + " in render_expr(fill.args[3])
    assert render_expr(circle.args[0]).startswith("5 + (sin(frame + ")
    assert render_expr(circle.args[0]).endswith("* 5)")
    assert circle.args[2] == 10


def test_canvas_groups():
    animated = {s for s, c in CANVAS.items() if c is Canvas.ANIMATED}
    assert animated == {Style.PSYCHEDELIC, Style.ANIMATION}


@pytest.mark.parametrize("style", [s for s in Style if CANVAS[s] is Canvas.STATIC])
def test_static_frame(style):
    program = frame(style, GRID)
    assert program.globals == []
    assert program.setup == [Call("createCanvas", (400, 400)), Call("noLoop"), Call("background", (255,))]
    assert program.epilogue == []
    assert [h.name for h in program.helpers] == ["lerpValue"]


def test_psychedelic_frame():
    program = frame(Style.PSYCHEDELIC, GRID)
    assert program.globals == [Declare("t", 0)]
    assert Call("noLoop") not in program.setup
    assert program.setup[1].name == "colorMode"
    assert program.prologue[0] == Call("background", (0,))
    assert program.epilogue == [Increment("t", 0.05)]


def test_animation_frame():
    program = frame(Style.ANIMATION, GRID)
    assert program.globals == [Declare("frame", 0)]
    assert Call("noLoop") not in program.setup
    assert program.prologue[0] == Call("background", (255,))
    assert program.epilogue == [Increment("frame", 0.1)]


def test_build_program_filters_and_keeps_order():
    samples = [make_sample(r=1, a=255), make_sample(r=2, a=100, x=1), make_sample(r=3, a=200, x=2)]
    program = build_program(Style.PIXELS, GRID, samples)
    assert [c.args[0] for c in calls(program, "fill")] == [1, 3]


def test_build_program_legacy_keeps_alpha_channel():
    program = build_program(Style.PIXELS, GRID, [make_sample(r=9, a=1)], config=LEGACY_CONFIG)
    assert calls(program, "fill") == [Call("fill", (9, 0, 0, 1))]


def test_build_program_custom_threshold():
    config = StyleConfig(alpha_threshold=250)
    samples = [make_sample(a=250), make_sample(a=251)]
    assert len(calls(build_program(Style.CIRCLES, GRID, samples, config=config), "circle")) == 1


def test_build_program_accepts_style_name():
    program = build_program("dots", GRID, [make_sample()])
    assert len(calls(program, "circle")) == 1
