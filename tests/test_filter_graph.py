from dataclasses import replace

import pytest

from noisegen.filter_graph import (
    build, parse_resolution, Filter, FilterChain, Expr, PATTERN_NAMES,
)
from noisegen.params import generate

RES = "800x600"


def test_seed_zero_sine_noise_and_hue_saturation():
    spec = build(generate(0), RES)
    assert spec.pattern_name == "Custom Sine Wave"
    assert spec.source == (
        "nullsrc=size=800x600:duration=0.1,format=rgb24,"
        "geq=r='128+0*sin(X/10)':g='128+1*sin(Y/10)':b='128+0*sin((X+Y)/10)'"
    )
    assert spec.filter_chain == "noise=alls=0:allf=t,hue=h=0:s=0.1"


def test_seed_999999_fractal_and_contrast():
    spec = build(generate(999999), RES)
    assert spec.pattern_name == "Fractal"
    assert spec.source == (
        "mandelbrot=size=800x600:rate=24:start_x=-1.010000:start_y=-0.510000"
        ":bailout=19:maxiter=149"
    )
    assert spec.filter_chain == "noise=alls=99:allf=t,eq=contrast=1.99:brightness=0.99"


def test_game_of_life_pattern():
    bundle = replace(generate(999999), pattern_type=2)
    spec = build(bundle, RES)
    assert spec.pattern_name == "Game of Life"
    assert spec.source == "life=size=800x600:rate=24:ratio=0.99:mold=8:life_color=0xa19503"


def test_color_sine_pattern_scales_with_resolution():
    bundle = replace(generate(999999), pattern_type=3)
    spec = build(bundle, "320x200")
    assert spec.pattern_name == "Color Sine Wave"
    assert spec.source == (
        "nullsrc=size=320x200:duration=0.1,format=rgb24,"
        "geq=r='128+128*sin(0.99*2*PI*X/W)':g='128+128*sin(0.99*2*PI*Y/H)'"
        ":b='128+128*sin(0.99*2*PI*(X+Y)/(W+H))'"
    )


@pytest.mark.parametrize("variation,expected", [
    (0, "hue=h=27:s=0.8"),
    (1, "hue=h=27:s=3,negate"),
    (2, "colorbalance=rs=0.99:gs=0.99:bs=0.99"),
    (3, "eq=contrast=1.99:brightness=0.99"),
    (4, "hue=h=27,colorchannelmixer=rr=0.99:gg=0.99:bb=0.99:ra=0"),
])
def test_color_filters(variation, expected):
    bundle = replace(generate(999999), color_variation=variation)
    spec = build(bundle, RES)
    assert spec.filter_chain == "noise=alls=99:allf=t," + expected


def test_small_fractions_keep_two_digits():
    bundle = replace(generate(5), color_variation=2)
    assert build(bundle, RES).filter_chain.endswith("colorbalance=rs=0.05:gs=0.05:bs=0.05")


def test_selection_depends_only_on_pattern_and_color_indices():
    base = generate(999999)
    for pattern_type in range(4):
        for color_variation in range(5):
            bundle = replace(base, pattern_type=pattern_type, color_variation=color_variation)
            spec = build(bundle, RES)
            assert spec.pattern_name == PATTERN_NAMES[pattern_type]
            # exactly one colour filter follows the grain filter
            assert spec.filter_chain.startswith("noise=alls=99:allf=t,")
            assert build(bundle, RES) == spec


@pytest.mark.parametrize("bad", ["800", "800x", "x600", "0x600", "800x0", "wide", "800X600"])
def test_invalid_resolution(bad):
    with pytest.raises(ValueError):
        build(generate(0), bad)


def test_parse_resolution():
    assert parse_resolution("1920x1080") == (1920, 1080)
    assert parse_resolution(" 8x8 ") == (8, 8)


def test_filter_rendering():
    assert Filter("negate").render() == "negate"
    assert Filter("format", (None, "rgb24")).render() == "format=rgb24"
    assert Filter("geq", ("r", Expr("X+Y")), ("g", 3)).render() == "geq=r='X+Y':g=3"
    chain = FilterChain([Filter("a")]).then(FilterChain([Filter("b", ("k", "v"))]))
    assert chain.render() == "a,b=k=v"
    assert len(chain) == 2


def test_out_of_range_color_variation_wraps():
    bundle = replace(generate(999999), color_variation=7)
    spec = build(bundle, RES)
    assert spec.color_filter_name == "Color Balance"
    assert spec.filter_chain.endswith("colorbalance=rs=0.99:gs=0.99:bs=0.99")
