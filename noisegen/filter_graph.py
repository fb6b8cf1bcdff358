"""
ent — Filter Graph Builder
Turns a ParameterBundle into the two FFmpeg expressions needed to render a
frame: a lavfi source expression (-i) and a post-processing chain (-vf).

Filters are built as typed values and rendered in one place, so option
values never need hand-written separators.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from noisegen.params import ParameterBundle, PATTERN_COUNT, COLOR_VARIATION_COUNT


# ═══════════════════════════════════════════════════════════════════════════════
# PATTERN / COLOR TABLES
# ═══════════════════════════════════════════════════════════════════════════════

PATTERN_NAMES = ["Custom Sine Wave", "Fractal", "Game of Life", "Color Sine Wave"]

COLOR_FILTER_NAMES = [
    "Hue Saturation",
    "Hue Negate",
    "Color Balance",
    "Contrast Brightness",
    "Hue Channel Mixer",
]

# Source frame settings
SYNTHETIC_DURATION = "0.1"
SOURCE_RATE = 24


# ═══════════════════════════════════════════════════════════════════════════════
# TYPED EXPRESSIONS
# ═══════════════════════════════════════════════════════════════════════════════

class Expr(str):
    """An arithmetic expression option value, rendered single-quoted."""


OptionValue = Union[int, str, Expr]


class Filter:
    """One filter node: `name=key=value:key=value`. A None key is positional."""

    def __init__(self, name: str, *options: Tuple[Optional[str], OptionValue]):
        self.name = name
        self.options = list(options)

    def render(self) -> str:
        if not self.options:
            return self.name
        parts = []
        for key, value in self.options:
            if key is None:
                parts.append(str(value))
            elif isinstance(value, Expr):
                parts.append(f"{key}='{value}'")
            else:
                parts.append(f"{key}={value}")
        return f"{self.name}={':'.join(parts)}"

    def __repr__(self):
        return f"Filter({self.render()!r})"


class FilterChain:
    """Filters applied in sequence, rendered comma separated."""

    def __init__(self, filters: List[Filter]):
        self.filters = list(filters)

    def then(self, other: "FilterChain") -> "FilterChain":
        return FilterChain(self.filters + other.filters)

    def render(self) -> str:
        return ",".join(f.render() for f in self.filters)

    def __len__(self):
        return len(self.filters)


@dataclass(frozen=True)
class FilterGraphSpec:
    source: str
    filter_chain: str
    pattern_name: str
    color_filter_name: str = ""


# ═══════════════════════════════════════════════════════════════════════════════
# RESOLUTION
# ═══════════════════════════════════════════════════════════════════════════════

_RESOLUTION_RE = re.compile(r"^(\d+)x(\d+)$")


def parse_resolution(resolution: str) -> Tuple[int, int]:
    """Parse 'WIDTHxHEIGHT' into a (width, height) tuple."""
    match = _RESOLUTION_RE.match(str(resolution).strip())
    if not match:
        raise ValueError(f"Invalid resolution {resolution!r}, expected WIDTHxHEIGHT")
    width, height = int(match.group(1)), int(match.group(2))
    if width <= 0 or height <= 0:
        raise ValueError(f"Resolution must be positive, got {resolution!r}")
    return width, height


# ═══════════════════════════════════════════════════════════════════════════════
# PATTERNS
# ═══════════════════════════════════════════════════════════════════════════════

def _null_source(resolution: str) -> FilterChain:
    return FilterChain([
        Filter("nullsrc", ("size", resolution), ("duration", SYNTHETIC_DURATION)),
        Filter("format", (None, "rgb24")),
    ])


def _sine_noise(bundle: ParameterBundle, resolution: str) -> FilterChain:
    n, t = bundle.noise_amount, bundle.texture_scale
    return _null_source(resolution).then(FilterChain([
        Filter(
            "geq",
            ("r", Expr(f"128+{n}*sin(X/10)")),
            ("g", Expr(f"128+{t}*sin(Y/10)")),
            ("b", Expr(f"128+{n}*sin((X+Y)/10)")),
        ),
    ]))


def _fractal(bundle: ParameterBundle, resolution: str) -> FilterChain:
    return FilterChain([
        Filter(
            "mandelbrot",
            ("size", resolution),
            ("rate", SOURCE_RATE),
            ("start_x", bundle.start_x_text),
            ("start_y", bundle.start_y_text),
            ("bailout", bundle.mandelbrot_bailout),
            ("maxiter", bundle.mandelbrot_max_iter),
        ),
    ])


def _game_of_life(bundle: ParameterBundle, resolution: str) -> FilterChain:
    return FilterChain([
        Filter(
            "life",
            ("size", resolution),
            ("rate", SOURCE_RATE),
            ("ratio", bundle.seed_small_text),
            # mold takes the integer part of texture_scale
            ("mold", int(bundle.texture_scale)),
            ("life_color", f"0x{bundle.hex_color}"),
        ),
    ])


def _color_sine(bundle: ParameterBundle, resolution: str) -> FilterChain:
    s = bundle.seed_small_text
    return _null_source(resolution).then(FilterChain([
        Filter(
            "geq",
            ("r", Expr(f"128+128*sin({s}*2*PI*X/W)")),
            ("g", Expr(f"128+128*sin({s}*2*PI*Y/H)")),
            ("b", Expr(f"128+128*sin({s}*2*PI*(X+Y)/(W+H))")),
        ),
    ]))


_PATTERN_BUILDERS = [_sine_noise, _fractal, _game_of_life, _color_sine]


# ═══════════════════════════════════════════════════════════════════════════════
# COLOR FILTERS
# ═══════════════════════════════════════════════════════════════════════════════

def _color_filter(bundle: ParameterBundle, variation: int) -> FilterChain:
    hue = bundle.hue_rotate
    d = f"{bundle.fraction:.2f}"

    if variation == 0:
        return FilterChain([
            Filter("hue", ("h", hue), ("s", f"{bundle.texture_scale / 10:.1f}")),
        ])
    if variation == 1:
        return FilterChain([Filter("hue", ("h", hue), ("s", 3)), Filter("negate")])
    if variation == 2:
        return FilterChain([Filter("colorbalance", ("rs", d), ("gs", d), ("bs", d))])
    if variation == 3:
        return FilterChain([
            Filter("eq", ("contrast", f"{1 + bundle.fraction:.2f}"), ("brightness", d)),
        ])
    return FilterChain([
        Filter("hue", ("h", hue)),
        Filter("colorchannelmixer", ("rr", d), ("gg", d), ("bb", d), ("ra", 0)),
    ])


def _texture_filter(bundle: ParameterBundle) -> FilterChain:
    # allf=t varies the grain temporally
    return FilterChain([Filter("noise", ("alls", bundle.noise_amount), ("allf", "t"))])


# ═══════════════════════════════════════════════════════════════════════════════
# BUILD
# ═══════════════════════════════════════════════════════════════════════════════

def build(bundle: ParameterBundle, resolution: str) -> FilterGraphSpec:
    """
    Build the source expression and filter chain for a parameter bundle.

    Args:
        bundle: Seed-derived parameters
        resolution: Output size as 'WIDTHxHEIGHT'

    Returns:
        FilterGraphSpec with the lavfi source, the -vf chain and the
        pattern name used for logging.
    """
    parse_resolution(resolution)

    pattern_type = bundle.pattern_type % PATTERN_COUNT
    color_variation = bundle.color_variation % COLOR_VARIATION_COUNT

    source = _PATTERN_BUILDERS[pattern_type](bundle, resolution)
    chain = _texture_filter(bundle).then(_color_filter(bundle, color_variation))

    return FilterGraphSpec(
        source=source.render(),
        filter_chain=chain.render(),
        pattern_name=PATTERN_NAMES[pattern_type],
        color_filter_name=COLOR_FILTER_NAMES[color_variation],
    )
