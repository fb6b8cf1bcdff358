"""
ent — Parameter Generator
Maps a seed to the numeric and color knobs that drive one image.

Every field is the seed reduced modulo a positive constant, so any integer
seed (negative or huge) lands inside the documented ranges.
"""

from dataclasses import dataclass, asdict
from typing import Dict, Any


PATTERN_COUNT = 4
COLOR_VARIATION_COUNT = 5


@dataclass(frozen=True)
class ParameterBundle:
    """Deterministic seed-derived parameters for one generation."""

    seed: int
    pattern_type: int          # [0, 4)
    noise_amount: int          # [0, 101)
    hue_rotate: int            # [0, 360)
    color_variation: int       # [0, 5)
    texture_scale: int         # [1, 11)
    seed_decimal: int          # [0, 100)
    seed_small: float          # seed_decimal / 100
    hex_r: int                 # [0, 256)
    hex_g: int
    hex_b: int
    mandelbrot_start_x: float
    mandelbrot_start_y: float
    mandelbrot_bailout: int    # [10, 100)
    mandelbrot_max_iter: int   # [50, 200)

    # ── Text forms embedded in filter expressions ──

    @property
    def seed_small_text(self) -> str:
        return f"{self.seed_small:.2f}"

    @property
    def hex_color(self) -> str:
        """24-bit color as six lowercase hex digits (rrggbb)."""
        return f"{self.hex_r:02x}{self.hex_g:02x}{self.hex_b:02x}"

    @property
    def start_x_text(self) -> str:
        return f"{self.mandelbrot_start_x:.6f}"

    @property
    def start_y_text(self) -> str:
        return f"{self.mandelbrot_start_y:.6f}"

    @property
    def fraction(self) -> float:
        """seed_decimal / 100, the shared factor of the color filters."""
        return self.seed_decimal / 100

    def as_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["hex_color"] = self.hex_color
        return data


def generate(seed: int) -> ParameterBundle:
    """
    Derive the parameter bundle for a seed.

    Pure function: equal seeds always produce equal bundles.
    """
    seed = int(seed)
    seed_decimal = seed % 100
    seed_small = round(seed_decimal / 100.0, 2)

    return ParameterBundle(
        seed=seed,
        pattern_type=(seed * 7) % PATTERN_COUNT,
        noise_amount=seed % 101,
        hue_rotate=(seed * 13) % 360,
        color_variation=(seed * 17) % COLOR_VARIATION_COUNT,
        texture_scale=(seed * 23) % 10 + 1,
        seed_decimal=seed_decimal,
        seed_small=seed_small,
        hex_r=(seed * 31) % 256,
        hex_g=(seed * 43) % 256,
        hex_b=(seed * 61) % 256,
        mandelbrot_start_x=round(-2.0 + seed_small, 6),
        mandelbrot_start_y=round(-1.5 + seed_small, 6),
        mandelbrot_bailout=10 + (seed % 90),
        mandelbrot_max_iter=50 + (seed % 150),
    )
