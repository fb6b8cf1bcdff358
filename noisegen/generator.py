"""
ent — Generation Orchestrator
Seed -> parameters -> filter graph -> FFmpeg render -> publish.

One call to NoiseGenerator.generate_image() walks
Seeded -> Built -> Rendered -> Published, or stops at RenderFailed.
"""

import os
import time
import sqlite3
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from noisegen import database as db
from noisegen import params
from noisegen import filter_graph
from noisegen.image_utils import image_stats
from noisegen.renderer import render, RenderError
from noisegen.seed import timestamp_seed

logger = logging.getLogger(__name__)

OUTPUT_PREFIX = "noise_"
OUTPUT_SUFFIX = ".png"


@dataclass
class GenerationContext:
    """Process-lifetime state shared by the generator and the viewer controller."""

    latest_path: Optional[str] = None
    last_stamp_ns: int = 0


def output_filename(stamp_ns: int) -> str:
    """noise_YYYYMMDD_HHMMSS_<nanoseconds>.png in local time."""
    seconds, nanos = divmod(stamp_ns, 1_000_000_000)
    stamp = datetime.fromtimestamp(seconds).strftime("%Y%m%d_%H%M%S")
    return f"{OUTPUT_PREFIX}{stamp}_{nanos:09d}{OUTPUT_SUFFIX}"


def unique_output_path(ctx: GenerationContext, output_dir: str, now_ns: Optional[int] = None) -> str:
    """Timestamped output path, strictly later than any earlier one in this context."""
    if now_ns is None:
        now_ns = time.time_ns()
    stamp = max(now_ns, ctx.last_stamp_ns + 1)
    ctx.last_stamp_ns = stamp
    return os.path.join(output_dir, output_filename(stamp))


class NoiseGenerator:
    """
    Generates one image per call and publishes it to the shared context.

    Args:
        settings: Effective Settings (output_dir, resolution, engine)
        context: Shared GenerationContext (a fresh one when omitted)
        render_fn: Callable(spec, output_path, engine) that raises RenderError
        seed_fn: Callable() -> seed, defaults to the timestamp checksum
        clock: Callable() -> nanoseconds, used for output filenames
        fixed_seed: Use this seed for every generation instead of seed_fn
        record_history: Store each attempt in the state database
    """

    def __init__(
        self,
        settings,
        context: Optional[GenerationContext] = None,
        render_fn: Callable = render,
        seed_fn: Callable[[], int] = timestamp_seed,
        clock: Callable[[], int] = time.time_ns,
        fixed_seed: Optional[int] = None,
        record_history: bool = True,
    ):
        self.settings = settings
        self.context = context if context is not None else GenerationContext()
        self._render = render_fn
        self._seed_fn = seed_fn
        self._clock = clock
        self._fixed_seed = fixed_seed
        self._record_history = record_history
        self.attempts = 0
        self.failures = 0

        os.makedirs(settings.output_dir, exist_ok=True)

    def next_seed(self) -> int:
        if self._fixed_seed is not None:
            return self._fixed_seed
        return self._seed_fn()

    def generate_image(self) -> Optional[str]:
        """
        Generate, render and publish one image.

        Returns:
            The new image path, or None when rendering failed. On failure
            context.latest_path keeps its previous value.
        """
        self.attempts += 1

        # ── Seeded ──
        seed = self.next_seed()

        # ── Built ──
        bundle = params.generate(seed)
        spec = filter_graph.build(bundle, self.settings.resolution)
        output_path = unique_output_path(self.context, self.settings.output_dir, self._clock())

        logger.info(
            "Generating image with seed: %d (Pattern: %s, noise: %d, hue: %d)",
            seed, spec.pattern_name, bundle.noise_amount, bundle.hue_rotate,
        )
        logger.debug("Source: %s", spec.source)
        logger.debug("Filter chain: %s", spec.filter_chain)

        # ── Rendered / RenderFailed ──
        try:
            self._render(spec, output_path, self.settings.engine)
        except RenderError as e:
            self.failures += 1
            logger.error("Error: Failed to generate image with pattern: %s", spec.pattern_name)
            logger.error("%s\n%s", e, e.diagnostics)
            self._record(output_path, seed, spec, "failed")
            return None

        # ── Published ──
        self.context.latest_path = output_path
        logger.info("Image successfully generated as %s", output_path)
        self._record(output_path, seed, spec, "done")

        if logger.isEnabledFor(logging.DEBUG):
            try:
                logger.debug("Image stats: %s", image_stats(output_path))
            except OSError as e:
                logger.debug("Could not read image stats: %s", e)

        return output_path

    def _record(self, output_path, seed, spec, status):
        if not self._record_history:
            return
        try:
            db.add_image(output_path, seed, spec.pattern_name, spec.color_filter_name, status)
        except (sqlite3.Error, OSError) as e:
            logger.warning("Could not record generation history: %s", e)
