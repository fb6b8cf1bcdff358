"""
ent — Single-shot and slideshow drivers.
"""

import sys
import time
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


def run_once(generator, viewer=None, out=None) -> Optional[str]:
    """
    Generate one image, print its path, then make sure the viewer shows it.

    Returns:
        The generated path, or None if rendering failed
    """
    out = out if out is not None else sys.stdout
    path = generator.generate_image()
    if path is not None:
        print(path, file=out, flush=True)
    if viewer is not None:
        viewer.ensure_running()
    return path


def run_loop(
    generator,
    viewer,
    delay: float,
    iterations: Optional[int] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """
    Generate and display a fresh image every `delay` seconds.

    Sleeps only between iterations, never before the first. A failed
    generation is reported by the generator and the loop moves on.

    Args:
        generator: NoiseGenerator
        viewer: ViewerController, or None to only write files
        delay: Seconds between iterations
        iterations: Stop after this many iterations (None = forever)
        sleep: time.sleep compatible callable

    Returns:
        Number of iterations run
    """
    logger.info("Starting auto-generation loop every %s seconds. Press Ctrl+C to stop.", delay)

    count = 0
    while iterations is None or count < iterations:
        if count:
            sleep(delay)
        count += 1

        path = generator.generate_image()
        if path is None:
            logger.warning("Iteration %d produced no image, keeping the current one", count)
            continue
        if viewer is not None:
            viewer.refresh()

    return count
