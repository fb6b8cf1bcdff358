"""
ent — Housekeeping
Prunes old generated images. Runs once at startup; the loop never prunes.
"""

import glob
import os
import logging

logger = logging.getLogger(__name__)


def prune_outputs(output_dir, keep=20, pattern="noise_*.png"):
    """
    Delete all but the newest `keep` images, newest meaning last by name.

    Errors are logged and discarded.

    Returns:
        Number of files removed
    """
    try:
        files = sorted(glob.glob(os.path.join(output_dir, pattern)))
    except OSError as e:
        logger.debug("Could not list %s: %s", output_dir, e)
        return 0

    stale = files[:-keep] if keep > 0 else files
    removed = 0
    for path in stale:
        try:
            os.remove(path)
            removed += 1
        except OSError as e:
            logger.debug("Could not remove %s: %s", path, e)

    if removed:
        logger.info("Removed %d old image(s) from %s", removed, output_dir)
    return removed
