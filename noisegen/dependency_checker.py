"""
ent — Dependency Checker
Verifies that the external tools (FFmpeg, the image viewer and the
window-manager helper) are installed before generation starts.
"""

import os
import shutil
import logging

logger = logging.getLogger(__name__)


class DependencyError(RuntimeError):
    """A required external tool is missing."""


def _find(program: str):
    """Resolve an executable: explicit path first, then PATH."""
    if os.path.sep in program:
        return program if os.path.isfile(program) and os.access(program, os.X_OK) else None
    return shutil.which(program)


def check_engine(engine: str) -> bool:
    """Check if the rendering engine (FFmpeg) is available."""
    return _find(engine) is not None


def check_viewer(viewer: str) -> bool:
    """Check if the image viewer is available."""
    return _find(viewer) is not None


def check_wm_helper(helper: str) -> bool:
    """Check if the window-manager helper (wmctrl) is available."""
    return _find(helper) is not None


def ensure_dependencies(settings, strict=False, need_viewer=True):
    """
    Check external tools and log what is missing.

    The engine is required; the viewer and wm helper are optional since the
    image is still written without them.

    Returns:
        dict mapping tool role to availability
    """
    status = {
        "engine": check_engine(settings.engine),
        "viewer": check_viewer(settings.viewer) if need_viewer else False,
        "wm_helper": check_wm_helper(settings.wm_helper) if need_viewer else False,
    }

    if not status["engine"]:
        logger.error("Rendering engine not found: %s", settings.engine)
        if strict:
            raise DependencyError(f"Rendering engine not found: {settings.engine}")
    if need_viewer and not status["viewer"]:
        logger.warning("Image viewer not found: %s, images will only be saved", settings.viewer)
    if need_viewer and not status["wm_helper"]:
        logger.debug("Window-manager helper not found: %s", settings.wm_helper)

    if all(status.values()):
        logger.debug("All dependencies present")
    return status
