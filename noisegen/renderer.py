"""
ent — Rendering Engine Wrapper
Runs FFmpeg synchronously to rasterize one frame of a FilterGraphSpec.
"""

import os
import shutil
import subprocess
import logging
from typing import List, Optional

from noisegen.filter_graph import FilterGraphSpec
from noisegen.image_utils import verify_image

logger = logging.getLogger(__name__)


class RenderError(RuntimeError):
    """The rendering engine exited non-zero or produced no usable file."""

    def __init__(self, message: str, returncode: Optional[int] = None, diagnostics: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.diagnostics = diagnostics


def get_ffmpeg_path(engine: str = "ffmpeg") -> str:
    """Find the FFmpeg executable: configured path, then system PATH, then the bare name."""
    if os.path.isfile(engine):
        return engine
    found = shutil.which(engine)
    if found:
        return found
    # Let the OS resolve it (and fail loudly) at spawn time
    return engine


def build_command(spec: FilterGraphSpec, output_path: str, engine: str = "ffmpeg") -> List[str]:
    return [
        get_ffmpeg_path(engine), "-y", "-hide_banner",
        "-f", "lavfi", "-i", spec.source,
        "-vf", spec.filter_chain,
        "-frames:v", "1",
        output_path,
    ]


def _discard(path: str):
    if os.path.exists(path):
        try:
            os.remove(path)
        except OSError as e:
            logger.debug("Could not remove partial output %s: %s", path, e)


def render(spec: FilterGraphSpec, output_path: str, engine: str = "ffmpeg",
           timeout: Optional[float] = None) -> str:
    """
    Render a single PNG frame.

    Args:
        spec: Source expression and filter chain
        output_path: Destination file (overwritten)
        engine: FFmpeg executable name or path
        timeout: Optional seconds before the engine is killed

    Returns:
        output_path on success

    Raises:
        RenderError with the engine's diagnostic text on failure. No file is
        left at output_path when this is raised.
    """
    cmd = build_command(spec, output_path, engine)
    logger.debug("FFmpeg cmd: %s", " ".join(cmd))

    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
    except FileNotFoundError as e:
        raise RenderError(f"Rendering engine not found: {engine}", diagnostics=str(e)) from e
    except subprocess.TimeoutExpired as e:
        _discard(output_path)
        raise RenderError(f"Rendering engine timed out after {timeout}s",
                          diagnostics=str(e.stderr or "")) from e

    if result.returncode != 0:
        _discard(output_path)
        err = (result.stderr or "").strip() or "Unknown error"
        raise RenderError(
            f"FFmpeg render failed (code {result.returncode})",
            returncode=result.returncode,
            diagnostics=err,
        )

    if not os.path.isfile(output_path):
        raise RenderError(f"FFmpeg exited cleanly but wrote no file: {output_path}",
                          returncode=0, diagnostics=(result.stderr or "").strip())

    try:
        verify_image(output_path)
    except ValueError as e:
        _discard(output_path)
        raise RenderError(str(e), returncode=0, diagnostics=(result.stderr or "").strip()) from e

    return output_path
