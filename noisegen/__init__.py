"""
ent — Seeded Noise Image Generator
Derives FFmpeg filter graphs from a timestamp seed and renders still images.
"""

__version__ = "1.0.0"
