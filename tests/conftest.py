import os

import pytest
from PIL import Image

from noisegen.config import Settings
from noisegen.renderer import RenderError


@pytest.fixture(autouse=True)
def isolated_state(tmp_path, monkeypatch):
    """Keep the state database and log file out of the real home directory."""
    state_dir = tmp_path / "state"
    monkeypatch.setenv("ENT_STATE_DIR", str(state_dir))
    for name in ("ENT_OUTPUT_DIR", "ENT_RESOLUTION", "ENT_ENGINE",
                 "ENT_VIEWER", "ENT_WM_HELPER", "ENT_KEEP"):
        monkeypatch.delenv(name, raising=False)
    return state_dir


@pytest.fixture
def settings(tmp_path):
    return Settings(output_dir=str(tmp_path / "out"), resolution="32x24")


def write_png(path, size=(32, 24), color=(10, 200, 30)):
    Image.new("RGB", size, color).save(path, format="PNG")


class FakeRender:
    """Stands in for renderer.render: writes a PNG or raises RenderError."""

    def __init__(self, fail_on=()):
        self.calls = []
        self.fail_on = set(fail_on)

    def __call__(self, spec, output_path, engine="ffmpeg"):
        self.calls.append((spec, output_path, engine))
        if len(self.calls) in self.fail_on:
            raise RenderError("FFmpeg render failed (code 1)", returncode=1,
                              diagnostics="Invalid filter")
        write_png(output_path)
        return output_path


class FakeProcess:
    _next_pid = 4000

    def __init__(self, args, **kwargs):
        FakeProcess._next_pid += 1
        self.pid = FakeProcess._next_pid
        self.args = args
        self.kwargs = kwargs
        self.returncode = None
        self.terminated = False

    def poll(self):
        return self.returncode

    def terminate(self):
        self.terminated = True
        self.returncode = -15

    def kill(self):
        self.returncode = -9

    def wait(self, timeout=None):
        return self.returncode


def listdir(path):
    return sorted(os.listdir(path)) if os.path.isdir(path) else []
