import pytest

from noisegen import dependency_checker
from noisegen.config import Settings
from noisegen.dependency_checker import ensure_dependencies, DependencyError


def _which_only(*available):
    return lambda name: f"/usr/bin/{name}" if name in available else None


def test_all_present(monkeypatch):
    monkeypatch.setattr(dependency_checker.shutil, "which", _which_only("ffmpeg", "ristretto", "wmctrl"))
    assert ensure_dependencies(Settings(), strict=True) == {
        "engine": True, "viewer": True, "wm_helper": True,
    }


def test_missing_viewer_is_not_fatal(monkeypatch):
    monkeypatch.setattr(dependency_checker.shutil, "which", _which_only("ffmpeg"))
    status = ensure_dependencies(Settings(), strict=True)
    assert status["engine"] is True
    assert status["viewer"] is False


def test_missing_engine_strict(monkeypatch):
    monkeypatch.setattr(dependency_checker.shutil, "which", _which_only("ristretto"))
    with pytest.raises(DependencyError):
        ensure_dependencies(Settings(), strict=True)
    assert ensure_dependencies(Settings())["engine"] is False


def test_viewer_skipped_when_not_needed(monkeypatch):
    monkeypatch.setattr(dependency_checker.shutil, "which", _which_only("ffmpeg"))
    status = ensure_dependencies(Settings(), need_viewer=False)
    assert status == {"engine": True, "viewer": False, "wm_helper": False}


def test_explicit_path(tmp_path):
    exe = tmp_path / "ffmpeg"
    exe.write_text("#!/bin/sh\n")
    exe.chmod(0o755)
    assert dependency_checker.check_engine(str(exe))
    assert not dependency_checker.check_engine(str(tmp_path / "missing"))
