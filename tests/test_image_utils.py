import pytest
from PIL import Image

from noisegen.image_utils import verify_image, image_stats

from conftest import write_png


def test_verify_image(tmp_path):
    path = str(tmp_path / "a.png")
    write_png(path, size=(16, 9))
    assert verify_image(path) == (16, 9)


def test_verify_rejects_garbage(tmp_path):
    path = tmp_path / "bad.png"
    path.write_bytes(b"nope")
    with pytest.raises(ValueError):
        verify_image(str(path))


def test_verify_missing_file(tmp_path):
    with pytest.raises(ValueError):
        verify_image(str(tmp_path / "missing.png"))


def test_image_stats_solid_color(tmp_path):
    path = str(tmp_path / "solid.png")
    write_png(path, size=(4, 4), color=(10, 200, 30))
    stats = image_stats(path)
    assert stats["size"] == (4, 4)
    assert stats["mean"] == [10.0, 200.0, 30.0]
    assert stats["std"] == [0.0, 0.0, 0.0]


def test_verify_rejects_decompression_bomb(tmp_path, monkeypatch):
    path = str(tmp_path / "big.png")
    write_png(path, size=(32, 24))
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)
    with pytest.raises(ValueError):
        verify_image(path)
