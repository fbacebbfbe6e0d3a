import pytest
from PIL import Image

from data_intake.core import DataIngestor
from data_intake.staging.filesystem import LocalFilesystem


def _raise_oserror(*args, **kwargs):
    raise OSError("simulated I/O failure")


@pytest.fixture
def staging_dir(tmp_path):
    """An empty directory to stage into, so tests can assert nothing leaks."""
    d = tmp_path / "staging"
    d.mkdir()
    return d


@pytest.fixture
def png_file(tmp_path):
    """Returns the path of a small PNG written with Pillow."""
    p = tmp_path / "pixel.png"
    Image.new("RGB", (32, 32), (255, 0, 0)).save(p, format="PNG")
    return p


@pytest.fixture
def ingestor():
    return DataIngestor()


@pytest.fixture
def broken_fs(monkeypatch):
    """Factory for a LocalFilesystem whose named methods raise OSError."""
    def _make(*methods):
        fs = LocalFilesystem()
        for name in methods:
            monkeypatch.setattr(fs, name, _raise_oserror)
        return fs
    return _make
