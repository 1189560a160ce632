import os
import time
import pytest
from datetime import datetime
from pathlib import Path

from media_sequencer.models import MediaFile


class FakeImageReader:
    """Serves EXIF fields from a dict keyed by file name."""

    def __init__(self, fields=None):
        self.fields = fields or {}
        self.calls = []

    def resolve_image_field(self, path, field_id):
        self.calls.append((Path(path).name, field_id))
        return self.fields.get(Path(path).name, {}).get(field_id)


class FakeVideoReader:
    def __init__(self, properties=None):
        self.properties = properties or {}
        self.calls = []

    def resolve_video_property(self, directory, filename, property_id):
        self.calls.append((filename, property_id))
        return self.properties.get(filename, {}).get(property_id)


@pytest.fixture
def image_reader():
    return FakeImageReader()


@pytest.fixture
def video_reader():
    return FakeVideoReader()


@pytest.fixture
def make_media(tmp_path):
    """Creates a file on disk with a given mtime and returns its MediaFile."""
    def _make(name, mtime=None, media_type=None):
        path = tmp_path / name
        path.write_bytes(b"data")
        ts = mtime if mtime is not None else datetime(2020, 1, 1).timestamp()
        os.utime(path, (ts, ts))
        ext = path.suffix.lower()
        if media_type is None:
            media_type = 'video' if ext in ('.mp4', '.mov', '.avi', '.mkv') else 'image'
        return MediaFile(path=path, ext=ext, type=media_type, mtime=ts)
    return _make


@pytest.fixture
def eastern_tz(monkeypatch):
    """Pins local time to US Eastern (UTC-5 in winter) for the test."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    monkeypatch.setenv("TZ", "EST+05EDT,M3.2.0,M11.1.0")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()
