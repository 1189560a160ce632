import json
import subprocess

import pytest
from datetime import datetime, timezone
from PIL import Image

from media_sequencer.metadata.parsing import (
    parse_exif_date,
    parse_media_date,
    sanitize_property_string,
)
from media_sequencer.metadata.readers import ImageMetadataReader, VideoMetadataReader


# Mock MediaInfo class structure
class MockTrack:
    def __init__(self, track_type="General", **kwargs):
        self.track_type = track_type
        for k, v in kwargs.items():
            setattr(self, k, v)


class MockMediaInfo:
    parsed = []
    tracks_for = {}

    def __init__(self, tracks):
        self.tracks = tracks

    @classmethod
    def parse(cls, path):
        cls.parsed.append(path)
        return cls(cls.tracks_for.get(path, []))


@pytest.fixture
def mock_mediainfo(monkeypatch):
    import media_sequencer.metadata.readers as readers_module
    MockMediaInfo.parsed = []
    MockMediaInfo.tracks_for = {}
    monkeypatch.setattr(readers_module, "MediaInfo", MockMediaInfo)
    return MockMediaInfo


# --- Parsing ---

def test_sanitize_strips_direction_marks_and_collapses_whitespace():
    raw = "\u200e2023\u200e:01:01 \u200f\u200e 10:00:00\t\x00"
    assert sanitize_property_string(raw) == "2023:01:01 10:00:00"


@pytest.mark.parametrize(
    "value,expected",
    [
        ("2020:01:02 03:04:05", datetime(2020, 1, 2, 3, 4, 5)),
        (" 2020:01:02 03:04:05 ", datetime(2020, 1, 2, 3, 4, 5)),
        ("2020-01-02 03:04:05", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_exif_date(value, expected):
    assert parse_exif_date(value) == expected


@pytest.mark.parametrize(
    "value,expected",
    [
        ("2022-03-04T05:06:07", datetime(2022, 3, 4, 5, 6, 7)),
        ("2022:03:04 05:06:07", datetime(2022, 3, 4, 5, 6, 7)),
        ("2022:03:04 05:06:07.123", datetime(2022, 3, 4, 5, 6, 7)),
        ("\u200e3/\u200e4/\u200e2022 \u200f\u200e5:06 PM", datetime(2022, 3, 4, 17, 6)),
        ("garbage", None),
        ("UTC", None),
    ],
)
def test_parse_media_date_local_values(value, expected):
    assert parse_media_date(value) == expected


def test_parse_media_date_converts_utc_to_local():
    expected = datetime(2021, 6, 1, 12, 0, 0, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
    assert parse_media_date("UTC 2021-06-01 12:00:00") == expected
    assert parse_media_date("2021-06-01 12:00:00 UTC") == expected


# --- Image reader ---

def test_image_reader_reads_real_exif(tmp_path):
    path = tmp_path / "shot.jpg"
    exif = Image.Exif()
    exif[0x0132] = "2019:08:09 10:11:12"  # DateTime (IFD0)
    with Image.new("RGB", (8, 8), color="red") as im:
        im.save(path, exif=exif)

    reader = ImageMetadataReader()
    assert reader.resolve_image_field(path, "Image DateTime") == "2019:08:09 10:11:12"
    assert reader.resolve_image_field(path, "EXIF DateTimeOriginal") is None


def test_image_reader_opens_file_once_per_path(monkeypatch, tmp_path):
    import media_sequencer.metadata.readers as readers_module

    calls = []

    def fake_process_file(f, details=True):
        calls.append(f.name)
        assert not f.closed
        return {"EXIF DateTimeOriginal": "2020:01:01 00:00:00"}

    monkeypatch.setattr(readers_module.exifread, "process_file", fake_process_file)
    path = tmp_path / "a.jpg"
    path.write_bytes(b"\xff\xd8")

    reader = ImageMetadataReader()
    reader.resolve_image_field(path, "EXIF DateTimeOriginal")
    reader.resolve_image_field(path, "Image DateTime")

    assert len(calls) == 1


def test_image_reader_missing_file_raises(tmp_path):
    from media_sequencer.exceptions import MetadataExtractionError

    with pytest.raises(MetadataExtractionError):
        ImageMetadataReader().resolve_image_field(tmp_path / "gone.jpg", "Image DateTime")


# --- Video reader ---

def test_video_reader_uses_general_track(mock_mediainfo, tmp_path):
    vid = tmp_path / "test.mp4"
    vid.touch()
    mock_mediainfo.tracks_for[str(vid)] = [
        MockTrack("Video", recorded_date="ignored"),
        MockTrack(recorded_date="2023-01-01 12:00:00", encoded_date=None),
    ]

    reader = VideoMetadataReader(use_exiftool=False)

    assert reader.resolve_video_property(tmp_path, "test.mp4", "recorded_date") == "2023-01-01 12:00:00"
    assert reader.resolve_video_property(tmp_path, "test.mp4", "encoded_date") is None
    assert reader.resolve_video_property(tmp_path, "test.mp4", "tagged_date") is None
    # General track is parsed once and reused for every property
    assert mock_mediainfo.parsed == [str(vid)]


def test_video_reader_falls_back_to_exiftool(mock_mediainfo, monkeypatch, tmp_path):
    vid = tmp_path / "old.avi"
    vid.touch()
    commands = []

    def fake_check_output(cmd, stderr=None, text=None):
        commands.append(cmd)
        return json.dumps([{"SourceFile": str(vid), "MediaCreateDate": "2010:10:10 10:10:10"}])

    monkeypatch.setattr(subprocess, "check_output", fake_check_output)

    reader = VideoMetadataReader()

    assert reader.resolve_video_property(tmp_path, "old.avi", "recorded_date") is None
    assert reader.resolve_video_property(tmp_path, "old.avi", "encoded_date") == "2010:10:10 10:10:10"
    assert len(commands) == 1
    assert commands[0][0] == "exiftool"


def test_video_reader_without_exiftool_installed(mock_mediainfo, monkeypatch, tmp_path):
    def missing(cmd, stderr=None, text=None):
        raise FileNotFoundError("exiftool")

    monkeypatch.setattr(subprocess, "check_output", missing)

    reader = VideoMetadataReader()
    assert reader.resolve_video_property(tmp_path, "nothing.mov", "recorded_date") is None


def test_parse_media_date_rejects_container_epoch():
    assert parse_media_date("UTC 1904-01-01 00:00:00") is None
    assert parse_media_date("1904:01:01 00:00:00") is None
    assert parse_media_date("0000:00:00 00:00:00") is None


def test_image_reader_wraps_exifread_errors_and_closes_file(monkeypatch, tmp_path):
    import media_sequencer.metadata.readers as readers_module
    from media_sequencer.exceptions import MetadataExtractionError

    handles = []

    def broken_process_file(f, details=True):
        handles.append(f)
        raise ValueError("corrupt IFD")

    monkeypatch.setattr(readers_module.exifread, "process_file", broken_process_file)
    path = tmp_path / "bad.jpg"
    path.write_bytes(b"\xff\xd8")

    with pytest.raises(MetadataExtractionError):
        ImageMetadataReader().resolve_image_field(path, "EXIF DateTimeOriginal")

    assert handles[0].closed


def test_exiftool_is_asked_for_utc_aware_dates(mock_mediainfo, monkeypatch, tmp_path):
    commands = []

    def fake_check_output(cmd, stderr=None, text=None):
        commands.append(cmd)
        return json.dumps([{"MediaCreateDate": "2023:01:01 05:00:00-05:00"}])

    monkeypatch.setattr(subprocess, "check_output", fake_check_output)

    VideoMetadataReader().resolve_video_property(tmp_path, "clip.mov", "encoded_date")

    assert commands[0][:4] == ["exiftool", "-j", "-api", "QuickTimeUTC"]
    assert commands[0][-1] == str(tmp_path / "clip.mov")


def test_exiftool_and_mediainfo_agree_on_local_time(eastern_tz, mock_mediainfo, monkeypatch, make_media):
    from media_sequencer.metadata.resolver import DateResolver

    via_mediainfo = make_media("a.mp4")
    via_exiftool = make_media("b.mp4")
    mock_mediainfo.tracks_for[str(via_mediainfo.path)] = [
        MockTrack(encoded_date="2023-01-01 10:00:00 UTC"),
    ]

    def fake_check_output(cmd, stderr=None, text=None):
        return json.dumps([{"MediaCreateDate": "2023:01:01 05:00:00-05:00"}])

    monkeypatch.setattr(subprocess, "check_output", fake_check_output)

    resolver = DateResolver(image_reader=ImageMetadataReader(), video_reader=VideoMetadataReader())
    first = resolver.resolve(via_mediainfo)
    second = resolver.resolve(via_exiftool)

    assert first.resolved == datetime(2023, 1, 1, 5, 0, 0)
    assert second.resolved == datetime(2023, 1, 1, 5, 0, 0)
