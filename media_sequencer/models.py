from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path


class DateSource(Enum):
    """Where a resolved media date came from."""
    EXIF_ORIGINAL = "exif-original"
    EXIF_MODIFIED = "exif-modified"
    VIDEO_MEDIA_CREATED = "media-created"
    FILESYSTEM = "filesystem"


@dataclass
class MediaFile:
    """
    Represents a media file found in the target directory.
    """
    path: Path
    ext: str
    type: str               # image/video
    mtime: float

    @property
    def name(self) -> str:
        return self.path.name


@dataclass
class MediaDateRecord:
    media: MediaFile
    resolved: datetime
    source: DateSource


@dataclass
class RenameAction:
    record: MediaDateRecord
    counter: int
    target: Path

    @property
    def source_path(self) -> Path:
        return self.record.media.path
