import json
import logging
import subprocess
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import exifread
from pymediainfo import MediaInfo

from .. import config
from ..exceptions import MetadataExtractionError


class ImageMetadataReader:
    """
    Reads embedded EXIF fields from image files using 'exifread'.

    The tag dictionary of the most recently read file is kept so that asking
    for a fallback field does not reopen the file.
    """

    def __init__(self):
        self._last: Optional[Tuple[Path, Dict[str, Any]]] = None

    def resolve_image_field(self, path: Path, field_id: str) -> Optional[str]:
        tags = self._read_tags(path)
        value = tags.get(field_id)
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    def _read_tags(self, path: Path) -> Dict[str, Any]:
        if self._last is not None and self._last[0] == path:
            return self._last[1]

        try:
            with path.open('rb') as f:
                # details=False skips makernotes and thumbnails
                tags = exifread.process_file(f, details=False)
        except OSError as e:
            raise MetadataExtractionError(f"Cannot read {path}: {e}") from e
        except Exception as e:
            raise MetadataExtractionError(f"ExifRead failed for {path}: {e}") from e

        self._last = (path, tags)
        return tags


class VideoMetadataReader:
    """
    Reads container-level properties from video files.

    Strategies:
      - 'pymediainfo' General track (fast, covers most containers).
      - 'exiftool' CLI as a fallback when MediaInfo has nothing for the property.
        Must be installed and on the system PATH.
    """

    def __init__(self, use_exiftool: bool = True):
        self.use_exiftool = use_exiftool
        self._mediainfo_cache: Optional[Tuple[Path, Any]] = None
        self._exiftool_cache: Optional[Tuple[Path, Dict[str, Any]]] = None

    def resolve_video_property(self, directory: Path, filename: str, property_id: str) -> Optional[str]:
        path = Path(directory) / filename

        value = self._from_mediainfo(path, property_id)
        if value is None and self.use_exiftool:
            value = self._from_exiftool(path, property_id)
        return value

    # --- Internal Extraction Helpers ---

    def _from_mediainfo(self, path: Path, property_id: str) -> Optional[str]:
        track = self._general_track(path)
        if track is None:
            return None
        val = getattr(track, property_id, None)
        return str(val) if val else None

    def _general_track(self, path: Path):
        if self._mediainfo_cache is not None and self._mediainfo_cache[0] == path:
            return self._mediainfo_cache[1]

        general = None
        try:
            mi = MediaInfo.parse(str(path))
            for track in mi.tracks:
                if track.track_type == "General":
                    general = track
                    break
        except Exception as e:
            logging.debug(f"MediaInfo failed for {path}: {e}")

        self._mediainfo_cache = (path, general)
        return general

    def _from_exiftool(self, path: Path, property_id: str) -> Optional[str]:
        tags = self._exiftool_tags(path)
        for name in config.EXIFTOOL_PROPERTY_ALIASES.get(property_id, []):
            if tags.get(name):
                return str(tags[name])
        return None

    def _exiftool_tags(self, path: Path) -> Dict[str, Any]:
        if self._exiftool_cache is not None and self._exiftool_cache[0] == path:
            return self._exiftool_cache[1]

        tags: Dict[str, Any] = {}
        # -j = JSON output
        # QuickTimeUTC: container dates are UTC, have exiftool print them with an offset
        cmd = ["exiftool", "-j", "-api", "QuickTimeUTC", str(path)]
        try:
            out = subprocess.check_output(cmd, stderr=subprocess.DEVNULL, text=True)
            data_list = json.loads(out)
            if data_list:
                tags = data_list[0]
        except FileNotFoundError:
            logging.debug("exiftool not found on PATH")
        except (subprocess.CalledProcessError, ValueError) as e:
            logging.debug(f"ExifTool failed for {path}: {e}")

        self._exiftool_cache = (path, tags)
        return tags
