import re
import unicodedata
from datetime import datetime, timezone
from typing import Optional

from .. import config

_WHITESPACE = re.compile(r"\s+")


def sanitize_property_string(raw: str) -> str:
    """
    Strips control and formatting characters (e.g. the U+200E/U+200F direction
    marks shell metadata likes to embed) and collapses whitespace runs.
    """
    kept = []
    for ch in raw:
        if ch.isspace():
            kept.append(" ")
        elif unicodedata.category(ch).startswith("C"):
            continue
        else:
            kept.append(ch)
    return _WHITESPACE.sub(" ", "".join(kept)).strip()


def parse_exif_date(value: Optional[str]) -> Optional[datetime]:
    """Parses an EXIF "YYYY:MM:DD HH:MM:SS" string as a naive local datetime."""
    if not value:
        return None
    try:
        return datetime.strptime(value.strip(), "%Y:%m:%d %H:%M:%S")
    except ValueError:
        return None


def parse_media_date(value: Optional[str]) -> Optional[datetime]:
    """
    Handles the date formats container metadata comes in (ISO, EXIF style,
    MediaInfo "UTC" markers, shell-style locale strings).

    Values explicitly marked as UTC are converted to local time. The result is
    always a naive datetime so it sorts alongside EXIF dates.
    """
    if not value:
        return None

    clean = sanitize_property_string(value)
    is_utc = "UTC" in clean
    clean = clean.replace("UTC", "").strip()
    if clean.endswith("Z"):
        is_utc = True
        clean = clean[:-1]
    if not clean:
        return None

    dt = None
    # 1. ISO format (e.g. 2020-01-01T12:00:00+02:00)
    try:
        dt = datetime.fromisoformat(clean)
    except ValueError:
        pass

    # 2. Known fixed formats, ignoring sub-second precision
    if dt is None:
        trimmed = clean.split(".")[0] if re.search(r":\d{2}\.\d+$", clean) else clean
        for fmt in config.DATE_FORMATS:
            try:
                dt = datetime.strptime(trimmed, fmt)
                break
            except ValueError:
                continue

    # Zero in the QuickTime/MP4 epoch means the camera never set the date
    if dt is None or dt.year <= config.CONTAINER_EPOCH_YEAR:
        return None

    if dt.tzinfo is None and is_utc:
        dt = dt.replace(tzinfo=timezone.utc)
    if dt.tzinfo is not None:
        dt = dt.astimezone().replace(tzinfo=None)
    return dt
