"""
Configuration constants for the media sequencer.
"""
from pathlib import Path

# --- File Type Definitions ---
IMAGE_EXTS = {'.jpg', '.jpeg', '.png'}
VIDEO_EXTS = {'.mp4', '.mov', '.avi', '.mkv'}

# Extension to Type Mapping
EXT_TO_TYPE = {}
for ext in IMAGE_EXTS: EXT_TO_TYPE[ext] = 'image'
for ext in VIDEO_EXTS: EXT_TO_TYPE[ext] = 'video'

# --- Metadata Parsing ---
# exifread tag names
PRIMARY_IMAGE_TAG = 'EXIF DateTimeOriginal'
SECONDARY_IMAGE_TAG = 'Image DateTime'

# MediaInfo General-track attributes that carry the "media created" date,
# most trustworthy first
VIDEO_DATE_PROPERTIES = [
    'recorded_date',
    'encoded_date',
    'tagged_date',
]

# Same properties as exiftool names them
EXIFTOOL_PROPERTY_ALIASES = {
    'recorded_date': ['DateTimeOriginal', 'CreationDate'],
    'encoded_date': ['MediaCreateDate', 'CreateDate'],
    'tagged_date': ['TrackCreateDate'],
}

# Formats tried after ISO parsing fails
DATE_FORMATS = [
    "%Y:%m:%d %H:%M:%S",
    "%Y:%m:%d %H:%M:%S%z",
    "%Y-%m-%d %H:%M:%S",
    "%Y:%m:%d %H:%M",
    "%m/%d/%Y %I:%M %p",
    "%m/%d/%Y %H:%M",
    "%d.%m.%Y %H:%M",
]

# Container timestamps count from 1904-01-01; anything at or before it is unset
CONTAINER_EPOCH_YEAR = 1904

# --- Renaming ---
DEFAULT_TARGET_DIR = Path(".")
DEFAULT_PREFIX = ""
DEFAULT_START = 1
DEFAULT_PAD_WIDTH = 3
NAME_PATTERN = "{counter:0{width}d}_{prefix}{name}"
