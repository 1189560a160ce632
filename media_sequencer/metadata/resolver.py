import logging
from datetime import datetime
from typing import Iterable, List, Optional

from .. import config
from ..models import DateSource, MediaDateRecord, MediaFile
from .parsing import parse_exif_date, parse_media_date
from .readers import ImageMetadataReader, VideoMetadataReader


class ResolutionStrategy:
    """
    One link in the fallback chain. `attempt` returns the resolved datetime,
    or None to let the next strategy try.
    """
    source: DateSource
    media_types: tuple = ()

    def applies_to(self, media: MediaFile) -> bool:
        return media.type in self.media_types

    def attempt(self, media: MediaFile) -> Optional[datetime]:
        raise NotImplementedError


class ImageFieldStrategy(ResolutionStrategy):
    media_types = ('image',)

    def __init__(self, reader, field_id: str, source: DateSource):
        self.reader = reader
        self.field_id = field_id
        self.source = source

    def attempt(self, media: MediaFile) -> Optional[datetime]:
        raw = self.reader.resolve_image_field(media.path, self.field_id)
        if isinstance(raw, bytes):
            raw = raw.decode('ascii', errors='ignore')
        return parse_exif_date(raw)


class VideoPropertyStrategy(ResolutionStrategy):
    media_types = ('video',)
    source = DateSource.VIDEO_MEDIA_CREATED

    def __init__(self, reader, property_ids: Iterable[str]):
        self.reader = reader
        self.property_ids = list(property_ids)

    def attempt(self, media: MediaFile) -> Optional[datetime]:
        for property_id in self.property_ids:
            raw = self.reader.resolve_video_property(media.path.parent, media.name, property_id)
            dt = parse_media_date(raw)
            if dt:
                return dt
        return None


class FilesystemStrategy(ResolutionStrategy):
    source = DateSource.FILESYSTEM

    def applies_to(self, media: MediaFile) -> bool:
        return True

    def attempt(self, media: MediaFile) -> Optional[datetime]:
        try:
            return datetime.fromtimestamp(media.mtime)
        except (OverflowError, OSError, ValueError):
            logging.warning(f"Unusable mtime {media.mtime} for {media.path}; sorting it first.")
            return datetime.min


def default_strategies(image_reader=None, video_reader=None) -> List[ResolutionStrategy]:
    image_reader = image_reader or ImageMetadataReader()
    video_reader = video_reader or VideoMetadataReader()
    return [
        ImageFieldStrategy(image_reader, config.PRIMARY_IMAGE_TAG, DateSource.EXIF_ORIGINAL),
        ImageFieldStrategy(image_reader, config.SECONDARY_IMAGE_TAG, DateSource.EXIF_MODIFIED),
        VideoPropertyStrategy(video_reader, config.VIDEO_DATE_PROPERTIES),
        FilesystemStrategy(),
    ]


class DateResolver:
    """
    Resolves the "media date" of a file by walking the strategy chain; first
    strategy that produces a datetime wins.

    Failures inside a strategy are logged and treated as "not found". The
    filesystem strategy terminates every chain, so `resolve` never raises for
    a file that was successfully enumerated.
    """

    def __init__(self, strategies: Optional[List[ResolutionStrategy]] = None,
                 image_reader=None, video_reader=None):
        if strategies is None:
            strategies = default_strategies(image_reader, video_reader)
        self.strategies = list(strategies)
        self._fallback = FilesystemStrategy()

    def resolve(self, media: MediaFile) -> MediaDateRecord:
        for strategy in self.strategies:
            if not strategy.applies_to(media):
                continue
            try:
                dt = strategy.attempt(media)
            except Exception as e:
                logging.debug(f"{strategy.source.value} lookup failed for {media.path}: {e}")
                continue
            if dt is not None:
                return MediaDateRecord(media=media, resolved=dt, source=strategy.source)
            logging.debug(f"No {strategy.source.value} date for {media.name}")

        # Custom chains without a filesystem link still get the last-write time
        return MediaDateRecord(media=media,
                               resolved=self._fallback.attempt(media),
                               source=DateSource.FILESYSTEM)
