import os
import logging
from pathlib import Path
from typing import Iterator, Optional, Set

from .. import config
from ..exceptions import EnumerationError
from ..models import MediaFile


class DiskScanner:
    def __init__(self, allowed_exts: Optional[Set[str]] = None):
        self.allowed_exts = {e.lower() for e in (allowed_exts or config.EXT_TO_TYPE)}

    def scan(self, root: Path) -> Iterator[MediaFile]:
        """
        Yields a MediaFile for every allow-listed file directly inside root.
        Subdirectories are not descended into.
        """
        if not root.is_dir():
            raise EnumerationError(f"Not a directory: {root}")

        for path, mtime in self._iter_files(root):
            ext = path.suffix.lower()
            if ext not in self.allowed_exts:
                continue
            # macOS AppleDouble companions share the extension but hold no media
            if path.name.startswith("._"):
                logging.debug(f"Skipping AppleDouble file {path.name}")
                continue

            yield MediaFile(
                path=path,
                ext=ext,
                type=config.EXT_TO_TYPE.get(ext, 'image'),
                mtime=mtime,
            )

    def _iter_files(self, root: Path) -> Iterator[tuple]:
        """Single-level listing using os.scandir, sorted for stable order."""
        with os.scandir(root) as it:
            entries = [e for e in it if e.is_file(follow_symlinks=False)]

        entries.sort(key=lambda e: e.name.lower())

        for e in entries:
            yield Path(e.path), e.stat(follow_symlinks=False).st_mtime
