"""
Custom exception hierarchy for the media sequencer.

Metadata failures are recovered inside the date resolver; everything else
terminates the run and is reported by the CLI.
"""
from pathlib import Path


class MediaSequencerError(Exception):
    """Base exception for all media sequencer errors."""
    pass


class MetadataExtractionError(MediaSequencerError):
    """Raised when metadata cannot be read from a file."""
    pass


class EnumerationError(MediaSequencerError):
    """Raised when the target directory cannot be listed."""
    pass


class RenameCollisionError(MediaSequencerError):
    """Raised before renaming when a target name is already taken."""

    def __init__(self, collisions):
        self.collisions = list(collisions)
        names = ", ".join(Path(p).name for p in self.collisions[:5])
        more = len(self.collisions) - 5
        if more > 0:
            names += f" (+{more} more)"
        super().__init__(f"{len(self.collisions)} target name(s) already exist: {names}")


class FileOperationError(MediaSequencerError):
    """Raised when a rename on disk fails."""
    pass
