import os
import logging
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from tqdm import tqdm

from .. import config
from ..exceptions import FileOperationError, RenameCollisionError
from ..models import MediaDateRecord, RenameAction


def sort_records(records: Iterable[MediaDateRecord]) -> List[MediaDateRecord]:
    """Ascending by resolved date. sorted() is stable, so ties keep enumeration order."""
    return sorted(records, key=lambda r: r.resolved)


def format_name(counter: int, original_name: str, prefix: str = "", width: int = config.DEFAULT_PAD_WIDTH) -> str:
    return config.NAME_PATTERN.format(counter=counter, width=width, prefix=prefix, name=original_name)


def plan_renames(records: List[MediaDateRecord],
                 start: int = config.DEFAULT_START,
                 width: int = config.DEFAULT_PAD_WIDTH,
                 prefix: str = config.DEFAULT_PREFIX) -> List[RenameAction]:
    """
    Assigns sequence numbers to already-sorted records and computes target paths.
    Counters wider than `width` are written in full.
    """
    if width < 1:
        raise ValueError("Padding width must be at least 1")

    actions = []
    for counter, record in enumerate(records, start=start):
        src = record.media.path
        target = src.with_name(format_name(counter, src.name, prefix, width))
        actions.append(RenameAction(record=record, counter=counter, target=target))

    if actions:
        last = actions[-1].counter
        if len(str(abs(last))) > width:
            logging.warning(
                f"Counter {last} exceeds padding width {width}; "
                f"names will not sort lexically. Consider --width {len(str(abs(last)))}."
            )
    return actions


def find_collisions(actions: List[RenameAction]) -> List[Path]:
    """
    Targets that already exist on disk (other than the file itself) or that
    more than one action wants.
    """
    collisions = []
    seen = set()
    for action in actions:
        target = action.target
        if target in seen:
            collisions.append(target)
            continue
        seen.add(target)
        if target.exists() and not _same_file(target, action.source_path):
            collisions.append(target)
    return collisions


def _same_file(a: Path, b: Path) -> bool:
    try:
        return os.path.samefile(a, b)
    except OSError:
        return False


class Renamer:
    """
    Applies a rename plan in place.

    Collisions are checked for the whole plan before the first rename, so a
    rejected run leaves the directory untouched.
    """

    def __init__(self, report: Optional[Callable[[RenameAction], None]] = None, show_progress: bool = True):
        self.report = report
        self.show_progress = show_progress

    def check(self, actions: List[RenameAction]):
        collisions = find_collisions(actions)
        if collisions:
            raise RenameCollisionError(collisions)

    def execute(self, actions: List[RenameAction], dry_run: bool = False) -> int:
        self.check(actions)

        if not actions:
            logging.info("No files to rename.")
            return 0

        logging.info(f"Renaming {len(actions)} files (DryRun={dry_run})...")

        done = 0
        for action in tqdm(actions, desc="Renaming", disable=not self.show_progress):
            src = action.source_path
            if not dry_run and src != action.target:
                try:
                    src.rename(action.target)
                except OSError as e:
                    raise FileOperationError(f"Failed to rename {src} -> {action.target}: {e}") from e
            done += 1
            if self.report:
                self.report(action)

        return done
