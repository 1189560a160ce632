import csv
import logging
from pathlib import Path
from typing import List, Optional, TextIO

from tqdm import tqdm

from .models import RenameAction

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

MANIFEST_HEADERS = [
    "Original Name",
    "New Name",
    "Resolved Date",
    "Date Source",
]


def format_action(action: RenameAction) -> str:
    record = action.record
    return (f"{action.source_path.name} -> {action.target.name}  "
            f"[{record.resolved.strftime(DATE_FORMAT)}] ({record.source.value})")


def format_summary(count: int, dry_run: bool = False) -> str:
    verb = "Would rename" if dry_run else "Renamed"
    noun = "file" if count == 1 else "files"
    return f"{verb} {count} {noun}."


class ConsoleReporter:
    """
    Prints one line per renamed file plus a closing summary.

    Lines go through tqdm.write so an active progress bar is redrawn below
    them instead of being torn.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream

    def __call__(self, action: RenameAction):
        tqdm.write(format_action(action), file=self.stream)

    def summary(self, count: int, dry_run: bool = False):
        tqdm.write(format_summary(count, dry_run), file=self.stream)


class ManifestWriter:
    """Writes a CSV of old/new names so a run can be reversed by hand."""

    def __init__(self, output_csv: Path):
        self.output_csv = Path(output_csv)

    def write(self, actions: List[RenameAction]):
        logging.info(f"Writing rename manifest -> {self.output_csv}")
        with open(self.output_csv, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(MANIFEST_HEADERS)
            for action in actions:
                writer.writerow([
                    action.source_path.name,
                    action.target.name,
                    action.record.resolved.strftime(DATE_FORMAT),
                    action.record.source.value,
                ])
