import logging
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

from .metadata.resolver import DateResolver
from .models import DateSource, RenameAction
from .organization.sequencer import Renamer, plan_renames, sort_records
from .reporting import ConsoleReporter, ManifestWriter
from .scanning.filesystem import DiskScanner
from . import config


class MediaSequencerApp:
    def __init__(self,
                 resolver: Optional[DateResolver] = None,
                 reporter: Optional[ConsoleReporter] = None,
                 show_progress: bool = True):
        self.resolver = resolver or DateResolver()
        self.reporter = reporter or ConsoleReporter()
        self.show_progress = show_progress

    def run(self,
            target_dir: Path,
            prefix: str = config.DEFAULT_PREFIX,
            start: int = config.DEFAULT_START,
            width: int = config.DEFAULT_PAD_WIDTH,
            dry_run: bool = False,
            manifest: Optional[Path] = None) -> List[RenameAction]:
        """
        Executes the sequencing pipeline.
        1. Enumerate (allow-listed files, top level only)
        2. Resolve media dates
        3. Sort (stable, ascending)
        4. Rename with zero-padded counters
        """
        # --- Step 1: Enumeration ---
        logging.info(f"Scanning {target_dir}...")
        files = list(DiskScanner().scan(target_dir))
        logging.info(f"Found {len(files)} media files.")

        # --- Step 2: Date Resolution ---
        records = [
            self.resolver.resolve(media)
            for media in tqdm(files, desc="Reading dates", disable=not self.show_progress)
        ]
        fallback_count = sum(1 for r in records if r.source is DateSource.FILESYSTEM)
        if fallback_count:
            logging.info(f"{fallback_count} file(s) fell back to filesystem time.")

        # --- Step 3: Sorting ---
        ordered = sort_records(records)

        # --- Step 4: Renaming ---
        actions = plan_renames(ordered, start=start, width=width, prefix=prefix)
        renamer = Renamer(report=self.reporter, show_progress=self.show_progress)
        renamer.check(actions)
        if manifest and actions:
            ManifestWriter(manifest).write(actions)

        count = renamer.execute(actions, dry_run=dry_run)
        self.reporter.summary(count, dry_run=dry_run)

        logging.info("Sequencing complete.")
        return actions
