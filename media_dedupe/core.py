import logging
from pathlib import Path
from typing import Dict, Optional, Tuple

from tqdm import tqdm

from . import config
from .exceptions import ConfigurationError
from .metadata.extract import MetadataExtractor
from .models import DuplicateGroup, Outcome, RunStats
from .organization.mover import Relocator
from .ranking.compare import Comparator
from .ranking.quality import QualityEvaluator
from .ranking.reducer import GroupReducer
from .reporting import ReportGenerator
from .scanning.filesystem import GroupBuilder
from .scanning.hasher import FileHasher


def validate_paths(src_root: Path, quarantine_root: Optional[Path] = None) -> Tuple[Path, Path]:
    """
    Resolves and checks the source/quarantine pair before any scanning.

    The quarantine may live inside the source (the default does) since it is
    excluded from the scan, but it may not be the source itself or contain it.
    """
    if src_root is None:
        raise ConfigurationError("Source directory is required")
    src_root = Path(src_root).expanduser()
    if not src_root.exists():
        raise ConfigurationError(f"Source directory does not exist: {src_root}")
    if not src_root.is_dir():
        raise ConfigurationError(f"Source is not a directory: {src_root}")
    src_root = src_root.resolve()

    if quarantine_root is None:
        quarantine_root = src_root / config.DEFAULT_QUARANTINE_NAME
    quarantine_root = Path(quarantine_root).expanduser().resolve()

    if quarantine_root == src_root:
        raise ConfigurationError("Duplicates directory must differ from the source directory")
    if quarantine_root in src_root.parents:
        raise ConfigurationError(
            f"Source {src_root} lies inside the duplicates directory {quarantine_root}"
        )
    if quarantine_root.exists() and not quarantine_root.is_dir():
        raise ConfigurationError(f"Duplicates path is not a directory: {quarantine_root}")
    return src_root, quarantine_root


class DuplicateHandlerApp:
    def __init__(self,
                 extractor: Optional[MetadataExtractor] = None,
                 hasher: Optional[FileHasher] = None,
                 use_hash: bool = True,
                 max_workers: int = 1,
                 progress: bool = False):
        self.extractor = extractor if extractor is not None else MetadataExtractor()
        self.hasher = hasher if hasher is not None else FileHasher(enabled=use_hash)
        self.max_workers = max_workers
        self.progress = progress
        self.builder = GroupBuilder()
        self.relocator = Relocator()
        self.report = ReportGenerator()

    def check_environment(self) -> Dict[str, bool]:
        """Logs missing optional backends once. Never blocks the run."""
        caps = self.extractor.capabilities()
        missing = sorted(name for name, ok in caps.items() if not ok)
        if missing:
            logging.warning(f"Optional dependencies missing: {', '.join(missing)}")
            logging.warning("Will use fallback methods for affected operations")
        else:
            logging.info("All dependencies available")

        if not self.hasher.available:
            logging.warning("Content hashing disabled; exact duplicates are ranked by quality only")
        caps['hashing'] = self.hasher.available
        return caps

    def run(self,
            src_root: Path,
            quarantine_root: Optional[Path] = None,
            simulate: bool = False) -> RunStats:
        """
        Executes the duplicate handling pipeline.
        1. Check environment
        2. Scan & Group
        3. Reduce each group to a keeper
        4. Relocate (or simulate relocating) the rest
        """
        src_root, quarantine_root = validate_paths(src_root, quarantine_root)
        stats = RunStats(simulated=simulate, quarantine_root=quarantine_root)
        self.report = ReportGenerator()

        self.check_environment()

        # Fresh caches each run; files may have changed since the last one
        comparator = Comparator(QualityEvaluator(self.extractor), self.hasher)
        reducer = GroupReducer(comparator)

        # --- Step 1: Scanning ---
        logging.info(f"Scanning for duplicates in: {src_root}")
        groups = self.builder.build(src_root, excluded_subtree=quarantine_root)
        stats.files_scanned = self.builder.last_scanned

        # --- Step 2: Reduce & Relocate ---
        for group in tqdm(groups, desc="Deduplicating", unit="group", disable=not self.progress):
            self._process_group(group, comparator, reducer, src_root, quarantine_root, simulate, stats)

        logging.info("Duplicate handling complete!")
        return stats

    def _process_group(self,
                       group: DuplicateGroup,
                       comparator: Comparator,
                       reducer: GroupReducer,
                       src_root: Path,
                       quarantine_root: Path,
                       simulate: bool,
                       stats: RunStats):
        if len(group) < 2:
            return

        stats.groups_found += 1
        logging.info(f"Processing duplicate group: {group}")

        # The keeper is settled before anything moves
        comparator.prefetch(group.members, self.max_workers)
        decision = reducer.reduce(group)
        stats.files_kept += 1
        self.report.record(group.canonical_name, decision.keeper, "keep",
                           comparator.quality_of(decision.keeper))

        for candidate in decision.relocate:
            dest = self.relocator.destination_for(candidate, group.canonical_name, src_root, quarantine_root)
            outcome = self.relocator.relocate(
                candidate, group.canonical_name, src_root, quarantine_root, simulate=simulate
            )
            stats.record(outcome)
            self.report.record(group.canonical_name, candidate, outcome.value,
                               comparator.quality_of(candidate),
                               None if outcome is Outcome.FAILED else dest)
