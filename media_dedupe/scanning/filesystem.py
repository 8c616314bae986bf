import logging
import os
from collections import defaultdict
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Set, Tuple

from ..models import DuplicateGroup, FileCandidate
from ..ranking.quality import classify_extension
from .naming import canonicalize


class GroupBuilder:
    """
    Partitions a tree into duplicate groups keyed by
    (parent directory, canonical name).
    """

    def __init__(self):
        self.last_scanned = 0

    def build(self, root: Path, excluded_subtree: Optional[Path] = None) -> List[DuplicateGroup]:
        """
        Returns only groups with more than one member. Groups come out in the
        order their first member appears in a sorted path listing, members in
        path order, so repeated runs over an unchanged tree match.
        """
        skip_dirs = {excluded_subtree.resolve()} if excluded_subtree else set()
        paths = sorted(self._iter_files(root.resolve(), skip_dirs), key=str)
        self.last_scanned = len(paths)

        buckets: Dict[Tuple[Path, str], List[FileCandidate]] = defaultdict(list)
        for path in paths:
            candidate = self._make_candidate(path)
            if candidate is not None:
                buckets[candidate.canonical_key].append(candidate)

        groups = [
            DuplicateGroup(directory=directory, canonical_name=name, members=tuple(members))
            for (directory, name), members in buckets.items()
            if len(members) > 1
        ]
        logging.info(f"Scanned {len(paths)} files; {len(groups)} duplicate groups.")
        return groups

    def _make_candidate(self, path: Path) -> Optional[FileCandidate]:
        try:
            stat_result = path.stat()
        except OSError as e:
            # File might have been moved/deleted during scan
            logging.warning(f"Failed to stat {path}: {e}")
            return None

        return FileCandidate(
            path=path,
            canonical_name=canonicalize(path.name),
            ext_class=classify_extension(path),
            size_bytes=stat_result.st_size,
            mtime=stat_result.st_mtime,
        )

    def _iter_files(self, root: Path, skip_dirs: Set[Path]) -> Iterator[Path]:
        """Depth-first walker using os.scandir for speed. Symlinks are not followed."""
        stack = [root]
        while stack:
            current = stack.pop()
            if current in skip_dirs:
                continue

            try:
                with os.scandir(current) as it:
                    entries = list(it)
            except OSError as e:
                logging.warning(f"Cannot read directory {current}: {e}")
                continue

            for e in entries:
                if e.is_dir(follow_symlinks=False):
                    stack.append(Path(e.path))
                elif e.is_file(follow_symlinks=False):
                    yield Path(e.path)
