import logging
import shutil
from pathlib import Path

from ..exceptions import FileOperationError
from ..models import FileCandidate, Outcome


class Relocator:
    """
    Moves non-keepers into the quarantine tree:

        quarantine_root / <dir relative to source_root> / <canonical name> / <file name>
    """

    def destination_for(self,
                        candidate: FileCandidate,
                        canonical_name: str,
                        source_root: Path,
                        quarantine_root: Path) -> Path:
        try:
            rel_dir = candidate.path.parent.relative_to(source_root)
        except ValueError:
            raise FileOperationError(f"{candidate.path} is not under {source_root}")
        return quarantine_root / rel_dir / canonical_name / candidate.name

    def relocate(self,
                 candidate: FileCandidate,
                 canonical_name: str,
                 source_root: Path,
                 quarantine_root: Path,
                 simulate: bool = False) -> Outcome:
        src = candidate.path
        try:
            dest = self.destination_for(candidate, canonical_name, source_root, quarantine_root)
        except FileOperationError as e:
            logging.error(f"  Failed to move: {src}: {e}")
            return Outcome.FAILED

        if simulate:
            logging.warning(f"  [DRY RUN] Would move: {src}")
            logging.warning(f"            -> {dest}")
            return Outcome.WOULD_MOVE

        try:
            self._move(src, dest)
        except (FileOperationError, OSError, shutil.Error) as e:
            logging.error(f"  Failed to move: {src}: {e}")
            return Outcome.FAILED

        logging.warning(f"  Moved duplicate: {src}")
        logging.warning(f"              -> {dest}")
        return Outcome.MOVED

    def _move(self, src: Path, dest: Path):
        # exist_ok makes concurrent or repeated creation harmless
        dest.parent.mkdir(parents=True, exist_ok=True)
        if dest.exists():
            # Never overwrite an earlier run's quarantined copy
            raise FileOperationError(f"destination already exists: {dest}")
        shutil.move(str(src), str(dest))
