import hashlib
import logging
from pathlib import Path
from typing import Optional

from .. import config
from ..exceptions import FileHashError


class FileHasher:
    """
    Computes content digests for the identity check.

    A disabled hasher (``--no-hash``) reports itself unavailable and never
    reads a file, so the comparator falls back to heuristic quality alone.
    """

    def __init__(self, enabled: bool = True, chunk_size: int = config.HASH_CHUNK_SIZE):
        self.enabled = enabled
        self.chunk_size = chunk_size

    @property
    def available(self) -> bool:
        return self.enabled

    def digest(self, path: Path) -> Optional[str]:
        """SHA-256 of the whole file, or None when hashing is unavailable."""
        if not self.enabled:
            return None
        try:
            return self._full_sha256(path)
        except FileHashError as e:
            logging.warning(f"Hashing skipped for {path}: {e}")
            return None

    def _full_sha256(self, path: Path) -> str:
        """Reads entire file. High I/O cost."""
        h = hashlib.sha256()
        try:
            with open(path, 'rb') as f:
                while chunk := f.read(self.chunk_size):
                    h.update(chunk)
        except OSError as e:
            raise FileHashError(f"cannot read {path}: {e}") from e
        return h.hexdigest()
