"""
Total ordering over copies of one logical file.

Order of precedence:
  1. Byte-identical content (same tag, equal digests): the older file wins.
  2. Video vs video: pixels, then bitrate.
  3. Image vs image: pixels.
  4. Everything else: the best shared scalar, or the byte size of the files.
"""
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, Iterable, Optional

from ..models import (
    Comparison,
    FileCandidate,
    PixelQuality,
    QualityDescriptor,
    SizeQuality,
    VideoQuality,
)
from ..scanning.hasher import FileHasher
from .quality import QualityEvaluator


def _compare_scalars(a, b) -> Comparison:
    if a > b:
        return Comparison.A_BETTER
    if a < b:
        return Comparison.B_BETTER
    return Comparison.EQUAL


def compare_quality(a: QualityDescriptor,
                    b: QualityDescriptor,
                    size_a: int = 0,
                    size_b: int = 0) -> Comparison:
    """
    Heuristic comparison of two descriptors (steps 2-4).

    size_a/size_b are the byte sizes of the underlying files, used when the
    descriptors share no meaningful scalar (size vs pixels).
    """
    if isinstance(a, VideoQuality) and isinstance(b, VideoQuality):
        return _compare_scalars((a.pixels, a.bitrate), (b.pixels, b.bitrate))

    if isinstance(a, PixelQuality) and isinstance(b, PixelQuality):
        return _compare_scalars(a.pixels, b.pixels)

    if isinstance(a, SizeQuality) and isinstance(b, SizeQuality):
        return _compare_scalars(a.size, b.size)

    # Mixed video/image: resolution is still the common ground
    if not isinstance(a, SizeQuality) and not isinstance(b, SizeQuality):
        return _compare_scalars(a.pixels, b.pixels)

    return _compare_scalars(size_a, size_b)


class Comparator:
    """
    Compares FileCandidates, caching each file's descriptor and digest so
    neither is computed more than once per run.
    """

    def __init__(self,
                 evaluator: Optional[QualityEvaluator] = None,
                 hasher: Optional[FileHasher] = None):
        self.evaluator = evaluator if evaluator is not None else QualityEvaluator()
        self.hasher = hasher if hasher is not None else FileHasher()
        self._quality: Dict[FileCandidate, QualityDescriptor] = {}
        self._digests: Dict[FileCandidate, Optional[str]] = {}

    def quality_of(self, candidate: FileCandidate) -> QualityDescriptor:
        if candidate not in self._quality:
            self._quality[candidate] = self.evaluator.evaluate(candidate.path, candidate.ext_class)
        return self._quality[candidate]

    def digest_of(self, candidate: FileCandidate) -> Optional[str]:
        if candidate not in self._digests:
            self._digests[candidate] = self.hasher.digest(candidate.path)
        return self._digests[candidate]

    def prefetch(self, candidates: Iterable[FileCandidate], max_workers: int = 1):
        """
        Evaluates descriptors up front, optionally on a thread pool.
        Results are stored from the calling thread only.
        """
        pending = [c for c in candidates if c not in self._quality]
        if max_workers <= 1 or len(pending) < 2:
            for c in pending:
                self.quality_of(c)
            return

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {
                executor.submit(self.evaluator.evaluate, c.path, c.ext_class): c
                for c in pending
            }
            for future in as_completed(futures):
                self._quality[futures[future]] = future.result()

    def identical(self, a: FileCandidate, b: FileCandidate) -> bool:
        """True when both files hash to the same digest."""
        if not self.hasher.available:
            return False
        # Files of different length cannot be byte-identical
        if a.size_bytes != b.size_bytes:
            return False
        digest_a = self.digest_of(a)
        if digest_a is None:
            return False
        return digest_a == self.digest_of(b)

    def compare(self, a: FileCandidate, b: FileCandidate) -> Comparison:
        qa = self.quality_of(a)
        qb = self.quality_of(b)

        if qa.tag == qb.tag and self.identical(a, b):
            logging.debug(f"Identical content: {a.path} == {b.path}")
            # Earlier modification time is treated as the original
            return _compare_scalars(b.mtime, a.mtime)

        return compare_quality(qa, qb, a.size_bytes, b.size_bytes)
