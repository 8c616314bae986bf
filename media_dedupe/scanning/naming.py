"""
Filename canonicalization.

Copies of one logical file differ only by a trailing copy marker:

    photo.jpg  ->  photo.jpg
    photo_1.jpg  ->  photo.jpg
    photo (1).jpg  ->  photo.jpg
    photo_1 (2).jpg  ->  photo.jpg   (each marker form stripped once, in order)
    photo_1_final.jpg  ->  photo_1_final.jpg   (marker not at the end)
"""
import re
from pathlib import Path
from typing import Tuple

from .. import config

_MARKERS = [re.compile(p) for p in config.COPY_MARKER_PATTERNS]


def split_name(filename: str) -> Tuple[str, str]:
    """Splits at the last dot. Returns (stem, ext) with ext '' when dotless."""
    stem, dot, ext = filename.rpartition('.')
    if not dot:
        return filename, ''
    return stem, dot + ext


def strip_copy_marker(stem: str) -> str:
    """Applies each copy-marker pattern once, in order, to the trailing end of the stem."""
    for pat in _MARKERS:
        stem = pat.sub('', stem, count=1)
    return stem


def canonicalize(filename: str) -> str:
    stem, ext = split_name(filename)
    return strip_copy_marker(stem) + ext


def canonical_key(path: Path) -> Tuple[Path, str]:
    return path.parent, canonicalize(path.name)
