import logging
from pathlib import Path
from typing import Optional

from .. import config
from ..metadata.extract import MetadataExtractor
from ..models import PixelQuality, QualityDescriptor, SizeQuality, VideoQuality


def classify_extension(path: Path) -> str:
    return config.EXT_TO_CLASS.get(path.suffix.lower(), 'other')


class QualityEvaluator:
    """
    Turns a file into a comparable quality descriptor.

    Images rank by pixel count, videos by pixel count then bitrate, everything
    else (and any file whose metadata cannot be read) by byte size.
    """

    def __init__(self, extractor: Optional[MetadataExtractor] = None):
        self.extractor = extractor if extractor is not None else MetadataExtractor()

    def evaluate(self, path: Path, ext_class: Optional[str] = None) -> QualityDescriptor:
        ext_class = ext_class or classify_extension(path)

        try:
            if ext_class == 'image':
                width, height = self.extractor.get_image_dimensions(path)
                if width and height and width > 0 and height > 0:
                    return PixelQuality(width * height)
            elif ext_class == 'video':
                width, height, bitrate = self.extractor.get_video_quality(path)
                if width and height and width > 0 and height > 0:
                    return VideoQuality(width * height, bitrate or 0)
        except Exception as e:
            # Extractors are pluggable; a faulty one must not abort the group
            logging.debug(f"Metadata extraction raised for {path}: {e}")

        if ext_class != 'other':
            logging.debug(f"No {ext_class} dimensions for {path}; ranking by size")
        return SizeQuality(self._size_of(path))

    def _size_of(self, path: Path) -> int:
        try:
            return path.stat().st_size
        except OSError as e:
            logging.debug(f"Cannot stat {path}: {e}")
            return 0
