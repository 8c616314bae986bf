import json
import logging
import shutil
import subprocess
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .. import config
from ..exceptions import MetadataExtractionError

# Optional imports handled gracefully; a missing library only costs precision
try:
    import exifread
except ImportError:
    exifread = None

try:
    from PIL import Image
except ImportError:
    Image = None

# Type hint 'Any' prevents Pylance from complaining about "None" having no attribute "parse"
MediaInfo: Any = None
try:
    from pymediainfo import MediaInfo
except ImportError:
    MediaInfo = None


def _positive_int(value) -> Optional[int]:
    """Parses tool output ("1920", 1920, 1920.0) into a positive int or None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        n = int(value) if isinstance(value, int) else int(float(str(value).strip()))
    except (TypeError, ValueError):
        return None
    return n if n > 0 else None


class MetadataExtractor:
    """
    Reports the dimensions used to rank copies of a file.

    Strategies:
      - Images: Pillow (reads the header only) -> 'exifread' EXIF tags -> 'exiftool'.
        Camera RAW: 'exifread' -> 'exiftool' -> Pillow.
      - Video: 'pymediainfo' -> 'ffprobe'.

    Every method returns Nones instead of raising; callers fall back to the
    file size.
    """

    def __init__(self):
        self.tools = {tool: shutil.which(tool) is not None for tool in config.EXTERNAL_TOOLS}

    def capabilities(self) -> Dict[str, bool]:
        """Which extraction backends can be used in this environment."""
        caps = {
            'pillow': Image is not None,
            'exifread': exifread is not None,
            'pymediainfo': self._mediainfo_usable(),
        }
        caps.update(self.tools)
        return caps

    def get_image_dimensions(self, path: Path) -> Tuple[Optional[int], Optional[int]]:
        """
        Returns:
            (width, height), either of which may be None
        """
        if path.suffix.lower() in config.RAW_EXTS:
            strategies = (self._dimensions_exifread, self._dimensions_exiftool, self._dimensions_pillow)
        else:
            strategies = (self._dimensions_pillow, self._dimensions_exifread, self._dimensions_exiftool)

        for strategy in strategies:
            try:
                width, height = strategy(path)
            except MetadataExtractionError as e:
                logging.debug(f"{strategy.__name__} failed for {path}: {e}")
                continue
            if width and height:
                return width, height
        return None, None

    def get_video_quality(self, path: Path) -> Tuple[Optional[int], Optional[int], Optional[int]]:
        """
        Reads the primary video stream.

        Returns:
            (width, height, bitrate), any of which may be None
        """
        # Strategy 1: MediaInfo (fast wrapper around libmediainfo)
        if MediaInfo is not None:
            try:
                width, height, bitrate = self._extract_mediainfo(path)
                if width and height:
                    return width, height, bitrate
            except MetadataExtractionError as e:
                logging.debug(f"MediaInfo failed for {path}: {e}")

        # Strategy 2: ffprobe (requires system install)
        if self.tools.get('ffprobe'):
            try:
                width, height, bitrate = self._extract_ffprobe(path)
                if width and height:
                    return width, height, bitrate
            except MetadataExtractionError as e:
                logging.debug(f"ffprobe failed for {path}: {e}")

        return None, None, None

    # --- Internal Extraction Helpers ---

    def _mediainfo_usable(self) -> bool:
        if MediaInfo is None:
            return False
        try:
            return bool(MediaInfo.can_parse())
        except AttributeError:
            # Older pymediainfo releases lack can_parse(); assume the library is bundled
            return True

    def _dimensions_pillow(self, path: Path) -> Tuple[Optional[int], Optional[int]]:
        if Image is None:
            return None, None
        try:
            with Image.open(path) as im:
                return im.width, im.height
        except Exception as e:
            raise MetadataExtractionError(str(e)) from e

    def _dimensions_exifread(self, path: Path) -> Tuple[Optional[int], Optional[int]]:
        if exifread is None:
            return None, None
        try:
            with path.open('rb') as f:
                # details=False skips makernotes and thumbnails
                tags = exifread.process_file(f, details=False)
        except Exception as e:
            raise MetadataExtractionError(str(e)) from e

        for width_tag, height_tag in config.IMAGE_DIMENSION_TAGS:
            width = _positive_int(str(tags[width_tag])) if width_tag in tags else None
            height = _positive_int(str(tags[height_tag])) if height_tag in tags else None
            if width and height:
                return width, height
        return None, None

    def _dimensions_exiftool(self, path: Path) -> Tuple[Optional[int], Optional[int]]:
        if not self.tools.get('exiftool'):
            return None, None
        # -n = numeric values, no "4000 pixels" formatting
        data_list = self._run_json(["exiftool", "-j", "-n", "-ImageWidth", "-ImageHeight", str(path)])
        if not data_list:
            return None, None
        tags = data_list[0]
        return _positive_int(tags.get("ImageWidth")), _positive_int(tags.get("ImageHeight"))

    def _extract_mediainfo(self, path: Path) -> Tuple[Optional[int], Optional[int], Optional[int]]:
        """Parses video using pymediainfo."""
        try:
            mi = MediaInfo.parse(str(path))
        except Exception as e:
            raise MetadataExtractionError(str(e)) from e

        for track in mi.tracks:
            if track.track_type == "Video":
                bitrate = (
                    getattr(track, "bit_rate", None) or
                    getattr(track, "nominal_bit_rate", None)
                )
                return (
                    _positive_int(getattr(track, "width", None)),
                    _positive_int(getattr(track, "height", None)),
                    _positive_int(bitrate),
                )
        return None, None, None

    def _extract_ffprobe(self, path: Path) -> Tuple[Optional[int], Optional[int], Optional[int]]:
        data = self._run_json([
            "ffprobe", "-v", "error",
            "-select_streams", "v:0",
            "-show_entries", "stream=width,height,bit_rate",
            "-of", "json",
            str(path),
        ])
        streams = data.get("streams") if isinstance(data, dict) else None
        if not streams:
            return None, None, None
        stream = streams[0]
        return (
            _positive_int(stream.get("width")),
            _positive_int(stream.get("height")),
            _positive_int(stream.get("bit_rate")),
        )

    def _run_json(self, cmd) -> Any:
        try:
            out = subprocess.check_output(
                cmd, stderr=subprocess.DEVNULL, text=True, timeout=config.SUBPROCESS_TIMEOUT
            )
            return json.loads(out)
        except (OSError, subprocess.SubprocessError, ValueError) as e:
            raise MetadataExtractionError(f"{cmd[0]}: {e}") from e
