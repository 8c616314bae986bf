"""
Configuration constants for the duplicate handler.
"""

# --- File Type Definitions ---
IMAGE_EXTS = {
    '.jpg', '.jpeg', '.png', '.tiff', '.tif', '.raw', '.cr2', '.nef',
    '.arw', '.dng', '.heic', '.heif', '.gif', '.bmp', '.webp',
}
VIDEO_EXTS = {
    '.mp4', '.mov', '.avi', '.mkv', '.m4v', '.3gp', '.mts', '.m2ts',
    '.wmv', '.flv', '.webm',
}

# TIFF-based camera RAW: the primary IFD is often the embedded preview,
# so EXIF tags and exiftool are read before Pillow
RAW_EXTS = {'.raw', '.cr2', '.nef', '.arw', '.dng'}

# Extension to Class Mapping
# Anything missing from this map is ranked by byte size only
EXT_TO_CLASS = {}
for ext in IMAGE_EXTS: EXT_TO_CLASS[ext] = 'image'
for ext in VIDEO_EXTS: EXT_TO_CLASS[ext] = 'video'

# --- Name Canonicalization ---
# Copy markers stripped from the end of a stem: "photo (2)" and "photo_2".
# Each pattern is applied once, in this order, to the result of the previous one.
COPY_MARKER_PATTERNS = [
    r' \(\d+\)$',
    r'_\d+$',
]

# --- Metadata Parsing ---
IMAGE_DIMENSION_TAGS = [
    ('EXIF ExifImageWidth', 'EXIF ExifImageLength'),
    ('Image ImageWidth', 'Image ImageLength'),
]

# Command line tools probed when the Python libraries come up empty
EXTERNAL_TOOLS = ('exiftool', 'ffprobe')
SUBPROCESS_TIMEOUT = 60  # seconds

# --- Hashing ---
HASH_CHUNK_SIZE = 64 * 1024  # 64 KB chunks for reading

# --- Relocation ---
DEFAULT_QUARANTINE_NAME = "duplicates"
