from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import ClassVar, Optional, Tuple, Union


# --- Quality Descriptors ---
# A descriptor is exactly one of the three classes below. The tag is what the
# comparator dispatches on; str() gives the form used in log lines.

@dataclass(frozen=True)
class SizeQuality:
    size: int
    tag: ClassVar[str] = 'size'

    def __str__(self) -> str:
        return f"size:{self.size}"


@dataclass(frozen=True)
class PixelQuality:
    pixels: int
    tag: ClassVar[str] = 'pixels'

    def __str__(self) -> str:
        return f"pixels:{self.pixels}"


@dataclass(frozen=True)
class VideoQuality:
    pixels: int
    bitrate: int = 0
    tag: ClassVar[str] = 'video'

    def __str__(self) -> str:
        return f"video:{self.pixels}|{self.bitrate}"


QualityDescriptor = Union[SizeQuality, PixelQuality, VideoQuality]


class Comparison(Enum):
    A_BETTER = 1
    B_BETTER = 2
    EQUAL = 0

    @property
    def inverse(self) -> "Comparison":
        if self is Comparison.A_BETTER:
            return Comparison.B_BETTER
        if self is Comparison.B_BETTER:
            return Comparison.A_BETTER
        return Comparison.EQUAL


class Outcome(Enum):
    MOVED = 'moved'
    WOULD_MOVE = 'would-move'
    FAILED = 'failed'


@dataclass(frozen=True)
class FileCandidate:
    """
    A regular file found during a scan.

    Size and mtime are captured once when the file is discovered. Quality and
    content digest are derived on demand and cached by the Comparator.
    """
    path: Path
    canonical_name: str
    ext_class: str          # image/video/other
    size_bytes: int
    mtime: float

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def canonical_key(self) -> Tuple[Path, str]:
        return self.path.parent, self.canonical_name


@dataclass(frozen=True)
class DuplicateGroup:
    """Files in one directory that share a canonical name."""
    directory: Path
    canonical_name: str
    members: Tuple[FileCandidate, ...]

    def __len__(self) -> int:
        return len(self.members)

    def __str__(self) -> str:
        return f"{self.directory / self.canonical_name} ({len(self.members)} files)"


@dataclass(frozen=True)
class RelocationDecision:
    group: DuplicateGroup
    keeper: FileCandidate
    relocate: Tuple[FileCandidate, ...]


@dataclass
class RunStats:
    """Counters for a single run. Created fresh by the orchestrator."""
    files_scanned: int = 0
    groups_found: int = 0
    files_kept: int = 0
    files_moved: int = 0    # includes would-move in dry runs
    failed: int = 0
    simulated: bool = False
    quarantine_root: Optional[Path] = field(default=None, compare=False)

    def record(self, outcome: Outcome):
        if outcome is Outcome.FAILED:
            self.failed += 1
        else:
            self.files_moved += 1
