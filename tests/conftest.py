import os
from datetime import datetime

import pytest

from media_dedupe.scanning.filesystem import GroupBuilder


class FakeExtractor:
    """Serves dimensions from dicts keyed by file name instead of reading files."""

    def __init__(self, images=None, videos=None):
        self.images = images or {}
        self.videos = videos or {}
        self.calls = []

    def capabilities(self):
        return {'fake': True}

    def get_image_dimensions(self, path):
        self.calls.append(path.name)
        return self.images.get(path.name, (None, None))

    def get_video_quality(self, path):
        self.calls.append(path.name)
        return self.videos.get(path.name, (None, None, None))


@pytest.fixture
def fake_extractor():
    """Factory: fake_extractor(images={...}, videos={...})."""
    return FakeExtractor


@pytest.fixture
def make_file(tmp_path):
    """Creates tmp_path/<rel> with the given bytes and optional mtime."""
    def _make(rel, content=b"", mtime=None):
        p = tmp_path / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(content)
        if mtime is not None:
            ts = mtime.timestamp() if isinstance(mtime, datetime) else mtime
            os.utime(p, (ts, ts))
        return p
    return _make


@pytest.fixture
def candidate():
    """Builds a FileCandidate for an existing file."""
    builder = GroupBuilder()

    def _candidate(path):
        return builder._make_candidate(path)
    return _candidate


def snapshot(root):
    """Relative path -> bytes for every file under root."""
    return {
        str(p.relative_to(root)): p.read_bytes()
        for p in sorted(root.rglob("*")) if p.is_file()
    }


@pytest.fixture
def tree_snapshot():
    return snapshot
