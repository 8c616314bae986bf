from datetime import datetime
from itertools import product

import pytest

from media_dedupe.models import Comparison, PixelQuality, SizeQuality, VideoQuality
from media_dedupe.ranking.compare import Comparator, compare_quality
from media_dedupe.ranking.quality import QualityEvaluator
from media_dedupe.scanning.hasher import FileHasher

A, B, EQ = Comparison.A_BETTER, Comparison.B_BETTER, Comparison.EQUAL


class CountingHasher(FileHasher):
    def __init__(self, enabled=True):
        super().__init__(enabled=enabled)
        self.hashed = []

    def digest(self, path):
        self.hashed.append(path.name)
        return super().digest(path)


def make_comparator(extractor, hasher=None):
    return Comparator(QualityEvaluator(extractor), hasher or CountingHasher())


# --- compare_quality (pure) ---

def test_video_resolution_dominates_bitrate():
    assert compare_quality(VideoQuality(2000, 1), VideoQuality(1000, 9_999)) == A


def test_video_bitrate_breaks_resolution_tie():
    assert compare_quality(VideoQuality(1000, 5000), VideoQuality(1000, 8000)) == B
    assert compare_quality(VideoQuality(1000, 8000), VideoQuality(1000, 8000)) == EQ


def test_images_compare_pixels():
    assert compare_quality(PixelQuality(6_000_000), PixelQuality(3_000_000)) == A
    assert compare_quality(PixelQuality(5), PixelQuality(5)) == EQ


def test_sizes_compare_sizes():
    assert compare_quality(SizeQuality(10), SizeQuality(20)) == B


def test_video_against_image_uses_pixels():
    assert compare_quality(VideoQuality(100, 50), PixelQuality(200)) == B
    assert compare_quality(PixelQuality(100), VideoQuality(100, 50)) == EQ


def test_size_against_pixels_uses_file_sizes():
    # The pixel count is not comparable with a byte count; the files' sizes are
    assert compare_quality(SizeQuality(10), PixelQuality(1_000_000), size_a=10, size_b=5) == A
    assert compare_quality(VideoQuality(9, 9), SizeQuality(3), size_a=1, size_b=3) == B


DESCRIPTORS = [
    SizeQuality(0), SizeQuality(10),
    PixelQuality(1), PixelQuality(10),
    VideoQuality(10, 0), VideoQuality(10, 5), VideoQuality(20, 0),
]


@pytest.mark.parametrize("a,b", list(product(DESCRIPTORS, DESCRIPTORS)))
def test_compare_quality_is_antisymmetric(a, b):
    assert compare_quality(a, b, 3, 4) == compare_quality(b, a, 4, 3).inverse


# --- Comparator over files ---

def test_higher_resolution_wins_when_contents_differ(make_file, candidate, fake_extractor):
    old = candidate(make_file("img.jpg", b"aaaa", datetime(2020, 1, 1)))
    new = candidate(make_file("img_1.jpg", b"bbbb", datetime(2022, 1, 1)))
    comp = make_comparator(fake_extractor(images={"img.jpg": (2000, 1500), "img_1.jpg": (3000, 2000)}))

    assert comp.compare(old, new) == B
    assert comp.compare(new, old) == A


def test_identical_content_keeps_the_older_file(make_file, candidate, fake_extractor):
    older = candidate(make_file("a.png", b"same", datetime(2021, 1, 1)))
    newer = candidate(make_file("a (1).png", b"same", datetime(2023, 5, 1)))
    comp = make_comparator(fake_extractor())

    assert comp.compare(older, newer) == A
    assert comp.compare(newer, older) == B


def test_identity_overrides_a_flawed_resolution_reading(make_file, candidate, fake_extractor):
    older = candidate(make_file("p.jpg", b"same bytes", datetime(2019, 6, 1)))
    newer = candidate(make_file("p_1.jpg", b"same bytes", datetime(2020, 6, 1)))
    extractor = fake_extractor(images={"p.jpg": (100, 100), "p_1.jpg": (4000, 3000)})

    assert make_comparator(extractor).compare(older, newer) == A


def test_disabled_hashing_falls_back_to_resolution(make_file, candidate, fake_extractor):
    older = candidate(make_file("p.jpg", b"same bytes", datetime(2019, 6, 1)))
    newer = candidate(make_file("p_1.jpg", b"same bytes", datetime(2020, 6, 1)))
    extractor = fake_extractor(images={"p.jpg": (100, 100), "p_1.jpg": (4000, 3000)})
    hasher = CountingHasher(enabled=False)

    assert make_comparator(extractor, hasher).compare(older, newer) == B
    assert hasher.hashed == []


def test_identical_content_same_mtime_is_equal(make_file, candidate, fake_extractor):
    a = candidate(make_file("x.bin", b"zz", 1_600_000_000))
    b = candidate(make_file("x_1.bin", b"zz", 1_600_000_000))
    assert make_comparator(fake_extractor()).compare(a, b) == EQ


def test_mismatched_tags_never_hash(make_file, candidate, fake_extractor):
    a = candidate(make_file("m.jpg", b"same"))
    b = candidate(make_file("m_1.jpg", b"same"))
    hasher = CountingHasher()
    comp = make_comparator(fake_extractor(images={"m.jpg": (10, 10)}), hasher)

    comp.compare(a, b)
    assert hasher.hashed == []


def test_different_sizes_skip_hashing(make_file, candidate, fake_extractor):
    a = candidate(make_file("s.dat", b"short"))
    b = candidate(make_file("s_1.dat", b"much longer"))
    hasher = CountingHasher()

    assert make_comparator(fake_extractor(), hasher).compare(a, b) == B
    assert hasher.hashed == []


def test_quality_and_digest_are_computed_once(make_file, candidate, fake_extractor):
    a = candidate(make_file("c.jpg", b"1111"))
    b = candidate(make_file("c_1.jpg", b"2222"))
    c = candidate(make_file("c (2).jpg", b"3333"))
    extractor = fake_extractor(images={"c.jpg": (1, 1), "c_1.jpg": (1, 1), "c (2).jpg": (1, 1)})
    hasher = CountingHasher()
    comp = make_comparator(extractor, hasher)

    for x, y in [(a, b), (b, c), (a, c), (b, a)]:
        comp.compare(x, y)

    assert sorted(extractor.calls) == sorted(["c.jpg", "c_1.jpg", "c (2).jpg"])
    assert sorted(hasher.hashed) == sorted(["c.jpg", "c_1.jpg", "c (2).jpg"])


def test_prefetch_with_workers_fills_cache(make_file, candidate, fake_extractor):
    files = [candidate(make_file(f"v_{i}.mp4", b"v" * i)) for i in range(1, 6)]
    extractor = fake_extractor(videos={f"v_{i}.mp4": (i, i, i) for i in range(1, 6)})
    comp = make_comparator(extractor)

    comp.prefetch(files, max_workers=3)
    assert len(extractor.calls) == 5
    assert comp.quality_of(files[2]) == VideoQuality(9, 3)
    assert len(extractor.calls) == 5
