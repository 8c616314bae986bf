import hashlib

from media_dedupe.scanning.filesystem import GroupBuilder
from media_dedupe.scanning.hasher import FileHasher


def test_digest_is_sha256_of_content(tmp_path):
    p = tmp_path / "sample.bin"
    data = b"hello world" * 10
    p.write_bytes(data)

    hasher = FileHasher(chunk_size=16)
    assert hasher.digest(p) == hashlib.sha256(data).hexdigest()


def test_disabled_hasher_is_unavailable(tmp_path):
    p = tmp_path / "a.bin"
    p.write_bytes(b"a")

    hasher = FileHasher(enabled=False)
    assert not hasher.available
    assert hasher.digest(p) is None


def test_unreadable_file_has_no_digest(tmp_path):
    assert FileHasher().digest(tmp_path / "missing.bin") is None


def _names(group):
    return [c.name for c in group.members]


def test_variants_are_grouped_per_directory(make_file, tmp_path):
    make_file("photo.jpg")
    make_file("photo_1.jpg")
    make_file("photo (2).jpg")
    make_file("other.jpg")
    make_file("sub/photo_1.jpg")

    groups = GroupBuilder().build(tmp_path)

    assert len(groups) == 1
    group = groups[0]
    assert group.directory == tmp_path.resolve()
    assert group.canonical_name == "photo.jpg"
    assert _names(group) == ["photo (2).jpg", "photo.jpg", "photo_1.jpg"]


def test_chained_markers_join_the_base_group(make_file, tmp_path):
    make_file("IMG.png")
    make_file("IMG_20.png")
    make_file("IMG_20 (3).png")

    groups = GroupBuilder().build(tmp_path)

    assert len(groups) == 1
    assert groups[0].canonical_name == "IMG.png"
    assert _names(groups[0]) == ["IMG.png", "IMG_20 (3).png", "IMG_20.png"]


def test_singletons_are_dropped(make_file, tmp_path):
    make_file("a.jpg")
    make_file("b_1.jpg")
    make_file("c (1).png")

    builder = GroupBuilder()
    assert builder.build(tmp_path) == []
    assert builder.last_scanned == 3


def test_excluded_subtree_is_not_scanned(make_file, tmp_path):
    make_file("x.jpg")
    make_file("duplicates/x.jpg/x_1.jpg")
    make_file("duplicates/x_1.jpg")

    builder = GroupBuilder()
    groups = builder.build(tmp_path, excluded_subtree=tmp_path / "duplicates")

    assert groups == []
    assert builder.last_scanned == 1


def test_nested_groups_in_stable_order(make_file, tmp_path):
    for rel in ["b/z_1.txt", "b/z.txt", "a/y.txt", "a/y (1).txt", "a/w.txt", "a/w_3.txt"]:
        make_file(rel)

    first = GroupBuilder().build(tmp_path)
    second = GroupBuilder().build(tmp_path)

    assert [(g.directory.name, g.canonical_name) for g in first] == [
        ("a", "w.txt"), ("a", "y.txt"), ("b", "z.txt"),
    ]
    assert first == second


def test_candidate_attributes(make_file, tmp_path):
    p = make_file("clip (1).MP4", b"12345", mtime=1_500_000_000)
    make_file("clip.MP4", b"1")

    group = GroupBuilder().build(tmp_path)[0]
    c = next(m for m in group.members if m.name == "clip (1).MP4")

    assert c.path == p.resolve()
    assert c.canonical_name == "clip.MP4"
    assert c.ext_class == 'video'
    assert c.size_bytes == 5
    assert c.mtime == 1_500_000_000
    assert c.canonical_key == (tmp_path.resolve(), "clip.MP4")
