import pytest
from pathlib import Path

from media_organizer.models import CandidateFile, MediaKind
from media_organizer.scanning.filesystem import DiskScanner


def test_scanner_iterates_and_skips(tmp_path):
    root = tmp_path
    skip_dir = root / "skip"
    skip_dir.mkdir()
    (skip_dir / "skip.txt").write_text("skip")

    sub = root / "a"
    sub.mkdir()
    (sub / "b.txt").write_text("b")
    (root / "c.txt").write_text("c")

    scanner = DiskScanner(skip_dirs={skip_dir})
    files = list(scanner.iter_files(root))

    assert (skip_dir / "skip.txt") not in files
    assert files == [root / "c.txt", sub / "b.txt"]


def test_delete_empty_folders_bottom_up(tmp_path):
    (tmp_path / "a" / "b" / "c").mkdir(parents=True)
    (tmp_path / "keep").mkdir()
    (tmp_path / "keep" / "file.jpg").write_bytes(b"x")

    removed = DiskScanner().delete_empty_folders(tmp_path)

    assert removed == 3
    assert not (tmp_path / "a").exists()
    assert (tmp_path / "keep" / "file.jpg").exists()
    assert tmp_path.exists()


def test_delete_empty_folders_leaves_skipped_tree(tmp_path):
    dest = tmp_path / "dest"
    (dest / "unknown").mkdir(parents=True)

    DiskScanner(skip_dirs={dest}).delete_empty_folders(tmp_path)

    assert (dest / "unknown").exists()


@pytest.mark.parametrize(
    "name,expected",
    [
        ("photo.JPG", MediaKind.IMAGE),
        ("photo.jpeg", MediaKind.IMAGE),
        ("screenshot.png", MediaKind.IMAGE),
        ("shot.cr2", MediaKind.IMAGE),
        ("shot.DNG", MediaKind.IMAGE),
        ("live.heic", MediaKind.IMAGE),
        ("clip.MP4", MediaKind.VIDEO),
        ("clip.mov", MediaKind.VIDEO),
        ("clip.m4v", MediaKind.VIDEO),
        ("clip.qt", MediaKind.VIDEO),
        ("notes.txt", MediaKind.OTHER),
        ("unknown.xyz", MediaKind.OTHER),
        ("README", MediaKind.OTHER),
    ],
)
def test_classify_by_extension(name, expected):
    assert CandidateFile.from_path(Path("/src") / name).kind is expected


def test_video_container_detection():
    assert CandidateFile.from_path(Path("a.MOV")).is_video_container
    assert not CandidateFile.from_path(Path("a.avi")).is_video_container
