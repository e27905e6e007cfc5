from __future__ import annotations

import os
from pathlib import Path

import pytest

from medimg.core.models import MAX_DEPTH, DiscoveryRequest, ImageRecord
from medimg.core.scanner import ImageScanner

from .conftest import touch


@pytest.fixture()
def scanner(tmp_path: Path) -> ImageScanner:
    return ImageScanner(tmp_path)


def _names(records: list[ImageRecord]) -> set[str]:
    return {r.filename for r in records}


def test_discover_filters_masks_and_non_images(tmp_path, scanner):
    root = tmp_path / "ds"
    touch(root / "a.jpg")
    touch(root / "a_mask.png")
    touch(root / "b.txt")
    touch(root / "sub" / "c.png")

    records = scanner.discover(root, 10)

    assert sorted(r.relative_path for r in records) == ["/images/ds/a.jpg", "/images/ds/sub/c.png"]


def test_discover_returns_every_image_when_under_limit(tmp_path, scanner):
    root = tmp_path / "ds"
    expected = set()
    for i in range(4):
        touch(root / f"class{i % 2}" / f"img{i}.png")
        expected.add(f"img{i}.png")

    records = scanner.discover(root, 50)

    assert len(records) == 4
    assert _names(records) == expected
    assert len({r.absolute_path for r in records}) == 4


def test_extension_match_is_case_insensitive(tmp_path, scanner):
    root = tmp_path / "ds"
    for name in ["upper.JPG", "mixed.JpEg", "scan.BMP", "photo.gif", "notes.jpg.txt"]:
        touch(root / name)

    assert _names(scanner.discover(root, 10)) == {"upper.JPG", "mixed.JpEg", "scan.BMP"}


def test_mask_marker_anywhere_in_name_is_excluded(tmp_path, scanner):
    root = tmp_path / "ds"
    touch(root / "benign (3)_mask.png")
    touch(root / "benign (3)_mask_1.png")
    touch(root / "benign (3).png")

    assert _names(scanner.discover(root, 10)) == {"benign (3).png"}


def test_discover_stops_at_sample_limit_across_subdirectories(tmp_path, scanner):
    root = tmp_path / "ds"
    for d in range(3):
        for f in range(4):
            touch(root / f"dir{d}" / f"img{f}.png")

    assert len(scanner.discover(root, 5)) == 5
    assert len(scanner.discover(root, 1)) == 1


def test_zero_sample_limit_returns_empty(tmp_path, scanner):
    root = tmp_path / "ds"
    touch(root / "a.png")

    assert scanner.discover(root, 0) == []


def test_missing_root_returns_empty(tmp_path, scanner):
    missing = tmp_path / "nope"

    assert scanner.discover(missing, 10) == []
    assert scanner.discover(missing, 10) == []
    assert not missing.exists()


def test_file_as_root_returns_empty(tmp_path, scanner):
    path = touch(tmp_path / "single.png")

    assert scanner.discover(path, 10) == []


def test_depth_bound(tmp_path, scanner):
    root = tmp_path / "ds"
    deepest_allowed = root.joinpath(*[f"d{i}" for i in range(MAX_DEPTH)])
    too_deep = deepest_allowed / "too_deep"
    touch(deepest_allowed / "kept.png")
    touch(too_deep / "dropped.png")

    assert _names(scanner.discover(root, 10)) == {"kept.png"}


def test_unreadable_directory_is_skipped(tmp_path, scanner, monkeypatch):
    root = tmp_path / "ds"
    touch(root / "ok" / "a.png")
    touch(root / "locked" / "b.png")
    touch(root / "c.png")

    real_scandir = os.scandir

    def fake_scandir(path):
        if Path(path).name == "locked":
            raise PermissionError(13, "Permission denied", str(path))
        return real_scandir(path)

    monkeypatch.setattr(os, "scandir", fake_scandir)

    assert _names(scanner.discover(root, 10)) == {"a.png", "c.png"}


def test_directory_removed_mid_scan_is_skipped(tmp_path, scanner, monkeypatch):
    root = tmp_path / "ds"
    touch(root / "gone" / "a.png")
    touch(root / "kept" / "b.png")

    real_scandir = os.scandir

    def fake_scandir(path):
        if Path(path).name == "gone":
            raise FileNotFoundError(2, "No such file or directory", str(path))
        return real_scandir(path)

    monkeypatch.setattr(os, "scandir", fake_scandir)

    assert _names(scanner.discover(root, 10)) == {"b.png"}


def test_web_path_uses_prefix_and_forward_slashes(tmp_path):
    scanner = ImageScanner(tmp_path, public_prefix="/static/")
    path = touch(tmp_path / "chest_xray" / "test" / "NORMAL" / "IM-1.jpeg")

    assert scanner.web_path(path) == "/static/chest_xray/test/NORMAL/IM-1.jpeg"


def test_walk_honours_request_depth(tmp_path, scanner):
    root = tmp_path / "ds"
    touch(root / "top.png")
    touch(root / "sub" / "nested.png")

    request = DiscoveryRequest(root_directory=root, sample_limit=10, max_depth=0)

    assert _names(scanner.walk(request)) == {"top.png"}


def test_record_dict_hides_absolute_path(tmp_path, scanner):
    root = tmp_path / "ds"
    touch(root / "a.png")

    record = scanner.discover(root, 1)[0]

    assert record.to_dict() == {"filename": "a.png", "path": "/images/ds/a.png"}
    assert Path(record.absolute_path).is_absolute()


def test_is_image():
    assert ImageScanner.is_image("x/y/scan.PNG")
    assert not ImageScanner.is_image("scan_mask.png")
    assert not ImageScanner.is_image("scan.tiff")
