"""Unit tests for filesystem operations (mkdir, copy, extension search, zip extraction, path resolution)."""

from __future__ import annotations

import logging
import os
import zipfile
from pathlib import Path

import pytest

from fsutils.exceptions import ApplicationError, InvalidArgumentError
from fsutils.finder import (
    copy,
    extract_zip_archive,
    get_files_by_extension,
    get_files_recursively_by_extension,
    list_files_by_extension,
    mkdir,
    resolve_filepath,
)
from fsutils.utils.ignore import build_spec


@pytest.fixture
def folder(tmp_path: Path) -> Path:
    """Fixture tree: foo/{bar.txt, foo.txt, baz.php, backbee.yml, noextension, sub/deep.txt}."""
    d = tmp_path / "foo"
    d.mkdir()
    for name in ("bar.txt", "foo.txt", "baz.php", "backbee.yml", "noextension"):
        (d / name).write_text(name)
    (d / "sub").mkdir()
    (d / "sub" / "deep.txt").write_text("deep")
    return d


@pytest.fixture
def private_dir(tmp_path: Path) -> Path:
    """Directory with mode 000; tests using it skip when permissions are not enforced (root)."""
    d = tmp_path / "bad-rights"
    d.mkdir()
    (d / "secret.txt").write_text("secret")
    d.chmod(0o000)
    if os.access(d, os.R_OK):
        d.chmod(0o755)
        pytest.skip("Permissions are not enforced for this user")
    yield d
    d.chmod(0o755)


def _make_zip(path: Path, members: dict[str, str]) -> Path:
    with zipfile.ZipFile(path, "w") as zf:
        for name, content in members.items():
            zf.writestr(name, content)
    return path


# --- list_files_by_extension ---


def test_get_files_by_extension(folder: Path) -> None:
    base = str(folder)
    assert get_files_by_extension(base, "txt") == [
        os.path.join(base, "bar.txt"),
        os.path.join(base, "foo.txt"),
    ]
    assert get_files_by_extension(base, "php") == [os.path.join(base, "baz.php")]
    assert get_files_by_extension(base, "yml") == [os.path.join(base, "backbee.yml")]
    assert get_files_by_extension(base, "") == [os.path.join(base, "noextension")]
    assert get_files_by_extension(base, "aaa") == []


def test_get_files_recursively_by_extension(folder: Path) -> None:
    base = str(folder)
    assert get_files_recursively_by_extension(base, "txt") == [
        os.path.join(base, "bar.txt"),
        os.path.join(base, "foo.txt"),
        os.path.join(base, "sub", "deep.txt"),
    ]
    assert get_files_recursively_by_extension(base, "") == [os.path.join(base, "noextension")]
    assert get_files_recursively_by_extension(base, "aaa") == []


def test_leading_dot_in_extension_is_ignored(folder: Path) -> None:
    for recursive in (False, True):
        assert list_files_by_extension(folder, ".txt", recursive) == list_files_by_extension(folder, "txt", recursive)


def test_results_are_sorted_and_stable(folder: Path) -> None:
    for name in ("zeta.txt", "alpha.txt", "Mid.txt"):
        (folder / name).write_text(name)
    first = list_files_by_extension(folder, "txt", recursive=True)
    assert first == sorted(first)
    assert list_files_by_extension(folder, "txt", recursive=True) == first


def test_relative_directory_gives_absolute_paths(folder: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(folder.parent)
    result = list_files_by_extension("foo", "php")
    assert result == [os.path.join(os.path.abspath("foo"), "baz.php")]


def test_listing_rereads_filesystem(folder: Path) -> None:
    assert list_files_by_extension(folder, "md") == []
    (folder / "new.md").write_text("x")
    assert list_files_by_extension(folder, "md") == [os.path.join(str(folder), "new.md")]


def test_listing_with_ignore_spec(folder: Path) -> None:
    base = str(folder)
    spec = build_spec(["sub/", "foo.txt"])
    assert list_files_by_extension(folder, "txt", recursive=True, ignore=spec) == [
        os.path.join(base, "bar.txt"),
    ]


@pytest.mark.parametrize("bad", ["", None])
def test_listing_empty_directory_argument_raises(bad: str | None) -> None:
    with pytest.raises(InvalidArgumentError):
        list_files_by_extension(bad, "txt")
    with pytest.raises(InvalidArgumentError):
        get_files_recursively_by_extension(bad, "")


def test_listing_missing_or_file_raises(folder: Path) -> None:
    with pytest.raises(InvalidArgumentError):
        list_files_by_extension(folder / "missing", "txt")
    with pytest.raises(InvalidArgumentError):
        list_files_by_extension(folder / "bar.txt", "txt", recursive=True)


def test_listing_unreadable_directory_raises(private_dir: Path) -> None:
    with pytest.raises(InvalidArgumentError):
        get_files_by_extension(private_dir, ".txt")
    with pytest.raises(InvalidArgumentError):
        get_files_recursively_by_extension(private_dir, ".txt")


def test_recursive_listing_skips_unreadable_subdirectory(
    folder: Path, caplog: pytest.LogCaptureFixture
) -> None:
    locked = folder / "locked"
    locked.mkdir()
    (locked / "hidden.txt").write_text("x")
    locked.chmod(0o000)
    try:
        if os.access(locked, os.R_OK):
            pytest.skip("Permissions are not enforced for this user")
        with caplog.at_level(logging.WARNING, logger="fsutils.finder"):
            result = list_files_by_extension(folder, "txt", recursive=True)
    finally:
        locked.chmod(0o755)
    assert os.path.join(str(folder), "locked", "hidden.txt") not in result
    assert os.path.join(str(folder), "bar.txt") in result
    assert "Skipping unreadable directory" in caplog.text


# --- mkdir ---


def test_existing_dir_mkdir(folder: Path) -> None:
    before = sorted(p.name for p in folder.iterdir())
    assert mkdir(folder) is True
    assert mkdir(str(folder)) is True
    assert sorted(p.name for p in folder.iterdir()) == before


def test_mkdir_creates_parents(tmp_path: Path) -> None:
    target = tmp_path / "a" / "b" / "c"
    assert mkdir(str(target)) is True
    assert target.is_dir()


@pytest.mark.parametrize("bad", ["", None])
def test_unknown_dir_mkdir(bad: str | None) -> None:
    with pytest.raises(InvalidArgumentError):
        mkdir(bad)


def test_mkdir_over_file_raises(folder: Path) -> None:
    with pytest.raises(InvalidArgumentError):
        mkdir(folder / "bar.txt")


def test_existing_dir_mkdir_with_bad_rights(private_dir: Path) -> None:
    with pytest.raises(InvalidArgumentError):
        mkdir(private_dir)


def test_mkdir_inside_unwritable_dir_raises(private_dir: Path) -> None:
    with pytest.raises(InvalidArgumentError):
        mkdir(private_dir / "child")


# --- copy ---


def test_copy_file(folder: Path, tmp_path: Path) -> None:
    src = folder / "blob.bin"
    src.write_bytes(b"\x00\xff\x10binary")
    dest = tmp_path / "copy.bin"
    assert copy(src, dest) is True
    assert dest.read_bytes() == b"\x00\xff\x10binary"


def test_copy_overwrites_destination(folder: Path, tmp_path: Path) -> None:
    dest = tmp_path / "out.txt"
    dest.write_text("old content that is longer")
    copy(folder / "bar.txt", dest)
    assert dest.read_text() == "bar.txt"


def test_copy_into_directory(folder: Path, tmp_path: Path) -> None:
    out = tmp_path / "out"
    out.mkdir()
    copy(str(folder / "baz.php"), str(out))
    assert (out / "baz.php").read_text() == "baz.php"


def test_copy_missing_source_raises(tmp_path: Path) -> None:
    with pytest.raises(InvalidArgumentError):
        copy(tmp_path / "missing.txt", tmp_path / "bar.txt")
    with pytest.raises(InvalidArgumentError):
        copy("", tmp_path / "bar.txt")


def test_copy_directory_source_raises(folder: Path, tmp_path: Path) -> None:
    with pytest.raises(InvalidArgumentError):
        copy(folder, tmp_path / "bar.txt")


def test_unreadable_copy(private_dir: Path, tmp_path: Path) -> None:
    with pytest.raises(InvalidArgumentError):
        copy(private_dir, tmp_path / "bar.txt")


def test_copy_to_unwritable_dir_raises(folder: Path, private_dir: Path) -> None:
    with pytest.raises(InvalidArgumentError):
        copy(folder / "bar.txt", private_dir / "bar.txt")


# --- extract_zip_archive ---


def test_extract_zip_archive(tmp_path: Path) -> None:
    archive = _make_zip(tmp_path / "archive.zip", {"a.txt": "A", "nested/b.txt": "B"})
    dest = tmp_path / "dest"
    dest.mkdir()
    names = extract_zip_archive(archive, dest)
    assert names == ["a.txt", "nested/b.txt"]
    assert (dest / "a.txt").read_text() == "A"
    assert (dest / "nested" / "b.txt").read_text() == "B"


def test_extract_zip_archive_nonexistent_dir() -> None:
    with pytest.raises(ApplicationError):
        extract_zip_archive("test", "test")


def test_extract_zip_archive_unreadable_dir(private_dir: Path) -> None:
    with pytest.raises(ApplicationError):
        extract_zip_archive("test", private_dir)


def test_extract_zip_archive_missing_archive(tmp_path: Path) -> None:
    with pytest.raises(ApplicationError):
        extract_zip_archive(tmp_path / "nope.zip", tmp_path, overwrite=True)


def test_extract_zip_archive_corrupt(tmp_path: Path) -> None:
    bogus = tmp_path / "bogus.zip"
    bogus.write_text("not a zip")
    dest = tmp_path / "dest"
    dest.mkdir()
    with pytest.raises(ApplicationError):
        extract_zip_archive(bogus, dest)


def test_extract_zip_archive_existing_content(tmp_path: Path) -> None:
    archive = _make_zip(tmp_path / "archive.zip", {"a.txt": "new"})
    dest = tmp_path / "dest"
    dest.mkdir()
    (dest / "a.txt").write_text("old")
    with pytest.raises(ApplicationError):
        extract_zip_archive(archive, dest)
    assert (dest / "a.txt").read_text() == "old"

    extract_zip_archive(archive, dest, overwrite=True)
    assert (dest / "a.txt").read_text() == "new"


def test_extract_zip_archive_rejects_escaping_members(tmp_path: Path) -> None:
    archive = _make_zip(tmp_path / "evil.zip", {"../evil.txt": "x"})
    dest = tmp_path / "dest"
    dest.mkdir()
    with pytest.raises(ApplicationError):
        extract_zip_archive(archive, dest)
    assert not (tmp_path / "evil.txt").exists()


def _patch_headers(path: Path, local_offset: int, central_offset: int, value: bytes) -> None:
    """Overwrite the same field in the local and central headers of a one-member zip."""
    data = bytearray(path.read_bytes())
    local = data.index(b"PK\x03\x04")
    central = data.index(b"PK\x01\x02")
    data[local + local_offset : local + local_offset + len(value)] = value
    data[central + central_offset : central + central_offset + len(value)] = value
    path.write_bytes(bytes(data))


@pytest.mark.parametrize(
    "local_offset,central_offset,value",
    [
        (6, 8, b"\x01\x00"),  # encrypted flag
        (8, 10, b"\x63\x00"),  # compression method 99
    ],
)
def test_extract_zip_archive_unsupported_member(
    tmp_path: Path, local_offset: int, central_offset: int, value: bytes
) -> None:
    archive = _make_zip(tmp_path / "locked.zip", {"a.txt": "A"})
    _patch_headers(archive, local_offset, central_offset, value)
    dest = tmp_path / "dest"
    dest.mkdir()
    with pytest.raises(ApplicationError, match="Unable to extract archive"):
        extract_zip_archive(archive, dest)


# --- resolve_filepath ---


def test_resolve_filepath_absolute(tmp_path: Path) -> None:
    twig = tmp_path / "file.twig"
    twig.write_text("{{ x }}")
    assert resolve_filepath(str(twig)) == os.path.realpath(twig)


def test_resolve_filepath_relative_to_base_dir(folder: Path) -> None:
    assert resolve_filepath("sub/deep.txt", base_dir=folder) == os.path.realpath(folder / "sub" / "deep.txt")


def test_resolve_filepath_include_paths(folder: Path, tmp_path: Path) -> None:
    other = tmp_path / "other"
    other.mkdir()
    assert resolve_filepath("baz.php", base_dir=other, include_paths=[folder]) == os.path.realpath(folder / "baz.php")


def test_resolve_filepath_missing_anchors_on_base_dir(tmp_path: Path) -> None:
    base = tmp_path / "base"
    base.mkdir()
    resolved = resolve_filepath("views/missing.twig", base_dir=base)
    assert resolved == os.path.join(str(base), "views", "missing.twig")


def test_resolve_filepath_empty_raises() -> None:
    with pytest.raises(InvalidArgumentError):
        resolve_filepath("")
