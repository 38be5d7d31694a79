"""资源解析器与镜像导入端测试"""

from __future__ import annotations

import io
import zipfile
from pathlib import Path

import pytest

from metaboot.core.metadata import DirectoryMirrorSink, DirectoryResolver, PackageDataResolver


def _zip_bytes(files: dict[str, str]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for name, content in files.items():
            zf.writestr(name, content)
    return buf.getvalue()


class TestDirectoryResolver:
    def test_resolves_nested_name(self, tmp_path: Path) -> None:
        (tmp_path / "a" / "b").mkdir(parents=True)
        (tmp_path / "a" / "b" / "core-12.zip").write_bytes(b"data")

        stream = DirectoryResolver(tmp_path).resolve("a/b/core-12.zip")

        assert stream is not None
        with stream:
            assert stream.read() == b"data"

    def test_missing_returns_none(self, tmp_path: Path) -> None:
        assert DirectoryResolver(tmp_path).resolve("core-1.zip") is None

    def test_directory_is_not_a_resource(self, tmp_path: Path) -> None:
        (tmp_path / "core-1.zip").mkdir()
        assert DirectoryResolver(tmp_path).resolve("core-1.zip") is None

    def test_rejects_escape(self, tmp_path: Path) -> None:
        base = tmp_path / "ns"
        base.mkdir()
        (tmp_path / "secret-1.zip").write_bytes(b"x")
        assert DirectoryResolver(base).resolve("../secret-1.zip") is None


class TestPackageDataResolver:
    def test_resolves_package_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        pkg = tmp_path / "fake_meta_pkg"
        (pkg / "packs").mkdir(parents=True)
        (pkg / "__init__.py").write_text("", encoding="utf-8")
        (pkg / "packs" / "core-2.zip").write_bytes(b"pkgdata")
        monkeypatch.syspath_prepend(str(tmp_path))

        stream = PackageDataResolver("fake_meta_pkg").resolve("packs/core-2.zip")

        assert stream is not None
        with stream:
            assert stream.read() == b"pkgdata"

    def test_unknown_package(self) -> None:
        assert PackageDataResolver("no_such_pkg_for_metaboot").resolve("x-1.zip") is None

    def test_rejects_parent_segments(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        pkg = tmp_path / "fake_meta_pkg2"
        pkg.mkdir()
        (pkg / "__init__.py").write_text("", encoding="utf-8")
        monkeypatch.syspath_prepend(str(tmp_path))
        assert PackageDataResolver("fake_meta_pkg2").resolve("../x-1.zip") is None


class TestDirectoryMirrorSink:
    def test_extracts_into_group_dir(self, tmp_path: Path) -> None:
        sink = DirectoryMirrorSink(tmp_path / "out")
        sink.import_mirror(io.BytesIO(_zip_bytes({"forms/a.json": "{}"})), group_key="g-1")

        assert (tmp_path / "out" / "g-1" / "forms" / "a.json").read_text() == "{}"

    def test_mirror_replaces_previous_content(self, tmp_path: Path) -> None:
        sink = DirectoryMirrorSink(tmp_path / "out")
        sink.import_mirror(io.BytesIO(_zip_bytes({"old.txt": "1", "keep.txt": "1"})), group_key="g")
        sink.import_mirror(io.BytesIO(_zip_bytes({"keep.txt": "2"})), group_key="g")

        dest = sink.package_dir("g")
        assert not (dest / "old.txt").exists()
        assert (dest / "keep.txt").read_text() == "2"

    def test_group_key_sanitised(self, tmp_path: Path) -> None:
        sink = DirectoryMirrorSink(tmp_path)
        name = sink.package_dir("a/b c").name
        assert name.startswith("a_b_c~")
        assert "/" not in name and " " not in name

    def test_safe_group_key_used_verbatim(self, tmp_path: Path) -> None:
        sink = DirectoryMirrorSink(tmp_path)
        assert sink.package_dir("8d4ba2e2-core_v1.x").name == "8d4ba2e2-core_v1.x"

    def test_distinct_keys_get_distinct_dirs(self, tmp_path: Path) -> None:
        sink = DirectoryMirrorSink(tmp_path)
        names = {sink.package_dir(k).name for k in ("a/b", "a_b", "a b", ".a", "a")}
        assert len(names) == 5

    def test_sanitised_keys_do_not_overwrite_each_other(self, tmp_path: Path) -> None:
        sink = DirectoryMirrorSink(tmp_path / "out")
        sink.import_mirror(io.BytesIO(_zip_bytes({"a.txt": "first"})), group_key="a/b")
        sink.import_mirror(io.BytesIO(_zip_bytes({"b.txt": "second"})), group_key="a_b")

        assert (sink.package_dir("a/b") / "a.txt").read_text() == "first"
        assert (sink.package_dir("a_b") / "b.txt").read_text() == "second"

    def test_dot_only_key_still_maps(self, tmp_path: Path) -> None:
        sink = DirectoryMirrorSink(tmp_path)
        assert sink.package_dir("..").name != sink.package_dir(".").name
        assert sink.package_dir("..").parent == tmp_path

    def test_corrupt_stream_raises_and_keeps_old(self, tmp_path: Path) -> None:
        sink = DirectoryMirrorSink(tmp_path / "out")
        sink.import_mirror(io.BytesIO(_zip_bytes({"v1.txt": "1"})), group_key="g")

        with pytest.raises(zipfile.BadZipFile):
            sink.import_mirror(io.BytesIO(b"not a zip"), group_key="g")

        assert (sink.package_dir("g") / "v1.txt").exists()

    def test_rejects_traversal_members(self, tmp_path: Path) -> None:
        sink = DirectoryMirrorSink(tmp_path / "out")
        with pytest.raises(ValueError, match="包内路径不合法"):
            sink.import_mirror(io.BytesIO(_zip_bytes({"../evil.txt": "x"})), group_key="g")
        assert not (tmp_path / "evil.txt").exists()
