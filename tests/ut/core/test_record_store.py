"""已导入包记录存储测试"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from metaboot.core.exceptions import ConfigError
from metaboot.core.metadata import MemoryRecordStore, YamlRecordStore


class TestYamlRecordStore:
    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        store = YamlRecordStore(tmp_path / "records.yml")
        assert store.get("g1") is None
        assert store.list_all() == []

    def test_set_and_get(self, tmp_path: Path) -> None:
        store = YamlRecordStore(tmp_path / "records.yml")
        record = store.set("g1", 3, resource_name="core-3.zip")

        got = store.get("g1")
        assert got == record
        assert got.version == 3
        assert got.imported_at > 0

    def test_survives_restart(self, tmp_path: Path) -> None:
        path = tmp_path / "data" / "records.yml"
        YamlRecordStore(path).set("g1", 3, resource_name="core-3.zip")

        reopened = YamlRecordStore(path)
        record = reopened.get("g1")
        assert record is not None
        assert record.version == 3
        assert record.resource_name == "core-3.zip"

    def test_file_layout(self, tmp_path: Path) -> None:
        path = tmp_path / "records.yml"
        YamlRecordStore(path).set("g1", 7, resource_name="x-7.zip")
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        assert data["imported_packages"]["g1"]["version"] == 7

    def test_version_bump_keeps_single_record(self, tmp_path: Path) -> None:
        store = YamlRecordStore(tmp_path / "records.yml")
        store.set("g1", 1)
        store.set("g1", 2)
        records = store.list_all()
        assert len(records) == 1
        assert records[0].version == 2

    def test_broken_file_raises_config_error(self, tmp_path: Path) -> None:
        path = tmp_path / "records.yml"
        path.write_text("imported_packages: {g1: [\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="记录文件无效"):
            YamlRecordStore(path)


class TestMemoryRecordStore:
    def test_initial_versions(self) -> None:
        store = MemoryRecordStore({"g1": 4})
        assert store.get("g1").version == 4
        assert store.get("g2") is None

    def test_list_all(self) -> None:
        store = MemoryRecordStore()
        store.set("a", 1)
        store.set("b", 2)
        assert {r.group_key for r in store.list_all()} == {"a", "b"}
