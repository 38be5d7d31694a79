"""已导入包记录存储

两种实现：
  - YamlRecordStore:   YAML 文件持久化（默认），跨进程重启保留
  - MemoryRecordStore: 进程内字典，用于测试和预演

记录只会被创建或升版本，从不删除。
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any

import yaml

from metaboot.core.exceptions import ConfigError
from metaboot.core.metadata.models import ImportedPackage
from metaboot.utils.yaml_io import load_yaml, save_yaml

logger = logging.getLogger(__name__)


def _from_entry(group_key: str, entry: dict[str, Any]) -> ImportedPackage:
    return ImportedPackage(
        group_key=group_key,
        version=int(entry.get("version", 0)),
        resource_name=str(entry.get("resource_name", "")),
        imported_at=float(entry.get("imported_at", 0.0)),
    )


class YamlRecordStore:
    """基于 YAML 文件的记录存储

    文件结构:
        imported_packages:
          <group_key>:
            version: 12
            resource_name: Kenya_EMR_Core-12.zip
            imported_at: 1700000000.0

    每次 set 都原子写回文件，写入即持久。
    """

    section_key = "imported_packages"

    def __init__(self, record_file: str | Path) -> None:
        self.record_file = Path(record_file)
        try:
            self._data: dict[str, Any] = load_yaml(self.record_file)
        except (ValueError, yaml.YAMLError) as e:
            raise ConfigError(f"记录文件无效: {self.record_file}: {e}") from e

    def _section(self) -> dict[str, dict[str, Any]]:
        result: dict[str, dict[str, Any]] = self._data.setdefault(self.section_key, {})
        return result

    def _save(self) -> None:
        save_yaml(self.record_file, self._data)

    def get(self, group_key: str) -> ImportedPackage | None:
        entry = self._section().get(group_key)
        if entry is None:
            return None
        return _from_entry(group_key, entry)

    def set(
        self, group_key: str, version: int, *, resource_name: str = "",
    ) -> ImportedPackage:
        record = ImportedPackage(
            group_key=group_key,
            version=version,
            resource_name=resource_name,
            imported_at=time.time(),
        )
        self._section()[group_key] = {
            "version": record.version,
            "resource_name": record.resource_name,
            "imported_at": record.imported_at,
        }
        self._save()
        logger.debug("记录已更新: %s -> v%d", group_key, version)
        return record

    def list_all(self) -> list[ImportedPackage]:
        return [_from_entry(k, v) for k, v in self._section().items()]


class MemoryRecordStore:
    """进程内记录存储"""

    def __init__(self, initial: dict[str, int] | None = None) -> None:
        self._records: dict[str, ImportedPackage] = {
            k: ImportedPackage(group_key=k, version=v)
            for k, v in (initial or {}).items()
        }

    def get(self, group_key: str) -> ImportedPackage | None:
        return self._records.get(group_key)

    def set(
        self, group_key: str, version: int, *, resource_name: str = "",
    ) -> ImportedPackage:
        record = ImportedPackage(
            group_key=group_key,
            version=version,
            resource_name=resource_name,
            imported_at=time.time(),
        )
        self._records[group_key] = record
        return record

    def list_all(self) -> list[ImportedPackage]:
        return list(self._records.values())
