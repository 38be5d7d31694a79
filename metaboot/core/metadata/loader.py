"""元数据包加载器

按版本幂等地导入元数据包：

  1. 从资源名解析版本号（<名称>-<版本>.zip）
  2. 已记录版本 >= 该版本 → 跳过，不触碰解析器和导入端
  3. 否则解析资源 → 镜像导入 → 写入记录 → commit

任何一个包失败都会中止整批加载（fail-fast），不做部分跳过。
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

from metaboot.core.exceptions import ImportFailureError, ResourceNotFoundError
from metaboot.core.metadata.models import parse_version

if TYPE_CHECKING:
    from metaboot.core.protocols import (
        Committer,
        ImportSink,
        PackageRecordStore,
        ResourceResolver,
    )

logger = logging.getLogger(__name__)


def _noop_commit() -> None:
    pass


class PackageLoader:
    """版本门控的元数据包加载器"""

    def __init__(
        self,
        store: PackageRecordStore,
        sink: ImportSink,
        commit: Committer | None = None,
    ) -> None:
        self.store = store
        self.sink = sink
        self._commit = commit or _noop_commit

    def ensure_installed(
        self, group_key: str, resource_name: str, resolver: ResourceResolver,
    ) -> bool:
        """确保指定版本的包已导入，返回本次是否有变更"""
        version = parse_version(resource_name)

        installed = self.store.get(group_key)
        if installed is not None and installed.version >= version:
            logger.info(
                "元数据包 %s 已安装，当前版本 %d，跳过",
                resource_name, installed.version,
                extra={"group_key": group_key},
            )
            return False

        stream = resolver.resolve(resource_name)
        if stream is None:
            raise ResourceNotFoundError(resource_name, group_key)

        try:
            with stream:
                self.sink.import_mirror(stream, group_key=group_key)
        except Exception as exc:
            raise ImportFailureError(resource_name, exc) from exc

        self.store.set(group_key, version, resource_name=resource_name)
        self._commit()
        logger.info(
            "已导入元数据包 %s (v%d)", resource_name, version,
            extra={"group_key": group_key},
        )
        return True

    def load_all(
        self, specs: Mapping[str, str], resolver: ResourceResolver,
    ) -> bool:
        """按声明顺序加载 {group_key: resource_name}，返回是否有任一变更"""
        any_changed = False
        for group_key, resource_name in specs.items():
            any_changed |= self.ensure_installed(group_key, resource_name, resolver)
        return any_changed
