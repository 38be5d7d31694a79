"""元数据管理器 - 串联一次完整的刷新

刷新顺序：
  1. 逐个模块配置加载元数据包（其他内容依赖这些元数据，所以排在最前）
  2. 按依赖顺序执行全部安装器

整个 refresh() 是进程内的临界区：并发的第二次调用会阻塞到第一次结束。
任何错误都向上抛出，调用方应视为启动失败。

用法:
    manager = MetadataManager.from_config(get_config())
    manager.refresh()
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from metaboot.core.exceptions import RefreshError
from metaboot.core.installer.executor import InstallerExecutor
from metaboot.core.metadata.loader import PackageLoader
from metaboot.core.metadata.manifest import (
    MetadataConfiguration,
    load_installers,
    load_manifest,
)
from metaboot.core.metadata.resolver import DirectoryResolver, PackageDataResolver
from metaboot.core.metadata.sink import DirectoryMirrorSink
from metaboot.core.metadata.store import YamlRecordStore

if TYPE_CHECKING:
    from metaboot.core.config import Config
    from metaboot.core.metadata.models import ImportedPackage
    from metaboot.core.protocols import (
        Committer,
        ImportSink,
        InstallerUnit,
        PackageRecordStore,
        ResourceResolver,
    )

logger = logging.getLogger(__name__)

# 为模块配置选择资源解析器的策略
ResolverFactory = Callable[[MetadataConfiguration], "ResourceResolver"]


def default_resolver_factory(resource_dir: str) -> ResolverFactory:
    """优先使用配置自带的命名空间，否则退回默认资源目录"""

    def factory(configuration: MetadataConfiguration) -> ResourceResolver:
        if configuration.resource_package:
            return PackageDataResolver(configuration.resource_package)
        if configuration.resource_dir:
            return DirectoryResolver(configuration.resource_dir)
        return DirectoryResolver(resource_dir)

    return factory


class MetadataManager:
    """元数据包与安装器的刷新入口"""

    def __init__(
        self,
        configurations: Sequence[MetadataConfiguration],
        installers: Sequence[InstallerUnit],
        store: PackageRecordStore,
        sink: ImportSink,
        resolver_factory: ResolverFactory,
        commit: Committer | None = None,
    ) -> None:
        self.configurations = list(configurations)
        self.installers = list(installers)
        self.store = store
        self.loader = PackageLoader(store, sink, commit=commit)
        self.executor = InstallerExecutor(commit=commit)
        self._resolver_factory = resolver_factory
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: Config) -> MetadataManager:
        """按配置和清单装配管理器"""
        manifest = load_manifest(config.manifest)
        return cls(
            configurations=manifest.configurations,
            installers=load_installers(manifest.installers),
            store=YamlRecordStore(Path(config.record_file)),
            sink=DirectoryMirrorSink(Path(config.import_dir)),
            resolver_factory=default_resolver_factory(config.resource_dir),
        )

    def refresh(self) -> bool:
        """执行一次完整刷新，返回元数据包是否有变更"""
        with self._lock:
            any_changed = False
            for configuration in self.configurations:
                resolver = self._resolver_factory(configuration)
                logger.info(
                    "加载模块 %s 的元数据包 (%d 个, %r)",
                    configuration.module_id, len(configuration.packages), resolver,
                    extra={"module_id": configuration.module_id},
                )
                try:
                    any_changed |= self.loader.load_all(configuration.packages, resolver)
                except Exception as exc:
                    raise RefreshError(configuration.module_id, exc) from exc

            self.executor.run(self.installers)
            return any_changed

    def installer_plan(self) -> list[str]:
        """只计算安装器执行顺序，不执行"""
        return InstallerExecutor().plan(self.installers)

    def get_imported_packages(self) -> list[ImportedPackage]:
        return self.store.list_all()
