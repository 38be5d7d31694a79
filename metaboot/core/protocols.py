"""协作方协议定义

加载器与执行器只依赖这里的抽象，不关心资源从哪里来、导入到哪里去。
使用 typing.Protocol 而非 ABC，已有类无需修改继承关系即可满足协议。
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, BinaryIO, Protocol

if TYPE_CHECKING:
    from metaboot.core.metadata.models import ImportedPackage


# =========================================================================
# 资源解析协议
# =========================================================================

class ResourceResolver(Protocol):
    """按名称查找资源的提供者

    可以限定在某个模块的命名空间内，也可以是全局默认命名空间。
    """

    def resolve(self, name: str) -> BinaryIO | None:
        """返回可读的二进制流，资源不存在时返回 None"""
        ...


# =========================================================================
# 导入端协议
# =========================================================================

class ImportSink(Protocol):
    """元数据包导入端

    以镜像模式导入：包内容整体替换本地对应实体，而不是合并。
    内容损坏或无法读取时直接抛出异常。
    """

    def import_mirror(self, stream: BinaryIO, *, group_key: str) -> None:
        ...


# =========================================================================
# 已导入包记录协议
# =========================================================================

class PackageRecordStore(Protocol):
    """group_key -> 已安装最高版本 的持久化记录"""

    def get(self, group_key: str) -> ImportedPackage | None:
        ...

    def set(
        self, group_key: str, version: int, *, resource_name: str = "",
    ) -> ImportedPackage:
        ...

    def list_all(self) -> list[ImportedPackage]:
        ...


# =========================================================================
# 安装器协议
# =========================================================================

class InstallerUnit(Protocol):
    """安装单元：稳定 id + 有序依赖列表 + install 动作"""

    id: str
    requires: Sequence[str]

    def install(self) -> None:
        ...


# 提交回调：使之前的写入持久化，每个安装器完成后、每个包导入后各调用一次
Committer = Callable[[], None]
