"""资源解析器

职责:
- 按名称打开元数据包的二进制流
- 资源不存在时返回 None，由加载器决定如何报错

两种实现：
  - DirectoryResolver:   以某个目录为命名空间
  - PackageDataResolver: 以已安装 Python 包的数据文件为命名空间
"""

from __future__ import annotations

import logging
from importlib import resources
from pathlib import Path
from typing import BinaryIO

logger = logging.getLogger(__name__)


class DirectoryResolver:
    """以目录为命名空间的解析器，拒绝越出目录的名称"""

    def __init__(self, base_dir: str | Path) -> None:
        self.base_dir = Path(base_dir)

    def __repr__(self) -> str:
        return f"DirectoryResolver({str(self.base_dir)!r})"

    def resolve(self, name: str) -> BinaryIO | None:
        base = self.base_dir.resolve()
        path = (base / name).resolve()
        if not path.is_relative_to(base):
            logger.warning("资源名越出命名空间，拒绝: %s", name)
            return None
        if not path.is_file():
            return None
        return open(path, "rb")  # noqa: SIM115  由调用方关闭


class PackageDataResolver:
    """以 Python 包数据文件为命名空间的解析器

    例如 PackageDataResolver("myapp.metadata") 会在该包目录下查找资源，
    资源名中的 "/" 视为子目录。
    """

    def __init__(self, package: str) -> None:
        self.package = package

    def __repr__(self) -> str:
        return f"PackageDataResolver({self.package!r})"

    def resolve(self, name: str) -> BinaryIO | None:
        try:
            root = resources.files(self.package)
        except ModuleNotFoundError:
            logger.warning("资源包不存在: %s", self.package)
            return None

        node = root
        for part in name.split("/"):
            if part in ("", ".", ".."):
                return None
            node = node.joinpath(part)
        if not node.is_file():
            return None
        return node.open("rb")
