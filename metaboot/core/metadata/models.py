"""元数据包数据模型

数据类:
- PackageSpec: 配置中声明的 (group_key, resource_name)
- ImportedPackage: 已导入包的持久化记录

版本号编码在资源名中：<名称>-<版本>.zip
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass

from metaboot.core.exceptions import MalformedResourceNameError

# 名称部分允许单词字符、路径分隔符和连字符；末尾 -<数字>.zip 是版本
PACKAGE_NAME_RE = re.compile(r"[\w/-]+-(\d+)\.zip", re.ASCII)


def parse_version(resource_name: str) -> int:
    """从资源名中解析版本号

    >>> parse_version("a/b/core-12.zip")
    12
    """
    match = PACKAGE_NAME_RE.fullmatch(resource_name)
    if match is None:
        raise MalformedResourceNameError(resource_name)
    return int(match.group(1))


@dataclass(frozen=True)
class PackageSpec:
    """单个元数据包声明"""

    group_key: str
    resource_name: str

    @property
    def version(self) -> int:
        return parse_version(self.resource_name)


@dataclass
class ImportedPackage:
    """已导入包记录：每个 group_key 一条，只升不删"""

    group_key: str
    version: int
    resource_name: str = ""
    imported_at: float = 0.0

    def to_dict(self) -> dict[str, object]:
        return asdict(self)
