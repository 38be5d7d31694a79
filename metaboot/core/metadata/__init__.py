"""元数据包加载模块

拆分说明:
- models.py: 数据模型与资源名解析
- store.py: 已导入包记录
- resolver.py: 资源解析
- sink.py: 镜像导入
- loader.py: 版本门控加载
- manifest.py: 清单加载
"""

from metaboot.core.metadata.loader import PackageLoader
from metaboot.core.metadata.models import ImportedPackage, PackageSpec, parse_version
from metaboot.core.metadata.resolver import DirectoryResolver, PackageDataResolver
from metaboot.core.metadata.sink import DirectoryMirrorSink
from metaboot.core.metadata.store import MemoryRecordStore, YamlRecordStore

__all__ = [
    "DirectoryMirrorSink",
    "DirectoryResolver",
    "ImportedPackage",
    "MemoryRecordStore",
    "PackageDataResolver",
    "PackageLoader",
    "PackageSpec",
    "YamlRecordStore",
    "parse_version",
]
