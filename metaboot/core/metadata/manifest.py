"""元数据清单加载

清单声明引导所需的全部输入，引擎本身从不自行发现：

    configurations:
      - module: kenyaemr
        resource_dir: metadata/emr        # 或 resource_package: myapp.metadata
        packages:
          8d4ba2e2-...: Kenya_EMR_Core-12.zip
    installers:
      - myapp.installers:CommonMetadata

packages 按文件中的书写顺序加载。
"""

from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from metaboot.core.exceptions import ConfigError
from metaboot.core.metadata.models import PackageSpec
from metaboot.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)


@dataclass
class MetadataConfiguration:
    """单个模块的包配置"""

    module_id: str
    packages: dict[str, str] = field(default_factory=dict)
    resource_dir: str = ""
    resource_package: str = ""

    def specs(self) -> list[PackageSpec]:
        return [PackageSpec(k, v) for k, v in self.packages.items()]


@dataclass
class Manifest:
    configurations: list[MetadataConfiguration] = field(default_factory=list)
    installers: list[str] = field(default_factory=list)


def _parse_configuration(index: int, raw: Any) -> MetadataConfiguration:
    if not isinstance(raw, dict):
        raise ConfigError(f"configurations[{index}] 必须是映射")
    module_id = raw.get("module")
    if not module_id:
        raise ConfigError(f"configurations[{index}] 缺少 module")
    packages = raw.get("packages") or {}
    if not isinstance(packages, dict):
        raise ConfigError(f"模块 {module_id} 的 packages 必须是映射")
    return MetadataConfiguration(
        module_id=str(module_id),
        packages={str(k): str(v) for k, v in packages.items()},
        resource_dir=str(raw.get("resource_dir", "")),
        resource_package=str(raw.get("resource_package", "")),
    )


def load_manifest(path: str | Path) -> Manifest:
    """从 YAML 文件加载清单，文件不存在时返回空清单"""
    p = Path(path)
    if not p.exists():
        logger.warning("清单文件不存在: %s", p)
        return Manifest()

    try:
        data = load_yaml(p)
    except (ValueError, yaml.YAMLError) as e:
        raise ConfigError(f"清单文件无效: {p}: {e}") from e

    raw_configs = data.get("configurations") or []
    raw_installers = data.get("installers") or []
    if not isinstance(raw_configs, list):
        raise ConfigError("configurations 必须是列表")
    if not isinstance(raw_installers, list):
        raise ConfigError("installers 必须是列表")

    manifest = Manifest(
        configurations=[_parse_configuration(i, c) for i, c in enumerate(raw_configs)],
        installers=[str(ref) for ref in raw_installers],
    )
    logger.info(
        "已加载清单 %s: %d 个模块配置, %d 个安装器",
        p, len(manifest.configurations), len(manifest.installers),
    )
    return manifest


def load_object(ref: str) -> Any:
    """按 "module:attr" 导入对象"""
    module_name, sep, attr = ref.partition(":")
    if not sep or not module_name or not attr:
        raise ConfigError(f"引用格式应为 module:attr: {ref!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigError(f"无法导入模块 {module_name}: {e}") from e
    try:
        return getattr(module, attr)
    except AttributeError as e:
        raise ConfigError(f"模块 {module_name} 中没有 {attr}") from e


def load_installers(refs: list[str]) -> list[Any]:
    """把清单中的安装器引用实例化为安装单元

    类会被无参实例化，已是实例的对象原样使用。
    """
    units = []
    for ref in refs:
        obj = load_object(ref)
        if isinstance(obj, type):
            try:
                obj = obj()
            except TypeError as e:
                raise ConfigError(f"无法实例化安装器 {ref}: {e}") from e
        units.append(obj)
    return units
