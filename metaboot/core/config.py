"""集中配置管理

提供清单、记录文件、资源目录等路径的统一入口。
支持从 YAML 文件加载 + 编程式覆盖。
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field

import yaml

from metaboot.core.exceptions import ConfigError
from metaboot.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)


@dataclass
class Config:
    """引导引擎全局配置"""

    # 元数据清单：声明模块的包列表和安装器列表
    manifest: str = "configs/metadata.yml"
    # 已导入包记录（跨进程重启保留）
    record_file: str = "data/imported_packages.yml"
    # 默认资源命名空间
    resource_dir: str = "metadata"
    # 镜像导入的目标根目录
    import_dir: str = "data/metadata"

    log_level: str = "INFO"

    extra: dict = field(default_factory=dict)

    @classmethod
    def from_file(cls, path: str = "configs/default.yml") -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        try:
            data = load_yaml(path)
        except (ValueError, yaml.YAMLError) as e:
            raise ConfigError(f"配置文件无效: {path}: {e}") from e
        if not data:
            return cls()
        known = {f.name for f in cls.__dataclass_fields__.values()}
        matched = {k: v for k, v in data.items() if k in known and k != "extra"}
        extra = {k: v for k, v in data.items() if k not in known}
        cfg = cls(**matched)
        cfg.extra = extra
        return cfg

    def to_dict(self) -> dict:
        return asdict(self)


# 全局单例，import 时不加载文件；由 CLI / Web 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str = "configs/default.yml") -> Config:
    """从文件初始化全局配置"""
    global _current  # noqa: PLW0603
    _current = Config.from_file(path)
    logger.info("配置已加载: %s", path)
    return _current
