"""YAML 文件读写工具

清单、配置、已导入包记录都经由这里读写。
统一 encoding="utf-8"、空值保护、原子写入。
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

# 清单与记录文件都很小，超过该大小视为误配
MAX_YAML_SIZE = 10 * 1024 * 1024


def atomic_write(path: Path, content: str) -> None:
    """先写同目录临时文件再 os.replace，进程中途退出不会留下半截文件"""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=str(path.parent), suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp, str(path))
    except Exception:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise


def load_yaml(path: str | Path) -> dict[str, Any]:
    """读取 YAML 映射

    文件不存在或为空时返回空字典；顶层不是映射时记 warning 并返回空字典。

    异常:
        ValueError: 文件超过 MAX_YAML_SIZE
        yaml.YAMLError: YAML 语法错误
    """
    p = Path(path)
    if not p.exists():
        return {}

    file_size = p.stat().st_size
    if file_size > MAX_YAML_SIZE:
        raise ValueError(
            f"YAML 文件过大: {p} ({file_size} 字节), 超过限制 {MAX_YAML_SIZE} 字节"
        )

    try:
        with open(p, encoding="utf-8") as f:
            result = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error("解析 YAML 文件失败: %s, 错误: %s", p, e)
        raise

    if result is None:
        return {}
    if not isinstance(result, dict):
        logger.warning(
            "%s 顶层不是映射 (实际类型: %s)，按空处理", p, type(result).__name__,
        )
        return {}
    return result


def save_yaml(path: str | Path, data: Any) -> None:
    """原子写入 YAML，保持键顺序"""
    content = yaml.dump(
        data, default_flow_style=False, allow_unicode=True, sort_keys=False,
    )
    atomic_write(Path(path), content)
