"""metaboot 日志配置

引导过程中的日志按三类上下文归属：模块配置 (module_id)、元数据包分组
(group_key) 和安装单元 (unit_id)。调用方通过 extra 传入，例如：

    logger.info("已导入元数据包 %s", name, extra={"group_key": key})

文本格式把上下文追加在消息末尾，JSON 格式放在 "context" 字段中，
便于在部署流水线中按包或安装器过滤一次刷新的全部日志。
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone

CONTEXT_FIELDS = ("module_id", "group_key", "unit_id")

ENV_LOG_LEVEL = "METABOOT_LOG_LEVEL"
ENV_LOG_JSON = "METABOOT_LOG_JSON"


def log_context(record: logging.LogRecord) -> dict[str, str]:
    """取出 record 上携带的引导上下文，按 CONTEXT_FIELDS 顺序"""
    return {
        name: str(getattr(record, name))
        for name in CONTEXT_FIELDS
        if getattr(record, name, None) is not None
    }


class TextFormatter(logging.Formatter):
    """人类可读格式，上下文以 [key=value ...] 追加"""

    default_fmt = "%(asctime)s [%(levelname)-7s] %(name)s: %(message)s"

    def __init__(self) -> None:
        super().__init__(self.default_fmt)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        ctx = log_context(record)
        if not ctx:
            return line
        tags = " ".join(f"{k}={v}" for k, v in ctx.items())
        head, sep, tail = line.partition("\n")
        return f"{head} [{tags}]{sep}{tail}"


class JSONFormatter(logging.Formatter):
    """结构化 JSON 日志格式器

    输出格式:
        {"timestamp": "...", "level": "INFO", "logger": "metaboot.core.manager",
         "message": "...", "context": {"module_id": "core", "group_key": "..."}}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        ctx = log_context(record)
        if ctx:
            log_entry["context"] = ctx
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, ensure_ascii=False)


def setup_logging(level: str = "INFO", json_output: bool = False) -> None:
    """配置根日志器

    参数:
        level: 日志级别字符串（DEBUG, INFO, WARNING, ERROR, CRITICAL）
        json_output: 为 True 时输出 JSON，否则输出带上下文的文本

    重复调用会先清理已有 handlers，避免日志重复输出。
    """
    reset_logging()
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if json_output else TextFormatter())
    root.addHandler(handler)


def setup_logging_from_env(default_level: str = "INFO") -> None:
    """按环境变量配置日志，未设置时使用配置文件中的级别"""
    setup_logging(
        level=os.getenv(ENV_LOG_LEVEL) or default_level,
        json_output=os.getenv(ENV_LOG_JSON, "") == "1",
    )


def reset_logging() -> None:
    """移除根日志器上的所有 handlers"""
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
