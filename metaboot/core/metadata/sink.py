"""镜像导入端

把 zip 格式的元数据包镜像到 target_dir/<group_key>/：
  1. 读入并校验包内所有成员路径（拒绝绝对路径与 ..）
  2. 解压到同级临时目录
  3. 删除旧目录，rename 临时目录到位

导入后目录内容与包内容完全一致，旧版本遗留的文件不会保留。
"""

from __future__ import annotations

import hashlib
import io
import logging
import re
import shutil
import tempfile
import zipfile
from pathlib import Path, PurePosixPath
from typing import BinaryIO

logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^a-zA-Z0-9_.\-]")


def _safe_dir_name(group_key: str) -> str:
    """group_key -> 目录名，一一对应

    已经安全的 key 原样使用；需要改写的 key 追加原始 key 的哈希，
    分隔符 "~" 不在安全字符集内，因此不会与任何原样使用的 key 重名。
    """
    name = _UNSAFE_KEY_CHARS.sub("_", group_key).strip(".")
    if name == group_key:
        return name
    digest = hashlib.sha256(group_key.encode("utf-8")).hexdigest()[:12]
    return f"{name or '_'}~{digest}"


def _check_members(archive: zipfile.ZipFile) -> None:
    for member in archive.namelist():
        p = PurePosixPath(member)
        if p.is_absolute() or ".." in p.parts:
            raise ValueError(f"包内路径不合法: {member}")


class DirectoryMirrorSink:
    """以目录镜像方式导入元数据包"""

    def __init__(self, target_dir: str | Path) -> None:
        self.target_dir = Path(target_dir)

    def package_dir(self, group_key: str) -> Path:
        return self.target_dir / _safe_dir_name(group_key)

    def import_mirror(self, stream: BinaryIO, *, group_key: str) -> None:
        dest = self.package_dir(group_key)
        payload = io.BytesIO(stream.read())

        with zipfile.ZipFile(payload) as archive:
            _check_members(archive)
            self.target_dir.mkdir(parents=True, exist_ok=True)
            staging = Path(tempfile.mkdtemp(dir=str(self.target_dir), suffix=".staging"))
            try:
                archive.extractall(staging)
            except Exception:
                shutil.rmtree(staging, ignore_errors=True)
                raise

        if dest.exists():
            shutil.rmtree(dest)
        staging.rename(dest)
        logger.info("镜像导入完成: %s", dest, extra={"group_key": group_key})
