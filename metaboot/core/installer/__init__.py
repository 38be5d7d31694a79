"""安装器执行模块

- models.py: 安装器写法与状态
- executor.py: 依赖解析与执行
"""

from metaboot.core.installer.executor import InstallerExecutor
from metaboot.core.installer.models import BaseInstaller, FunctionInstaller, UnitState

__all__ = [
    "BaseInstaller",
    "FunctionInstaller",
    "InstallerExecutor",
    "UnitState",
]
