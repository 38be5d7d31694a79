"""安装器数据模型

两种写法都满足 InstallerUnit 协议：

    class CommonMetadata(BaseInstaller):
        id = "common.metadata"
        requires = ("base.metadata",)

        def install(self) -> None:
            ...

    FunctionInstaller("common.metadata", install_common, requires=("base.metadata",))
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum


class UnitState(str, Enum):
    """单个安装器在一次执行中的状态"""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


class BaseInstaller(ABC):
    """类形式的安装器，id 与依赖在类上声明"""

    id: str = ""
    requires: tuple[str, ...] = ()

    @abstractmethod
    def install(self) -> None:
        ...

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} id={self.id!r}>"


@dataclass
class FunctionInstaller:
    """包装普通函数的安装器"""

    id: str
    action: Callable[[], None]
    requires: tuple[str, ...] = field(default_factory=tuple)

    def install(self) -> None:
        self.action()
