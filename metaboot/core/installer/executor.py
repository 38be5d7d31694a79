"""安装器执行器

按依赖顺序执行一组安装器，每个 install() 每次运行至多执行一次。

执行分两步：
  1. plan(): 建立 id 索引，深度优先遍历依赖图得到执行顺序。
     重复 id、缺失依赖、循环依赖都在这一步抛出，此时还没有任何 install() 运行。
  2. run():  按顺序逐个 install()，每完成一个就 commit 一次。
     某个安装器失败时立即中止，已完成的安装器不回滚。

顺序规则：按输入顺序遍历，每个安装器先按声明顺序满足其依赖，再执行自身。
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING

from metaboot.core.exceptions import (
    CyclicDependencyError,
    DuplicateIdError,
    InstallerFailureError,
    MissingDependencyError,
)
from metaboot.core.installer.models import UnitState

if TYPE_CHECKING:
    from metaboot.core.protocols import Committer, InstallerUnit

logger = logging.getLogger(__name__)

_EXHAUSTED = object()


def _noop_commit() -> None:
    pass


class InstallerExecutor:
    """依赖感知的安装器执行器"""

    def __init__(self, commit: Committer | None = None) -> None:
        self._commit = commit or _noop_commit
        self.states: dict[str, UnitState] = {}
        self.completed: list[str] = []

    @staticmethod
    def _index(units: Sequence[InstallerUnit]) -> dict[str, InstallerUnit]:
        index: dict[str, InstallerUnit] = {}
        for unit in units:
            if unit.id in index:
                raise DuplicateIdError(unit.id)
            index[unit.id] = unit
        return index

    def plan(self, units: Sequence[InstallerUnit]) -> list[str]:
        """计算执行顺序，不执行任何 install()"""
        index = self._index(units)
        self.states = {uid: UnitState.PENDING for uid in index}
        order: list[str] = []
        done: set[str] = set()

        for root in units:
            if root.id in done:
                continue

            # 显式栈代替递归：(安装器, 尚未处理的依赖迭代器)
            stack: list[tuple[InstallerUnit, Iterator[str]]] = [(root, iter(root.requires))]
            path: list[str] = [root.id]

            while stack:
                current, pending = stack[-1]
                required_id = next(pending, _EXHAUSTED)

                if required_id is _EXHAUSTED:
                    stack.pop()
                    path.pop()
                    done.add(current.id)
                    order.append(current.id)
                    continue

                if required_id in done:
                    continue

                required = index.get(required_id)
                if required is None:
                    raise MissingDependencyError(required_id, current.id)

                if required_id in path:
                    cycle = path[path.index(required_id):] + [required_id]
                    for uid in cycle:
                        self.states[uid] = UnitState.FAILED
                    raise CyclicDependencyError(cycle)

                stack.append((required, iter(required.requires)))
                path.append(required_id)

        return order

    def run(self, units: Sequence[InstallerUnit]) -> list[str]:
        """按依赖顺序执行全部安装器，返回已完成的 id 列表"""
        self.completed = []
        order = self.plan(units)
        index = {unit.id: unit for unit in units}
        logger.info("安装器执行顺序: %s", ", ".join(order) or "(无)")

        for unit_id in order:
            unit = index[unit_id]
            self.states[unit_id] = UnitState.IN_PROGRESS
            logger.info("执行安装器: %s", unit_id, extra={"unit_id": unit_id})
            try:
                unit.install()
            except Exception as exc:
                self.states[unit_id] = UnitState.FAILED
                logger.error("安装器 %s 失败: %s", unit_id, exc, extra={"unit_id": unit_id})
                raise InstallerFailureError(unit_id, exc) from exc

            self.states[unit_id] = UnitState.COMPLETED
            self.completed.append(unit_id)
            self._commit()

        logger.info("安装器全部完成: %d 个", len(self.completed))
        return list(self.completed)
