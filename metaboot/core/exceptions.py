"""统一异常体系

所有引导异常继承 MetabootError，调用方可统一捕获并视为启动失败。
Web 层可据此输出 code，CLI 层可据此输出友好提示。

没有任何异常会被自动重试：同样的输入必然再次失败。
"""

from __future__ import annotations

from collections.abc import Sequence


class MetabootError(Exception):
    """引导基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(MetabootError):
    """配置文件或清单缺失、内容无效"""

    code = "CONFIG_ERROR"


# =========================================================================
# 元数据包加载
# =========================================================================


class MalformedResourceNameError(MetabootError):
    """资源名不符合 <名称>-<版本>.zip 格式"""

    code = "MALFORMED_RESOURCE_NAME"

    def __init__(self, resource_name: str) -> None:
        super().__init__(
            f"资源名必须形如 PackageNameWithNoSpaces-X.zip: {resource_name!r}"
        )
        self.resource_name = resource_name


class ResourceNotFoundError(MetabootError):
    """解析器命名空间内找不到资源"""

    code = "RESOURCE_NOT_FOUND"

    def __init__(self, resource_name: str, group_key: str) -> None:
        super().__init__(f"找不到包 {resource_name} (group={group_key})")
        self.resource_name = resource_name
        self.group_key = group_key


class ImportFailureError(MetabootError):
    """导入端拒绝了包内容"""

    code = "IMPORT_FAILURE"

    def __init__(self, resource_name: str, cause: BaseException) -> None:
        super().__init__(f"元数据包导入失败: {resource_name} ({cause})")
        self.resource_name = resource_name
        self.cause = cause


# =========================================================================
# 安装器执行
# =========================================================================


class DuplicateIdError(MetabootError):
    """两个安装器使用了相同 id"""

    code = "DUPLICATE_ID"

    def __init__(self, unit_id: str) -> None:
        super().__init__(f"安装器 id 重复: {unit_id}")
        self.unit_id = unit_id


class MissingDependencyError(MetabootError):
    """依赖的安装器不存在"""

    code = "MISSING_DEPENDENCY"

    def __init__(self, required_id: str, requesting_id: str) -> None:
        super().__init__(
            f"找不到安装器 {requesting_id} 所依赖的 {required_id}"
        )
        self.required_id = required_id
        self.requesting_id = requesting_id


class CyclicDependencyError(MetabootError):
    """安装器依赖成环"""

    code = "CYCLIC_DEPENDENCY"

    def __init__(self, path: Sequence[str]) -> None:
        self.path = list(path)
        super().__init__(f"安装器循环依赖: {' -> '.join(self.path)}")


class InstallerFailureError(MetabootError):
    """单个安装器的 install() 抛出异常"""

    code = "INSTALLER_FAILURE"

    def __init__(self, unit_id: str, cause: BaseException) -> None:
        super().__init__(f"安装器 {unit_id} 执行失败: {cause}")
        self.unit_id = unit_id
        self.cause = cause


class RefreshError(MetabootError):
    """刷新过程中某个模块的元数据包加载失败"""

    code = "REFRESH_ERROR"

    def __init__(self, module_id: str, cause: BaseException) -> None:
        super().__init__(f"加载模块 {module_id} 的元数据包时出错: {cause}")
        self.module_id = module_id
        self.cause = cause
