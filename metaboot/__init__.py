"""metaboot - 元数据引导引擎

启动时完成两件事：按版本幂等导入元数据包、按依赖顺序执行安装器。
"""

__version__ = "0.1.0"
