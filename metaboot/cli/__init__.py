"""metaboot 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
"""

import click

from metaboot import __version__
from metaboot.core.config import init_config
from metaboot.core.exceptions import MetabootError
from metaboot.utils.logger import setup_logging_from_env


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", "config_path", default="configs/default.yml", help="配置文件路径")
@click.pass_context
def main(ctx: click.Context, config_path: str) -> None:
    """metaboot - 元数据引导引擎"""
    try:
        cfg = init_config(config_path)
    except MetabootError as e:
        raise click.ClickException(f"[{e.code}] {e}") from e
    setup_logging_from_env(cfg.log_level)
    ctx.obj = cfg


# 注册各领域子命令
from metaboot.cli.cmd_metadata import register as _reg_metadata  # noqa: E402
from metaboot.cli.cmd_installers import register as _reg_installers  # noqa: E402

_reg_metadata(main)
_reg_installers(main)
