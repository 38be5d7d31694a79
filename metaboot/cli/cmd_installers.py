"""CLI: 安装器命令"""

from __future__ import annotations

import click

from metaboot.core.config import Config
from metaboot.core.exceptions import MetabootError
from metaboot.core.installer.executor import InstallerExecutor
from metaboot.core.metadata.manifest import load_installers, load_manifest


def register(group: click.Group) -> None:
    group.add_command(plan)


@click.command()
@click.pass_obj
def plan(cfg: Config) -> None:
    """输出安装器执行顺序（不执行）"""
    try:
        manifest = load_manifest(cfg.manifest)
        order = InstallerExecutor().plan(load_installers(manifest.installers))
    except MetabootError as e:
        raise click.ClickException(f"[{e.code}] {e}") from e
    if not order:
        click.echo("没有已注册的安装器。")
        return
    for i, unit_id in enumerate(order, 1):
        click.echo(f"  {i:3d}. {unit_id}")
