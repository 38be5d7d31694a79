"""CLI: 元数据包与刷新命令"""

from __future__ import annotations

from datetime import datetime

import click

from metaboot.core.config import Config
from metaboot.core.exceptions import MalformedResourceNameError, MetabootError
from metaboot.core.manager import MetadataManager
from metaboot.core.metadata.models import parse_version
from metaboot.core.metadata.store import YamlRecordStore


def register(group: click.Group) -> None:
    group.add_command(refresh)
    group.add_command(list_packages)
    group.add_command(check_name)
    group.add_command(dashboard)


@click.command()
@click.pass_obj
def refresh(cfg: Config) -> None:
    """执行一次完整刷新：加载元数据包，然后运行安装器"""
    try:
        manager = MetadataManager.from_config(cfg)
        changed = manager.refresh()
    except MetabootError as e:
        raise click.ClickException(f"[{e.code}] {e}") from e
    click.echo("刷新完成" + ("（元数据有变更）" if changed else "（元数据无变更）"))


@click.command(name="packages")
@click.pass_obj
def list_packages(cfg: Config) -> None:
    """列出已导入的元数据包"""
    try:
        records = YamlRecordStore(cfg.record_file).list_all()
    except MetabootError as e:
        raise click.ClickException(f"[{e.code}] {e}") from e
    if not records:
        click.echo("尚未导入任何元数据包。")
        return
    for r in sorted(records, key=lambda r: r.group_key):
        when = datetime.fromtimestamp(r.imported_at).strftime("%Y-%m-%d %H:%M:%S") if r.imported_at else "-"
        click.echo(f"  {r.group_key:40s} v{r.version:<6d} {r.resource_name:30s} {when}")


@click.command(name="check-name")
@click.argument("resource_name")
def check_name(resource_name: str) -> None:
    """校验资源名并输出解析出的版本号"""
    try:
        version = parse_version(resource_name)
    except MalformedResourceNameError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"{resource_name}: 版本 {version}")


@click.command()
@click.option("--port", default=8888, help="监听端口")
def dashboard(port: int) -> None:
    """启动轻量级 Web 接口"""
    from metaboot.web.app import run_server
    run_server(port=port)
