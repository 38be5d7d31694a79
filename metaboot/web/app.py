"""轻量级 Web 接口（基于 Flask）

提供：已导入元数据包查询、安装器执行顺序预览、手动触发刷新。

    app = create_app(MetadataManager.from_config(get_config()))
    app.run(port=8888)
"""

from __future__ import annotations

import logging

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from metaboot.core.exceptions import MetabootError
from metaboot.core.manager import MetadataManager

logger = logging.getLogger(__name__)


def create_app(manager: MetadataManager) -> Flask:
    app = Flask(__name__)

    @app.errorhandler(HTTPException)
    def handle_http_exception(exc):
        """HTTP 异常统一返回 JSON"""
        return jsonify(error=exc.description), exc.code

    @app.errorhandler(MetabootError)
    def handle_metaboot_error(exc):
        logger.error("引导失败: %s", exc)
        return jsonify(error=str(exc), code=exc.code), 500

    @app.route("/api/packages")
    def api_packages():
        """查询已导入的元数据包"""
        records = sorted(manager.get_imported_packages(), key=lambda r: r.group_key)
        return jsonify(packages=[r.to_dict() for r in records])

    @app.route("/api/installers/plan")
    def api_installer_plan():
        return jsonify(order=manager.installer_plan())

    @app.route("/api/refresh", methods=["POST"])
    def api_refresh():
        """同步执行一次刷新；并发请求会排队"""
        logger.info("手动触发刷新")
        changed = manager.refresh()
        return jsonify(message="刷新完成", changed=changed)

    return app


def run_server(port: int = 8888) -> None:
    from metaboot.core.config import get_config
    app = create_app(MetadataManager.from_config(get_config()))
    logger.info("Web 接口启动: http://127.0.0.1:%d", port)
    app.run(host="127.0.0.1", port=port)
