"""配置与异常体系测试"""

from __future__ import annotations

from pathlib import Path

import pytest

import metaboot.core.config as cfgmod
from metaboot.core.config import Config, get_config, init_config
from metaboot.core.exceptions import (
    ConfigError,
    CyclicDependencyError,
    ImportFailureError,
    MetabootError,
    RefreshError,
)


@pytest.fixture(autouse=True)
def _reset_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cfgmod, "_current", None)


class TestConfig:
    def test_defaults_when_file_missing(self, tmp_path: Path) -> None:
        cfg = Config.from_file(str(tmp_path / "none.yml"))
        assert cfg.manifest == "configs/metadata.yml"
        assert cfg.record_file == "data/imported_packages.yml"

    def test_known_and_extra_keys(self, tmp_path: Path) -> None:
        path = tmp_path / "default.yml"
        path.write_text("record_file: /var/lib/records.yml\nteam: emr\n", encoding="utf-8")

        cfg = Config.from_file(str(path))

        assert cfg.record_file == "/var/lib/records.yml"
        assert cfg.extra == {"team": "emr"}
        assert cfg.to_dict()["record_file"] == "/var/lib/records.yml"

    def test_global_singleton(self, tmp_path: Path) -> None:
        assert get_config() is get_config()
        path = tmp_path / "c.yml"
        path.write_text("log_level: DEBUG\n", encoding="utf-8")
        cfg = init_config(str(path))
        assert get_config() is cfg
        assert cfg.log_level == "DEBUG"

    def test_broken_yaml_raises_config_error(self, tmp_path: Path) -> None:
        path = tmp_path / "default.yml"
        path.write_text("manifest: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="配置文件无效"):
            Config.from_file(str(path))


class TestExceptions:
    def test_all_share_base(self) -> None:
        err = CyclicDependencyError(["a", "b", "a"])
        assert isinstance(err, MetabootError)
        assert err.code == "CYCLIC_DEPENDENCY"

    def test_wrappers_keep_cause(self) -> None:
        cause = OSError("disk")
        assert ImportFailureError("x-1.zip", cause).cause is cause
        err = RefreshError("kenyaemr", cause)
        assert err.module_id == "kenyaemr"
        assert "kenyaemr" in str(err)
