import logging
from pathlib import Path

from tenantlic.common.config import Config


def test_config_defaults(monkeypatch) -> None:
    for name in (
        "TENANTLIC_SERVER_HOST",
        "TENANTLIC_SERVER_PORT",
        "TENANTLIC_ADMIN_PASSWORD",
        "TENANTLIC_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    config = Config()
    assert config.SERVER_HOST == "127.0.0.1"
    assert config.SERVER_PORT == 8000  # noqa: PLR2004
    assert config.SERVER_URL == "http://127.0.0.1:8000"
    assert config.ADMIN_PASSWORD is None
    assert config.LOG_LEVEL == logging.INFO
    assert config.DEFAULT_LICENSE_MONTHS == 6  # noqa: PLR2004


def test_config_reads_environment(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TENANTLIC_SERVER_HOST", "0.0.0.0")
    monkeypatch.setenv("TENANTLIC_SERVER_PORT", "9001")
    monkeypatch.setenv("TENANTLIC_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TENANTLIC_LOG_LEVEL", "debug")
    config = Config()
    assert config.SERVER_URL == "http://0.0.0.0:9001"
    assert config.LICENSE_STORE_PATH == tmp_path / "licenses.json"
    assert config.LOG_LEVEL == logging.DEBUG


def test_config_unknown_log_level_falls_back(monkeypatch) -> None:
    monkeypatch.setenv("TENANTLIC_LOG_LEVEL", "chatty")
    assert Config().LOG_LEVEL == logging.INFO


def test_config_has_no_unused_length_limits() -> None:
    config = Config()
    assert not hasattr(config, "NAME_MAX_LENGTH")
    assert not hasattr(config, "DESCRIPTION_MAX_LENGTH")
