from __future__ import annotations

import json
import logging
from pathlib import Path

from soulstone.presentation.cli import config as cli_config


def test_load_config_defaults_when_missing(tmp_path: Path) -> None:
    config = cli_config.load_config(tmp_path / "missing.json")

    assert config == {"log_level": "WARNING", "content_path": ""}


def test_load_config_defaults_on_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("[not json", encoding="utf-8")

    assert cli_config.load_config(path)["log_level"] == "WARNING"


def test_save_and_load_round_trip_normalizes(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "config.json"

    cli_config.save_config({"log_level": "debug", "content_path": "/srv/content"}, path)

    assert json.loads(path.read_text(encoding="utf-8"))["log_level"] == "DEBUG"
    assert cli_config.load_config(path) == {"log_level": "DEBUG", "content_path": "/srv/content"}


def test_unknown_log_level_falls_back(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"log_level": "LOUD", "content_path": 5}), encoding="utf-8")

    assert cli_config.load_config(path) == {"log_level": "WARNING", "content_path": ""}


def test_debug_env_forces_debug_level(monkeypatch) -> None:
    monkeypatch.setenv("SOULSTONE_DEBUG", "1")
    assert cli_config.resolve_log_level({"log_level": "ERROR"}) == logging.DEBUG

    monkeypatch.delenv("SOULSTONE_DEBUG")
    assert cli_config.resolve_log_level({"log_level": "ERROR"}) == logging.ERROR


def test_user_data_dir_on_posix(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(cli_config.os, "name", "posix")
    monkeypatch.setattr(cli_config.Path, "home", classmethod(lambda cls: tmp_path))

    assert cli_config.get_default_config_path() == tmp_path / ".config" / "soulstone" / "config.json"


def test_configure_logging_writes_to_file(tmp_path: Path) -> None:
    log_path = tmp_path / "logs" / "soulstone.log"
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level
    try:
        cli_config.configure_logging({"log_level": "INFO", "content_path": ""}, log_path)
        logging.getLogger("soulstone.test").info("hello log")
        for handler in root.handlers:
            handler.flush()
        assert "hello log" in log_path.read_text(encoding="utf-8")
    finally:
        for handler in root.handlers[:]:
            root.removeHandler(handler)
            handler.close()
        for handler in saved_handlers:
            root.addHandler(handler)
        root.setLevel(saved_level)
