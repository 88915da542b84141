from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path

from textreplace.core.runtime_paths import default_table_asset


APP_DIR_NAME = "TextReplace"
TABLE_FILE_NAME = "text_replacements.csv"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _default_app_dir() -> Path:
    appdata = os.getenv("APPDATA")
    if appdata:
        return Path(appdata) / APP_DIR_NAME
    return Path.home() / f".{APP_DIR_NAME.lower()}"


def _default_table_path() -> Path:
    return _default_app_dir() / TABLE_FILE_NAME


def _default_export_dir() -> Path:
    return Path.home() / "Downloads"


@dataclass
class AppConfig:
    table_path: str = ""
    default_table_path: str = ""
    export_dir: str = ""
    counter_enabled: bool = True
    sort_by_usage: bool = True
    seed_default_table: bool = True
    log_level: str = "INFO"

    @classmethod
    def defaults(cls) -> "AppConfig":
        cfg = cls()
        cfg.table_path = str(_default_table_path())
        cfg.default_table_path = str(default_table_asset())
        cfg.export_dir = str(_default_export_dir())
        return cfg


class ConfigStore:
    def __init__(self, path: Path):
        self.path = path
        self.logger = logging.getLogger("textreplace.config")

    @classmethod
    def default(cls) -> "ConfigStore":
        return cls(_default_app_dir() / "config.json")

    def load(self) -> AppConfig:
        if not self.path.exists():
            cfg = AppConfig.defaults()
            self.save(cfg)
            return cfg

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            self.logger.warning("Config unreadable, using defaults: %s", exc)
            return AppConfig.defaults()

        cfg = AppConfig.defaults()
        should_save = False
        for key, value in raw.items():
            if hasattr(cfg, key):
                setattr(cfg, key, value)
        if not cfg.table_path:
            cfg.table_path = str(_default_table_path())
            should_save = True
        if not cfg.default_table_path:
            cfg.default_table_path = str(default_table_asset())
            should_save = True
        if not cfg.export_dir:
            cfg.export_dir = str(_default_export_dir())
            should_save = True
        level = str(cfg.log_level).upper()
        if level not in LOG_LEVELS:
            level = "INFO"
        if level != cfg.log_level:
            cfg.log_level = level
            should_save = True
        if should_save:
            self.save(cfg)
        return cfg

    def save(self, config: AppConfig) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(asdict(config), indent=2, ensure_ascii=True),
            encoding="utf-8",
        )
