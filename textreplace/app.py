from __future__ import annotations

import logging
from pathlib import Path

from textreplace.core.app_logging import configure_logging
from textreplace.core.config import AppConfig, ConfigStore
from textreplace.core.engine import ReplacementEngine
from textreplace.core.storage import ReplacementStore
from textreplace.core.table import ReplacementTable


def build_table(config: AppConfig) -> ReplacementTable:
    store = ReplacementStore(
        Path(config.table_path),
        track_counters=config.counter_enabled,
    )
    if config.seed_default_table and config.default_table_path:
        store.seed_from(Path(config.default_table_path))
    table = ReplacementTable(store, sort_by_usage=config.sort_by_usage)
    table.reload()
    return table


def build_engine(
    config_store: ConfigStore | None = None,
    log_file: Path | None = None,
) -> ReplacementEngine:
    config = (config_store or ConfigStore.default()).load()
    target = configure_logging(log_file, level=config.log_level)
    logger = logging.getLogger("textreplace.app")
    logger.info("Text replacement engine starting. Log file: %s", target)
    table = build_table(config)
    logger.info("Replacement table ready. rules=%s", len(table.index))
    return ReplacementEngine(table)
