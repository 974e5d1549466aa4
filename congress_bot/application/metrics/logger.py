from __future__ import annotations

import logging
import os
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path


class ResilientTimedRotatingFileHandler(TimedRotatingFileHandler):
    """
    Пересоздаёт файл лога, если его удалили снаружи, пока бот работает.
    """

    def emit(self, record):
        if self.stream and not Path(self.baseFilename).exists():
            try:
                self.stream.close()
            except OSError:
                pass
            self.stream = self._open()
        super().emit(record)


def configure_metrics_logger(
    path: str,
    *,
    when: str = "midnight",
    backups: int = 14,
    logger_name: str = "metrics.actions",
) -> logging.Logger:
    """
    JSON-строки метрик в отдельный файл с ротацией раз в сутки.
    Повторный вызов с тем же путём ничего не меняет.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(logger_name)
    logger.setLevel(logging.INFO)
    logger.propagate = False

    existing = [getattr(handler, "baseFilename", None) for handler in logger.handlers]
    if existing and all(name == os.path.abspath(target) for name in existing):
        return logger
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    handler = ResilientTimedRotatingFileHandler(
        filename=target,
        when=when,
        backupCount=backups,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger
