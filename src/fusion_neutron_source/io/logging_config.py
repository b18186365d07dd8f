# ──────────────────────────────────────────────────────────────────────
# Fusion Neutron Source — Structured Logging Configuration
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ──────────────────────────────────────────────────────────────────────
from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

ROOT_LOGGER = "fusion_neutron_source"


class SourceJSONFormatter(logging.Formatter):
    """
    Encodes log records as one JSON object per line.

    A ``physics_context`` mapping passed through ``extra`` is copied into
    the payload.
    """
    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "line": record.lineno,
            "message": record.getMessage(),
        }
        if hasattr(record, "physics_context"):
            log_data["physics_context"] = record.physics_context
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, default=str)


def setup_source_logging(
    level: int = logging.INFO,
    json_output: bool = True,
    log_file: str | None = None,
) -> logging.Logger:
    """Install console (and optional file) handlers on the package logger."""
    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    def _formatter() -> logging.Formatter:
        if json_output:
            return SourceJSONFormatter()
        return logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(_formatter())
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(_formatter())
        root_logger.addHandler(file_handler)

    root_logger.debug("Logging initialized", extra={"physics_context": {"json": json_output}})
    return root_logger
