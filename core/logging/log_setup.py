"""
core/logging/log_setup.py

Root logger configuration for the application. Modules only ever call
``logging.getLogger(__name__)``; handlers and levels are attached here once.
"""

from __future__ import annotations

import logging
from typing import Optional

from core.config.config_service import ConfigService, config_service

_HANDLER_NAME = "signplace-console"


def configure_logging(config: Optional[ConfigService] = None, *, level: Optional[str] = None) -> logging.Logger:
    """Attach a console handler to the root logger (idempotent)."""
    cfg = config or config_service
    root = logging.getLogger()

    lvl_name = (level or cfg.logging.level or "INFO").upper()
    lvl = logging.getLevelName(lvl_name)
    if not isinstance(lvl, int):
        lvl = logging.INFO
    root.setLevel(lvl)

    handler = next((h for h in root.handlers if h.get_name() == _HANDLER_NAME), None)
    if handler is None:
        handler = logging.StreamHandler()
        handler.set_name(_HANDLER_NAME)
        root.addHandler(handler)
    handler.setFormatter(logging.Formatter(cfg.logging.format))
    return root
