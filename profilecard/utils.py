# -*- coding: utf-8 -*-
from __future__ import annotations
import logging
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def ensure_data_dir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)


def setup_logging(logs_dir: Path, level: int = logging.INFO) -> None:
    ensure_data_dir(logs_dir)
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            logging.FileHandler(logs_dir / "app.log", encoding="utf-8"),
            logging.StreamHandler()
        ]
    )
