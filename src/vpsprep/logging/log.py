# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

#src/vpsprep/logging/log.py

from __future__ import annotations

import logging
import os
import uuid
from datetime import datetime, timezone
from pathlib import Path

LOG_DIR_ENV = "VPSPREP_LOG_DIR"

FORMAT = "%(asctime)s | %(levelname)-7s | %(message)s"
DATEFMT = "%Y-%m-%d %H:%M:%S"


def default_log_dir() -> Path:
    """$VPSPREP_LOG_DIR, else ~/.vpsprep/logs"""
    env = os.environ.get(LOG_DIR_ENV)
    if env:
        return Path(env).expanduser()
    return Path.home() / ".vpsprep" / "logs"


def init_logging(
    *,
    log_dir: Path | None = None,
    verbose: bool = False,
) -> tuple[logging.Logger, str, Path]:
    """
    Route the ``vpsprep`` logger to a per-run file and the console.

    The file always gets DEBUG: OS probe answers and the exit code of every
    block, which the console does not show unless *verbose*. Raw command
    output is echoed by the provisioner and is not duplicated here.
    """
    run_id = str(uuid.uuid4())
    log_dir = log_dir or default_log_dir()
    log_dir.mkdir(parents=True, exist_ok=True)

    ts = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
    log_path = log_dir / f"provision-{ts}-{run_id[:8]}.log"

    logger = logging.getLogger("vpsprep")
    logger.setLevel(logging.DEBUG)
    for h in list(logger.handlers):
        h.close()
        logger.removeHandler(h)
    logger.propagate = False

    formatter = logging.Formatter(FORMAT, datefmt=DATEFMT)
    for handler, level in (
        (logging.FileHandler(log_path), logging.DEBUG),
        (logging.StreamHandler(), logging.DEBUG if verbose else logging.INFO),
    ):
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug("run_id=%s log_file=%s", run_id, log_path)
    return logger, run_id, log_path
