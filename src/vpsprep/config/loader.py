# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/vpsprep/config/loader.py

import logging
import os
from pathlib import Path
from typing import List, Optional, Tuple

import yaml

from .models import DeployConfig

log = logging.getLogger("vpsprep")


def _deep_merge(base: dict, override: dict) -> dict:
    """
    Recursively merge *override* into *base* (mutates base).
    Only overwrites when the override value is non-empty.
    """
    for key, value in override.items():
        if (
            key in base
            and isinstance(base[key], dict)
            and isinstance(value, dict)
        ):
            _deep_merge(base[key], value)
        else:
            if value not in (None, ""):
                base[key] = value
    return base


def _destination_file(config_path: Path, destination: str) -> Path:
    """config/deploy.yml + 'staging' -> config/deploy.staging.yml"""
    return config_path.with_name(f"{config_path.stem}.{destination}{config_path.suffix}")


def _load_yaml(path: Path) -> dict:
    """Load a YAML file, expanding ${ENV_VAR} references."""
    raw = path.read_text()
    expanded = os.path.expandvars(raw)
    return yaml.safe_load(expanded) or {}


def load_config(path: str | Path, destination: Optional[str] = None) -> DeployConfig:
    """
    Load and validate a deploy descriptor.

    When *destination* is given, ``deploy.<destination>.yml`` next to the
    base file is deep-merged over it before validation, the same way Kamal
    layers destination files. A missing destination file is an error.
    """
    path = Path(path)
    data = _load_yaml(path)

    if destination:
        overlay = _destination_file(path, destination)
        if not overlay.is_file():
            raise FileNotFoundError(f"Destination config not found: {overlay}")
        log.debug("Merging destination config %s", overlay)
        _deep_merge(data, _load_yaml(overlay))

    return DeployConfig.model_validate(data)


def target_hosts(cfg: DeployConfig) -> List[str]:
    """
    Role hosts then accessory hosts, duplicates dropped, first-seen order kept.
    """
    return list(dict.fromkeys(cfg.role_hosts() + cfg.accessory_hosts()))


def read_targets(path: str | Path, destination: Optional[str] = None) -> Tuple[List[str], str]:
    """Return ``(hosts, user)`` for a descriptor."""
    cfg = load_config(path, destination)
    hosts = target_hosts(cfg)
    log.debug("Resolved %d target host(s): %s", len(hosts), ", ".join(hosts))
    return hosts, cfg.ssh.user
