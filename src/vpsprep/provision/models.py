# src/vpsprep/provision/models.py

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from .commands import OSFamily


@dataclass
class Host:
    """
    Represents a server you will SSH into.
    """
    address: str                  # IP or DNS to connect
    username: str = "root"
    port: int = 22
    pkey_path: Optional[Path] = None


@dataclass(frozen=True)
class ProvisionReport:
    """
    Outcome of a completed run: detected family per host, in the order
    the hosts were provisioned.
    """
    user: str
    families: Dict[str, OSFamily] = field(default_factory=dict)

    @property
    def hosts(self) -> List[str]:
        return list(self.families)

    @property
    def reminder(self) -> str:
        return reminder_command(self.user, self.hosts)


def reminder_command(user: str, hosts: List[str]) -> str:
    if not hosts:
        raise ValueError("no hosts to log in to")
    return f"ssh {user}@{hosts[0]}"
