# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/vpsprep/provision/provisioner.py

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import typer

from vpsprep.utils.ssh import open_ssh

from . import commands
from .commands import CommandBlock, OSFamily
from .detect import detect_os_family
from .models import Host, ProvisionReport

log = logging.getLogger("vpsprep")

# (progress label, block) in execution order
STEPS: Tuple[Tuple[str, CommandBlock], ...] = (
    ("Installing essentials", commands.ESSENTIALS),
    ("Adding swap", commands.SWAP),
    ("Preparing /storage", commands.STORAGE),
    ("Adding user", commands.ADD_USER),
    ("Installing fail2ban", commands.FAIL2BAN),
    ("Configuring firewall", commands.FIREWALL),
    ("Configuring unattended upgrades", commands.UNATTENDED_UPGRADES),
    ("Disabling root login", commands.DISABLE_ROOT),
)


class Provisioner:
    """
    Prepares fresh servers for container deploys:
      - essentials      (docker, curl, update tooling)
      - swap            (2G /swapfile, swappiness 20)
      - storage         (/storage owned by uid 1000)
      - user            (deploy user, authorized_keys, sudoers, docker group)
      - fail2ban
      - firewall        (ufw 22/80/443)
      - unattended upgrades
      - disable root    (no root or password logins over SSH)

    Hosts are done one after another over a single root session each.
    Remote exit codes are logged but never stop the sequence; connection
    errors propagate and abort the remaining hosts.
    """

    def __init__(
        self,
        pkey_path: Optional[Path] = None,
        port: int = 22,
        connect: Callable = open_ssh,
        echo: Callable[[str], None] = typer.echo,
    ):
        self.pkey_path = pkey_path
        self.port = port
        self._connect = connect
        self.echo = echo

    def _run_block(self, runner, host: str, block: CommandBlock, family: OSFamily, user: str) -> None:
        script = commands.render(block, family, user)
        rc, output = runner.run(script)
        log.debug("[%s] %s exited with %d", host, block.name, rc)
        if output.strip():
            self.echo(output.rstrip("\n"))

    def provision_host(self, address: str, user: str) -> OSFamily:
        h = self._connect(Host(address=address, port=self.port, pkey_path=self.pkey_path))
        try:
            family = detect_os_family(h)
            log.info("[%s] Detected %s family", address, family.value)
            for label, block in STEPS:
                log.info("[%s] %s...", address, label)
                self._run_block(h, address, block, family, user)
            log.info("[%s] Provisioning complete", address)
            return family
        finally:
            h.close()

    def provision(self, hosts: List[str], user: str) -> ProvisionReport:
        """
        Connect to each host and run every step.
        """
        if not hosts:
            raise ValueError("no hosts to provision")
        families = {}
        for i, address in enumerate(hosts, 1):
            log.info("[hosts] Provisioning %s (%d/%d)...", address, i, len(hosts))
            families[address] = self.provision_host(address, user)
        return ProvisionReport(user=user, families=families)
