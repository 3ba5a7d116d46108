# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/vpsprep/utils/ssh.py

from __future__ import annotations

import logging

import paramiko

from vpsprep.provision.models import Host
from vpsprep.utils.ssh_runner import SSHRunner

log = logging.getLogger("vpsprep")


class SSHKeyError(RuntimeError):
    pass


def load_private_key(path) -> paramiko.PKey:
    for key_cls in (
        paramiko.Ed25519Key,
        paramiko.RSAKey,
        paramiko.ECDSAKey,
    ):
        try:
            return key_cls.from_private_key_file(str(path))
        except paramiko.PasswordRequiredException as e:
            raise SSHKeyError(
                f"Private key {path} is encrypted; load it into ssh-agent and omit --ssh-key"
            ) from e
        except paramiko.SSHException:
            continue
    raise SSHKeyError(f"Unsupported private key format for {path}")


def open_ssh(
    host: Host,
    *,
    connect_timeout: float = 30.0,
) -> SSHRunner:
    """
    Open a key-authenticated session. Without an explicit key file the
    agent and the default ~/.ssh keys are tried; passwords never are.
    """
    client = paramiko.SSHClient()
    client.set_missing_host_key_policy(paramiko.AutoAddPolicy())

    pkey = load_private_key(host.pkey_path) if host.pkey_path else None

    log.debug("Connecting to %s@%s:%d", host.username, host.address, host.port)
    client.connect(
        hostname=host.address,
        port=host.port,
        username=host.username,
        pkey=pkey,
        password=None,
        look_for_keys=pkey is None,
        allow_agent=pkey is None,
        timeout=connect_timeout,
    )

    return SSHRunner(client)
