# src/vpsprep/utils/ssh_runner.py

from __future__ import annotations

from typing import Optional

import paramiko

from vpsprep.provision.detect import OS_PROBE


class SSHRunner:
    def __init__(self, client: paramiko.SSHClient):
        self.client = client

    def run(
        self,
        cmd: str,
        *,
        timeout: Optional[int] = None,
    ) -> tuple[int, str]:
        """
        Run *cmd* and block until it exits. Returns (rc, output) where
        output is stdout and stderr interleaved as the remote wrote them;
        a non-zero rc is reported, never raised.
        """
        stdin, stdout, stderr = self.client.exec_command(cmd, timeout=timeout)
        # also moves any stderr already buffered over to stdout
        stdout.channel.set_combine_stderr(True)
        out = stdout.read().decode("utf-8", errors="replace")
        rc = stdout.channel.recv_exit_status()
        return rc, out

    def close(self) -> None:
        self.client.close()


class DryRunRunner:
    """
    Stands in for an SSHRunner without connecting. Every command is handed
    to *echo*; the OS probe is answered with *probe_output*.
    """

    def __init__(self, echo, probe_output: str = ""):
        self.echo = echo
        self.probe_output = probe_output

    def run(self, cmd: str, *, timeout: Optional[int] = None) -> tuple[int, str]:
        if cmd == OS_PROBE:
            return 0, self.probe_output
        self.echo(f"[dry-run] {cmd.rstrip()}")
        return 0, ""

    def close(self) -> None:
        pass
