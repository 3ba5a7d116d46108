# src/vpsprep/cli/app.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from vpsprep.config.loader import read_targets
from vpsprep.logging.log import init_logging
from vpsprep.provision.commands import OSFamily
from vpsprep.provision.provisioner import Provisioner
from vpsprep.utils.ssh import open_ssh
from vpsprep.utils.ssh_runner import DryRunRunner


# ------------------------------------------------------------------------------
# CLI setup
# ------------------------------------------------------------------------------

app = typer.Typer(help="Prepare fresh Ubuntu/CentOS servers for container deploys")

DEFAULT_CONFIG = Path("config") / "deploy.yml"

PROBE_ANSWERS = {
    OSFamily.UBUNTU: 'NAME="Ubuntu"\n',
    OSFamily.RHEL: 'NAME="CentOS Linux"\n',
}


def _load_targets(config: Path, destination: Optional[str]):
    hosts, user = read_targets(config, destination)
    if not hosts:
        typer.secho(f"No hosts found in {config}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    return hosts, user


def build_connector(dry_run: bool, assume_os: OSFamily):
    """
    Real SSH sessions, or dry-run stand-ins that answer the OS probe
    as *assume_os*.
    """
    if not dry_run:
        return open_ssh
    return lambda host: DryRunRunner(typer.echo, probe_output=PROBE_ANSWERS[assume_os])


@app.command()
def provision(
    config: Path = typer.Argument(DEFAULT_CONFIG, help="Deploy descriptor YAML"),
    destination: Optional[str] = typer.Option(
        None, "--destination", "-d", help="Merge deploy.<destination>.yml over the descriptor",
    ),
    ssh_key: Optional[Path] = typer.Option(None, "--ssh-key", help="Private key for root"),
    ssh_port: int = typer.Option(22, "--ssh-port"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print commands instead of running them"),
    assume_os: OSFamily = typer.Option(
        OSFamily.UBUNTU, "--assume-os", help="OS family reported to --dry-run",
    ),
    log_dir: Optional[Path] = typer.Option(
        None, "--log-dir", help="Directory for the run log (default: $VPSPREP_LOG_DIR or ~/.vpsprep/logs)",
    ),
    debug: bool = typer.Option(False, "--debug"),
):
    logger, run_id, log_path = init_logging(log_dir=log_dir, verbose=debug)

    typer.echo(f"  Run ID   : {run_id}")
    typer.echo(f"  Logs     : {log_path}")

    hosts, user = _load_targets(config, destination)
    logger.debug("hosts=%s user=%s", hosts, user)

    provisioner = Provisioner(
        pkey_path=ssh_key,
        port=ssh_port,
        connect=build_connector(dry_run, assume_os),
    )
    report = provisioner.provision(hosts, user)

    typer.echo("")
    typer.secho("Done!", bold=True)
    typer.echo(f"Remember to log in as the new user: {report.reminder}")


@app.command()
def hosts(
    config: Path = typer.Argument(DEFAULT_CONFIG, help="Deploy descriptor YAML"),
    destination: Optional[str] = typer.Option(None, "--destination", "-d"),
):
    """
    Print the hosts that would be provisioned and the user to create.
    """
    targets, user = _load_targets(config, destination)
    for h in targets:
        typer.echo(h)
    typer.echo(f"user: {user}")


if __name__ == "__main__":
    app()
