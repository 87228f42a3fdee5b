"""
Quorum CLI - Main entry point

Usage:
    quorum snapshot save --config cluster.yml [--name NAME]
    quorum snapshot remove --config cluster.yml --name NAME
    quorum snapshot prepare --config cluster.yml --name NAME
    quorum snapshot restore --config cluster.yml --name NAME --certs-dir DIR
"""

import logging
import sys
from typing import Dict, Optional

import click

from quorum import __version__
from quorum.config import QuorumConfig
from quorum.coordinator.cluster import EtcdCluster
from quorum.core.snapshot import snapshot_name
from quorum.errors import QuorumError
from quorum.identity.certificates import (
    CertificatePKI,
    load_certificates,
    restore_certificate_set,
)


def setup_logging(level: str, fmt: Optional[str] = None) -> None:
    """Configure logging for the CLI."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=fmt or "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def load_cluster(config_path: str, log_level: Optional[str]) -> EtcdCluster:
    """Load configuration, set up logging and build the cluster."""
    config = QuorumConfig.load(config_path)
    setup_logging(log_level or config.logging.level, config.logging.format)
    if not config.hosts:
        raise click.UsageError(f"No hosts defined in {config_path}")
    return EtcdCluster.from_config(config)


def fail(error: Exception) -> None:
    """Print an error in red and exit with status 1."""
    click.echo(click.style(f"Error: {error}", fg="red"), err=True)
    sys.exit(1)


def load_restore_certificates(certs_dir: str) -> Dict[str, CertificatePKI]:
    """Load the certificate bundle, exiting with status 1 if it is unusable."""
    try:
        certs = load_certificates(certs_dir)
        restore_certificate_set(certs)
    except QuorumError as e:
        fail(e)
    return certs


def run_operation(cluster: EtcdCluster, operation, *args) -> None:
    """Run a cluster operation, exiting with status 1 on failure."""
    try:
        operation(*args)
    except QuorumError as e:
        fail(e)
    finally:
        cluster.close()


@click.group()
@click.version_option(version=__version__)
def cli():
    """Quorum: etcd snapshot disaster recovery"""
    pass


@cli.group()
def snapshot():
    """etcd snapshot commands."""
    pass


@snapshot.command("save")
@click.option("--config", "config_path", type=click.Path(exists=True), required=True, help="Config file path")
@click.option("--name", help="Snapshot name (generated if not provided)")
@click.option("--log-level", default=None, help="Logging level")
def snapshot_save(config_path, name, log_level):
    """Take a snapshot on every etcd host."""
    cluster = load_cluster(config_path, log_level)
    if not name:
        backup_config = cluster.config.etcd.backup_config
        s3 = backup_config is not None and backup_config.s3_backup_config is not None
        name = snapshot_name(cluster.config.cluster_name, recurring=False, s3=s3)

    click.echo(f"Saving snapshot {name} on {len(cluster.etcd_hosts)} hosts")
    run_operation(cluster, cluster.snapshot_etcd, name)
    click.echo(click.style(f"Snapshot {name} saved.", fg="green"))


@snapshot.command("remove")
@click.option("--config", "config_path", type=click.Path(exists=True), required=True, help="Config file path")
@click.option("--name", required=True, help="Snapshot name")
@click.option("--log-level", default=None, help="Logging level")
def snapshot_remove(config_path, name, log_level):
    """Remove a snapshot from every etcd host."""
    cluster = load_cluster(config_path, log_level)
    click.echo(f"Removing snapshot {name} from {len(cluster.etcd_hosts)} hosts")
    run_operation(cluster, cluster.remove_etcd_snapshot, name)
    click.echo(click.style(f"Snapshot {name} removed.", fg="green"))


@snapshot.command("prepare")
@click.option("--config", "config_path", type=click.Path(exists=True), required=True, help="Config file path")
@click.option("--name", required=True, help="Snapshot name")
@click.option("--log-level", default=None, help="Logging level")
def snapshot_prepare(config_path, name, log_level):
    """Stage a snapshot on every etcd host and verify the copies."""
    cluster = load_cluster(config_path, log_level)
    click.echo(f"Preparing snapshot {name} on {len(cluster.etcd_hosts)} hosts")
    run_operation(cluster, cluster.prepare_backup, name)
    click.echo(click.style(f"Snapshot {name} is ready for restore.", fg="green"))


@snapshot.command("restore")
@click.option("--config", "config_path", type=click.Path(exists=True), required=True, help="Config file path")
@click.option("--name", required=True, help="Snapshot name")
@click.option("--certs-dir", type=click.Path(exists=True, file_okay=False), required=True, help="Directory of cluster certificates")
@click.option("--log-level", default=None, help="Logging level")
def snapshot_restore(config_path, name, certs_dir, log_level):
    """Restore etcd on every host from a snapshot."""
    certs = load_restore_certificates(certs_dir)
    cluster = load_cluster(config_path, log_level)

    click.echo(f"Restoring snapshot {name} on {len(cluster.etcd_hosts)} hosts")
    run_operation(cluster, cluster.restore_from_snapshot, name, certs)
    click.echo(click.style(f"Snapshot {name} restored.", fg="green"))


if __name__ == "__main__":
    cli()
