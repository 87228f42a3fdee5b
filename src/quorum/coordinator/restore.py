"""
Snapshot Lifecycle and Restore

Save, remove and restore run host by host in order. The first failing
host stops the operation; hosts already handled are left as they are.
"""

import logging
from typing import Sequence

from quorum.config import EtcdServiceConfig
from quorum.core.hosts import Host, get_initial_cluster
from quorum.errors import RestoreError

logger = logging.getLogger(__name__)


def save_snapshot(
    hosts: Sequence[Host],
    image: str,
    snapshot_name: str,
    etcd: EtcdServiceConfig,
) -> None:
    """Take a one-off snapshot on every etcd host."""
    for host in hosts:
        logger.info(f"[etcd] Saving snapshot [{snapshot_name}] on host [{host.address}]")
        host.runtime.snapshot_save(image, snapshot_name, True, etcd)


def remove_snapshot(
    hosts: Sequence[Host],
    image: str,
    snapshot_name: str,
    etcd: EtcdServiceConfig,
) -> None:
    """Delete a snapshot from every etcd host."""
    for host in hosts:
        logger.info(f"[etcd] Removing snapshot [{snapshot_name}] on host [{host.address}]")
        host.runtime.snapshot_remove(image, snapshot_name, True, etcd)


def restore_snapshot(
    hosts: Sequence[Host],
    image: str,
    snapshot_name: str,
    peer_port: int = 2380,
) -> str:
    """
    Restore etcd from a staged snapshot on every host.

    All hosts are restored with the same initial-cluster descriptor, built
    once from the full host set.

    Args:
        hosts: etcd hosts, in order
        image: etcd image used for the restore
        snapshot_name: Snapshot present on every host
        peer_port: etcd peer port used in the descriptor

    Returns:
        The initial-cluster descriptor used

    Raises:
        RestoreError: Restore failed on a host; later hosts were not attempted
    """
    initial_cluster = get_initial_cluster(hosts, peer_port)
    logger.debug(f"[etcd] Initial cluster for restore: {initial_cluster}")

    for host in hosts:
        logger.info(f"[etcd] Restoring snapshot [{snapshot_name}] on host [{host.address}]")
        try:
            host.runtime.snapshot_restore(image, snapshot_name, initial_cluster)
        except Exception as e:
            raise RestoreError(host.address, e) from e

    return initial_cluster
