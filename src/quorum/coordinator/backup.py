"""
Backup Preparation

Before a restore, the snapshot must be present on every etcd host. Two
staging paths exist:

Local snapshots (legacy clusters without backup config, or snapshot names
carrying the local provider flag):
1. Stop etcd on each host in order and try to start the backup server on
   the same client port; the first host that succeeds becomes the transfer
   host and the scan stops there
2. If no host could serve, restart etcd everywhere and fail
3. Every other host downloads the snapshot from the transfer host
4. The backup server container is removed

S3 snapshots: every host downloads the snapshot from the object store.

Either way the staged copies are then checked for consistency.
"""

import logging
from typing import Optional, Sequence

from quorum.config import EtcdServiceConfig
from quorum.core.hosts import Host
from quorum.core.snapshot import is_local_snapshot
from quorum.errors import (
    BACKUP_PREPARE_ERROR,
    GENERIC_PREPARE_ERROR,
    BackupPrepareError,
    BackupServerError,
    SnapshotConsistencyError,
)
from quorum.transport.runtime import (
    ETCD_CONTAINER_NAME,
    ETCD_SERVE_BACKUP_CONTAINER_NAME,
)
from quorum.verification.checksum import verify_snapshot_checksums

logger = logging.getLogger(__name__)


def elect_transfer_host(
    hosts: Sequence[Host],
    image: str,
    snapshot_name: str,
    port: int,
) -> Host:
    """
    Stop etcd and start the backup server on the first host that can serve.

    Hosts after the elected one are neither stopped nor tried.

    Raises:
        BackupServerError: No host could start the backup server; etcd has
            been started again on every host
    """
    transfer_host: Optional[Host] = None
    errors = []

    for host in hosts:
        try:
            host.runtime.stop_container(ETCD_CONTAINER_NAME)
        except Exception as e:
            logger.warning(f"failed to stop etcd container on host [{host.address}]: {e}")

        try:
            host.runtime.start_backup_server(image, snapshot_name, port)
        except Exception as e:
            logger.warning(f"failed to start backup server on host [{host.address}]: {e}")
            errors.append(e)
            continue

        transfer_host = host
        break

    if transfer_host is None:
        for host in hosts:
            try:
                host.runtime.start_container(ETCD_CONTAINER_NAME)
            except Exception as e:
                logger.warning(f"failed to start etcd container on host [{host.address}]: {e}")
        raise BackupServerError(errors)

    logger.info(f"[etcd] Serving snapshot [{snapshot_name}] from host [{transfer_host.address}]")
    return transfer_host


def transfer_local_backup(
    hosts: Sequence[Host],
    image: str,
    snapshot_name: str,
    port: int,
) -> Host:
    """
    Distribute a local snapshot from an elected transfer host to all hosts.

    Args:
        hosts: etcd hosts, in iteration order
        image: Backup tool image
        snapshot_name: Snapshot to distribute
        port: etcd client port the backup server binds to

    Returns:
        The host that served the snapshot

    Raises:
        BackupServerError: No transfer host could be elected
        Exception: First download or cleanup failure, unchanged
    """
    transfer_host = elect_transfer_host(hosts, image, snapshot_name, port)

    for host in hosts:
        if host.address == transfer_host.address:
            continue
        logger.info(
            f"[etcd] Downloading snapshot [{snapshot_name}] on host [{host.address}] "
            f"from [{transfer_host.address}]"
        )
        host.runtime.download_from_backup_server(
            image, snapshot_name, transfer_host.address, port
        )

    transfer_host.runtime.remove_container(ETCD_SERVE_BACKUP_CONTAINER_NAME)
    return transfer_host


def fetch_s3_backup(
    hosts: Sequence[Host],
    image: str,
    snapshot_name: str,
    etcd: EtcdServiceConfig,
) -> None:
    """Download an S3 snapshot on every host, stopping at the first failure."""
    for host in hosts:
        logger.info(f"[etcd] Downloading snapshot [{snapshot_name}] from S3 on host [{host.address}]")
        host.runtime.download_from_s3(image, snapshot_name, etcd)


def prepare_backup(
    hosts: Sequence[Host],
    etcd: EtcdServiceConfig,
    image: str,
    snapshot_name: str,
) -> None:
    """
    Stage a snapshot on every etcd host and verify the copies match.

    Raises:
        BackupPrepareError: Neither staging path applies (S3 snapshot
            without S3 configuration gets BACKUP_PREPARE_ERROR)
        BackupServerError: Local path could not elect a transfer host
        SnapshotConsistencyError: Staged copies differ between hosts
    """
    backup_config = etcd.backup_config
    local = is_local_snapshot(snapshot_name)
    backup_ready = False

    if backup_config is None or local:
        transfer_local_backup(hosts, image, snapshot_name, etcd.client_port)
        backup_ready = True

    if backup_config is not None and backup_config.s3_backup_config is not None and not local:
        fetch_s3_backup(hosts, image, snapshot_name, etcd)
        backup_ready = True

    if not backup_ready:
        if not local and backup_config is not None and backup_config.s3_backup_config is None:
            raise BackupPrepareError(BACKUP_PREPARE_ERROR)
        raise BackupPrepareError(GENERIC_PREPARE_ERROR)

    if not verify_snapshot_checksums(hosts, image, snapshot_name):
        raise SnapshotConsistencyError(snapshot_name)
