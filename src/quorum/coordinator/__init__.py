"""Coordinator: backup staging, restore, and certificate distribution."""

from quorum.coordinator.backup import (
    elect_transfer_host,
    fetch_s3_backup,
    prepare_backup,
    transfer_local_backup,
)
from quorum.coordinator.certificates import (
    WORKER_THREADS,
    deploy_restore_certs,
)
from quorum.coordinator.cluster import EtcdCluster
from quorum.coordinator.restore import (
    remove_snapshot,
    restore_snapshot,
    save_snapshot,
)

__all__ = [
    # Backup
    "elect_transfer_host",
    "fetch_s3_backup",
    "prepare_backup",
    "transfer_local_backup",
    # Certificates
    "WORKER_THREADS",
    "deploy_restore_certs",
    # Cluster
    "EtcdCluster",
    # Restore
    "remove_snapshot",
    "restore_snapshot",
    "save_snapshot",
]
