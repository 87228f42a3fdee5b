"""
Snapshot Consistency Verification

Before a restore may proceed, every member host must hold a byte-identical
copy of the snapshot. Each host computes the checksum of its local copy;
the copies are consistent iff every checksum equals the first host's.

Checksums are recomputed on every call and never cached.
"""

import logging
from typing import List, Sequence, Tuple

from quorum.core.hosts import Host

logger = logging.getLogger(__name__)


def collect_checksums(
    hosts: Sequence[Host],
    image: str,
    snapshot_name: str,
) -> List[Tuple[str, str]]:
    """
    Compute the snapshot checksum on every host, in host order.

    Args:
        hosts: Member hosts
        image: Backup tool image used to compute the checksum
        snapshot_name: Snapshot to check

    Returns:
        List of (host address, checksum)

    Raises:
        Exception from the first host whose checksum could not be computed
    """
    records = []
    for host in hosts:
        checksum = host.runtime.snapshot_checksum(image, snapshot_name)
        logger.info(
            f"[etcd] Checksum of etcd snapshot on host [{host.address}] is [{checksum}]"
        )
        records.append((host.address, checksum))
    return records


def checksums_match(records: Sequence[Tuple[str, str]]) -> bool:
    """Return True if every checksum equals the first one."""
    if not records:
        return False
    expected = records[0][1]
    return all(checksum == expected for _, checksum in records)


def verify_snapshot_checksums(
    hosts: Sequence[Host],
    image: str,
    snapshot_name: str,
) -> bool:
    """
    Check that all hosts hold an identical copy of the snapshot.

    An unreachable host fails the whole check.

    Returns:
        True if all copies match, False otherwise
    """
    logger.info("[etcd] Checking if all snapshots are identical")
    try:
        records = collect_checksums(hosts, image, snapshot_name)
    except Exception as e:
        logger.warning(f"[etcd] Failed to compute snapshot checksum: {e}")
        return False

    if not checksums_match(records):
        logger.warning(f"[etcd] Snapshot [{snapshot_name}] differs between hosts")
        return False
    return True
