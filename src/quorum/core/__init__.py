"""Core host and snapshot model."""

from quorum.core.hosts import (
    ETCD_ROLE,
    Host,
    get_initial_cluster,
)
from quorum.core.snapshot import (
    LOCAL_SNAPSHOT_PATTERN,
    is_local_snapshot,
    snapshot_name,
)

__all__ = [
    "ETCD_ROLE",
    "Host",
    "get_initial_cluster",
    "LOCAL_SNAPSHOT_PATTERN",
    "is_local_snapshot",
    "snapshot_name",
]
