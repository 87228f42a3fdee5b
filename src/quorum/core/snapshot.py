"""
Snapshot Naming

Snapshot names encode who took them and where they live:

    <cluster>-<type flag><provider flag>-<timestamp>

type flag:     "r" recurring, "m" manual
provider flag: "l" local,     "s" S3

Only the provider flag decides whether a snapshot is transferred between
hosts or fetched from the object store.
"""

import re
from datetime import datetime
from typing import Union

RECURRING_FLAG = "r"
MANUAL_FLAG = "m"
LOCAL_FLAG = "l"
S3_FLAG = "s"

TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"

# Does not anchor on the type flag.
LOCAL_SNAPSHOT_PATTERN = re.compile(r"^c-[a-z0-9].*?-.l-")


def is_local_snapshot(name: str) -> bool:
    """Return True if the snapshot name carries the local provider flag."""
    return LOCAL_SNAPSHOT_PATTERN.match(name) is not None


def snapshot_name(
    cluster_name: str,
    recurring: bool = False,
    s3: bool = False,
    timestamp: Union[datetime, str, None] = None,
) -> str:
    """
    Build a snapshot name for the given cluster.

    Args:
        cluster_name: Cluster identifier, e.g. "c-abc12"
        recurring: True for scheduled snapshots, False for manual ones
        s3: True if the snapshot is stored in the object store
        timestamp: Datetime or preformatted string (defaults to now)

    Returns:
        Snapshot name string
    """
    if timestamp is None:
        timestamp = datetime.now()
    if isinstance(timestamp, datetime):
        timestamp = timestamp.strftime(TIMESTAMP_FORMAT)

    type_flag = RECURRING_FLAG if recurring else MANUAL_FLAG
    provider_flag = S3_FLAG if s3 else LOCAL_FLAG
    return f"{cluster_name}-{type_flag}{provider_flag}-{timestamp}"
