"""Transport: host runtime interface and gRPC host agent client."""

from quorum.transport.agent import AgentClient, decode_message, encode_message
from quorum.transport.runtime import (
    ETCD_CONTAINER_NAME,
    ETCD_SERVE_BACKUP_CONTAINER_NAME,
    HostRuntime,
)

__all__ = [
    "AgentClient",
    "decode_message",
    "encode_message",
    "ETCD_CONTAINER_NAME",
    "ETCD_SERVE_BACKUP_CONTAINER_NAME",
    "HostRuntime",
]
