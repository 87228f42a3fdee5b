"""
Member Hosts

A Host is one etcd quorum member together with the runtime handle used to
reach it. The host set is supplied by the surrounding cluster model and is
only iterated here, always in its given order.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Sequence

if TYPE_CHECKING:
    from quorum.config import HostConfig
    from quorum.transport.runtime import HostRuntime

ETCD_ROLE = "etcd"
DEFAULT_PEER_PORT = 2380


@dataclass
class Host:
    """An etcd member host."""

    address: str
    runtime: "HostRuntime"
    hostname_override: str = ""
    internal_address: str = ""
    roles: List[str] = field(default_factory=lambda: [ETCD_ROLE])

    def __post_init__(self) -> None:
        if not self.hostname_override:
            self.hostname_override = self.address
        if not self.internal_address:
            self.internal_address = self.address

    @classmethod
    def from_config(cls, host_config: "HostConfig", runtime: "HostRuntime") -> "Host":
        """Build a host from its configuration entry."""
        return cls(
            address=host_config.address,
            runtime=runtime,
            hostname_override=host_config.hostname_override,
            internal_address=host_config.internal_address,
        )

    @property
    def etcd_member_name(self) -> str:
        return f"etcd-{self.hostname_override}"


def get_initial_cluster(hosts: Sequence[Host], peer_port: int = DEFAULT_PEER_PORT) -> str:
    """
    Build the etcd --initial-cluster descriptor for a host set.

    Format: "etcd-<name>=https://<internal address>:<peer port>", comma
    separated, in host order.
    """
    return ",".join(
        f"{host.etcd_member_name}=https://{host.internal_address}:{peer_port}"
        for host in hosts
    )
