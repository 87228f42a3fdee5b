"""
Host Runtime Interface

Every remote operation the recovery coordinators perform on a member host
goes through a HostRuntime. Implementations raise on failure; the
coordinators decide whether a failure is fatal.
"""

from typing import TYPE_CHECKING, Dict, Protocol

if TYPE_CHECKING:
    from quorum.config import EtcdServiceConfig
    from quorum.identity.certificates import CertificatePKI

ETCD_CONTAINER_NAME = "etcd"
ETCD_SERVE_BACKUP_CONTAINER_NAME = "etcd-serve-backup"


class HostRuntime(Protocol):
    """Protocol for the container runtime and snapshot tooling of one host."""

    def stop_container(self, name: str) -> None:
        ...

    def start_container(self, name: str) -> None:
        ...

    def remove_container(self, name: str) -> None:
        ...

    def start_backup_server(self, image: str, snapshot_name: str, port: int) -> None:
        """Serve snapshot_name from this host on port."""
        ...

    def download_from_backup_server(
        self,
        image: str,
        snapshot_name: str,
        server_address: str,
        port: int,
    ) -> None:
        """Fetch snapshot_name from the backup server at server_address."""
        ...

    def download_from_s3(
        self,
        image: str,
        snapshot_name: str,
        etcd: "EtcdServiceConfig",
    ) -> None:
        """Fetch snapshot_name from the configured object store."""
        ...

    def snapshot_checksum(self, image: str, snapshot_name: str) -> str:
        """Return the content checksum of the local snapshot file."""
        ...

    def snapshot_save(
        self,
        image: str,
        snapshot_name: str,
        once: bool,
        etcd: "EtcdServiceConfig",
    ) -> None:
        ...

    def snapshot_remove(
        self,
        image: str,
        snapshot_name: str,
        once: bool,
        etcd: "EtcdServiceConfig",
    ) -> None:
        ...

    def snapshot_restore(self, image: str, snapshot_name: str, initial_cluster: str) -> None:
        """Restore the etcd data directory from snapshot_name."""
        ...

    def deploy_certificates(self, image: str, certs: Dict[str, "CertificatePKI"]) -> None:
        """Install certs on this host."""
        ...
