"""
etcd Cluster Recovery Facade

EtcdCluster binds the etcd host set to its configuration and exposes the
recovery operations:

- snapshot_etcd / remove_etcd_snapshot
- prepare_backup (stage + verify)
- restore_etcd_snapshot
- deploy_restore_certs
- restore_from_snapshot (the full restore sequence)
"""

import logging
from typing import Callable, Dict, List, Optional

from quorum.config import QuorumConfig
from quorum.coordinator import backup, certificates, restore
from quorum.core.hosts import ETCD_ROLE, Host
from quorum.identity.certificates import CertificatePKI, restore_certificate_set
from quorum.transport.agent import AgentClient
from quorum.transport.runtime import HostRuntime

logger = logging.getLogger(__name__)


class EtcdCluster:
    """Recovery operations over the etcd members of a cluster."""

    def __init__(self, hosts: List[Host], config: Optional[QuorumConfig] = None):
        self.config = config or QuorumConfig()
        self.etcd_hosts = [h for h in hosts if ETCD_ROLE in h.roles]

    @classmethod
    def from_config(
        cls,
        config: QuorumConfig,
        runtime_factory: Optional[Callable[[str], HostRuntime]] = None,
    ) -> "EtcdCluster":
        """
        Build a cluster whose hosts are reached through host agents.

        Args:
            config: Root configuration listing the hosts
            runtime_factory: Builds a runtime from an agent address
                (AgentClient with the configured timeout if None)
        """
        if runtime_factory is None:
            timeout = config.network.call_timeout_s

            def runtime_factory(address: str) -> HostRuntime:
                return AgentClient(address, timeout=timeout)

        hosts = [
            Host.from_config(h, runtime_factory(h.get_agent_address()))
            for h in config.hosts
        ]
        return cls(hosts, config)

    def close(self) -> None:
        """Close any host agent connections."""
        for host in self.etcd_hosts:
            close = getattr(host.runtime, "close", None)
            if close is not None:
                close()

    @property
    def backup_image(self) -> str:
        image = self.config.images.backup
        if not image:
            logger.error("[etcd] error getting backup image: no backup image configured")
            return ""
        return image

    def snapshot_etcd(self, snapshot_name: str) -> None:
        """Take a snapshot on every etcd host."""
        restore.save_snapshot(self.etcd_hosts, self.backup_image, snapshot_name, self.config.etcd)

    def remove_etcd_snapshot(self, snapshot_name: str) -> None:
        """Remove a snapshot from every etcd host."""
        restore.remove_snapshot(self.etcd_hosts, self.backup_image, snapshot_name, self.config.etcd)

    def prepare_backup(self, snapshot_name: str) -> None:
        """Stage the snapshot on every etcd host and verify the copies."""
        backup.prepare_backup(self.etcd_hosts, self.config.etcd, self.backup_image, snapshot_name)

    def restore_etcd_snapshot(self, snapshot_name: str) -> str:
        """Restore the staged snapshot on every etcd host."""
        return restore.restore_snapshot(
            self.etcd_hosts,
            self.config.images.etcd,
            snapshot_name,
            self.config.etcd.peer_port,
        )

    def deploy_restore_certs(
        self, cluster_certs: Dict[str, CertificatePKI]
    ) -> Dict[str, CertificatePKI]:
        """Install the CA and node certificates on every etcd host."""
        return certificates.deploy_restore_certs(
            self.etcd_hosts, cluster_certs, self.config.images.cert_downloader
        )

    def restore_from_snapshot(
        self,
        snapshot_name: str,
        cluster_certs: Dict[str, CertificatePKI],
    ) -> None:
        """
        Run the full restore sequence.

        1. Check the restore certificates are present
        2. Stage and verify the snapshot on every host
        3. Restore etcd from it on every host
        4. Deploy the restore certificates

        Any failing step aborts the sequence.
        """
        restore_certificate_set(cluster_certs)
        logger.info(f"[etcd] Restoring cluster from snapshot [{snapshot_name}]")
        self.prepare_backup(snapshot_name)
        self.restore_etcd_snapshot(snapshot_name)
        self.deploy_restore_certs(cluster_certs)
        logger.info(f"[etcd] Restored cluster from snapshot [{snapshot_name}]")
