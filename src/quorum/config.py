"""
Configuration Management

This module provides configuration dataclasses and loading functions
for the Quorum recovery tooling.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml

DEFAULT_BACKUP_IMAGE = "rancher/rke-tools:v0.1.96"
DEFAULT_ETCD_IMAGE = "rancher/mirrored-coreos-etcd:v3.5.9"


@dataclass
class ImagesConfig:
    """Container images used by the recovery operations."""

    backup: str = DEFAULT_BACKUP_IMAGE
    etcd: str = DEFAULT_ETCD_IMAGE
    cert_downloader: str = DEFAULT_BACKUP_IMAGE


@dataclass
class S3BackupConfig:
    """Object-store location for remote snapshots."""

    bucket_name: str = ""
    endpoint: str = "s3.amazonaws.com"
    region: str = ""
    access_key: str = ""
    secret_key: str = ""
    folder: str = ""
    custom_ca: str = ""


@dataclass
class BackupConfig:
    """Recurring backup settings. Absent means legacy local-only mode."""

    interval_hours: int = 12
    retention: int = 6
    s3_backup_config: Optional[S3BackupConfig] = None

    @classmethod
    def from_dict(cls, data: dict) -> "BackupConfig":
        data = dict(data)
        s3 = data.pop("s3_backup_config", None)
        return cls(
            s3_backup_config=S3BackupConfig(**s3) if s3 is not None else None,
            **data,
        )


@dataclass
class EtcdServiceConfig:
    """Configuration of the etcd store service."""

    client_port: int = 2379
    peer_port: int = 2380
    snapshot_dir: str = "/opt/rke/etcd-snapshots"
    backup_config: Optional[BackupConfig] = None

    @classmethod
    def from_dict(cls, data: dict) -> "EtcdServiceConfig":
        data = dict(data)
        backup = data.pop("backup_config", None)
        return cls(
            backup_config=BackupConfig.from_dict(backup) if backup is not None else None,
            **data,
        )


@dataclass
class HostConfig:
    """A member host and the address of its host agent."""

    address: str
    agent_address: str = ""  # "host:port", derived from address if empty
    hostname_override: str = ""
    internal_address: str = ""
    agent_port: int = 50061

    def get_agent_address(self) -> str:
        """Return the gRPC address of the host agent."""
        return self.agent_address or f"{self.address}:{self.agent_port}"


@dataclass
class NetworkConfig:
    """Configuration for host agent connections."""

    call_timeout_s: float = 300.0


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class QuorumConfig:
    """Root configuration for the recovery tooling."""

    cluster_name: str = "c-local"
    hosts: List[HostConfig] = field(default_factory=list)
    etcd: EtcdServiceConfig = field(default_factory=EtcdServiceConfig)
    images: ImagesConfig = field(default_factory=ImagesConfig)
    network: NetworkConfig = field(default_factory=NetworkConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, path: Path) -> "QuorumConfig":
        """Load configuration from YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict) -> "QuorumConfig":
        """Create configuration from dictionary."""
        return cls(
            cluster_name=data.get("cluster_name") or "c-local",
            hosts=[HostConfig(**h) for h in data.get("hosts") or []],
            etcd=EtcdServiceConfig.from_dict(data.get("etcd") or {}),
            images=ImagesConfig(**(data.get("images") or {})),
            network=NetworkConfig(**(data.get("network") or {})),
            logging=LoggingConfig(**(data.get("logging") or {})),
        )

    def to_dict(self) -> dict:
        """Convert configuration to dictionary."""
        from dataclasses import asdict

        return asdict(self)

    def save(self, path: Path) -> None:
        """Save configuration to YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)
