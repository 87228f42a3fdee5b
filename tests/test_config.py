"""
Tests for configuration loading.
"""

import pytest
import yaml

from quorum.config import (
    BackupConfig,
    EtcdServiceConfig,
    HostConfig,
    QuorumConfig,
    S3BackupConfig,
)

CLUSTER_YAML = """
cluster_name: c-demo
hosts:
  - address: 10.0.0.1
    hostname_override: node-0
  - address: 10.0.0.2
    agent_address: 10.0.0.2:9000
etcd:
  client_port: 2379
  backup_config:
    interval_hours: 6
    s3_backup_config:
      bucket_name: snapshots
      region: us-east-1
images:
  backup: rancher/rke-tools:custom
network:
  call_timeout_s: 30
logging:
  level: DEBUG
"""


class TestQuorumConfig:
    """Tests for the root configuration."""

    def test_defaults(self):
        """Defaults describe a legacy local-only cluster."""
        config = QuorumConfig()
        assert config.hosts == []
        assert config.etcd.backup_config is None
        assert config.etcd.client_port == 2379
        assert config.etcd.peer_port == 2380

    def test_load(self, temp_dir):
        """Nested YAML sections become dataclasses."""
        path = temp_dir / "cluster.yml"
        path.write_text(CLUSTER_YAML)

        config = QuorumConfig.load(path)

        assert config.cluster_name == "c-demo"
        assert [h.address for h in config.hosts] == ["10.0.0.1", "10.0.0.2"]
        assert config.hosts[0].hostname_override == "node-0"
        assert config.etcd.backup_config.interval_hours == 6
        assert config.etcd.backup_config.s3_backup_config.bucket_name == "snapshots"
        assert config.images.backup == "rancher/rke-tools:custom"
        assert config.images.etcd  # default kept
        assert config.network.call_timeout_s == 30
        assert config.logging.level == "DEBUG"

    def test_missing_file(self, temp_dir):
        """A missing config file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            QuorumConfig.load(temp_dir / "missing.yml")

    def test_empty_file(self, temp_dir):
        """An empty file loads as defaults."""
        path = temp_dir / "empty.yml"
        path.write_text("")
        assert QuorumConfig.load(path) == QuorumConfig()

    def test_null_sections(self, temp_dir):
        """Sections present but set to null load as defaults."""
        path = temp_dir / "cluster.yml"
        path.write_text("cluster_name: c-demo\nhosts:\netcd:\nimages:\nnetwork:\nlogging:\n")

        config = QuorumConfig.load(path)

        assert config.cluster_name == "c-demo"
        assert config.hosts == []
        assert config.etcd == EtcdServiceConfig()
        assert config.images == QuorumConfig().images

    def test_save_and_load(self, temp_dir):
        """Saved configuration loads back unchanged."""
        config = QuorumConfig(
            cluster_name="c-x",
            hosts=[HostConfig(address="10.0.0.9")],
            etcd=EtcdServiceConfig(
                backup_config=BackupConfig(s3_backup_config=S3BackupConfig(bucket_name="b"))
            ),
        )
        path = temp_dir / "out" / "cluster.yml"
        config.save(path)

        assert yaml.safe_load(path.read_text())["cluster_name"] == "c-x"
        assert QuorumConfig.load(path) == config


class TestBackupConfig:
    """Tests for backup configuration nesting."""

    def test_backup_without_s3(self):
        """Backup config may omit S3."""
        etcd = EtcdServiceConfig.from_dict({"backup_config": {"retention": 3}})
        assert etcd.backup_config.retention == 3
        assert etcd.backup_config.s3_backup_config is None

    def test_serialized_fields(self):
        """Backup config carries only schedule, retention and S3 settings."""
        data = QuorumConfig(etcd=EtcdServiceConfig(backup_config=BackupConfig())).to_dict()
        assert set(data["etcd"]["backup_config"]) == {"interval_hours", "retention", "s3_backup_config"}

    def test_null_backup_config(self):
        """A null backup config means legacy mode."""
        etcd = EtcdServiceConfig.from_dict({"backup_config": None})
        assert etcd.backup_config is None


class TestHostConfig:
    """Tests for host entries."""

    def test_agent_address_derived(self):
        """The agent address defaults to address:agent_port."""
        assert HostConfig(address="10.0.0.1").get_agent_address() == "10.0.0.1:50061"

    def test_agent_address_explicit(self):
        """An explicit agent address wins."""
        host = HostConfig(address="10.0.0.1", agent_address="agent:1234")
        assert host.get_agent_address() == "agent:1234"
