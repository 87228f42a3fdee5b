"""
Pytest configuration and shared fixtures.
"""

import datetime
import hashlib
import tempfile
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

from quorum.core.hosts import Host
from quorum.errors import HostError
from quorum.identity.certificates import CertificatePKI


class FakeRuntime:
    """In-memory HostRuntime that records every call."""

    def __init__(self, address: str, network: Dict[str, "FakeRuntime"], fail: Iterable[str] = ()):
        self.address = address
        self.network = network
        self.fail = set(fail)
        self.calls: List[tuple] = []
        self.containers = {"etcd": "running"}
        self.snapshots: Dict[str, bytes] = {}
        self.checksum: Optional[str] = None
        self.serving: Optional[str] = None
        self.restored: Optional[tuple] = None
        self.certs: Dict[str, CertificatePKI] = {}

    def _record(self, method: str, *args) -> None:
        self.calls.append((method, args))
        if method in self.fail:
            raise HostError(self.address, f"{method} failed")

    def called(self, method: str) -> bool:
        return any(name == method for name, _ in self.calls)

    def stop_container(self, name):
        self._record("stop_container", name)
        self.containers[name] = "stopped"

    def start_container(self, name):
        self._record("start_container", name)
        self.containers[name] = "running"

    def remove_container(self, name):
        self._record("remove_container", name)
        self.containers.pop(name, None)
        if name == "etcd-serve-backup":
            self.serving = None

    def start_backup_server(self, image, snapshot_name, port):
        self._record("start_backup_server", image, snapshot_name, port)
        self.containers["etcd-serve-backup"] = "running"
        self.serving = snapshot_name

    def download_from_backup_server(self, image, snapshot_name, server_address, port):
        self._record("download_from_backup_server", image, snapshot_name, server_address, port)
        server = self.network[server_address]
        assert server.serving == snapshot_name
        self.snapshots[snapshot_name] = server.snapshots[snapshot_name]

    def download_from_s3(self, image, snapshot_name, etcd):
        self._record("download_from_s3", image, snapshot_name, etcd)
        self.snapshots[snapshot_name] = f"s3://{snapshot_name}".encode()

    def snapshot_checksum(self, image, snapshot_name):
        self._record("snapshot_checksum", image, snapshot_name)
        if self.checksum is not None:
            return self.checksum
        if snapshot_name not in self.snapshots:
            raise HostError(self.address, f"snapshot {snapshot_name} not found")
        return hashlib.md5(self.snapshots[snapshot_name]).hexdigest()

    def snapshot_save(self, image, snapshot_name, once, etcd):
        self._record("snapshot_save", image, snapshot_name, once, etcd)
        self.snapshots[snapshot_name] = f"{self.address}/{snapshot_name}".encode()

    def snapshot_remove(self, image, snapshot_name, once, etcd):
        self._record("snapshot_remove", image, snapshot_name, once, etcd)
        self.snapshots.pop(snapshot_name, None)

    def snapshot_restore(self, image, snapshot_name, initial_cluster):
        self._record("snapshot_restore", image, snapshot_name, initial_cluster)
        self.restored = (snapshot_name, initial_cluster)

    def deploy_certificates(self, image, certs):
        self._record("deploy_certificates", image, certs)
        self.certs = dict(certs)


@pytest.fixture
def make_hosts():
    """Factory building hosts backed by FakeRuntime.

    make_hosts(3, fail={1: ["start_backup_server"]}) makes host 1 fail
    that call.
    """

    def _make(count: int, fail: Optional[Dict[int, Iterable[str]]] = None) -> List[Host]:
        fail = fail or {}
        network: Dict[str, FakeRuntime] = {}
        hosts = []
        for i in range(count):
            address = f"10.0.0.{i + 1}"
            runtime = FakeRuntime(address, network, fail=fail.get(i, ()))
            network[address] = runtime
            hosts.append(Host(address=address, runtime=runtime, hostname_override=f"node-{i}"))
        return hosts

    return _make


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def make_certificate(name: str) -> CertificatePKI:
    """Create a self-signed certificate named name."""
    key = ec.generate_private_key(ec.SECP256R1())
    subject = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, name)])
    now = datetime.datetime.now(datetime.timezone.utc)
    certificate = (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(subject)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now)
        .not_valid_after(now + datetime.timedelta(days=1))
        .sign(key, hashes.SHA256())
    )
    return CertificatePKI(name=name, certificate=certificate, key=key)


@pytest.fixture(scope="session")
def cluster_certs():
    """A full cluster certificate bundle."""
    return {
        name: make_certificate(name)
        for name in ["kube-ca", "kube-node", "kube-apiserver", "kube-etcd-10-0-0-1"]
    }
