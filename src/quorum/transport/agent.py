"""
Host Agent gRPC Client

AgentClient implements HostRuntime by calling the host agent running on
each member host. Calls are generic unary RPCs on the
/quorum.HostAgent service with JSON-encoded request and response bodies:

    request:  {"<arg>": <value>, ...}
    response: {"ok": true, ...result fields} or {"ok": false, "error": "..."}

Usage:
    ```python
    client = AgentClient("10.0.0.5:50061", timeout=300.0)
    checksum = client.snapshot_checksum(image, "c-demo-ml-20240101")
    client.close()
    ```
"""

import json
import logging
from dataclasses import asdict
from typing import TYPE_CHECKING, Any, Dict, Optional

import grpc

from quorum.errors import HostError

if TYPE_CHECKING:
    from quorum.config import EtcdServiceConfig
    from quorum.identity.certificates import CertificatePKI

logger = logging.getLogger(__name__)

SERVICE_NAME = "quorum.HostAgent"


def encode_message(message: Dict[str, Any]) -> bytes:
    """Serialize a request or response body."""
    return json.dumps(message, sort_keys=True).encode("utf-8")


def decode_message(data: bytes) -> Dict[str, Any]:
    """Deserialize a request or response body."""
    if not data:
        return {}
    return json.loads(data.decode("utf-8"))


class AgentClient:
    """
    HostRuntime backed by a gRPC connection to a host agent.

    Failures, whether transport errors or agent-reported errors, are raised
    as HostError carrying the host address.
    """

    def __init__(
        self,
        address: str,
        timeout: float = 300.0,
        channel: Optional[grpc.Channel] = None,
    ):
        """
        Initialize the client.

        Args:
            address: gRPC address of the host agent ("host:port")
            timeout: Per-call timeout in seconds
            channel: Existing channel (a new insecure channel if None)
        """
        self.address = address
        self.timeout = timeout
        self._channel = channel or grpc.insecure_channel(address)
        self._methods: Dict[str, Any] = {}

    def close(self) -> None:
        """Close the underlying channel."""
        if self._channel is not None:
            self._channel.close()
            self._channel = None
            self._methods = {}

    def _method(self, name: str):
        if self._channel is None:
            raise HostError(self.address, "agent client is closed")
        if name not in self._methods:
            self._methods[name] = self._channel.unary_unary(
                f"/{SERVICE_NAME}/{name}",
                request_serializer=encode_message,
                response_deserializer=decode_message,
            )
        return self._methods[name]

    def _call(self, name: str, **request: Any) -> Dict[str, Any]:
        """Invoke one agent RPC and return the decoded response."""
        logger.debug(f"Calling {name} on agent {self.address}")
        try:
            response = self._method(name)(request, timeout=self.timeout)
        except grpc.RpcError as e:
            logger.error(f"gRPC error calling {name} on {self.address}: {e}")
            raise HostError(self.address, f"{name} failed: {e}") from e

        if not response.get("ok", False):
            error = response.get("error") or "unknown agent error"
            raise HostError(self.address, f"{name} failed: {error}")
        return response

    def stop_container(self, name: str) -> None:
        self._call("StopContainer", container=name)

    def start_container(self, name: str) -> None:
        self._call("StartContainer", container=name)

    def remove_container(self, name: str) -> None:
        self._call("RemoveContainer", container=name)

    def start_backup_server(self, image: str, snapshot_name: str, port: int) -> None:
        self._call("StartBackupServer", image=image, snapshot_name=snapshot_name, port=port)

    def download_from_backup_server(
        self,
        image: str,
        snapshot_name: str,
        server_address: str,
        port: int,
    ) -> None:
        self._call(
            "DownloadFromBackupServer",
            image=image,
            snapshot_name=snapshot_name,
            server_address=server_address,
            port=port,
        )

    def download_from_s3(
        self,
        image: str,
        snapshot_name: str,
        etcd: "EtcdServiceConfig",
    ) -> None:
        self._call("DownloadFromS3", image=image, snapshot_name=snapshot_name, etcd=asdict(etcd))

    def snapshot_checksum(self, image: str, snapshot_name: str) -> str:
        response = self._call("SnapshotChecksum", image=image, snapshot_name=snapshot_name)
        checksum = response.get("checksum")
        if not checksum:
            raise HostError(self.address, "SnapshotChecksum returned no checksum")
        return checksum

    def snapshot_save(
        self,
        image: str,
        snapshot_name: str,
        once: bool,
        etcd: "EtcdServiceConfig",
    ) -> None:
        self._call(
            "SnapshotSave",
            image=image,
            snapshot_name=snapshot_name,
            once=once,
            etcd=asdict(etcd),
        )

    def snapshot_remove(
        self,
        image: str,
        snapshot_name: str,
        once: bool,
        etcd: "EtcdServiceConfig",
    ) -> None:
        self._call(
            "SnapshotRemove",
            image=image,
            snapshot_name=snapshot_name,
            once=once,
            etcd=asdict(etcd),
        )

    def snapshot_restore(self, image: str, snapshot_name: str, initial_cluster: str) -> None:
        self._call(
            "SnapshotRestore",
            image=image,
            snapshot_name=snapshot_name,
            initial_cluster=initial_cluster,
        )

    def deploy_certificates(self, image: str, certs: Dict[str, "CertificatePKI"]) -> None:
        self._call(
            "DeployCertificates",
            image=image,
            certificates={name: cert.to_dict() for name, cert in certs.items()},
        )
