"""
Error Taxonomy

Exceptions raised by the recovery coordinators. Calling layers may match on
BACKUP_PREPARE_ERROR and RESTORE_ERROR_PREFIX.
"""

from typing import Iterable, List

BACKUP_PREPARE_ERROR = (
    "failed to prepare backup: restoring S3 backups with no cluster level "
    "S3 configuration is not supported"
)
GENERIC_PREPARE_ERROR = "failed to prepare backup for restore"
CONSISTENCY_ERROR = "etcd snapshots are not consistent"
RESTORE_ERROR_PREFIX = "[etcd] Failed to restore etcd snapshot"


class QuorumError(Exception):
    """Base class for all recovery errors."""

    pass


class HostError(QuorumError):
    """Raised when a remote call fails on a single host."""

    def __init__(self, address: str, message: str):
        self.address = address
        self.message = message
        super().__init__(f"[{address}] {message}")


class ErrorList(QuorumError):
    """
    Aggregate of per-host failures.

    Every collected error is kept in order; the message is the joined text
    of the individual errors.
    """

    def __init__(self, errors: Iterable[Exception], message: str = ""):
        self.errors: List[Exception] = list(errors)
        joined = "[" + "; ".join(str(e) for e in self.errors) + "]"
        super().__init__(f"{message}: {joined}" if message else joined)

    def __len__(self) -> int:
        return len(self.errors)

    def __iter__(self):
        return iter(self.errors)


class BackupServerError(ErrorList):
    """Raised when no host could start the backup server."""

    def __init__(self, errors: Iterable[Exception]):
        super().__init__(
            errors, message="failed to start backup server on all etcd nodes"
        )


class BackupPrepareError(QuorumError):
    """Raised when the backup cannot be staged for restore."""

    pass


class CertificateError(QuorumError):
    """Raised when the restore certificate set is incomplete or unreadable."""

    pass


class SnapshotConsistencyError(QuorumError):
    """Raised when snapshot checksums differ between hosts."""

    def __init__(self, snapshot_name: str):
        self.snapshot_name = snapshot_name
        super().__init__(CONSISTENCY_ERROR)


class RestoreError(QuorumError):
    """Raised when restoring the snapshot fails on a host."""

    def __init__(self, address: str, cause: Exception):
        self.address = address
        self.cause = cause
        super().__init__(f"{RESTORE_ERROR_PREFIX}: {cause}")
