"""Verification: snapshot checksum comparison across hosts."""

from quorum.verification.checksum import (
    checksums_match,
    collect_checksums,
    verify_snapshot_checksums,
)

__all__ = [
    "checksums_match",
    "collect_checksums",
    "verify_snapshot_checksums",
]
