"""
Quorum: Disaster Recovery Orchestration for etcd Clusters

Coordinates snapshot recovery across every etcd member host:
- Snapshot save/remove on every member
- Ephemeral transfer-host election for local snapshots
- Checksum verification of the staged snapshot on all hosts
- Cluster-wide restore and restore certificate distribution
"""

__version__ = "0.1.0"
