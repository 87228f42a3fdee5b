"""Identity: restore certificate bundle."""

from quorum.identity.certificates import (
    CA_CERT_NAME,
    KUBE_NODE_CERT_NAME,
    RESTORE_CERT_NAMES,
    CertificatePKI,
    load_certificates,
    restore_certificate_set,
)

__all__ = [
    "CA_CERT_NAME",
    "KUBE_NODE_CERT_NAME",
    "RESTORE_CERT_NAMES",
    "CertificatePKI",
    "load_certificates",
    "restore_certificate_set",
]
