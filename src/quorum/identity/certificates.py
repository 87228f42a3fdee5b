"""
Restore Certificate Bundle

Certificates are held as cryptography x509 objects keyed by name. A restore
only ever needs the cluster CA and the node identity certificate.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.types import PrivateKeyTypes

from quorum.errors import CertificateError

logger = logging.getLogger(__name__)

CA_CERT_NAME = "kube-ca"
KUBE_NODE_CERT_NAME = "kube-node"

RESTORE_CERT_NAMES = (CA_CERT_NAME, KUBE_NODE_CERT_NAME)


@dataclass
class CertificatePKI:
    """A named certificate with its optional private key."""

    name: str
    certificate: x509.Certificate
    key: Optional[PrivateKeyTypes] = None

    @property
    def certificate_pem(self) -> str:
        return self.certificate.public_bytes(serialization.Encoding.PEM).decode("ascii")

    @property
    def key_pem(self) -> str:
        """PEM-encoded private key, or an empty string if there is none."""
        if self.key is None:
            return ""
        return self.key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        ).decode("ascii")

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "certificate": self.certificate_pem,
            "key": self.key_pem,
        }


def restore_certificate_set(certs: Dict[str, CertificatePKI]) -> Dict[str, CertificatePKI]:
    """
    Restrict a certificate bundle to the certificates a restore deploys.

    Args:
        certs: Full cluster certificate bundle

    Returns:
        Mapping containing exactly the CA and node certificates

    Raises:
        CertificateError: The CA or node certificate is missing from certs
    """
    missing = [name for name in RESTORE_CERT_NAMES if name not in certs]
    if missing:
        raise CertificateError(f"certificates missing from bundle: {', '.join(missing)}")
    return {name: certs[name] for name in RESTORE_CERT_NAMES}


def load_certificates(path: Path) -> Dict[str, CertificatePKI]:
    """
    Load a certificate bundle from a directory.

    Each certificate is read from <name>.pem; a matching <name>-key.pem is
    loaded as its private key when present.

    Args:
        path: Directory containing PEM files

    Returns:
        Mapping of certificate name -> CertificatePKI

    Raises:
        CertificateError: A certificate or key file is not valid PEM
    """
    path = Path(path)
    if not path.is_dir():
        raise FileNotFoundError(f"Certificate directory not found: {path}")

    certs = {}
    for cert_file in sorted(path.glob("*.pem")):
        if cert_file.stem.endswith("-key"):
            continue
        name = cert_file.stem
        try:
            certificate = x509.load_pem_x509_certificate(cert_file.read_bytes())
        except ValueError as e:
            raise CertificateError(f"invalid certificate {cert_file}: {e}") from e

        key = None
        key_file = path / f"{name}-key.pem"
        if key_file.exists():
            try:
                key = serialization.load_pem_private_key(key_file.read_bytes(), password=None)
            except ValueError as e:
                raise CertificateError(f"invalid private key {key_file}: {e}") from e

        certs[name] = CertificatePKI(name=name, certificate=certificate, key=key)

    logger.debug(f"Loaded {len(certs)} certificates from {path}")
    return certs
