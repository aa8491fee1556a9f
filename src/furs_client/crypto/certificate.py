"""
Certificate bundle loading and FURS identity extraction

This module covers the certificate side of FURS authentication:
- Loading a password-protected PKCS#12 bundle (or a PEM/DER pair)
- Rendering subject and issuer names in the exact form FURS expects
  in the signed token header
- Loading CA certificates used to validate the FURS TLS endpoint
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    load_der_private_key,
    load_pem_private_key,
    pkcs12,
)
from cryptography.x509.oid import NameOID

from furs_client.exceptions import CertificateParseError


logger = logging.getLogger(__name__)


# OU value that marks a FURS cash-register certificate
DEVICE_CLASS_MARKER = "DavPotRacTEST"

# Emitted in place of the subject serialNumber attribute
SERIAL_NUMBER_PLACEHOLDER = "2.5.4.5=#1"

CA_CERT_EXTENSIONS = (".cer", ".crt", ".pem")

_NUMERIC = re.compile(r"^\d+$")


class CertificateBundle:
    """
    Private key and certificate unpacked from a FURS certificate archive

    The bundle is loaded once and never mutated. ``clear()`` (or leaving a
    ``with`` block) drops the decrypted key material; any later access
    raises ``CertificateParseError``.

    Example:
        >>> with CertificateBundle.from_file('./cert.p12', 'secret') as bundle:
        ...     identity = CertificateIdentity.from_certificate(bundle.certificate)
    """

    def __init__(
        self,
        private_key: RSAPrivateKey,
        certificate: x509.Certificate,
        additional_certificates: Optional[Sequence[x509.Certificate]] = None,
    ) -> None:
        if private_key is None:
            raise CertificateParseError("No private key found in certificate bundle")
        if certificate is None:
            raise CertificateParseError("No certificate found in certificate bundle")
        if not isinstance(private_key, RSAPrivateKey):
            raise CertificateParseError(
                f"Unsupported key type: {type(private_key).__name__}. "
                "Only RSA keys are supported."
            )

        self._private_key: Optional[RSAPrivateKey] = private_key
        self._certificate: Optional[x509.Certificate] = certificate
        self._additional_certificates = list(additional_certificates or [])

    @classmethod
    def from_pkcs12(cls, data: bytes, password: Optional[str]) -> "CertificateBundle":
        """
        Load a bundle from PKCS#12 (.p12/.pfx) content

        Args:
            data: Raw PKCS#12 archive
            password: Archive passphrase

        Returns:
            Loaded certificate bundle

        Raises:
            CertificateParseError: If the archive cannot be decrypted or
                lacks a private key or certificate
        """
        password_bytes = password.encode("utf-8") if password else None

        try:
            private_key, certificate, additional = pkcs12.load_key_and_certificates(
                data, password_bytes
            )
        except (ValueError, TypeError) as e:
            raise CertificateParseError(
                f"Failed to load certificate: {str(e)}",
                cause=e,
            ) from e

        return cls(private_key, certificate, additional)

    @classmethod
    def from_file(
        cls,
        path: Union[str, Path],
        password: Optional[str],
    ) -> "CertificateBundle":
        """Load a PKCS#12 bundle from disk"""
        file_path = Path(path)

        if not file_path.exists():
            raise CertificateParseError(f"Certificate file not found: {file_path}")

        try:
            data = file_path.read_bytes()
        except OSError as e:
            raise CertificateParseError(
                f"Failed to read certificate file: {str(e)}",
                cause=e,
            ) from e

        bundle = cls.from_pkcs12(data, password)
        logger.info(f"Certificate bundle loaded from {file_path.name}")
        return bundle

    @classmethod
    def from_pem(
        cls,
        certificate: Union[str, bytes],
        private_key: Union[str, bytes],
        password: Optional[str] = None,
    ) -> "CertificateBundle":
        """
        Load a bundle from a separate certificate and private key

        Both PEM and DER encodings are accepted.
        """
        cert_data = certificate.encode("utf-8") if isinstance(certificate, str) else certificate
        key_data = private_key.encode("utf-8") if isinstance(private_key, str) else private_key
        password_bytes = password.encode("utf-8") if password else None

        try:
            if b"-----BEGIN" in cert_data:
                cert = x509.load_pem_x509_certificate(cert_data)
            else:
                cert = x509.load_der_x509_certificate(cert_data)
        except ValueError as e:
            raise CertificateParseError(
                f"Failed to load certificate: {str(e)}",
                cause=e,
            ) from e

        try:
            if b"-----BEGIN" in key_data:
                key = load_pem_private_key(key_data, password=password_bytes)
            else:
                key = load_der_private_key(key_data, password=password_bytes)
        except (ValueError, TypeError) as e:
            raise CertificateParseError(
                f"Failed to load private key: {str(e)}",
                cause=e,
            ) from e

        return cls(key, cert)

    @property
    def private_key(self) -> RSAPrivateKey:
        """Get the private key"""
        if self._private_key is None:
            raise CertificateParseError("Certificate bundle has been cleared")
        return self._private_key

    @property
    def certificate(self) -> x509.Certificate:
        """Get the end-entity certificate"""
        if self._certificate is None:
            raise CertificateParseError("Certificate bundle has been cleared")
        return self._certificate

    @property
    def additional_certificates(self) -> List[x509.Certificate]:
        """Get the chain certificates shipped with the bundle"""
        return list(self._additional_certificates)

    @property
    def cleared(self) -> bool:
        """Check whether the key material has been released"""
        return self._private_key is None

    def clear(self) -> None:
        """Release the private key and certificates"""
        self._private_key = None
        self._certificate = None
        self._additional_certificates = []

    def __enter__(self) -> "CertificateBundle":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.clear()


# A subject step inspects the attribute list and returns one "key=value"
# part, or None when the attribute is absent.
NameStep = Callable[[List[x509.NameAttribute]], Optional[str]]


def _first(
    attributes: List[x509.NameAttribute],
    predicate: Callable[[x509.NameAttribute], bool],
) -> Optional[x509.NameAttribute]:
    """Return the first attribute matching predicate"""
    return next((attr for attr in attributes if predicate(attr)), None)


def _attr_value(attribute: x509.NameAttribute) -> str:
    value = attribute.value
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value


def _has_oid(oid: x509.ObjectIdentifier) -> Callable[[x509.NameAttribute], bool]:
    return lambda attr: attr.oid == oid


def _emit(label: str, oid: x509.ObjectIdentifier, escape_commas: bool = False) -> NameStep:
    """Build a step emitting ``label=value`` for the first attribute with oid"""
    def step(attributes: List[x509.NameAttribute]) -> Optional[str]:
        attr = _first(attributes, _has_oid(oid))
        if attr is None:
            return None
        value = _attr_value(attr)
        if escape_commas:
            value = value.replace(",", "\\,")
        return f"{label}={value}"
    return step


def _serial_number_placeholder(attributes: List[x509.NameAttribute]) -> Optional[str]:
    if _first(attributes, _has_oid(NameOID.SERIAL_NUMBER)) is None:
        return None
    return SERIAL_NUMBER_PLACEHOLDER


def _organizational_unit(
    predicate: Callable[[str], bool],
) -> NameStep:
    """Build a step emitting the first OU whose value satisfies predicate"""
    def step(attributes: List[x509.NameAttribute]) -> Optional[str]:
        attr = _first(
            attributes,
            lambda a: a.oid == NameOID.ORGANIZATIONAL_UNIT_NAME and predicate(_attr_value(a)),
        )
        if attr is None:
            return None
        return f"OU={_attr_value(attr)}"
    return step


def subject_steps(device_class_marker: str = DEVICE_CLASS_MARKER) -> List[NameStep]:
    """Ordered steps producing the FURS subject name"""
    return [
        _emit("CN", NameOID.COMMON_NAME, escape_commas=True),
        _serial_number_placeholder,
        _organizational_unit(lambda value: value == device_class_marker),
        _organizational_unit(lambda value: bool(_NUMERIC.match(value))),
        _emit("O", NameOID.ORGANIZATION_NAME),
        _emit("C", NameOID.COUNTRY_NAME),
    ]


ISSUER_STEPS: List[NameStep] = [
    _emit("CN", NameOID.COMMON_NAME),
    _emit("O", NameOID.ORGANIZATION_NAME),
    _emit("C", NameOID.COUNTRY_NAME),
]


def render_name(name: x509.Name, steps: Sequence[NameStep]) -> str:
    """Run steps over the attributes of name and join the emitted parts"""
    attributes = list(name)
    parts = [part for part in (step(attributes) for step in steps) if part is not None]
    return ",".join(parts)


@dataclass(frozen=True)
class CertificateIdentity:
    """
    Certificate identity fields carried in the signed token header

    Attributes:
        subject_name: Subject in FURS canonical form
        issuer_name: Issuer in FURS canonical form
        serial: Certificate serial number as a decimal string
        valid_from: Certificate validity start
        valid_to: Certificate validity end
    """
    subject_name: str
    issuer_name: str
    serial: str
    valid_from: datetime
    valid_to: datetime

    @classmethod
    def from_certificate(
        cls,
        certificate: x509.Certificate,
        device_class_marker: str = DEVICE_CLASS_MARKER,
    ) -> "CertificateIdentity":
        """
        Extract the FURS identity from a certificate

        Args:
            certificate: Loaded X.509 certificate
            device_class_marker: OU value identifying the certificate class

        Returns:
            CertificateIdentity with subject, issuer and decimal serial
        """
        return cls(
            subject_name=render_name(certificate.subject, subject_steps(device_class_marker)),
            issuer_name=render_name(certificate.issuer, ISSUER_STEPS),
            serial=str(certificate.serial_number),
            valid_from=certificate.not_valid_before_utc,
            valid_to=certificate.not_valid_after_utc,
        )

    @classmethod
    def from_bundle(
        cls,
        bundle: CertificateBundle,
        device_class_marker: str = DEVICE_CLASS_MARKER,
    ) -> "CertificateIdentity":
        """Extract the identity from a bundle's certificate"""
        return cls.from_certificate(bundle.certificate, device_class_marker)

    def as_tuple(self) -> tuple:
        """Get ``(subject_name, issuer_name, serial)``"""
        return (self.subject_name, self.issuer_name, self.serial)


def load_ca_certificates(path: Union[str, Path]) -> List[str]:
    """
    Load CA certificates for TLS validation of the FURS endpoint

    Args:
        path: Directory of .cer/.crt/.pem files, or a single certificate file

    Returns:
        List of certificates in PEM format

    Raises:
        CertificateParseError: If the path is missing, holds no certificates,
            or a file cannot be parsed
    """
    ca_path = Path(path)

    if not ca_path.exists():
        raise CertificateParseError(f"CA certificates path not found: {ca_path}")

    if ca_path.is_dir():
        files = sorted(
            p for p in ca_path.iterdir()
            if p.is_file() and p.suffix.lower() in CA_CERT_EXTENSIONS
        )
    else:
        files = [ca_path]

    if not files:
        raise CertificateParseError(f"No certificate files found in: {ca_path}")

    pem_certificates: List[str] = []
    for cert_file in files:
        data = cert_file.read_bytes()
        try:
            if b"BEGIN CERTIFICATE" in data:
                pem_certificates.append(data.decode("utf-8"))
            else:
                cert = x509.load_der_x509_certificate(data)
                pem_certificates.append(cert.public_bytes(Encoding.PEM).decode("utf-8"))
        except ValueError as e:
            raise CertificateParseError(
                f"Failed to load CA certificate {cert_file.name}: {str(e)}",
                cause=e,
            ) from e

    logger.debug(f"Loaded {len(pem_certificates)} CA certificate(s) from {ca_path}")
    return pem_certificates
