"""
Shared test fixtures

Certificates are generated on the fly: a 2048-bit RSA key and a
certificate whose subject mimics a FURS-issued cash register certificate.
"""

from datetime import datetime, timezone
from typing import List, Tuple

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.serialization import BestAvailableEncryption, pkcs12
from cryptography.x509.oid import NameOID

from furs_client.crypto.certificate import CertificateBundle


P12_PASSWORD = "secret"
CERT_SERIAL = 0x1234ABCD

SUBJECT_ATTRIBUTES: List[Tuple[x509.ObjectIdentifier, str]] = [
    (NameOID.COUNTRY_NAME, "SI"),
    (NameOID.ORGANIZATION_NAME, "FURS"),
    (NameOID.ORGANIZATIONAL_UNIT_NAME, "12345678"),
    (NameOID.ORGANIZATIONAL_UNIT_NAME, "Other"),
    (NameOID.ORGANIZATIONAL_UNIT_NAME, "DavPotRacTEST"),
    (NameOID.SERIAL_NUMBER, "1"),
    (NameOID.COMMON_NAME, "Test, d.o.o."),
]

ISSUER_ATTRIBUTES: List[Tuple[x509.ObjectIdentifier, str]] = [
    (NameOID.COUNTRY_NAME, "SI"),
    (NameOID.ORGANIZATION_NAME, "state-institutions"),
    (NameOID.COMMON_NAME, "Tax CA Test"),
]


def make_name(attributes: List[Tuple[x509.ObjectIdentifier, str]]) -> x509.Name:
    return x509.Name([x509.NameAttribute(oid, value) for oid, value in attributes])


def make_certificate(
    key: rsa.RSAPrivateKey,
    subject: List[Tuple[x509.ObjectIdentifier, str]] = SUBJECT_ATTRIBUTES,
    issuer: List[Tuple[x509.ObjectIdentifier, str]] = ISSUER_ATTRIBUTES,
    serial: int = CERT_SERIAL,
) -> x509.Certificate:
    return (
        x509.CertificateBuilder()
        .subject_name(make_name(subject))
        .issuer_name(make_name(issuer))
        .public_key(key.public_key())
        .serial_number(serial)
        .not_valid_before(datetime(2024, 1, 1, tzinfo=timezone.utc))
        .not_valid_after(datetime(2034, 1, 1, tzinfo=timezone.utc))
        .sign(key, hashes.SHA256())
    )


@pytest.fixture(scope="session")
def rsa_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def certificate(rsa_key) -> x509.Certificate:
    return make_certificate(rsa_key)


@pytest.fixture
def bundle(rsa_key, certificate) -> CertificateBundle:
    return CertificateBundle(rsa_key, certificate)


@pytest.fixture(scope="session")
def p12_bytes(rsa_key, certificate) -> bytes:
    return pkcs12.serialize_key_and_certificates(
        b"furs",
        rsa_key,
        certificate,
        None,
        BestAvailableEncryption(P12_PASSWORD.encode("utf-8")),
    )


@pytest.fixture
def p12_file(tmp_path, p12_bytes):
    path = tmp_path / "furs.p12"
    path.write_bytes(p12_bytes)
    return path


@pytest.fixture
def p12_password() -> str:
    return P12_PASSWORD


@pytest.fixture
def certificate_factory(rsa_key):
    """Build certificates with custom subject or issuer attributes"""
    def factory(**kwargs) -> x509.Certificate:
        return make_certificate(rsa_key, **kwargs)
    return factory
