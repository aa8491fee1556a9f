"""Cryptography module initialization

This module provides the certificate-bound signing services for FURS:
- CertificateBundle / CertificateIdentity: PKCS#12 loading and identity strings
- Signer: RSA-SHA256 signatures
- compute_zoi: protected invoice identifier
- build_token / decode_token: signed request tokens
"""

from furs_client.crypto.certificate import (
    CertificateBundle,
    CertificateIdentity,
    DEVICE_CLASS_MARKER,
    SERIAL_NUMBER_PLACEHOLDER,
    load_ca_certificates,
)
from furs_client.crypto.signature import Signer, verify_signature
from furs_client.crypto.zoi import ZoiInput, compute_zoi
from furs_client.crypto.token import (
    DecodedToken,
    base64url_decode,
    base64url_encode,
    build_token,
    decode_token,
    verify_token,
)

__all__ = [
    # Certificates
    "CertificateBundle",
    "CertificateIdentity",
    "DEVICE_CLASS_MARKER",
    "SERIAL_NUMBER_PLACEHOLDER",
    "load_ca_certificates",
    # Signing
    "Signer",
    "verify_signature",
    "ZoiInput",
    "compute_zoi",
    # Tokens
    "DecodedToken",
    "base64url_decode",
    "base64url_encode",
    "build_token",
    "decode_token",
    "verify_token",
]
