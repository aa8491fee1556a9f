"""
Digital Signature Service
RSA-SHA256 signing for FURS protected identifiers and request tokens

The signer wraps an RSA private key and signs raw bytes with PKCS#1 v1.5
padding. It holds no mutable state, so a single instance may be shared
between threads.
"""

from typing import Optional, Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey, RSAPublicKey

from furs_client.crypto.certificate import CertificateBundle
from furs_client.exceptions import SigningError


class Signer:
    """
    RSA-SHA256 signer bound to a private key

    Example:
        >>> signer = Signer.from_bundle(bundle)
        >>> signature = signer.sign(b'header.payload')
        >>> signer.verify(b'header.payload', signature)
        True
    """

    ALGORITHM = "RS256"

    def __init__(
        self,
        private_key: RSAPrivateKey,
        public_key: Optional[RSAPublicKey] = None,
    ) -> None:
        """
        Create a signer

        Args:
            private_key: RSA private key used for signing
            public_key: Key used for verification (derived from private_key
                when omitted)

        Raises:
            SigningError: If the key is missing or not an RSA key
        """
        if private_key is None:
            raise SigningError("Private key not loaded")
        if not isinstance(private_key, RSAPrivateKey):
            raise SigningError(
                f"Unsupported key type: {type(private_key).__name__}. "
                "Only RSA keys are supported."
            )

        self._private_key = private_key
        self._public_key = public_key or private_key.public_key()

    @classmethod
    def from_bundle(cls, bundle: CertificateBundle) -> "Signer":
        """Create a signer from a certificate bundle's private key"""
        return cls(bundle.private_key, bundle.certificate.public_key())

    @property
    def public_key(self) -> RSAPublicKey:
        return self._public_key

    def sign(self, message: Union[bytes, str]) -> bytes:
        """
        Sign a message with RSA PKCS#1 v1.5 and SHA-256

        Args:
            message: Bytes to sign (str is encoded as UTF-8)

        Returns:
            Raw signature bytes

        Raises:
            SigningError: If the signing operation fails
        """
        data = message.encode("utf-8") if isinstance(message, str) else message

        try:
            return self._private_key.sign(data, padding.PKCS1v15(), hashes.SHA256())
        except (ValueError, TypeError) as e:
            raise SigningError(
                f"Failed to sign data: {str(e)}",
                cause=e,
            ) from e

    def verify(
        self,
        message: Union[bytes, str],
        signature: bytes,
        public_key: Optional[RSAPublicKey] = None,
    ) -> bool:
        """
        Verify a signature produced by ``sign``

        Args:
            message: Bytes that were signed
            signature: Raw signature bytes
            public_key: Key to verify with (defaults to the signer's own)

        Returns:
            True when the signature matches
        """
        return verify_signature(public_key or self._public_key, message, signature)


def verify_signature(
    public_key: RSAPublicKey,
    message: Union[bytes, str],
    signature: bytes,
) -> bool:
    """Check an RSA-SHA256 PKCS#1 v1.5 signature against public_key"""
    data = message.encode("utf-8") if isinstance(message, str) else message

    try:
        public_key.verify(signature, data, padding.PKCS1v15(), hashes.SHA256())
    except InvalidSignature:
        return False

    return True
