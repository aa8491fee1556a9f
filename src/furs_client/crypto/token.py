"""
Signed request tokens
Build, decode and verify FURS authorization tokens

A FURS token has the shape of a JWS compact serialization
(``header.payload.signature``, base64url without padding) but its header
carries the certificate identity instead of a key id:

    {"alg": "RS256", "subject_name": ..., "issuer_name": ..., "serial": ...}

Tokens are signed over the UTF-8 bytes of ``header.payload``.
"""

import base64
import binascii
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from cryptography.hazmat.primitives.asymmetric.rsa import RSAPublicKey

from furs_client.crypto.certificate import CertificateIdentity
from furs_client.crypto.signature import Signer, verify_signature
from furs_client.exceptions import MalformedTokenError


logger = logging.getLogger(__name__)


TOKEN_SEGMENTS = 3


def base64url_encode(data: Union[bytes, str]) -> str:
    """Encode bytes (or UTF-8 text) as base64url without padding"""
    raw = data.encode("utf-8") if isinstance(data, str) else data
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def base64url_decode(data: str) -> bytes:
    """
    Decode base64url text with or without padding

    Raises:
        ValueError: If data contains characters outside the base64url alphabet
    """
    padded = data + "=" * (-len(data) % 4)
    standard = padded.replace("-", "+").replace("_", "/")
    return base64.b64decode(standard, validate=True)


def canonical_json(value: Any) -> str:
    """Serialize to compact JSON, keeping key order and non-ASCII text"""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def build_header(identity: CertificateIdentity) -> Dict[str, str]:
    """Build the token header for a certificate identity"""
    return {
        "alg": Signer.ALGORITHM,
        "subject_name": identity.subject_name,
        "issuer_name": identity.issuer_name,
        "serial": identity.serial,
    }


def build_token(payload: Any, identity: CertificateIdentity, signer: Signer) -> str:
    """
    Build a signed FURS token

    Args:
        payload: JSON-serializable request body
        identity: Certificate identity placed in the header
        signer: Signer holding the matching private key

    Returns:
        Token string ``header.payload.signature``

    Raises:
        SigningError: If signing fails
    """
    encoded_header = base64url_encode(canonical_json(build_header(identity)))
    encoded_payload = base64url_encode(canonical_json(payload))
    signing_input = f"{encoded_header}.{encoded_payload}"

    signature = signer.sign(signing_input.encode("utf-8"))

    return f"{signing_input}.{base64url_encode(signature)}"


@dataclass
class DecodedToken:
    """
    Result of decoding a token

    ``valid`` reports structural validity only; use ``verify_token`` to
    check the signature.
    """
    header: Dict[str, Any] = field(default_factory=dict)
    payload: Any = field(default_factory=dict)
    signature: str = ""
    valid: bool = False
    error: Optional[str] = None


def _split(token: Any) -> List[str]:
    if not isinstance(token, str):
        raise MalformedTokenError("Token must be a string")

    segments = token.split(".")
    if len(segments) != TOKEN_SEGMENTS:
        raise MalformedTokenError(
            f"Invalid token format - expected {TOKEN_SEGMENTS} segments, got {len(segments)}"
        )
    return segments


def _decode_segment(segment: str, name: str) -> Any:
    try:
        return json.loads(base64url_decode(segment).decode("utf-8"))
    # deeply nested JSON exhausts the decoder's recursion limit
    except (binascii.Error, ValueError, RecursionError) as e:
        raise MalformedTokenError(f"Invalid token {name}: {str(e)}", cause=e) from e


def decode_token(token: str) -> DecodedToken:
    """
    Decode a token without verifying its signature

    Never raises. Tokens come from the FURS server and any structural
    problem is reported through ``DecodedToken.error``.
    """
    try:
        encoded_header, encoded_payload, encoded_signature = _split(token)
        header = _decode_segment(encoded_header, "header")
        if not isinstance(header, dict):
            raise MalformedTokenError("Invalid token header: not a JSON object")
        payload = _decode_segment(encoded_payload, "payload")
    except MalformedTokenError as e:
        logger.warning(f"Failed to decode token: {str(e)}")
        return DecodedToken(error=str(e))

    return DecodedToken(
        header=header,
        payload=payload,
        signature=encoded_signature,
        valid=True,
    )


def verify_token(token: str, key: Union[Signer, RSAPublicKey]) -> bool:
    """
    Verify a token's RS256 signature

    Args:
        token: Token string
        key: Signer or RSA public key to verify with

    Returns:
        True when the token is well formed and the signature matches
    """
    try:
        encoded_header, encoded_payload, encoded_signature = _split(token)
        signature = base64url_decode(encoded_signature)
    except (MalformedTokenError, binascii.Error, ValueError):
        return False

    public_key = key.public_key if isinstance(key, Signer) else key
    signing_input = f"{encoded_header}.{encoded_payload}".encode("utf-8")
    return verify_signature(public_key, signing_input, signature)
