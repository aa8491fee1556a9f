"""
HTTP transport layer for the FURS API
Handles HTTPS communication with mutual TLS, request ids and audit logging
"""

import os
import tempfile
import time
import uuid
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Generic, List, Optional, Tuple, TypeVar, Union

import requests
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
)

from furs_client.config.furs_config import FursConfig
from furs_client.crypto.certificate import CertificateBundle, load_ca_certificates
from furs_client.exceptions import AuthenticationError, FursError, NetworkError


# Type variable for generic response
T = TypeVar("T")

# Logger for this module
logger = logging.getLogger(__name__)


@dataclass
class HttpRequestOptions:
    """Request options for HTTP client"""
    headers: Optional[Dict[str, str]] = None
    timeout: Optional[int] = None  # milliseconds


@dataclass
class HttpResponse(Generic[T]):
    """HTTP response wrapper"""
    data: T
    status: int
    headers: Dict[str, str]
    duration: int  # milliseconds
    request_id: str


@dataclass
class HttpAuditEntry:
    """Audit log entry for HTTP requests"""
    timestamp: str
    request_id: str
    method: str
    url: str
    headers: Dict[str, str]
    body: Optional[Any] = None
    response: Optional[Dict[str, Any]] = None
    duration: int = 0
    success: bool = False
    error: Optional[str] = None


# Sensitive fields that should be redacted in audit entries
SENSITIVE_FIELDS = [
    "authorization",
    "token",
    "privatekey",
    "private_key",
    "password",
    "cert_password",
]


def bundle_to_temp_pem_files(bundle: CertificateBundle) -> Tuple[str, str]:
    """
    Write a bundle's certificate chain and private key to temporary PEM files

    ``requests`` only accepts client certificates as file paths. The files
    are created with owner-only permissions and must be removed with
    ``cleanup_pem_files``.

    Returns:
        (certificate_path, key_path)
    """
    cert_pem = bundle.certificate.public_bytes(Encoding.PEM)
    for extra in bundle.additional_certificates:
        cert_pem += extra.public_bytes(Encoding.PEM)

    key_pem = bundle.private_key.private_bytes(
        Encoding.PEM,
        PrivateFormat.PKCS8,
        NoEncryption(),
    )

    cert_path = _write_temp_file(cert_pem, "furs-cert-")
    try:
        key_path = _write_temp_file(key_pem, "furs-key-")
    except OSError:
        cleanup_pem_files(cert_path)
        raise

    return cert_path, key_path


def cleanup_pem_files(*paths: Optional[str]) -> None:
    """Remove temporary PEM files, ignoring ones already gone"""
    for path in paths:
        if not path:
            continue
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Failed to remove temporary file {path}: {e}")


def _write_temp_file(data: bytes, prefix: str) -> str:
    fd, path = tempfile.mkstemp(prefix=prefix, suffix=".pem")
    with os.fdopen(fd, "wb") as f:
        f.write(data)
    return path


def _is_sensitive(key: Any) -> bool:
    lower_key = str(key).lower()
    return any(name in lower_key for name in SENSITIVE_FIELDS)


def redact(value: Any) -> Any:
    """Replace sensitive values in nested dicts and lists with ``[REDACTED]``"""
    if isinstance(value, dict):
        return {
            key: "[REDACTED]" if _is_sensitive(key) else redact(item)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [redact(item) for item in value]
    return value


def _parse_body(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class HttpClient:
    """
    HTTP Client for the FURS API

    Features:
    - Mutual TLS with the taxpayer's certificate
    - Server verification against a configurable CA bundle
    - Request ID generation for traceability
    - Audit logging with redaction of sensitive fields

    Example:
        >>> config = FursConfig(...)
        >>> with HttpClient(config, bundle) as client:
        ...     response = client.post(config.invoice_endpoint, {"token": token})
        ...     print(response.data)
    """

    def __init__(
        self,
        config: FursConfig,
        bundle: Optional[CertificateBundle] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Create a new HTTP client instance

        Args:
            config: Resolved FURS configuration
            bundle: Certificate bundle presented as the TLS client certificate
            session: Preconfigured session (a new one is created when omitted)
        """
        self.config = config

        # Audit logging callback
        self._audit_log_callback: Optional[Callable[[HttpAuditEntry], None]] = None

        self._temp_files: List[str] = []
        try:
            self._session = session or self._create_session(bundle)
        except Exception:
            cleanup_pem_files(*self._temp_files)
            raise

    def _create_session(self, bundle: Optional[CertificateBundle]) -> requests.Session:
        """Create a requests session configured for mutual TLS"""
        session = requests.Session()

        session.headers.update({
            "Content-Type": "application/json; charset=UTF-8",
            "Accept": "application/json",
        })

        if bundle is not None:
            cert_path, key_path = bundle_to_temp_pem_files(bundle)
            self._temp_files.extend([cert_path, key_path])
            session.cert = (cert_path, key_path)

        session.verify = self._resolve_verify()

        return session

    def _resolve_verify(self) -> Union[bool, str]:
        """Resolve the ``verify`` setting for the session"""
        if not self.config.verify_tls:
            logger.warning("TLS verification of the FURS server is disabled")
            return False

        if not self.config.ca_certs_path:
            return True

        pem_certificates = load_ca_certificates(self.config.ca_certs_path)
        ca_bundle = _write_temp_file("".join(pem_certificates).encode("utf-8"), "furs-ca-")
        self._temp_files.append(ca_bundle)
        return ca_bundle

    def _generate_request_id(self) -> str:
        """Generate unique request ID for traceability"""
        timestamp = hex(int(time.time() * 1000))[2:]
        return f"furs-{timestamp}-{uuid.uuid4().hex[:8]}"

    def _normalize_error(
        self, error: Exception, response: Optional[requests.Response] = None
    ) -> FursError:
        """Map a requests exception onto the FURS error hierarchy"""
        if isinstance(error, FursError):
            return error

        # SSLError subclasses ConnectionError and must be checked first
        if isinstance(error, requests.exceptions.Timeout):
            return NetworkError.timeout()
        if isinstance(error, requests.exceptions.SSLError):
            return NetworkError.ssl_error(f"SSL/TLS error: {error}")
        if isinstance(error, requests.exceptions.ConnectionError):
            return NetworkError.connection_error(f"Connection error: {error}")

        if response is None or not isinstance(error, requests.exceptions.HTTPError):
            return FursError(f"Request error: {error}", cause=error)

        status = response.status_code
        excerpt = (response.text or "")[:200]
        message = f"HTTP {status} from FURS" + (f": {excerpt}" if excerpt else "")

        if status in (401, 403):
            return AuthenticationError(message, cause=error)

        return FursError(message, code="SERVER_HTTP_ERROR", status_code=status, cause=error)

    def _audit(
        self,
        request_id: str,
        url: str,
        headers: Dict[str, str],
        body: Optional[Any],
        started: float,
        response: Optional[requests.Response] = None,
        error: Optional[Exception] = None,
    ) -> None:
        """Hand a redacted record of one exchange to the audit callback"""
        if not (self.config.enable_audit_log and self._audit_log_callback):
            return

        response_record = None
        if response is not None:
            response_body = _parse_body(response)
            if isinstance(response_body, str):
                response_body = response_body[:500] or None
            response_record = {
                "statusCode": response.status_code,
                "body": redact(response_body),
            }

        self._audit_log_callback(HttpAuditEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            request_id=request_id,
            method="POST",
            url=url,
            headers=redact(dict(headers)),
            body=redact(body),
            response=response_record,
            duration=int((time.time() - started) * 1000),
            success=error is None,
            error=str(error) if error else None,
        ))

    def set_audit_log_callback(
        self, callback: Callable[[HttpAuditEntry], None]
    ) -> None:
        """Register the receiver of audit entries"""
        self._audit_log_callback = callback

    def post(
        self,
        url: str,
        data: Optional[Any] = None,
        options: Optional[HttpRequestOptions] = None,
    ) -> HttpResponse[Any]:
        """
        POST a JSON body to a FURS endpoint

        Args:
            url: Request path (relative to base URL)
            data: JSON request body
            options: Optional request options

        Returns:
            HTTP response wrapper

        Raises:
            NetworkError: On timeouts, TLS and connection failures
            AuthenticationError: When FURS rejects the client certificate
            FursError: On other HTTP errors
        """
        options = options or HttpRequestOptions()
        full_url = f"{self.base_url}{url}"
        request_id = self._generate_request_id()

        headers = {**self._session.headers, "X-Request-ID": request_id, **(options.headers or {})}
        timeout = (options.timeout or self.config.timeout) / 1000.0

        logger.debug(f"POST {full_url} [{request_id}]")
        started = time.time()
        response: Optional[requests.Response] = None

        try:
            response = self._session.post(full_url, json=data, headers=headers, timeout=timeout)
            response.raise_for_status()
        except Exception as e:
            self._audit(request_id, full_url, headers, data, started, response, e)
            normalized = self._normalize_error(e, response)
            logger.debug(f"POST {full_url} [{request_id}] failed: {normalized}")
            raise normalized from e

        self._audit(request_id, full_url, headers, data, started, response)

        duration = int((time.time() - started) * 1000)
        logger.debug(f"POST {full_url} [{request_id}] {response.status_code} in {duration}ms")

        return HttpResponse(
            data=_parse_body(response),
            status=response.status_code,
            headers=dict(response.headers),
            duration=duration,
            request_id=request_id,
        )

    @property
    def base_url(self) -> str:
        """Resolved FURS base URL without a trailing slash"""
        return self.config.get_resolved_base_url()

    def close(self) -> None:
        """Close the HTTP session and remove temporary certificate files"""
        self._session.close()
        cleanup_pem_files(*self._temp_files)
        self._temp_files = []

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
