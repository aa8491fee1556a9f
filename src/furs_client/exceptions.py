"""Exception classes for the FURS client"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class FursErrorCategory(str, Enum):
    """FURS error category codes"""
    VALIDATION = "VAL"
    AUTH = "AUTH"
    NETWORK = "NET"
    SERVER = "SERVER"
    CRYPTO = "CRYPTO"
    TOKEN = "TOKEN"
    CONFIG = "CONFIG"
    UNKNOWN = "UNKNOWN"


class FursError(Exception):
    """
    Base exception for FURS errors

    All errors in the package extend from this class.
    Provides consistent error handling and categorization.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
        category: Optional[FursErrorCategory] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.status_code = status_code
        self.cause = cause
        self.details = details
        self.timestamp = datetime.now(timezone.utc)
        self.category = category or self._determine_category(code)

    def _determine_category(self, code: Optional[str]) -> FursErrorCategory:
        """Determine error category from code"""
        if not code:
            return FursErrorCategory.UNKNOWN

        if code.startswith("VAL"):
            return FursErrorCategory.VALIDATION
        if code.startswith("AUTH"):
            return FursErrorCategory.AUTH
        if code.startswith("NET"):
            return FursErrorCategory.NETWORK
        if code.startswith("SERVER"):
            return FursErrorCategory.SERVER
        if code.startswith("CRYPTO"):
            return FursErrorCategory.CRYPTO
        if code.startswith("TOKEN"):
            return FursErrorCategory.TOKEN
        if code.startswith("CONFIG"):
            return FursErrorCategory.CONFIG

        return FursErrorCategory.UNKNOWN

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary"""
        return {
            "name": self.__class__.__name__,
            "message": str(self),
            "code": self.code,
            "status_code": self.status_code,
            "category": self.category.value,
            "timestamp": self.timestamp.isoformat(),
            "details": self.details,
        }

    def has_code(self, code: str) -> bool:
        """Check if error has a specific code"""
        return self.code == code

    def is_category(self, category: FursErrorCategory) -> bool:
        """Check if error belongs to a category"""
        return self.category == category

    def get_description(self) -> str:
        """Get human-readable error description"""
        parts = [str(self)]

        if self.code:
            parts.insert(0, f"[{self.code}]")

        if self.status_code:
            parts.append(f"(HTTP {self.status_code})")

        return " ".join(parts)


class ValidationError(FursError):
    """
    Validation error

    Raised when caller-supplied data violates a format invariant.
    ``invariant`` names the rule that failed.
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        invariant: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code="VALIDATION_ERROR", details=details)
        self.field = field
        self.invariant = invariant


class InvalidZoiError(ValidationError):
    """ZOI is not 32 hexadecimal characters"""

    def __init__(self, message: str = "Invalid ZOI format. Must be 32 hexadecimal characters.",
                 details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, field="zoi", invariant="^[0-9a-fA-F]{32}$", details=details)


class InvalidTaxNumberError(ValidationError):
    """Tax number does not render to exactly 8 digits"""

    def __init__(self, message: str = "Invalid tax number. Must be 8 digits.",
                 details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, field="tax_number", invariant="^\\d{8}$", details=details)


class InvalidPayloadLengthError(ValidationError):
    """Fiscal payload is not exactly 60 digits"""

    def __init__(self, message: str = "Code data must be exactly 60 digits",
                 details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, field="payload", invariant="^\\d{60}$", details=details)


class InvalidPartCountError(ValidationError):
    """Barcode part count outside of [2, 6]"""

    def __init__(self, message: str = "Number of parts must be between 2 and 6",
                 details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, field="parts", invariant="2 <= parts <= 6", details=details)


class CryptoError(FursError):
    """Cryptographic operation error"""

    def __init__(
        self,
        message: str,
        code: str = "CRYPTO01",
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code=code, cause=cause, details=details)


class CertificateParseError(CryptoError):
    """Certificate bundle is malformed, incomplete or cannot be decrypted"""

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code="CRYPTO_CERT_PARSE", cause=cause, details=details)


class SigningError(CryptoError):
    """Private key is unusable for signing"""

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code="CRYPTO_SIGNING", cause=cause, details=details)


class MalformedTokenError(CryptoError):
    """Signed token does not have the header.payload.signature structure"""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(message, code="TOKEN_MALFORMED", cause=cause)


class AuthenticationError(FursError):
    """Certificate or credential problem"""

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code="AUTHENTICATION_ERROR", cause=cause, details=details)


class NetworkError(FursError):
    """
    Network error for HTTP transport layer failures
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        network_code: str = "NET10",
        cause: Optional[Exception] = None,
    ) -> None:
        super().__init__(message, code=network_code, status_code=status_code, cause=cause)
        self.network_code = network_code

    @classmethod
    def timeout(cls, message: str = "Request timed out") -> "NetworkError":
        """Create a timeout error"""
        return cls(message, status_code=408, network_code="NET01")

    @classmethod
    def connection_error(
        cls, message: str = "Connection failed"
    ) -> "NetworkError":
        """Create a connection error"""
        return cls(message, network_code="NET02")

    @classmethod
    def ssl_error(cls, message: str = "SSL/TLS error") -> "NetworkError":
        """Create an SSL error"""
        return cls(message, network_code="NET04")


class ServerError(FursError):
    """FURS returned an error block in its response"""

    def __init__(
        self,
        message: str,
        server_code: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message,
            code=server_code,
            status_code=status_code,
            details=details,
            category=FursErrorCategory.SERVER,
        )
        self.server_code = server_code


class ConfigError(FursError):
    """Configuration error"""

    def __init__(
        self,
        message: str,
        code: str = "CONFIG01",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code=code, details=details)
