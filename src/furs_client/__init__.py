"""
FURS Fiscalization SDK for Python

Main entry point for the SDK
"""

from furs_client.client import FursClient
from furs_client.exceptions import (
    FursError,
    FursErrorCategory,
    ValidationError,
    InvalidZoiError,
    InvalidTaxNumberError,
    InvalidPayloadLengthError,
    InvalidPartCountError,
    CryptoError,
    CertificateParseError,
    SigningError,
    MalformedTokenError,
    AuthenticationError,
    NetworkError,
    ServerError,
    ConfigError,
)

# HTTP Client
from furs_client.client import (
    HttpClient,
    HttpRequestOptions,
    HttpResponse,
    HttpAuditEntry,
)

# Configuration
from furs_client.config import (
    FursConfig,
    FursEnvironment,
    ConfigLoader,
    ConfigValidator,
    FURS_BASE_URLS,
    ENV_VAR_MAPPING,
    ConfigDefaults,
)

# Cryptography
from furs_client.crypto import (
    CertificateBundle,
    CertificateIdentity,
    Signer,
    ZoiInput,
    compute_zoi,
    DecodedToken,
    build_token,
    decode_token,
    verify_token,
)

# Fiscal codes
from furs_client.codes import (
    BarcodeSplitter,
    CodeGenerationResult,
    CodeGenerator,
    CodeType,
    FiscalPayload,
    FiscalPayloadBuilder,
    InvoiceCodeData,
)

# Models
from furs_client.models import (
    Address,
    BusinessPremiseRequest,
    BusinessPremiseResult,
    FursResponse,
    InvoiceRequest,
    InvoiceResult,
    PremiseIdentifier,
    PropertyId,
    RealEstatePremise,
    SoftwareSupplier,
    TaxesPerSeller,
    VatInfo,
)

__version__ = "0.1.0"

__all__ = [
    # Client
    "FursClient",
    # HTTP Client
    "HttpClient",
    "HttpRequestOptions",
    "HttpResponse",
    "HttpAuditEntry",
    # Exceptions
    "FursError",
    "FursErrorCategory",
    "ValidationError",
    "InvalidZoiError",
    "InvalidTaxNumberError",
    "InvalidPayloadLengthError",
    "InvalidPartCountError",
    "CryptoError",
    "CertificateParseError",
    "SigningError",
    "MalformedTokenError",
    "AuthenticationError",
    "NetworkError",
    "ServerError",
    "ConfigError",
    # Configuration
    "FursConfig",
    "FursEnvironment",
    "ConfigLoader",
    "ConfigValidator",
    "FURS_BASE_URLS",
    "ENV_VAR_MAPPING",
    "ConfigDefaults",
    # Cryptography
    "CertificateBundle",
    "CertificateIdentity",
    "Signer",
    "ZoiInput",
    "compute_zoi",
    "DecodedToken",
    "build_token",
    "decode_token",
    "verify_token",
    # Fiscal codes
    "BarcodeSplitter",
    "CodeGenerationResult",
    "CodeGenerator",
    "CodeType",
    "FiscalPayload",
    "FiscalPayloadBuilder",
    "InvoiceCodeData",
    # Models
    "Address",
    "BusinessPremiseRequest",
    "BusinessPremiseResult",
    "FursResponse",
    "InvoiceRequest",
    "InvoiceResult",
    "PremiseIdentifier",
    "PropertyId",
    "RealEstatePremise",
    "SoftwareSupplier",
    "TaxesPerSeller",
    "VatInfo",
]
