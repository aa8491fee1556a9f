"""
FURS Configuration Types and Schema
Type-safe configuration objects for the FURS client
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from furs_client.crypto.certificate import DEVICE_CLASS_MARKER


class FursEnvironment(str, Enum):
    """FURS Environment types"""
    TEST = "test"
    PRODUCTION = "production"


# Base URLs for FURS environments
FURS_BASE_URLS = {
    FursEnvironment.TEST: "https://blagajne-test.fu.gov.si:9002",
    FursEnvironment.PRODUCTION: "https://blagajne.fu.gov.si:9003",
}


class ConfigDefaults:
    """Default configuration values"""
    ENVIRONMENT = FursEnvironment.TEST
    BUSINESS_PREMISE_ENDPOINT = "/v1/cash_registers/invoices/register"
    INVOICE_ENDPOINT = "/v1/cash_registers/invoices"
    TIMEOUT = 30000
    VERIFY_TLS = True
    ENABLE_AUDIT_LOG = True
    DEBUG = False


# Environment variable mapping
ENV_VAR_MAPPING = {
    "FURS_CERT_PATH": "cert_path",
    "FURS_CERT_PASSWORD": "cert_password",
    "FURS_TAX_NUMBER": "tax_number",
    "FURS_ENVIRONMENT": "environment",
    "FURS_BASE_URL": "base_url",
    "FURS_BUSINESS_PREMISE_ENDPOINT": "business_premise_endpoint",
    "FURS_INVOICE_ENDPOINT": "invoice_endpoint",
    "FURS_TIMEOUT": "timeout",
    "FURS_CA_CERTS_PATH": "ca_certs_path",
    "FURS_VERIFY_TLS": "verify_tls",
    "FURS_DEVICE_CLASS_MARKER": "device_class_marker",
    "FURS_ENABLE_AUDIT_LOG": "enable_audit_log",
    "FURS_DEBUG": "debug",
}


class FursConfig(BaseModel):
    """
    Main FURS Configuration class
    Defines all configuration options for the FURS client
    """

    # Required - Certificate and taxpayer
    cert_path: str = Field(
        ...,
        description="Path to the PKCS#12 (.p12/.pfx) certificate issued by FURS",
        min_length=1
    )
    cert_password: str = Field(
        ...,
        description="Passphrase of the PKCS#12 certificate",
        min_length=1
    )
    tax_number: int = Field(
        ...,
        description="Taxpayer's 8-digit tax number"
    )

    # Optional - Environment settings
    environment: FursEnvironment = Field(
        default=ConfigDefaults.ENVIRONMENT,
        description="Environment: 'test' or 'production'"
    )
    base_url: Optional[str] = Field(
        default=None,
        description="Override default base URL"
    )
    business_premise_endpoint: str = Field(
        default=ConfigDefaults.BUSINESS_PREMISE_ENDPOINT,
        description="Business premise registration path"
    )
    invoice_endpoint: str = Field(
        default=ConfigDefaults.INVOICE_ENDPOINT,
        description="Invoice fiscalization path"
    )
    timeout: int = Field(
        default=ConfigDefaults.TIMEOUT,
        description="Request timeout in milliseconds",
        ge=1000,
        le=300000
    )

    # Optional - TLS
    ca_certs_path: Optional[str] = Field(
        default=None,
        description="Directory or file with CA certificates for the FURS server"
    )
    verify_tls: bool = Field(
        default=ConfigDefaults.VERIFY_TLS,
        description="Verify the FURS server certificate"
    )

    # Optional - Certificate identity
    device_class_marker: str = Field(
        default=DEVICE_CLASS_MARKER,
        description="OU value identifying the certificate class",
        min_length=1
    )

    # Optional - Logging
    enable_audit_log: bool = Field(
        default=ConfigDefaults.ENABLE_AUDIT_LOG,
        description="Enable audit logging of HTTP exchanges"
    )
    debug: bool = Field(
        default=ConfigDefaults.DEBUG,
        description="Enable debug logging"
    )

    model_config = {
        "str_strip_whitespace": True,
    }

    @field_validator("tax_number")
    @classmethod
    def validate_tax_number(cls, v: int) -> int:
        """Validate tax_number has exactly 8 digits"""
        if not 10000000 <= v <= 99999999:
            raise ValueError("tax_number must be an 8-digit number")
        return v

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: Optional[str]) -> Optional[str]:
        """Validate base_url is a valid URL"""
        if v is not None and v != "":
            if not v.startswith(("http://", "https://")):
                raise ValueError("base_url must be a valid HTTP/HTTPS URL")
        return v

    @field_validator("business_premise_endpoint", "invoice_endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        """Validate endpoint paths are absolute"""
        if not v.startswith("/"):
            raise ValueError("endpoint must start with '/'")
        return v

    @model_validator(mode="after")
    def set_default_base_url(self) -> "FursConfig":
        """Set default base_url based on environment if not provided"""
        if not self.base_url:
            self.base_url = FURS_BASE_URLS[self.environment]
        return self

    def get_resolved_base_url(self) -> str:
        """Get the resolved base URL"""
        return (self.base_url or FURS_BASE_URLS[self.environment]).rstrip("/")

    def get_business_premise_url(self) -> str:
        return f"{self.get_resolved_base_url()}{self.business_premise_endpoint}"

    def get_invoice_url(self) -> str:
        return f"{self.get_resolved_base_url()}{self.invoice_endpoint}"
