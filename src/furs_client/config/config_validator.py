"""
Configuration Validator
Validates FURS client configuration with clear error messages
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from furs_client.config.furs_config import FursEnvironment
from furs_client.exceptions import ValidationError


CERTIFICATE_EXTENSIONS = (".p12", ".pfx")


@dataclass
class ValidationErrorDetail:
    """Validation error detail"""
    field: str
    message: str
    value: Optional[Any] = None


@dataclass
class ValidationResult:
    """Validation result"""
    valid: bool
    errors: List[ValidationErrorDetail] = field(default_factory=list)


class ConfigValidator:
    """
    ConfigValidator class
    Provides comprehensive validation for FURS configuration
    """

    def __init__(self) -> None:
        self._errors: List[ValidationErrorDetail] = []

    def validate(self, config: Dict[str, Any]) -> ValidationResult:
        """
        Validate the entire configuration dictionary

        Args:
            config: Configuration dictionary to validate

        Returns:
            ValidationResult listing every problem found
        """
        self._errors = []

        self._validate_required(config)
        self._validate_tax_number(config)
        self._validate_formats(config)
        self._validate_ranges(config)
        self._validate_environment(config)
        self._validate_certificate_config(config)

        return ValidationResult(
            valid=len(self._errors) == 0,
            errors=self._errors.copy()
        )

    def validate_or_raise(self, config: Dict[str, Any]) -> None:
        """
        Validate and raise if invalid

        Raises:
            ValidationError: If configuration is invalid
        """
        result = self.validate(config)
        if not result.valid:
            error_messages = "; ".join(
                f"{e.field}: {e.message}" for e in result.errors
            )
            raise ValidationError(
                f"Configuration validation failed: {error_messages}",
                field=result.errors[0].field,
                details={"errors": [e.field for e in result.errors]},
            )

    def _add_error(self, field_name: str, message: str, value: Any = None) -> None:
        self._errors.append(ValidationErrorDetail(
            field=field_name,
            message=message,
            value=value
        ))

    def _validate_required(self, config: Dict[str, Any]) -> None:
        """Validate required fields are present and non-empty"""
        for field_name in ("cert_path", "cert_password", "tax_number"):
            value = config.get(field_name)
            if value is None:
                self._add_error(field_name, f"{field_name} is required")
            elif isinstance(value, str) and value.strip() == "":
                self._add_error(
                    field_name,
                    f"{field_name} cannot be empty",
                    None if field_name == "cert_password" else value
                )

    def _validate_tax_number(self, config: Dict[str, Any]) -> None:
        """Validate the tax number is exactly 8 digits"""
        tax_number = config.get("tax_number")
        if tax_number is None or (isinstance(tax_number, str) and tax_number.strip() == ""):
            return

        if isinstance(tax_number, bool) or not isinstance(tax_number, (int, str)):
            self._add_error("tax_number", "tax_number must be an 8-digit number", tax_number)
            return

        text = str(tax_number).strip()
        if len(text) != 8 or not text.isascii() or not text.isdigit() or text.startswith("0"):
            self._add_error("tax_number", "tax_number must be an 8-digit number", tax_number)

    def _validate_formats(self, config: Dict[str, Any]) -> None:
        """Validate field formats"""
        base_url = config.get("base_url")
        if base_url is not None and base_url != "":
            if not isinstance(base_url, str) or not base_url.startswith(("http://", "https://")):
                self._add_error("base_url", "base_url must be a valid HTTP/HTTPS URL", base_url)

        for endpoint_field in ("business_premise_endpoint", "invoice_endpoint"):
            endpoint = config.get(endpoint_field)
            if endpoint is not None:
                if not isinstance(endpoint, str) or not endpoint.startswith("/"):
                    self._add_error(
                        endpoint_field,
                        f"{endpoint_field} must be a path starting with '/'",
                        endpoint
                    )

        ca_certs_path = config.get("ca_certs_path")
        if ca_certs_path is not None and not isinstance(ca_certs_path, str):
            self._add_error("ca_certs_path", "ca_certs_path must be a string", ca_certs_path)

    def _validate_ranges(self, config: Dict[str, Any]) -> None:
        """Validate numeric ranges"""
        timeout = config.get("timeout")
        if timeout is not None:
            if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
                self._add_error(
                    "timeout",
                    "timeout must be a positive number (milliseconds)",
                    timeout
                )
            elif timeout < 1000:
                self._add_error(
                    "timeout",
                    "timeout should be at least 1000ms for reliable operation",
                    timeout
                )
            elif timeout > 300000:
                self._add_error(
                    "timeout",
                    "timeout should not exceed 300000ms (5 minutes)",
                    timeout
                )

    def _validate_environment(self, config: Dict[str, Any]) -> None:
        """Validate environment setting"""
        environment = config.get("environment")
        if environment is not None:
            valid_environments = [e.value for e in FursEnvironment]
            env_value = environment.value if isinstance(environment, FursEnvironment) else environment
            if env_value not in valid_environments:
                self._add_error(
                    "environment",
                    f"environment must be one of: {', '.join(valid_environments)}",
                    environment
                )

    def _validate_certificate_config(self, config: Dict[str, Any]) -> None:
        """Validate the certificate path points at a PKCS#12 archive"""
        cert_path = config.get("cert_path")
        if isinstance(cert_path, str) and cert_path.strip():
            if not cert_path.lower().endswith(CERTIFICATE_EXTENSIONS):
                self._add_error(
                    "cert_path",
                    "cert_path must point to a PKCS#12 file "
                    f"({', '.join(CERTIFICATE_EXTENSIONS)})",
                    cert_path
                )
