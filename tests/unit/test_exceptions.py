"""
Exception Hierarchy Unit Tests
"""

import pytest

from furs_client.exceptions import (
    AuthenticationError,
    CertificateParseError,
    ConfigError,
    CryptoError,
    FursError,
    FursErrorCategory,
    InvalidPartCountError,
    InvalidPayloadLengthError,
    InvalidTaxNumberError,
    InvalidZoiError,
    MalformedTokenError,
    NetworkError,
    ServerError,
    SigningError,
    ValidationError,
)


class TestFursError:
    """Tests for the base error"""

    @pytest.mark.parametrize("code,category", [
        ("VALIDATION_ERROR", FursErrorCategory.VALIDATION),
        ("AUTHENTICATION_ERROR", FursErrorCategory.AUTH),
        ("NET01", FursErrorCategory.NETWORK),
        ("SERVER_HTTP_ERROR", FursErrorCategory.SERVER),
        ("CRYPTO_SIGNING", FursErrorCategory.CRYPTO),
        ("TOKEN_MALFORMED", FursErrorCategory.TOKEN),
        ("CONFIG01", FursErrorCategory.CONFIG),
        ("S001", FursErrorCategory.UNKNOWN),
        (None, FursErrorCategory.UNKNOWN),
    ])
    def test_category_from_code(self, code, category):
        assert FursError("failure", code=code).category == category

    def test_to_dict(self):
        error = FursError("failure", code="SERVER_HTTP_ERROR", status_code=502)
        data = error.to_dict()
        assert data["name"] == "FursError"
        assert data["message"] == "failure"
        assert data["code"] == "SERVER_HTTP_ERROR"
        assert data["status_code"] == 502
        assert data["category"] == "SERVER"

    def test_description(self):
        error = FursError("failure", code="NET02", status_code=503)
        assert error.get_description() == "[NET02] failure (HTTP 503)"
        assert error.has_code("NET02")


class TestErrorHierarchy:
    """Tests for the specific error classes"""

    @pytest.mark.parametrize("error", [
        InvalidZoiError(),
        InvalidTaxNumberError(),
        InvalidPayloadLengthError(),
        InvalidPartCountError(),
    ])
    def test_format_errors_are_validation_errors(self, error):
        assert isinstance(error, ValidationError)
        assert error.is_category(FursErrorCategory.VALIDATION)
        assert error.field is not None
        assert error.invariant is not None

    def test_default_messages(self):
        assert str(InvalidPayloadLengthError()) == "Code data must be exactly 60 digits"
        assert str(InvalidPartCountError()) == "Number of parts must be between 2 and 6"

    @pytest.mark.parametrize("error_class", [CertificateParseError, SigningError, MalformedTokenError])
    def test_crypto_errors(self, error_class):
        error = error_class("failure")
        assert isinstance(error, CryptoError)
        assert isinstance(error, FursError)

    def test_malformed_token_category(self):
        assert MalformedTokenError("bad").is_category(FursErrorCategory.TOKEN)

    def test_server_error_category(self):
        error = ServerError("FURS Error S001: bad", server_code="S001")
        assert error.code == "S001"
        assert error.category == FursErrorCategory.SERVER

    def test_network_error_factories(self):
        assert NetworkError.timeout().status_code == 408
        assert NetworkError.connection_error().network_code == "NET02"
        assert NetworkError.ssl_error().is_category(FursErrorCategory.NETWORK)

    def test_authentication_and_config(self):
        assert AuthenticationError("denied").is_category(FursErrorCategory.AUTH)
        assert ConfigError("missing").is_category(FursErrorCategory.CONFIG)
