"""
Configuration Module Unit Tests
"""

import os
import json
import tempfile
from pathlib import Path
import pytest

from furs_client.config import (
    FursConfig,
    FursEnvironment,
    ConfigLoader,
    ConfigValidator,
    ConfigDefaults,
    FURS_BASE_URLS,
)
from furs_client.exceptions import ConfigError, ValidationError


class TestConfigValidator:
    """Tests for ConfigValidator"""

    @pytest.fixture
    def validator(self) -> ConfigValidator:
        return ConfigValidator()

    @pytest.fixture
    def valid_config(self) -> dict:
        return {
            "cert_path": "/path/to/furs.p12",
            "cert_password": "secret",
            "tax_number": 12345678,
        }

    def test_validate_valid_config(self, validator: ConfigValidator, valid_config: dict):
        """Should pass with valid configuration"""
        result = validator.validate(valid_config)
        assert result.valid is True
        assert len(result.errors) == 0

    def test_validate_missing_cert_path(self, validator: ConfigValidator, valid_config: dict):
        """Should fail when cert_path is missing"""
        del valid_config["cert_path"]
        result = validator.validate(valid_config)
        assert result.valid is False
        assert any(e.field == "cert_path" for e in result.errors)

    def test_validate_empty_password(self, validator: ConfigValidator, valid_config: dict):
        """Should fail when cert_password is empty without echoing it"""
        valid_config["cert_password"] = "  "
        result = validator.validate(valid_config)
        assert result.valid is False
        error = next(e for e in result.errors if e.field == "cert_password")
        assert "empty" in error.message
        assert error.value is None

    @pytest.mark.parametrize("tax_number", [1234567, "123456789", "1234567a", "01234567", True])
    def test_validate_invalid_tax_number(self, validator: ConfigValidator, valid_config: dict, tax_number):
        """Should fail when tax_number is not 8 digits"""
        valid_config["tax_number"] = tax_number
        result = validator.validate(valid_config)
        assert result.valid is False
        assert any(e.field == "tax_number" for e in result.errors)

    def test_validate_tax_number_as_string(self, validator: ConfigValidator, valid_config: dict):
        """Should accept an 8-digit tax number string"""
        valid_config["tax_number"] = "12345678"
        assert validator.validate(valid_config).valid is True

    def test_validate_invalid_environment(self, validator: ConfigValidator, valid_config: dict):
        """Should fail with invalid environment"""
        valid_config["environment"] = "invalid"
        result = validator.validate(valid_config)
        assert result.valid is False
        assert any(e.field == "environment" for e in result.errors)

    def test_validate_invalid_timeout(self, validator: ConfigValidator, valid_config: dict):
        """Should fail with negative timeout"""
        valid_config["timeout"] = -1000
        result = validator.validate(valid_config)
        assert result.valid is False
        assert any(e.field == "timeout" for e in result.errors)

    def test_validate_timeout_too_low(self, validator: ConfigValidator, valid_config: dict):
        """Should fail with timeout too low"""
        valid_config["timeout"] = 100
        result = validator.validate(valid_config)
        assert result.valid is False
        assert any(
            e.field == "timeout" and "1000ms" in e.message
            for e in result.errors
        )

    def test_validate_timeout_too_high(self, validator: ConfigValidator, valid_config: dict):
        """Should fail with timeout above five minutes"""
        valid_config["timeout"] = 300001
        result = validator.validate(valid_config)
        assert any(
            e.field == "timeout" and "300000ms" in e.message
            for e in result.errors
        )

    def test_validate_invalid_base_url(self, validator: ConfigValidator, valid_config: dict):
        """Should fail with invalid base_url"""
        valid_config["base_url"] = "not-a-url"
        result = validator.validate(valid_config)
        assert result.valid is False
        assert any(e.field == "base_url" for e in result.errors)

    def test_validate_valid_base_url(self, validator: ConfigValidator, valid_config: dict):
        """Should accept valid base_url"""
        valid_config["base_url"] = "https://example.com"
        result = validator.validate(valid_config)
        assert result.valid is True

    def test_validate_relative_endpoint(self, validator: ConfigValidator, valid_config: dict):
        """Should fail when an endpoint is not an absolute path"""
        valid_config["invoice_endpoint"] = "v1/cash_registers/invoices"
        result = validator.validate(valid_config)
        assert any(e.field == "invoice_endpoint" for e in result.errors)

    def test_validate_certificate_extension(self, validator: ConfigValidator, valid_config: dict):
        """Should require a PKCS#12 certificate file"""
        valid_config["cert_path"] = "/path/to/cert.pem"
        result = validator.validate(valid_config)
        assert result.valid is False
        assert any(e.field == "cert_path" for e in result.errors)

        valid_config["cert_path"] = "/path/to/cert.PFX"
        assert validator.validate(valid_config).valid is True

    def test_validate_or_raise_invalid(self, validator: ConfigValidator, valid_config: dict):
        """Should raise ValidationError with invalid configuration"""
        del valid_config["tax_number"]
        with pytest.raises(ValidationError) as exc_info:
            validator.validate_or_raise(valid_config)
        assert exc_info.value.field == "tax_number"


class TestConfigLoader:
    """Tests for ConfigLoader"""

    @pytest.fixture
    def loader(self) -> ConfigLoader:
        return ConfigLoader()

    @pytest.fixture
    def valid_config(self) -> dict:
        return {
            "cert_path": "/path/to/furs.p12",
            "cert_password": "secret",
            "tax_number": 12345678,
        }

    def test_from_dict(self, loader: ConfigLoader, valid_config: dict):
        """Should return a copy of the configuration"""
        result = loader.from_dict(valid_config)
        assert result == valid_config
        assert result is not valid_config

    def test_from_environment(self, loader: ConfigLoader, monkeypatch):
        """Should load configuration from environment variables"""
        monkeypatch.setenv("FURS_CERT_PATH", "/certs/furs.p12")
        monkeypatch.setenv("FURS_TAX_NUMBER", "87654321")
        monkeypatch.setenv("FURS_ENVIRONMENT", "PRODUCTION")
        monkeypatch.setenv("FURS_TIMEOUT", "60000")
        monkeypatch.setenv("FURS_ENABLE_AUDIT_LOG", "false")

        result = loader.from_environment()

        assert result["cert_path"] == "/certs/furs.p12"
        assert result["tax_number"] == 87654321
        assert result["environment"] == FursEnvironment.PRODUCTION
        assert result["timeout"] == 60000
        assert result["enable_audit_log"] is False

    def test_from_environment_boolean_parsing(self, loader: ConfigLoader, monkeypatch):
        """Should parse boolean values correctly"""
        monkeypatch.setenv("FURS_VERIFY_TLS", "true")
        result = loader.from_environment()
        assert result["verify_tls"] is True

        monkeypatch.setenv("FURS_VERIFY_TLS", "1")
        result = loader.from_environment()
        assert result["verify_tls"] is True

        monkeypatch.setenv("FURS_VERIFY_TLS", "false")
        result = loader.from_environment()
        assert result["verify_tls"] is False

    def test_from_environment_ignores_empty(self, loader: ConfigLoader, monkeypatch):
        """Should skip empty environment variables"""
        monkeypatch.setenv("FURS_CERT_PASSWORD", "")
        assert "cert_password" not in loader.from_environment()

    def test_merge(self, loader: ConfigLoader):
        """Should merge multiple configurations with priority"""
        base = {"tax_number": 11111111, "cert_path": "/base.p12"}
        override = {"tax_number": 22222222, "timeout": 5000}

        result = loader.merge(base, override)

        assert result["tax_number"] == 22222222
        assert result["cert_path"] == "/base.p12"
        assert result["timeout"] == 5000

    def test_merge_filters_none(self, loader: ConfigLoader):
        """Should not include None values from overrides"""
        base = {"tax_number": 11111111, "timeout": 30000}
        override = {"tax_number": 22222222, "timeout": None}

        result = loader.merge(base, override)

        assert result["tax_number"] == 22222222
        assert result["timeout"] == 30000

    def test_resolve_applies_defaults(self, loader: ConfigLoader, valid_config: dict):
        """Should apply default values"""
        result = loader.resolve(valid_config)

        assert result.environment == FursEnvironment.TEST
        assert result.timeout == ConfigDefaults.TIMEOUT
        assert result.verify_tls == ConfigDefaults.VERIFY_TLS
        assert result.enable_audit_log == ConfigDefaults.ENABLE_AUDIT_LOG
        assert result.invoice_endpoint == ConfigDefaults.INVOICE_ENDPOINT
        assert result.device_class_marker == "DavPotRacTEST"

    def test_resolve_sets_base_url_from_environment(self, loader: ConfigLoader, valid_config: dict):
        """Should set base_url based on environment"""
        valid_config["environment"] = FursEnvironment.TEST
        result = loader.resolve(valid_config)
        assert result.base_url == FURS_BASE_URLS[FursEnvironment.TEST]

        valid_config["environment"] = FursEnvironment.PRODUCTION
        result = loader.resolve(valid_config)
        assert result.base_url == FURS_BASE_URLS[FursEnvironment.PRODUCTION]

    def test_resolve_allows_custom_base_url(self, loader: ConfigLoader, valid_config: dict):
        """Should allow custom base_url"""
        valid_config["base_url"] = "https://custom.example.com"
        result = loader.resolve(valid_config)
        assert result.base_url == "https://custom.example.com"

    def test_resolve_invalid(self, loader: ConfigLoader, valid_config: dict):
        """Should raise ValidationError for invalid configuration"""
        valid_config["tax_number"] = 123
        with pytest.raises(ValidationError):
            loader.resolve(valid_config)

    def test_from_file(self, loader: ConfigLoader, valid_config: dict):
        """Should load configuration from JSON file"""
        with tempfile.NamedTemporaryFile(
            mode="w", suffix=".json", delete=False
        ) as f:
            json.dump(valid_config, f)
            f.flush()

            try:
                result = loader.from_file(f.name)
                assert result["tax_number"] == valid_config["tax_number"]
                assert result["cert_path"] == valid_config["cert_path"]
            finally:
                os.unlink(f.name)

    def test_from_file_resolves_relative_paths(self, loader: ConfigLoader, valid_config: dict):
        """Should resolve certificate paths against the config file directory"""
        with tempfile.TemporaryDirectory() as tmpdir:
            valid_config["cert_path"] = "certs/furs.p12"
            valid_config["ca_certs_path"] = "certs/ca"
            config_path = Path(tmpdir) / "furs.json"
            config_path.write_text(json.dumps(valid_config))

            result = loader.from_file(config_path)

            base = config_path.resolve().parent
            assert result["cert_path"] == str(base / "certs/furs.p12")
            assert result["ca_certs_path"] == str(base / "certs/ca")

    def test_from_file_not_found(self, loader: ConfigLoader):
        """Should raise error for missing file"""
        with pytest.raises(ConfigError) as exc_info:
            loader.from_file("/nonexistent/path.json")

        assert "CONFIG_FILE_NOT_FOUND" in str(exc_info.value.code)

    def test_from_file_invalid_json(self, loader: ConfigLoader, tmp_path):
        """Should raise error for malformed JSON"""
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        with pytest.raises(ConfigError) as exc_info:
            loader.from_file(path)

        assert exc_info.value.code == "CONFIG_PARSE_ERROR"

    def test_from_file_requires_object(self, loader: ConfigLoader, tmp_path):
        """Should reject JSON that is not an object"""
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")

        with pytest.raises(ConfigError):
            loader.from_file(path)

    def test_load_from_config(self, loader: ConfigLoader, valid_config: dict):
        """Should load and resolve configuration from dict"""
        result = loader.load(config=valid_config, env=False)

        assert result.tax_number == valid_config["tax_number"]
        assert result.environment == FursEnvironment.TEST
        assert result.base_url == FURS_BASE_URLS[FursEnvironment.TEST]

    def test_load_config_overrides_environment(self, loader: ConfigLoader, valid_config: dict, monkeypatch):
        """Should give programmatic values priority over the environment"""
        monkeypatch.setenv("FURS_TAX_NUMBER", "87654321")
        monkeypatch.setenv("FURS_TIMEOUT", "45000")

        result = loader.load(config=valid_config)

        assert result.tax_number == 12345678
        assert result.timeout == 45000

    def test_create_template(self, loader: ConfigLoader):
        """Should create template configuration file"""
        with tempfile.TemporaryDirectory() as tmpdir:
            template_path = Path(tmpdir) / "config" / "template.json"
            loader.create_template(template_path)

            assert template_path.exists()

            with open(template_path) as f:
                template = json.load(f)

            assert "cert_path" in template
            assert "tax_number" in template
            assert "environment" in template


class TestFursConfig:
    """Tests for FursConfig Pydantic model"""

    @pytest.fixture
    def valid_data(self) -> dict:
        return {
            "cert_path": "/path/to/furs.p12",
            "cert_password": "secret",
            "tax_number": 12345678,
        }

    def test_create_valid_config(self, valid_data: dict):
        """Should create config with valid data"""
        config = FursConfig(**valid_data)
        assert config.tax_number == 12345678
        assert config.environment == FursEnvironment.TEST

    def test_default_base_url(self, valid_data: dict):
        """Should set default base_url from environment"""
        config = FursConfig(**valid_data)
        assert config.base_url == FURS_BASE_URLS[FursEnvironment.TEST]

    def test_endpoint_urls(self, valid_data: dict):
        """Should join the base URL and endpoint paths"""
        valid_data["base_url"] = "https://furs.example.com/"
        config = FursConfig(**valid_data)
        assert config.get_invoice_url() == "https://furs.example.com/v1/cash_registers/invoices"
        assert config.get_business_premise_url() == (
            "https://furs.example.com/v1/cash_registers/invoices/register"
        )

    def test_invalid_tax_number(self, valid_data: dict):
        """Should reject tax numbers that are not 8 digits"""
        valid_data["tax_number"] = 1234567
        with pytest.raises(ValueError):
            FursConfig(**valid_data)

    def test_invalid_base_url(self, valid_data: dict):
        """Should reject invalid base_url"""
        valid_data["base_url"] = "not-a-url"
        with pytest.raises(ValueError):
            FursConfig(**valid_data)

    def test_timeout_out_of_range(self, valid_data: dict):
        """Should reject timeouts outside the supported range"""
        valid_data["timeout"] = 500
        with pytest.raises(ValueError):
            FursConfig(**valid_data)
