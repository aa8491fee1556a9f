"""
Configuration and Usage Examples for the FURS client
Demonstrates configuration sources and a full fiscalization round trip
"""

from datetime import datetime

from furs_client import (
    ConfigLoader,
    ConfigValidator,
    FursClient,
    FursConfig,
    FursEnvironment,
    InvoiceRequest,
)


# =============================================================================
# Example 1: Programmatic Configuration
# =============================================================================

def programmatic_config_example() -> FursConfig:
    """Configure the client programmatically"""
    loader = ConfigLoader()

    return loader.load(
        config={
            # Certificate issued by FURS
            "cert_path": "./certs/furs.p12",
            "cert_password": "your-certificate-password",

            # Taxpayer
            "tax_number": 12345678,

            # Environment settings
            "environment": FursEnvironment.TEST,  # Use PRODUCTION for live
            "timeout": 30000,

            # Server verification
            "ca_certs_path": "./certs/ca",
        },
        env=False,
    )


# =============================================================================
# Example 2: File, Environment and Programmatic Sources
# =============================================================================

def merged_config_example() -> FursConfig:
    """
    Merge configuration from multiple sources
    Priority: programmatic > environment > file

    Environment variables use the FURS_ prefix:

    export FURS_CERT_PATH="/path/to/furs.p12"
    export FURS_CERT_PASSWORD="secret"
    export FURS_TAX_NUMBER="12345678"
    export FURS_ENVIRONMENT="test"
    """
    loader = ConfigLoader()

    return loader.load(
        file="./config/furs_config.json",
        env=True,
        config={"timeout": 60000},
    )


# =============================================================================
# Example 3: Configuration Validation
# =============================================================================

def validation_example() -> None:
    """Validate configuration before use"""
    validator = ConfigValidator()

    result = validator.validate({
        "cert_path": "./certs/furs.pem",
        "tax_number": 1234,
    })

    if not result.valid:
        print("Configuration validation failed:")
        for error in result.errors:
            print(f"  - {error.field}: {error.message}")


# =============================================================================
# Example 4: Fiscalize an Invoice and Print its Codes
# =============================================================================

def fiscalization_example(config: FursConfig) -> None:
    """Register a premise, fiscalize an invoice and print the barcode data"""
    with FursClient(config) as client:
        client.register_business_premise({
            "business_premise_id": "BP101",
            "identifier": {"PremiseType": "C"},
            "validity_date": "2030-01-01",
        })

        result = client.fiscalize_invoice_with_codes(
            InvoiceRequest(
                business_premise_id="BP101",
                electronic_device_id="DEV1",
                invoice_amount=122.0,
                taxes_per_seller=[{
                    "VAT": [{"TaxRate": 22.0, "TaxableAmount": 100.0, "TaxAmount": 22.0}],
                }],
                issue_date_time=datetime.now().astimezone(),
            ),
            parts=3,
        )

        print(f"ZOI: {result.zoi}")
        print(f"EOR: {result.unique_invoice_id}")
        if result.codes:
            print(f"QR data: {result.codes['qr'].data}")
            for part in result.codes["code128"].data:
                print(f"Code128: {part}")


# =============================================================================
# Run Examples
# =============================================================================

if __name__ == "__main__":
    print("=== FURS Configuration Examples ===\n")

    print("1. Configuration Validation:")
    validation_example()
    print()

    print("2. Create Configuration Template:")
    ConfigLoader().create_template("./config/furs_config.template.json")
    print("Configuration template created at ./config/furs_config.template.json")
