"""Fiscal code module initialization

This module builds the data encoded into FURS QR, PDF417 and Code128 codes:
- formatter: hex/decimal, date and checksum primitives
- payload: the 60-digit fiscal payload
- splitter: Code128 multi-barcode splitting
- generator: facade over all three code types
"""

from furs_client.codes.formatter import (
    Defaults,
    calculate_control_character,
    format_date_for_code,
    format_tax_number,
    hex_to_decimal_padded,
    validate_tax_number,
    validate_zoi,
)
from furs_client.codes.payload import (
    FiscalPayload,
    FiscalPayloadBuilder,
    format_code_data,
    validate_payload,
)
from furs_client.codes.splitter import (
    SPLIT_RULES,
    BarcodeSplitter,
    SplitRule,
    split_for_code128,
)
from furs_client.codes.generator import (
    CodeGenerationResult,
    CodeGenerator,
    CodeType,
    InvoiceCodeData,
)

__all__ = [
    # Primitives
    "Defaults",
    "calculate_control_character",
    "format_date_for_code",
    "format_tax_number",
    "hex_to_decimal_padded",
    "validate_tax_number",
    "validate_zoi",
    # Payload
    "FiscalPayload",
    "FiscalPayloadBuilder",
    "format_code_data",
    "validate_payload",
    # Code128
    "SPLIT_RULES",
    "BarcodeSplitter",
    "SplitRule",
    "split_for_code128",
    # Generator
    "CodeGenerationResult",
    "CodeGenerator",
    "CodeType",
    "InvoiceCodeData",
]
