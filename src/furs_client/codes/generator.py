"""
FURS Code Generator
Facade producing the data for QR, PDF417 and Code128 codes

QR and PDF417 codes encode the 60-digit payload directly. Code128 splits
it across several barcodes. Rendering the symbols is left to a barcode
library; this module only produces the strings to render.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Union

from furs_client.codes.formatter import (
    format_tax_number,
    validate_issue_date_time,
    validate_zoi,
)
from furs_client.codes.payload import FiscalPayload, FiscalPayloadBuilder
from furs_client.codes.splitter import BarcodeSplitter
from furs_client.exceptions import InvalidZoiError
from furs_client.utils.identifiers import DateInput


logger = logging.getLogger(__name__)


class CodeType(str, Enum):
    """Supported code symbologies"""
    QR = "QR"
    PDF417 = "PDF417"
    CODE128 = "CODE128"


@dataclass
class InvoiceCodeData:
    """Invoice fields encoded into a code"""
    zoi: str
    tax_number: Union[int, str]
    issue_date_time: DateInput


@dataclass
class CodeGenerationResult:
    """
    Generated code data

    Attributes:
        type: Code symbology
        data: Payload string for QR/PDF417, list of part strings for Code128
        formatted_data: The 60-digit payload
        components: Payload components keyed by name
    """
    type: CodeType
    data: Union[str, List[str]]
    formatted_data: str
    components: Dict[str, str] = field(default_factory=dict)


class CodeGenerator:
    """
    Generates FURS code data for a fiscalized invoice

    Example:
        >>> generator = CodeGenerator()
        >>> result = generator.generate_code(
        ...     InvoiceCodeData(zoi, 12345678, '2015-08-15T10:13:32'),
        ...     CodeType.CODE128,
        ...     parts=3,
        ... )
        >>> result.data
        ['41...', '42...', '43...']
    """

    def __init__(self) -> None:
        self._builder = FiscalPayloadBuilder()
        self._splitter = BarcodeSplitter()

    def generate_code(
        self,
        invoice_data: InvoiceCodeData,
        code_type: CodeType,
        parts: int = 3,
    ) -> CodeGenerationResult:
        """
        Generate code data of one type

        Args:
            invoice_data: ZOI, tax number and issue timestamp
            code_type: Code symbology
            parts: Number of Code128 barcodes (ignored for QR/PDF417)

        Returns:
            CodeGenerationResult

        Raises:
            ValidationError: If the invoice data or part count is invalid
        """
        payload = self._build_payload(invoice_data)
        code_type = CodeType(code_type)

        data: Union[str, List[str]]
        if code_type == CodeType.CODE128:
            data = self._splitter.split(payload.value, parts)
        else:
            data = payload.value

        logger.debug(f"Generated {code_type.value} code data")

        return CodeGenerationResult(
            type=code_type,
            data=data,
            formatted_data=payload.value,
            components=payload.components(),
        )

    def generate_all_codes(
        self,
        invoice_data: InvoiceCodeData,
        parts: int = 3,
    ) -> Dict[str, CodeGenerationResult]:
        """Generate QR, PDF417 and Code128 data, keyed ``qr``, ``pdf417``, ``code128``"""
        return {
            "qr": self.generate_code(invoice_data, CodeType.QR),
            "pdf417": self.generate_code(invoice_data, CodeType.PDF417),
            "code128": self.generate_code(invoice_data, CodeType.CODE128, parts),
        }

    def validate_invoice_data(self, invoice_data: InvoiceCodeData) -> bool:
        """
        Validate invoice data for code generation

        Returns:
            True when valid

        Raises:
            InvalidZoiError: If the ZOI is not 32 hexadecimal characters
            InvalidTaxNumberError: If the tax number does not render to 8 digits
            ValidationError: If the issue timestamp cannot be parsed
        """
        if not validate_zoi(invoice_data.zoi):
            raise InvalidZoiError()

        format_tax_number(invoice_data.tax_number)
        validate_issue_date_time(invoice_data.issue_date_time)

        return True

    # ============ Private Helper Methods ============

    def _build_payload(self, invoice_data: InvoiceCodeData) -> FiscalPayload:
        self.validate_invoice_data(invoice_data)
        return self._builder.build(
            invoice_data.zoi,
            invoice_data.tax_number,
            invoice_data.issue_date_time,
        )
