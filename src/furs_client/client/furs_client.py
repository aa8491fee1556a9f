"""
FURS Client
Business premise registration and invoice fiscalization

The client loads the taxpayer's certificate once, derives the token
identity and signer from it, and exchanges signed tokens with FURS.
Certificate rotation requires a new client instance.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional, Union

from furs_client.client.http_client import HttpClient
from furs_client.codes.generator import (
    CodeGenerationResult,
    CodeGenerator,
    CodeType,
    InvoiceCodeData,
)
from furs_client.config.config_loader import ConfigLoader
from furs_client.config.furs_config import FursConfig
from furs_client.crypto.certificate import CertificateBundle, CertificateIdentity
from furs_client.crypto.signature import Signer
from furs_client.crypto.token import build_token, decode_token
from furs_client.crypto.zoi import ZoiInput, compute_zoi
from furs_client.exceptions import FursError, ServerError
from furs_client.models.invoice import InvoiceRequest
from furs_client.models.premise import BusinessPremiseRequest
from furs_client.models.results import BusinessPremiseResult, FursResponse, InvoiceResult
from furs_client.utils.identifiers import (
    DateInput,
    format_date_for_furs,
    format_issue_date_time,
    generate_id,
    generate_message_id,
)


logger = logging.getLogger(__name__)

PACKAGE_LOGGER = "furs_client"


class FursClient:
    """
    FURS client for invoice fiscalization and business premise registration

    Example:
        >>> with FursClient({
        ...     'cert_path': './certs/furs.p12',
        ...     'cert_password': 'secret',
        ...     'tax_number': 12345678,
        ... }) as client:
        ...     result = client.fiscalize_invoice(InvoiceRequest(
        ...         business_premise_id='BP101',
        ...         electronic_device_id='DEV1',
        ...         invoice_amount=122.0,
        ...         taxes_per_seller=[{'VAT': [{'TaxRate': 22.0,
        ...                                     'TaxableAmount': 100.0,
        ...                                     'TaxAmount': 22.0}]}],
        ...     ))
        ...     print(result.unique_invoice_id)
    """

    def __init__(
        self,
        config: Union[FursConfig, Dict[str, Any]],
        bundle: Optional[CertificateBundle] = None,
        http_client: Optional[HttpClient] = None,
    ) -> None:
        """
        Create a new FURS client

        Args:
            config: Resolved configuration or a configuration dictionary
            bundle: Preloaded certificate bundle (loaded from
                ``config.cert_path`` when omitted). A bundle passed in
                stays owned by the caller and is not cleared on close.
            http_client: Transport to use (created from config when omitted)

        Raises:
            ValidationError: If the configuration is invalid
            CertificateParseError: If the certificate cannot be loaded
        """
        if isinstance(config, dict):
            config = ConfigLoader().resolve(config)
        self.config = config

        if config.debug:
            logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG)

        self._owns_bundle = bundle is None
        if bundle is None:
            bundle = CertificateBundle.from_file(config.cert_path, config.cert_password)
        self._bundle = bundle
        self._identity = CertificateIdentity.from_bundle(self._bundle, config.device_class_marker)
        self._signer = Signer.from_bundle(self._bundle)
        self._code_generator = CodeGenerator()

        try:
            self._http = http_client or HttpClient(config, self._bundle)
        except Exception:
            if self._owns_bundle:
                self._bundle.clear()
            raise

        logger.info(
            f"FURS client initialized for {config.environment.value} environment "
            f"(subject: {self._identity.subject_name})"
        )

    @property
    def identity(self) -> CertificateIdentity:
        """Certificate identity used in token headers"""
        return self._identity

    @property
    def signer(self) -> Signer:
        return self._signer

    def register_business_premise(
        self,
        business_premise: Union[BusinessPremiseRequest, Dict[str, Any]],
    ) -> BusinessPremiseResult:
        """
        Register a business premise

        Args:
            business_premise: Business premise data

        Returns:
            Registration result

        Raises:
            ServerError: If FURS returns an error block
            NetworkError: On transport failures
        """
        if isinstance(business_premise, dict):
            business_premise = BusinessPremiseRequest.model_validate(business_premise)

        business_premise_id = business_premise.business_premise_id or generate_id("BP")
        logger.info(f"Registering business premise {business_premise_id}")

        software_supplier = [
            supplier.model_dump(by_alias=True, exclude_none=True)
            for supplier in business_premise.software_supplier
        ] if business_premise.software_supplier else [{"TaxNumber": self.config.tax_number}]

        payload = {
            "BusinessPremiseRequest": {
                "Header": self._build_header(),
                "BusinessPremise": {
                    "TaxNumber": self.config.tax_number,
                    "BusinessPremiseID": business_premise_id,
                    "BPIdentifier": business_premise.identifier.model_dump(
                        by_alias=True, exclude_none=True
                    ),
                    "ValidityDate": business_premise.validity_date,
                    "SoftwareSupplier": software_supplier,
                    "SpecialNotes": business_premise.special_notes,
                },
            },
        }

        result = self._send_request(payload, self.config.business_premise_endpoint)
        response = self._extract_response(result, "BusinessPremiseResponse")

        logger.info(f"Business premise {business_premise_id} registered")

        return BusinessPremiseResult(
            business_premise_id=business_premise_id,
            success=True,
            response=response,
        )

    def fiscalize_invoice(
        self,
        invoice: Union[InvoiceRequest, Dict[str, Any]],
    ) -> InvoiceResult:
        """
        Fiscalize an invoice

        Computes the ZOI, sends the signed invoice and returns the EOR
        (unique invoice id) assigned by FURS.

        Args:
            invoice: Invoice data

        Returns:
            Fiscalization result

        Raises:
            ServerError: If FURS returns an error block
            NetworkError: On transport failures
        """
        invoice = self._resolve_invoice(invoice)
        invoice_number = invoice.invoice_number
        issue_date_time = invoice.issue_date_time

        logger.info(f"Fiscalizing invoice {invoice_number}")

        zoi = compute_zoi(self._signer, ZoiInput(
            tax_number=self.config.tax_number,
            issue_date_time=issue_date_time,
            invoice_number=invoice_number,
            business_premise_id=invoice.business_premise_id,
            electronic_device_id=invoice.electronic_device_id,
            invoice_amount=invoice.invoice_amount,
        ))

        payment_amount = (
            invoice.payment_amount if invoice.payment_amount is not None else invoice.invoice_amount
        )
        operator_tax_number = invoice.operator_tax_number or self.config.tax_number

        payload = {
            "InvoiceRequest": {
                "Header": self._build_header(),
                "Invoice": {
                    "TaxNumber": self.config.tax_number,
                    "IssueDateTime": format_issue_date_time(issue_date_time),
                    "NumberingStructure": invoice.numbering_structure,
                    "InvoiceIdentifier": {
                        "BusinessPremiseID": invoice.business_premise_id,
                        "ElectronicDeviceID": invoice.electronic_device_id,
                        "InvoiceNumber": invoice_number,
                    },
                    "InvoiceAmount": invoice.invoice_amount,
                    "PaymentAmount": payment_amount,
                    "TaxesPerSeller": [
                        taxes.model_dump(by_alias=True) for taxes in invoice.taxes_per_seller
                    ],
                    "OperatorTaxNumber": operator_tax_number,
                    "ProtectedID": zoi,
                },
            },
        }

        result = self._send_request(payload, self.config.invoice_endpoint)
        response = self._extract_response(result, "InvoiceResponse")
        unique_invoice_id = response.get("UniqueInvoiceID") if response else None

        if unique_invoice_id:
            logger.info(f"Invoice {invoice_number} fiscalized (EOR: {unique_invoice_id})")
        else:
            logger.warning(f"FURS response for invoice {invoice_number} has no EOR")

        return InvoiceResult(
            invoice_number=invoice_number,
            unique_invoice_id=unique_invoice_id,
            zoi=zoi,
            success=bool(unique_invoice_id),
            response=response,
        )

    def generate_qr_code(self, zoi: str, issue_date_time: DateInput) -> CodeGenerationResult:
        """Generate QR code data for a fiscalized invoice"""
        return self._code_generator.generate_code(
            self._code_data(zoi, issue_date_time), CodeType.QR
        )

    def generate_pdf417_code(self, zoi: str, issue_date_time: DateInput) -> CodeGenerationResult:
        """Generate PDF417 code data for a fiscalized invoice"""
        return self._code_generator.generate_code(
            self._code_data(zoi, issue_date_time), CodeType.PDF417
        )

    def generate_code128(
        self,
        zoi: str,
        issue_date_time: DateInput,
        parts: int = 3,
    ) -> CodeGenerationResult:
        """Generate Code128 barcode strings (2 to 6 parts) for a fiscalized invoice"""
        return self._code_generator.generate_code(
            self._code_data(zoi, issue_date_time), CodeType.CODE128, parts
        )

    def generate_all_codes(
        self,
        zoi: str,
        issue_date_time: DateInput,
        parts: int = 3,
    ) -> Dict[str, CodeGenerationResult]:
        """Generate QR, PDF417 and Code128 data for a fiscalized invoice"""
        return self._code_generator.generate_all_codes(
            self._code_data(zoi, issue_date_time), parts
        )

    def fiscalize_invoice_with_codes(
        self,
        invoice: Union[InvoiceRequest, Dict[str, Any]],
        generate_codes: bool = True,
        parts: int = 3,
    ) -> InvoiceResult:
        """
        Fiscalize an invoice and generate its codes

        The codes use the same issue timestamp that was signed into the ZOI.
        Codes are only generated when fiscalization succeeded.
        """
        invoice = self._resolve_invoice(invoice)
        result = self.fiscalize_invoice(invoice)

        if generate_codes and result.success:
            result.codes = self.generate_all_codes(result.zoi, invoice.issue_date_time, parts)

        return result

    def close(self) -> None:
        """Close the transport and release a certificate bundle loaded from config"""
        self._http.close()
        if self._owns_bundle:
            self._bundle.clear()
        logger.info("FURS client closed")

    def __enter__(self) -> "FursClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # ============ Private Helper Methods ============

    def _build_header(self) -> Dict[str, str]:
        return {
            "MessageID": generate_message_id(),
            "DateTime": format_date_for_furs(),
        }

    def _code_data(self, zoi: str, issue_date_time: DateInput) -> InvoiceCodeData:
        return InvoiceCodeData(
            zoi=zoi,
            tax_number=self.config.tax_number,
            issue_date_time=issue_date_time,
        )

    def _resolve_invoice(self, invoice: Union[InvoiceRequest, Dict[str, Any]]) -> InvoiceRequest:
        """Fill in the generated invoice number and issue timestamp"""
        if isinstance(invoice, dict):
            invoice = InvoiceRequest.model_validate(invoice)

        updates: Dict[str, Any] = {}
        if not invoice.invoice_number:
            updates["invoice_number"] = generate_id("INV")
        if invoice.issue_date_time is None:
            updates["issue_date_time"] = datetime.now().astimezone()

        return invoice.model_copy(update=updates) if updates else invoice

    def _send_request(self, payload: Dict[str, Any], endpoint: str) -> FursResponse:
        """Sign a payload, send it and decode the response token"""
        token = build_token(payload, self._identity, self._signer)

        logger.debug(f"Sending request to {endpoint} ({len(token)} byte token)")
        response = self._http.post(endpoint, {"token": token})

        data = response.data
        if not isinstance(data, dict) or "token" not in data:
            return FursResponse(
                status_code=response.status,
                response=data,
                error="Response does not contain a token",
            )

        decoded = decode_token(data["token"])
        return FursResponse(
            status_code=response.status,
            response=data,
            decoded=decoded,
            error=decoded.error,
        )

    def _extract_response(self, result: FursResponse, key: str) -> Dict[str, Any]:
        """
        Get the response block from a decoded FURS response

        Raises:
            FursError: If the response cannot be decoded
            ServerError: If the response carries an error block
        """
        if result.decoded is None or not result.decoded.valid:
            raise FursError(
                f"Invalid response from FURS: {result.error}",
                code="SERVER_INVALID_RESPONSE",
                status_code=result.status_code,
            )

        payload = result.decoded.payload
        block = payload.get(key) if isinstance(payload, dict) else None
        if not isinstance(block, dict):
            raise FursError(
                f"Invalid response from FURS: missing {key}",
                code="SERVER_INVALID_RESPONSE",
                status_code=result.status_code,
            )

        error = block.get("Error")
        if error:
            if not isinstance(error, dict):
                error = {"ErrorMessage": str(error)}
            error_code = str(error.get("ErrorCode", ""))
            error_message = error.get("ErrorMessage", "")
            logger.warning(f"FURS returned error {error_code}: {error_message}")
            raise ServerError(
                f"FURS Error {error_code}: {error_message}",
                server_code=error_code,
                status_code=result.status_code,
                details=error,
            )

        return block
