"""
Protected invoice identifier (ZOI)

The ZOI is the MD5 digest of an RSA-SHA256 signature over the
concatenation of the invoice's identifying fields:

    tax number + "YYYY-MM-DD HH:MM:SS" (UTC) + invoice number
        + business premise id + electronic device id + amount (2 decimals)
"""

import hashlib
import logging
from dataclasses import dataclass
from typing import Union

from furs_client.crypto.signature import Signer
from furs_client.exceptions import ValidationError
from furs_client.utils.identifiers import DateInput, format_datetime_for_zoi


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ZoiInput:
    """Invoice fields covered by the ZOI"""
    tax_number: Union[int, str]
    issue_date_time: DateInput
    invoice_number: str
    business_premise_id: str
    electronic_device_id: str
    invoice_amount: float

    def to_signing_string(self) -> str:
        """
        Build the string that is signed

        Raises:
            ValidationError: If the issue timestamp cannot be parsed
        """
        try:
            issued = format_datetime_for_zoi(self.issue_date_time)
        except ValueError as e:
            raise ValidationError(
                f"Invalid issue date/time format: {self.issue_date_time!r}",
                field="issue_date_time",
                invariant="ISO-8601",
            ) from e

        return (
            f"{self.tax_number}"
            f"{issued}"
            f"{self.invoice_number}"
            f"{self.business_premise_id}"
            f"{self.electronic_device_id}"
            f"{self.invoice_amount:.2f}"
        )


def compute_zoi(signer: Signer, zoi_input: ZoiInput) -> str:
    """
    Compute the ZOI for an invoice

    Args:
        signer: Signer holding the taxpayer's private key
        zoi_input: Invoice fields

    Returns:
        32-character lowercase hexadecimal ZOI

    Raises:
        SigningError: If signing fails
        ValidationError: If the issue timestamp is invalid
    """
    signature = signer.sign(zoi_input.to_signing_string().encode("utf-8"))
    zoi = hashlib.md5(signature).hexdigest()
    logger.debug(f"ZOI computed for invoice {zoi_input.invoice_number}")
    return zoi
