"""Invoice models"""

from datetime import datetime
from typing import List, Literal, Optional, Union
from pydantic import BaseModel, Field

from furs_client.models.premise import WIRE_CONFIG


class VatInfo(BaseModel):
    """VAT breakdown for one rate"""

    tax_rate: float = Field(..., alias="TaxRate", description="VAT rate in percent")
    taxable_amount: float = Field(..., alias="TaxableAmount", description="Taxable amount")
    tax_amount: float = Field(..., alias="TaxAmount", description="Tax amount")

    model_config = WIRE_CONFIG


class TaxesPerSeller(BaseModel):
    """Taxes charged by one seller"""

    vat: List[VatInfo] = Field(..., alias="VAT", description="VAT breakdown")

    model_config = WIRE_CONFIG


class InvoiceRequest(BaseModel):
    """Invoice fiscalization request"""

    business_premise_id: str = Field(..., min_length=1, description="Business premise ID")
    electronic_device_id: str = Field(..., min_length=1, description="Electronic device ID")
    invoice_number: Optional[str] = Field(
        None, description="Invoice number (generated when omitted)"
    )
    invoice_amount: float = Field(..., description="Total invoice amount")
    payment_amount: Optional[float] = Field(
        None, description="Payment amount (defaults to the invoice amount)"
    )
    taxes_per_seller: List[TaxesPerSeller] = Field(..., description="Taxes per seller")
    issue_date_time: Optional[Union[datetime, str]] = Field(
        None, description="Issue date/time (defaults to now)"
    )
    numbering_structure: Literal["B", "C"] = Field(
        "B", description="B: numbering per device, C: numbering per premise"
    )
    operator_tax_number: Optional[int] = Field(
        None, description="Operator tax number (defaults to the taxpayer)"
    )

    model_config = WIRE_CONFIG
