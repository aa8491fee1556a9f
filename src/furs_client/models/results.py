"""Result models"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field

from furs_client.codes.generator import CodeGenerationResult
from furs_client.crypto.token import DecodedToken


class FursResponse(BaseModel):
    """Raw FURS HTTP response with its decoded token"""

    status_code: int = Field(..., description="HTTP status code")
    response: Any = Field(None, description="Parsed response body")
    decoded: Optional[DecodedToken] = Field(None, description="Decoded response token")
    error: Optional[str] = Field(None, description="Parse error, if any")


class BusinessPremiseResult(BaseModel):
    """Business premise registration result"""

    business_premise_id: str = Field(..., description="Business premise ID")
    success: bool = Field(..., description="Registration succeeded")
    response: Optional[Dict[str, Any]] = Field(None, description="BusinessPremiseResponse block")


class InvoiceResult(BaseModel):
    """Invoice fiscalization result"""

    invoice_number: str = Field(..., description="Invoice number")
    unique_invoice_id: Optional[str] = Field(None, description="EOR assigned by FURS")
    zoi: str = Field(..., description="Protected invoice identifier")
    success: bool = Field(..., description="Fiscalization succeeded")
    response: Optional[Dict[str, Any]] = Field(None, description="InvoiceResponse block")
    codes: Optional[Dict[str, CodeGenerationResult]] = Field(
        None, description="Generated QR, PDF417 and Code128 data"
    )
