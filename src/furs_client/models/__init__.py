"""Models module initialization"""

from furs_client.models.premise import (
    Address,
    BusinessPremiseRequest,
    PremiseIdentifier,
    PropertyId,
    RealEstatePremise,
    SoftwareSupplier,
)
from furs_client.models.invoice import (
    InvoiceRequest,
    TaxesPerSeller,
    VatInfo,
)
from furs_client.models.results import (
    BusinessPremiseResult,
    FursResponse,
    InvoiceResult,
)

__all__ = [
    "Address",
    "BusinessPremiseRequest",
    "PremiseIdentifier",
    "PropertyId",
    "RealEstatePremise",
    "SoftwareSupplier",
    "InvoiceRequest",
    "TaxesPerSeller",
    "VatInfo",
    "BusinessPremiseResult",
    "FursResponse",
    "InvoiceResult",
]
