"""Business premise models"""

from typing import List, Literal, Optional
from pydantic import BaseModel, Field


WIRE_CONFIG = {
    "populate_by_name": True,
    "str_strip_whitespace": True,
}


class PropertyId(BaseModel):
    """Cadastral identification of a real estate premise"""

    cadastral_number: int = Field(..., alias="CadastralNumber", description="Cadastral municipality number")
    building_number: int = Field(..., alias="BuildingNumber", description="Building number")
    building_section_number: Optional[int] = Field(
        None, alias="BuildingSectionNumber", description="Building section number"
    )

    model_config = WIRE_CONFIG


class Address(BaseModel):
    """Premise address"""

    street: str = Field(..., alias="Street", description="Street name")
    house_number: str = Field(..., alias="HouseNumber", description="House number")
    house_number_additional: Optional[str] = Field(
        None, alias="HouseNumberAdditional", description="House number suffix"
    )
    community: str = Field(..., alias="Community", description="Community name")
    city: str = Field(..., alias="City", description="City name")
    postal_code: str = Field(..., alias="PostalCode", description="Postal code")

    model_config = WIRE_CONFIG


class RealEstatePremise(BaseModel):
    """Fixed business premise"""

    property_id: PropertyId = Field(..., alias="PropertyID", description="Property identification")
    address: Address = Field(..., alias="Address", description="Address information")

    model_config = WIRE_CONFIG


class PremiseIdentifier(BaseModel):
    """
    Business premise identifier

    A real estate premise carries ``real_estate_bp``; a movable premise
    carries ``premise_type`` (A: vehicle, B: object at a fixed location,
    C: individual electronic device).
    """

    real_estate_bp: Optional[RealEstatePremise] = Field(
        None, alias="RealEstateBP", description="Real estate business premise"
    )
    premise_type: Optional[Literal["A", "B", "C"]] = Field(
        None, alias="PremiseType", description="Movable premise type"
    )

    model_config = WIRE_CONFIG


class SoftwareSupplier(BaseModel):
    """Cash register software supplier"""

    tax_number: int = Field(..., alias="TaxNumber", description="Supplier tax number")

    model_config = WIRE_CONFIG


class BusinessPremiseRequest(BaseModel):
    """Business premise registration request"""

    business_premise_id: Optional[str] = Field(
        None, description="Business premise ID (generated when omitted)"
    )
    identifier: PremiseIdentifier = Field(..., description="Business premise identifier")
    validity_date: str = Field(..., description="Validity date (YYYY-MM-DD)")
    software_supplier: Optional[List[SoftwareSupplier]] = Field(
        None, description="Software suppliers (defaults to the taxpayer)"
    )
    special_notes: str = Field("", description="Special notes")

    model_config = WIRE_CONFIG
