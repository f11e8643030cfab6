from datetime import date
from pydantic import BaseModel, Field


class BusinessInfo(BaseModel):
    name: str
    tagline: str
    phone: str
    email: str
    website: str


class BillTo(BaseModel):
    customer_name: str | None = None
    customer_mobile: str | None = None
    customer_address: str | None = None


class QuotationLine(BaseModel):
    name: str
    dimensions: str
    material_name: str
    rate: float
    quantity: int
    sqft: float
    amount: float


class QuotationExtraCost(BaseModel):
    name: str
    note: str = ""
    amount: float


class Quotation(BaseModel):
    number: str
    project_id: str
    project_name: str
    project_type_name: str
    issued_on: date
    valid_until: date
    business: BusinessInfo
    bill_to: BillTo | None = None
    lines: list[QuotationLine] = Field(default_factory=list)
    extra_costs: list[QuotationExtraCost] = Field(default_factory=list)
    items_total: float
    extra_costs_total: float
    final_total: float
    terms: list[str] = Field(default_factory=list)
