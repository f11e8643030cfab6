from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, computed_field

from core import pricing

MilestoneStatus = Literal["pending", "in-progress", "completed"]
PhotoCategory = Literal["before", "progress", "after", "material"]


# ---------- nested documents stored in the project's JSON columns ----------

class ProjectItem(BaseModel):
    id: str
    name: str
    length: float
    width: float
    depth: float = 0.0
    material_id: str
    quantity: int
    note: str | None = None
    custom_rate: float | None = None
    sqft: float
    amount: float


class ExtraCost(BaseModel):
    id: str
    name: str
    amount: float
    note: str | None = None


class Milestone(BaseModel):
    id: str
    name: str
    description: str | None = None
    due_date: datetime | None = None
    completed_date: datetime | None = None
    status: MilestoneStatus = "pending"
    order: int = 0


class ProjectPhoto(BaseModel):
    id: str
    url: str
    file_name: str
    caption: str | None = None
    category: PhotoCategory = "progress"
    uploaded_at: datetime


# ---------- payloads for nested collections ----------

class ItemCreate(BaseModel):
    name: str
    length: float
    width: float
    depth: float = 0.0
    material_id: str
    quantity: int = 1
    note: str | None = None
    custom_rate: float | None = None


class ItemUpdate(BaseModel):
    """Only fields sent by the client are merged; custom_rate=null clears the override."""
    name: str | None = None
    length: float | None = None
    width: float | None = None
    depth: float | None = None
    material_id: str | None = None
    quantity: int | None = None
    note: str | None = None
    custom_rate: float | None = None


class ExtraCostCreate(BaseModel):
    name: str
    amount: float
    note: str | None = None


class ExtraCostUpdate(BaseModel):
    name: str | None = None
    amount: float | None = None
    note: str | None = None


class MilestoneCreate(BaseModel):
    name: str
    description: str | None = None
    due_date: datetime | None = None
    completed_date: datetime | None = None
    status: MilestoneStatus = "pending"
    order: int | None = None


class MilestoneUpdate(BaseModel):
    name: str | None = None
    description: str | None = None
    due_date: datetime | None = None
    completed_date: datetime | None = None
    status: MilestoneStatus | None = None
    order: int | None = None


class PhotoCreate(BaseModel):
    url: str
    file_name: str
    caption: str | None = None
    category: PhotoCategory = "progress"


class PhotoUpdate(BaseModel):
    caption: str | None = None
    category: PhotoCategory | None = None


# ---------- the aggregate as loaded from / written to a project row ----------

class ProjectDocument(BaseModel):
    id: str
    items: list[ProjectItem] = Field(default_factory=list)
    extra_costs: list[ExtraCost] = Field(default_factory=list)
    milestones: list[Milestone] = Field(default_factory=list)
    photos: list[ProjectPhoto] = Field(default_factory=list)
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


# ---------- project level ----------

class ProjectBase(BaseModel):
    name: str
    type_id: str
    customer_name: str | None = None
    customer_mobile: str | None = None
    customer_address: str | None = None


class ProjectCreate(ProjectBase):
    """Client payload for creating a project. User is inferred from auth."""
    pass


class ProjectUpdate(BaseModel):
    name: str | None = None
    type_id: str | None = None
    customer_name: str | None = None
    customer_mobile: str | None = None
    customer_address: str | None = None


class ProjectResponse(ProjectBase):
    id: str
    user_id: str
    items: list[ProjectItem] = Field(default_factory=list)
    extra_costs: list[ExtraCost] = Field(default_factory=list)
    milestones: list[Milestone] = Field(default_factory=list)
    photos: list[ProjectPhoto] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def items_total(self) -> float:
        return pricing.project_items_total(self.items)

    @computed_field
    @property
    def extra_costs_total(self) -> float:
        return pricing.extra_costs_total(self.extra_costs)

    @computed_field
    @property
    def final_total(self) -> float:
        return pricing.final_total(self.items, self.extra_costs)
