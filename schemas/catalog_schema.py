from datetime import datetime
from pydantic import BaseModel, Field


class MaterialBase(BaseModel):
    name: str
    rate_per_sqft: float = Field(ge=0)


class MaterialCreate(MaterialBase):
    pass


class MaterialUpdate(BaseModel):
    name: str | None = None
    rate_per_sqft: float | None = Field(default=None, ge=0)


class MaterialResponse(MaterialBase):
    id: str
    project_type_id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class ProjectTypeBase(BaseModel):
    name: str
    icon: str = ""
    description: str = ""


class ProjectTypeCreate(ProjectTypeBase):
    pass


class ProjectTypeUpdate(BaseModel):
    name: str | None = None
    icon: str | None = None
    description: str | None = None


class ProjectTypeResponse(ProjectTypeBase):
    id: str
    materials: list[MaterialResponse] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
