import uuid
from sqlalchemy import Column, String, Float, ForeignKey, Index, Text
from sqlalchemy.orm import relationship
from models.base import Base, TimestampMixin

class ProjectType(Base, TimestampMixin):
    __tablename__ = "project_types"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    icon = Column(String(64), nullable=False, default="")
    description = Column(Text, nullable=False, default="")

    materials = relationship(
        "Material",
        back_populates="project_type",
        cascade="all, delete-orphan",
        order_by="Material.created_at",
    )


class Material(Base, TimestampMixin):
    __tablename__ = "materials"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    project_type_id = Column(String(64), ForeignKey("project_types.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    rate_per_sqft = Column(Float, nullable=False)

    project_type = relationship("ProjectType", back_populates="materials")

Index("idx_materials_project_type_id", Material.project_type_id)
