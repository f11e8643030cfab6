import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey, Index, JSON
from sqlalchemy.sql import func
from models.base import Base

class Project(Base):
    __tablename__ = "projects"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(64), ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    type_id = Column(String(64), nullable=False)
    name = Column(String(255), nullable=False)
    customer_name = Column(String(255), nullable=True)
    customer_mobile = Column(String(32), nullable=True)
    customer_address = Column(String(512), nullable=True)
    # Nested collections are embedded arrays; each write replaces the whole column
    items = Column(JSON, nullable=False, default=list)
    extra_costs = Column(JSON, nullable=False, default=list)
    milestones = Column(JSON, nullable=False, default=list)
    photos = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    # Stamped by the aggregate on every mutation
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

Index("idx_projects_user_id_updated_at", Project.user_id, Project.updated_at.desc())
