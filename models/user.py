import uuid
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Index
from models.base import Base, TimestampMixin

class User(Base, TimestampMixin):
    __tablename__ = "user"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    email_verified = Column(Boolean, default=False, nullable=False)
    image = Column(String(512), nullable=True)
    # Admins maintain the shared project-type / material catalog
    is_admin = Column(Boolean, default=False, nullable=False)


class UserSession(Base, TimestampMixin):
    """Bearer token issued by the sign-in service for a user."""
    __tablename__ = "session"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    expires_at = Column(DateTime(timezone=True), nullable=False)
    token = Column(String(512), unique=True, nullable=False, index=True)
    ip_address = Column(String(128), nullable=True)
    user_agent = Column(String(512), nullable=True)
    user_id = Column(String(64), ForeignKey("user.id", ondelete="CASCADE"), nullable=False)

Index("idx_session_userId", UserSession.user_id)
