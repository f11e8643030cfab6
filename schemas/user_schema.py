from datetime import datetime
from pydantic import BaseModel


class UserBase(BaseModel):
    email: str
    name: str | None = None
    image: str | None = None


class UserCreate(UserBase):
    is_admin: bool = False


class UserResponse(UserBase):
    id: str
    email_verified: bool
    is_admin: bool

    model_config = {
        "from_attributes": True,
    }


class SessionCreate(BaseModel):
    user_id: str
    token: str
    expires_at: datetime
    ip_address: str | None = None
    user_agent: str | None = None
