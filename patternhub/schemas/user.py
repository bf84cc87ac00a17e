from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr

from patternhub.models.user import UserRole


class UserResponse(BaseModel):
    """Signed-in account as returned by ``/admin/auth/me``."""

    id: int
    username: str
    email: EmailStr
    full_name: Optional[str]
    label: str
    role: UserRole
    is_admin: bool
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}
