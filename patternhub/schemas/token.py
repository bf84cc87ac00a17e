from pydantic import BaseModel


class AccessToken(BaseModel):
    """Body of a successful ``POST /admin/auth/login``."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int
