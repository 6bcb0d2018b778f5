from uuid import UUID
from sqlmodel import SQLModel, Field


class Token(SQLModel):
    """Issued on sign-in. Railway staff tokens are bearer JWTs (HS256)."""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = Field(description="Access token lifetime in seconds.")


class TokenAccess(SQLModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class TokenRefresh(SQLModel):
    refresh_token: str


class TokenData(SQLModel):
    """Claims extracted from a verified JWT."""
    user_id: UUID
    token_type: str
