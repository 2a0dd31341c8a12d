"""Token schemas for authentication."""
from pydantic import BaseModel, Field


class TokenPair(BaseModel):
    """Token pair response model."""

    access_token: str = Field(..., description="JWT access token (short-lived)")
    refresh_token: str = Field(..., description="JWT refresh token (long-lived)")
