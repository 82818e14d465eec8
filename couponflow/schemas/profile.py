"""Profile and login schemas."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from couponflow.core.branches import BranchCode
from couponflow.models.profile import ProfileRole


class ProfileCreate(BaseModel):
    email: str = Field(max_length=255)
    password: SecretStr
    display_name: str | None = Field(default=None, max_length=255)
    branch_code: BranchCode | None = None
    role: ProfileRole = ProfileRole.STAFF


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    display_name: str | None = None
    branch_code: str | None = None
    role: str


class LoginRequest(BaseModel):
    email: str = Field(max_length=255)
    password: SecretStr


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    profile: ProfileResponse
