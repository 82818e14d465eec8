"""Staff sign-in endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from couponflow.core.auth import get_current_profile
from couponflow.core.database import get_db
from couponflow.models.profile import Profile
from couponflow.schemas.profile import LoginRequest, ProfileResponse, TokenResponse
from couponflow.services.auth_service import AuthService

router = APIRouter()


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Sign in",
    responses={401: {"description": "Invalid email or password"}},
)
async def login(
    data: LoginRequest,
    db: Session = Depends(get_db),
) -> TokenResponse:
    """Exchange email and password for an access token."""
    service = AuthService(db)
    try:
        profile = service.authenticate(data.email, data.password.get_secret_value())
    except ValueError as e:
        raise HTTPException(status_code=401, detail=str(e)) from None
    return TokenResponse(
        access_token=service.create_access_token(profile),
        profile=ProfileResponse.model_validate(profile),
    )


@router.get(
    "/me",
    response_model=ProfileResponse,
    summary="Current profile",
    responses={401: {"description": "Unauthorized"}},
)
async def me(profile: Profile = Depends(get_current_profile)) -> Profile:
    """Return the signed-in profile."""
    return profile
