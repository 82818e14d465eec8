import jwt
from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from couponflow.core.branches import BranchCode
from couponflow.core.database import get_db
from couponflow.models.profile import Profile
from couponflow.repositories.profile_repository import ProfileRepository
from couponflow.services.auth_service import AuthService


def get_current_profile(
    request: Request,
    db: Session = Depends(get_db),
) -> Profile:
    """Resolve the signed-in staff profile from the bearer token."""
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise HTTPException(status_code=401, detail="Missing bearer token")

    if not auth_header.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid authorization header format")

    token = auth_header[7:]
    try:
        profile_id = AuthService.verify_access_token(token)
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Session has expired") from None
    except (jwt.InvalidTokenError, KeyError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid session token") from None

    profile = ProfileRepository(db).get_by_id(profile_id)
    if not profile:
        raise HTTPException(status_code=401, detail="Profile not found")
    if not profile.is_active:
        raise HTTPException(status_code=401, detail="Profile is inactive")
    return profile


def require_admin(profile: Profile = Depends(get_current_profile)) -> Profile:
    if not profile.is_admin:
        raise HTTPException(status_code=403, detail="Admin only")
    return profile


def ensure_branch_access(profile: Profile, branch_code: BranchCode) -> None:
    """Staff may only act for their own branch; admins may act for any."""
    if profile.is_admin:
        return
    if profile.branch_code != branch_code.value:
        raise HTTPException(status_code=403, detail="Not allowed to act for this branch")
