"""Staff sign-in: bcrypt password checks and JWT access tokens."""

from datetime import UTC, datetime, timedelta
from uuid import UUID

import bcrypt
import jwt
from sqlalchemy.orm import Session

from couponflow.core.config import settings
from couponflow.models.profile import Profile
from couponflow.repositories.profile_repository import ProfileRepository
from couponflow.schemas.profile import ProfileCreate


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=12)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


class AuthService:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.profile_repo = ProfileRepository(db)

    def register(self, data: ProfileCreate) -> Profile:
        """Create a staff profile with a hashed password."""
        if self.profile_repo.get_by_email(data.email):
            raise ValueError(f"Profile with email {data.email} already exists")
        return self.profile_repo.create(data, hash_password(data.password.get_secret_value()))

    def authenticate(self, email: str, password: str) -> Profile:
        """Return the active profile for the credentials.

        Raises:
            ValueError: If the email is unknown, the password is wrong or the
                profile is inactive. The message does not say which.
        """
        profile = self.profile_repo.get_by_email(email)
        if (
            profile is None
            or not profile.is_active
            or not verify_password(password, str(profile.password_hash))
        ):
            raise ValueError("Invalid email or password")
        return profile

    @staticmethod
    def create_access_token(profile: Profile) -> str:
        now = datetime.now(UTC)
        payload = {
            "sub": str(profile.id),
            "role": profile.role,
            "type": "access",
            "iat": int(now.timestamp()),
            "exp": now + timedelta(minutes=settings.JWT_ACCESS_MINUTES),
        }
        return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALG)

    @staticmethod
    def verify_access_token(token: str) -> UUID:
        """Decode an access token and return the profile id.

        Raises jwt.ExpiredSignatureError or jwt.InvalidTokenError on failure.
        """
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALG])
        if payload.get("type") != "access":
            raise jwt.InvalidTokenError("Invalid token type")
        return UUID(payload["sub"])
