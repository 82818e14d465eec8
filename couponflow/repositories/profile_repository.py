"""Profile repository for data access."""

from uuid import UUID

from sqlalchemy.orm import Session

from couponflow.models.profile import Profile
from couponflow.schemas.profile import ProfileCreate


class ProfileRepository:
    """Repository for Profile model."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, profile_id: UUID) -> Profile | None:
        return self.db.query(Profile).filter(Profile.id == profile_id).first()

    def get_by_email(self, email: str) -> Profile | None:
        return self.db.query(Profile).filter(Profile.email == email.strip().lower()).first()

    def create(self, data: ProfileCreate, password_hash: str) -> Profile:
        profile = Profile(
            email=data.email.strip().lower(),
            password_hash=password_hash,
            display_name=data.display_name,
            branch_code=data.branch_code.value if data.branch_code else None,
            role=data.role.value,
        )
        self.db.add(profile)
        self.db.commit()
        self.db.refresh(profile)
        return profile
