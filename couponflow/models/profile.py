"""Profile model for staff accounts."""

from enum import Enum

from sqlalchemy import Boolean, Column, DateTime, String, func

from couponflow.core.database import Base
from couponflow.models.shared import UUIDType, generate_uuid


class ProfileRole(str, Enum):
    ADMIN = "admin"
    STAFF = "staff"


class Profile(Base):
    """Staff account. Non-admin profiles are pinned to ``branch_code``."""

    __tablename__ = "profiles"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    display_name = Column(String(255), nullable=True)
    branch_code = Column(String(10), nullable=True)
    role = Column(String(20), nullable=False, default=ProfileRole.STAFF.value)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def is_admin(self) -> bool:
        return self.role == ProfileRole.ADMIN.value
