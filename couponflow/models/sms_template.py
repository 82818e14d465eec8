"""SmsTemplate model for coupon notification messages."""

from enum import Enum

from sqlalchemy import Boolean, Column, DateTime, Index, String, Text, func, text

from couponflow.core.database import Base
from couponflow.models.shared import UUIDType, generate_uuid


class SmsTemplateType(str, Enum):
    ISSUE = "issue"
    VERIFY = "verify"


class SmsTemplate(Base):
    """SmsTemplate model - at most one default per type."""

    __tablename__ = "sms_templates"
    __table_args__ = (
        Index(
            "uq_sms_templates_default_per_type",
            "type",
            unique=True,
            sqlite_where=text("is_default = 1"),
            postgresql_where=text("is_default"),
        ),
    )

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    type = Column(String(20), nullable=False, index=True)
    content = Column(Text, nullable=False)
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
