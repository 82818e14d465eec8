"""SmsTemplate repository for data access."""

from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from couponflow.models.shared import utc_now
from couponflow.models.sms_template import SmsTemplate, SmsTemplateType
from couponflow.schemas.sms_template import SmsTemplateCreate, SmsTemplateUpdate


class SmsTemplateRepository:
    """Repository for SmsTemplate model."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(self, template_type: SmsTemplateType | None = None) -> list[SmsTemplate]:
        """Get templates grouped by type, default template first."""
        query = self.db.query(SmsTemplate)
        if template_type is not None:
            query = query.filter(SmsTemplate.type == template_type.value)
        return query.order_by(
            SmsTemplate.type.asc(),
            SmsTemplate.is_default.desc(),
            SmsTemplate.created_at.asc(),
        ).all()

    def get_by_id(self, template_id: UUID) -> SmsTemplate | None:
        return self.db.query(SmsTemplate).filter(SmsTemplate.id == template_id).first()

    def get_default(self, template_type: SmsTemplateType) -> SmsTemplate | None:
        """Get the default template for a notification type."""
        return (
            self.db.query(SmsTemplate)
            .filter(
                SmsTemplate.type == template_type.value,
                SmsTemplate.is_default.is_(True),
            )
            .first()
        )

    def create(self, data: SmsTemplateCreate) -> SmsTemplate:
        """Create a template; the first template of a type becomes its default."""
        has_templates = (
            self.db.query(SmsTemplate.id)
            .filter(SmsTemplate.type == data.type.value)
            .first()
            is not None
        )
        template = SmsTemplate(
            name=data.name.strip(),
            type=data.type.value,
            content=data.content.strip(),
            is_default=not has_templates,
        )
        self.db.add(template)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise
        self.db.refresh(template)
        return template

    def update(self, template_id: UUID, data: SmsTemplateUpdate) -> SmsTemplate | None:
        template = self.get_by_id(template_id)
        if not template:
            return None

        update_data = data.model_dump(exclude_unset=True)
        for key, value in update_data.items():
            if value is not None:
                setattr(template, key, value.strip())
        template.updated_at = utc_now()  # type: ignore[assignment]

        self.db.commit()
        self.db.refresh(template)
        return template

    def set_default(self, template_id: UUID) -> SmsTemplate | None:
        """Make a template the default of its type.

        Clearing the previous default and setting the new one happen in one
        transaction; the partial unique index rejects a concurrent second
        default with an IntegrityError.
        """
        template = self.get_by_id(template_id)
        if not template:
            return None

        try:
            self.db.query(SmsTemplate).filter(
                SmsTemplate.type == template.type,
                SmsTemplate.id != template.id,
                SmsTemplate.is_default.is_(True),
            ).update({SmsTemplate.is_default: False}, synchronize_session=False)
            template.is_default = True  # type: ignore[assignment]
            template.updated_at = utc_now()  # type: ignore[assignment]
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise
        self.db.refresh(template)
        return template
