"""SMS template administration and rendering."""

import re
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from couponflow.models.sms_template import SmsTemplate, SmsTemplateType
from couponflow.repositories.sms_template_repository import SmsTemplateRepository
from couponflow.schemas.sms_template import SmsTemplateCreate, SmsTemplateUpdate

_PLACEHOLDER = re.compile(r"\{\{([^}]+)\}\}")


def render_template(content: str, variables: dict[str, str | None]) -> str:
    """Substitute ``{{name}}`` tokens; unknown or empty tokens render as nothing."""
    return _PLACEHOLDER.sub(lambda m: variables.get(m.group(1)) or "", content)


class SmsTemplateConflictError(ValueError):
    """Another request changed the default template at the same time."""


class SmsTemplateService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = SmsTemplateRepository(db)

    def list_templates(self, template_type: SmsTemplateType | None = None) -> list[SmsTemplate]:
        return self.repo.get_all(template_type)

    def create_template(self, data: SmsTemplateCreate) -> SmsTemplate:
        try:
            return self.repo.create(data)
        except IntegrityError:
            raise SmsTemplateConflictError(
                f"A default {data.type.value} template was created concurrently"
            ) from None

    def update_template(self, template_id: UUID, data: SmsTemplateUpdate) -> SmsTemplate | None:
        return self.repo.update(template_id, data)

    def set_default(self, template_id: UUID) -> SmsTemplate | None:
        try:
            return self.repo.set_default(template_id)
        except IntegrityError:
            raise SmsTemplateConflictError(
                "The default template was changed concurrently, reload and retry"
            ) from None

    def get_default(self, template_type: SmsTemplateType) -> SmsTemplate | None:
        return self.repo.get_default(template_type)
