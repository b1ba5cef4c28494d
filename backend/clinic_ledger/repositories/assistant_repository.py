from uuid import UUID

from sqlalchemy.orm import Session

from clinic_ledger.models.assistant import Assistant
from clinic_ledger.schemas.assistant import AssistantCreate


class AssistantRepository:
    """Repository for Assistant model."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(self, site_id: UUID) -> list[Assistant]:
        return (
            self.db.query(Assistant)
            .filter(Assistant.site_id == site_id)
            .order_by(Assistant.name.asc())
            .all()
        )

    def create(self, data: AssistantCreate) -> Assistant:
        assistant = Assistant(site_id=data.site_id, name=data.name)
        self.db.add(assistant)
        self.db.commit()
        self.db.refresh(assistant)
        return assistant
