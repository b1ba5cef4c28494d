from uuid import UUID

from sqlalchemy.orm import Session

from clinic_ledger.models.account import Account
from clinic_ledger.schemas.account import AccountCreate


class AccountRepository:
    """Repository for Account model."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(self, site_id: UUID) -> list[Account]:
        return (
            self.db.query(Account)
            .filter(Account.site_id == site_id)
            .order_by(Account.name.asc())
            .all()
        )

    def get_by_id(self, account_id: UUID, site_id: UUID | None = None) -> Account | None:
        query = self.db.query(Account).filter(Account.id == account_id)
        if site_id is not None:
            query = query.filter(Account.site_id == site_id)
        return query.first()

    def create(self, data: AccountCreate) -> Account:
        account = Account(site_id=data.site_id, name=data.name)
        self.db.add(account)
        self.db.commit()
        self.db.refresh(account)
        return account
