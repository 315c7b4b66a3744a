"""SQLAlchemy-backed Unit of Work."""

from sqlalchemy.orm import Session

from accessedu.application.common.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """Commits or rolls back the request-scoped SQLAlchemy session."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
