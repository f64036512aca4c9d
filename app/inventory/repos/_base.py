from sqlalchemy.orm.exc import StaleDataError

from app.inventory.core.error_catalog import AppError, ErrorCatalog


class VersionedRepository:
    def __init__(self, db):
        self.db = db

    def save(self, record):
        details = {"entity_type": record.__tablename__, "entity_id": record.id}
        self.db.add(record)
        try:
            self.db.commit()
        except StaleDataError as exc:
            self.db.rollback()
            raise AppError(ErrorCatalog.CONCURRENT_MODIFICATION, details=details) from exc
        self.db.refresh(record)
        return record
