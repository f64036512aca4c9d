"""Soft-delete state machine shared by stores and products.

A record is either ``ACTIVE`` or ``DELETED``. Deleting and restoring are the
only transitions and each one stamps who did it and when. Nothing here talks
to the database; callers copy the resulting record back onto the row.

A fresh delete keeps the previous ``restored_at``/``restored_by`` and a restore
keeps ``deleted_at``/``deleted_by``: each pair always describes the latest
transition of its kind. The full history lives in the audit trail.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum

from app.inventory.core.error_catalog import AppError, ErrorCatalog


class LifecycleState(str, Enum):
    ACTIVE = "active"
    DELETED = "deleted"


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


@dataclass(frozen=True)
class LifecycleRecord:
    state: LifecycleState = LifecycleState.ACTIVE
    deleted_at: datetime | None = None
    deleted_by: str | None = None
    restored_at: datetime | None = None
    restored_by: str | None = None

    @property
    def is_deleted(self) -> bool:
        return self.state is LifecycleState.DELETED

    def delete(self, actor: str, now: datetime | None = None) -> "LifecycleRecord":
        if self.is_deleted:
            raise AppError(
                ErrorCatalog.RESOURCE_ALREADY_DELETED,
                details={"deleted_at": self.deleted_at, "deleted_by": self.deleted_by},
            )
        return replace(self, state=LifecycleState.DELETED, deleted_at=now or utcnow(), deleted_by=actor)

    def restore(self, actor: str, now: datetime | None = None) -> "LifecycleRecord":
        if not self.is_deleted:
            raise AppError(ErrorCatalog.RESOURCE_NOT_DELETED)
        return replace(self, state=LifecycleState.ACTIVE, restored_at=now or utcnow(), restored_by=actor)

