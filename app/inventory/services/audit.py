import logging
from dataclasses import dataclass

from app.inventory.core.lifecycle import utcnow
from app.inventory.core.principal import Principal
from app.inventory.db.models import AuditEvent
from app.inventory.repos.audit import AuditRepository

logger = logging.getLogger(__name__)


@dataclass
class AuditEventPayload:
    store_id: int | None
    user_id: str | None
    trace_id: str | None
    actor: str
    action: str
    entity_type: str
    entity_id: str | None
    before: dict | None
    after: dict | None
    result: str
    actor_role: str | None = None

    @classmethod
    def for_principal(
        cls,
        principal: Principal,
        *,
        action: str,
        entity_type: str,
        entity_id,
        store_id: int | None,
        trace_id: str | None = None,
        before: dict | None = None,
        after: dict | None = None,
        result: str = "success",
    ) -> "AuditEventPayload":
        return cls(
            store_id=store_id,
            user_id=principal.subject_id,
            trace_id=trace_id or None,
            actor=principal.display_name,
            actor_role=principal.role.value,
            action=action,
            entity_type=entity_type,
            entity_id=str(entity_id) if entity_id is not None else None,
            before=before,
            after=after,
            result=result,
        )


class AuditService:
    """Best-effort audit logging.

    Strategy: failures are logged and swallowed to avoid breaking request flows.
    """

    def __init__(self, db):
        self.db = db
        self.repo = AuditRepository(db)

    def record_event(self, payload: AuditEventPayload) -> None:
        try:
            event = AuditEvent(
                store_id=payload.store_id,
                user_id=payload.user_id,
                trace_id=payload.trace_id,
                actor=payload.actor,
                actor_role=payload.actor_role,
                action=payload.action,
                entity_type=payload.entity_type,
                entity_id=payload.entity_id,
                before_payload=payload.before,
                after_payload=payload.after,
                result=payload.result,
                created_at=utcnow(),
            )
            self.repo.create(event)
        except Exception:
            self.db.rollback()
            logger.exception(
                "Failed to write audit event",
                extra={
                    "action": payload.action,
                    "trace_id": payload.trace_id,
                    "store_id": payload.store_id,
                    "entity_id": payload.entity_id,
                },
            )
