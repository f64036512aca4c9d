from __future__ import annotations

import logging

from app.inventory.core.authorization import Action, ResourceKind, authorize
from app.inventory.core.error_catalog import AppError, ErrorCatalog
from app.inventory.core.lifecycle import LifecycleState
from app.inventory.core.logging import log_json
from app.inventory.core.principal import Principal
from app.inventory.db.models import Store
from app.inventory.repos.stores import StoreRepository
from app.inventory.services.audit import AuditEventPayload, AuditService

logger = logging.getLogger(__name__)


def store_snapshot(store: Store) -> dict:
    return {
        "name": store.name,
        "address": store.address,
        "lifecycle_state": store.lifecycle_state,
        "deleted_at": store.deleted_at.isoformat() if store.deleted_at else None,
        "deleted_by": store.deleted_by,
        "restored_at": store.restored_at.isoformat() if store.restored_at else None,
        "restored_by": store.restored_by,
    }


class StoreService:
    """Store administration. A store is its own tenant, so its id is the tenant id."""

    def __init__(self, db, *, trace_id: str | None = None):
        self.repo = StoreRepository(db)
        self.audit = AuditService(db)
        self.trace_id = trace_id

    def _load(self, store_id: int) -> Store:
        store = self.repo.get_by_id(store_id, include_deleted=True)
        if store is None:
            raise AppError(ErrorCatalog.STORE_NOT_FOUND, details={"store_id": store_id})
        return store

    def _authorize(self, principal: Principal, action: Action, store: Store, **kwargs):
        return authorize(
            principal,
            action,
            resource_tenant_id=store.id,
            resource_state=LifecycleState(store.lifecycle_state),
            resource=ResourceKind.STORE,
            **kwargs,
        )

    def _record(self, principal: Principal, action: str, store: Store, *, before: dict | None) -> None:
        self.audit.record_event(
            AuditEventPayload.for_principal(
                principal,
                action=f"store.{action}",
                entity_type="store",
                entity_id=store.id,
                store_id=store.id,
                trace_id=self.trace_id,
                before=before,
                after=store_snapshot(store),
            )
        )

    def list_stores(
        self,
        principal: Principal,
        *,
        include_deleted: bool = False,
        search: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
        sort_by: str = "name",
        sort_order: str = "asc",
    ):
        authorize(principal, Action.LIST, resource=ResourceKind.STORE, include_deleted=include_deleted)
        return self.repo.list_stores(
            include_deleted=include_deleted,
            search=search,
            limit=limit,
            offset=offset,
            sort_by=sort_by,
            sort_order=sort_order,
        )

    def get_store(self, principal: Principal, store_id: int, *, include_deleted: bool = False) -> Store:
        store = self._load(store_id)
        if store.is_deleted and not include_deleted:
            raise AppError(ErrorCatalog.STORE_NOT_FOUND, details={"store_id": store_id})
        self._authorize(principal, Action.READ, store, include_deleted=include_deleted)
        return store

    def create_store(self, principal: Principal, *, name: str, address: str | None = None) -> Store:
        authorize(principal, Action.CREATE, resource=ResourceKind.STORE)
        store = self.repo.create(Store(name=name, address=address))
        self._record(principal, "create", store, before=None)
        return store

    def update_store(
        self,
        principal: Principal,
        store_id: int,
        *,
        name: str,
        address: str | None = None,
        version: int | None = None,
    ) -> Store:
        store = self._load(store_id)
        self._authorize(principal, Action.UPDATE, store)
        if version is not None and version != store.version:
            raise AppError(
                ErrorCatalog.CONCURRENT_MODIFICATION,
                details={"expected_version": version, "current_version": store.version},
            )
        before = store_snapshot(store)
        store.name = name
        store.address = address
        self.repo.update(store)
        self._record(principal, "update", store, before=before)
        return store

    def delete_store(self, principal: Principal, store_id: int) -> Store:
        store = self._load(store_id)
        self._authorize(principal, Action.DELETE, store)
        before = store_snapshot(store)
        store.apply_lifecycle(store.lifecycle().delete(principal.display_name))
        self.repo.update(store)
        log_json(logger, {"event": "store.delete", "store_id": store.id, "actor": principal.display_name})
        self._record(principal, "delete", store, before=before)
        return store

    def restore_store(self, principal: Principal, store_id: int) -> Store:
        store = self._load(store_id)
        self._authorize(principal, Action.RESTORE, store)
        before = store_snapshot(store)
        store.apply_lifecycle(store.lifecycle().restore(principal.display_name))
        self.repo.update(store)
        log_json(logger, {"event": "store.restore", "store_id": store.id, "actor": principal.display_name})
        self._record(principal, "restore", store, before=before)
        return store
