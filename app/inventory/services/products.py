from __future__ import annotations

import logging

from app.inventory.core.authorization import Action, ResourceKind, authorize, resolve_create_tenant
from app.inventory.core.config import settings
from app.inventory.core.error_catalog import AppError, ErrorCatalog
from app.inventory.core.lifecycle import LifecycleState
from app.inventory.core.logging import log_json
from app.inventory.core.principal import Principal
from app.inventory.db.models import Product
from app.inventory.repos.products import ProductRepository
from app.inventory.repos.stores import StoreRepository
from app.inventory.services.audit import AuditEventPayload, AuditService

logger = logging.getLogger(__name__)


def product_snapshot(product: Product) -> dict:
    return {
        "name": product.name,
        "quantity": product.quantity,
        "price": format(product.price, "f") if product.price is not None else None,
        "store_id": product.store_id,
        "lifecycle_state": product.lifecycle_state,
        "deleted_at": product.deleted_at.isoformat() if product.deleted_at else None,
        "deleted_by": product.deleted_by,
        "restored_at": product.restored_at.isoformat() if product.restored_at else None,
        "restored_by": product.restored_by,
    }


class ProductService:
    def __init__(self, db, *, trace_id: str | None = None):
        self.repo = ProductRepository(db)
        self.store_repo = StoreRepository(db)
        self.audit = AuditService(db)
        self.trace_id = trace_id

    def _load(self, product_id: int) -> Product:
        product = self.repo.get_by_id(product_id, include_deleted=True)
        if product is None:
            raise AppError(ErrorCatalog.PRODUCT_NOT_FOUND, details={"product_id": product_id})
        return product

    def _ensure_store_active(self, product: Product) -> None:
        if not self.store_repo.exists_active(product.store_id):
            raise AppError(ErrorCatalog.STORE_DELETED, details={"store_id": product.store_id})

    def _record(self, principal: Principal, action: str, product: Product, *, before: dict | None) -> None:
        self.audit.record_event(
            AuditEventPayload.for_principal(
                principal,
                action=f"product.{action}",
                entity_type="product",
                entity_id=product.id,
                store_id=product.store_id,
                trace_id=self.trace_id,
                before=before,
                after=product_snapshot(product),
            )
        )

    def list_products(
        self,
        principal: Principal,
        *,
        tenant_id: int | None = None,
        include_deleted: bool = False,
        search: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
        sort_by: str = "id",
        sort_order: str = "asc",
    ):
        decision = authorize(
            principal,
            Action.LIST,
            resource=ResourceKind.PRODUCT,
            requested_tenant_id=tenant_id,
            include_deleted=include_deleted,
            admin_tenant_filter=settings.ADMIN_LIST_TENANT_FILTER,
        )
        return self.repo.list_products(
            tenant_filter_id=decision.tenant_filter,
            include_deleted=include_deleted,
            search=search,
            limit=limit,
            offset=offset,
            sort_by=sort_by,
            sort_order=sort_order,
        )

    def get_product(self, principal: Principal, product_id: int, *, include_deleted: bool = False) -> Product:
        product = self._load(product_id)
        if not include_deleted and (product.is_deleted or product.store.is_deleted):
            raise AppError(ErrorCatalog.PRODUCT_NOT_FOUND, details={"product_id": product_id})
        authorize(
            principal,
            Action.READ,
            resource_tenant_id=product.store_id,
            resource_state=LifecycleState(product.lifecycle_state),
            resource=ResourceKind.PRODUCT,
            include_deleted=include_deleted,
        )
        return product

    def create_product(
        self,
        principal: Principal,
        *,
        name: str,
        quantity: int,
        price,
        store_id: int | None = None,
    ) -> Product:
        authorize(principal, Action.CREATE, resource=ResourceKind.PRODUCT)
        resolved_store_id = resolve_create_tenant(principal, store_id)
        if resolved_store_id is None:
            raise AppError(ErrorCatalog.VALIDATION_ERROR, details={"message": "store_id is required"})
        if not self.store_repo.exists_active(resolved_store_id):
            raise AppError(
                ErrorCatalog.VALIDATION_ERROR,
                details={"message": "Store not found", "store_id": resolved_store_id},
            )

        product = self.repo.create(
            Product(name=name, quantity=quantity, price=price, store_id=resolved_store_id)
        )
        self._record(principal, "create", product, before=None)
        return product

    def update_product(
        self,
        principal: Principal,
        product_id: int,
        *,
        name: str,
        quantity: int,
        price,
        store_id: int | None = None,
        version: int | None = None,
    ) -> Product:
        product = self._load(product_id)
        authorize(
            principal,
            Action.UPDATE,
            resource_tenant_id=product.store_id,
            resource_state=LifecycleState(product.lifecycle_state),
            resource=ResourceKind.PRODUCT,
        )
        if version is not None and version != product.version:
            raise AppError(
                ErrorCatalog.CONCURRENT_MODIFICATION,
                details={"expected_version": version, "current_version": product.version},
            )
        self._ensure_store_active(product)

        before = product_snapshot(product)
        if principal.is_system_admin and store_id is not None and store_id != product.store_id:
            if not self.store_repo.exists_active(store_id):
                raise AppError(
                    ErrorCatalog.VALIDATION_ERROR,
                    details={"message": "Store not found", "store_id": store_id},
                )
            product.store_id = store_id

        product.name = name
        product.quantity = quantity
        product.price = price
        self.repo.update(product)
        self._record(principal, "update", product, before=before)
        return product

    def delete_product(self, principal: Principal, product_id: int) -> Product:
        product = self._load(product_id)
        authorize(
            principal,
            Action.DELETE,
            resource_tenant_id=product.store_id,
            resource_state=LifecycleState(product.lifecycle_state),
            resource=ResourceKind.PRODUCT,
        )
        self._ensure_store_active(product)
        before = product_snapshot(product)
        product.apply_lifecycle(product.lifecycle().delete(principal.display_name))
        self.repo.update(product)
        log_json(
            logger,
            {
                "event": "product.delete",
                "product_id": product.id,
                "store_id": product.store_id,
                "actor": principal.display_name,
                "trace_id": self.trace_id,
            },
        )
        self._record(principal, "delete", product, before=before)
        return product

    def restore_product(self, principal: Principal, product_id: int) -> Product:
        product = self._load(product_id)
        authorize(
            principal,
            Action.RESTORE,
            resource_tenant_id=product.store_id,
            resource_state=LifecycleState(product.lifecycle_state),
            resource=ResourceKind.PRODUCT,
        )
        self._ensure_store_active(product)
        before = product_snapshot(product)
        product.apply_lifecycle(product.lifecycle().restore(principal.display_name))
        self.repo.update(product)
        log_json(
            logger,
            {
                "event": "product.restore",
                "product_id": product.id,
                "store_id": product.store_id,
                "actor": principal.display_name,
                "trace_id": self.trace_id,
            },
        )
        self._record(principal, "restore", product, before=before)
        return product
