from sqlalchemy import func, select

from app.inventory.core.lifecycle import LifecycleState
from app.inventory.db.models import Store
from app.inventory.repos._base import VersionedRepository


class StoreRepository(VersionedRepository):
    def get_by_id(self, store_id: int, *, include_deleted: bool = False):
        store = self.db.get(Store, store_id)
        if store is None or (store.is_deleted and not include_deleted):
            return None
        return store

    def exists_active(self, store_id: int) -> bool:
        stmt = select(Store.id).where(Store.id == store_id, Store.lifecycle_state == LifecycleState.ACTIVE.value)
        return self.db.execute(stmt).first() is not None

    def list_stores(
        self,
        *,
        include_deleted: bool = False,
        search: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
        sort_by: str = "name",
        sort_order: str = "asc",
    ):
        stmt = select(Store)
        count_stmt = select(func.count()).select_from(Store)

        if not include_deleted:
            stmt = stmt.where(Store.lifecycle_state == LifecycleState.ACTIVE.value)
            count_stmt = count_stmt.where(Store.lifecycle_state == LifecycleState.ACTIVE.value)

        if search:
            pattern = f"%{search.strip()}%"
            stmt = stmt.where(Store.name.ilike(pattern))
            count_stmt = count_stmt.where(Store.name.ilike(pattern))

        sort_mapping = {
            "id": Store.id,
            "name": Store.name,
            "created_at": Store.created_at,
        }
        sort_column = sort_mapping.get(sort_by, Store.name)
        stmt = stmt.order_by(sort_column.asc() if sort_order == "asc" else sort_column.desc())

        if offset:
            stmt = stmt.offset(offset)
        if limit:
            stmt = stmt.limit(limit)

        rows = self.db.execute(stmt).scalars().all()
        total = self.db.execute(count_stmt).scalar_one()
        return rows, total

    def create(self, store: Store):
        return self.save(store)

    def update(self, store: Store):
        return self.save(store)
