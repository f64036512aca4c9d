from sqlalchemy import func, select

from app.inventory.core.lifecycle import LifecycleState
from app.inventory.db.models import Product, Store
from app.inventory.repos._base import VersionedRepository


class ProductRepository(VersionedRepository):
    def get_by_id(self, product_id: int, *, include_deleted: bool = False):
        product = self.db.get(Product, product_id)
        if product is None:
            return None
        if not include_deleted and (product.is_deleted or product.store.is_deleted):
            return None
        return product

    def list_products(
        self,
        *,
        tenant_filter_id: int | None = None,
        include_deleted: bool = False,
        search: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
        sort_by: str = "id",
        sort_order: str = "asc",
    ):
        stmt = select(Product)
        count_stmt = select(func.count()).select_from(Product)

        if tenant_filter_id is not None:
            stmt = stmt.where(Product.store_id == tenant_filter_id)
            count_stmt = count_stmt.where(Product.store_id == tenant_filter_id)

        if not include_deleted:
            active = (
                Product.lifecycle_state == LifecycleState.ACTIVE.value,
                Store.lifecycle_state == LifecycleState.ACTIVE.value,
            )
            stmt = stmt.join(Store, Product.store_id == Store.id).where(*active)
            count_stmt = count_stmt.join(Store, Product.store_id == Store.id).where(*active)

        if search:
            pattern = f"%{search.strip()}%"
            stmt = stmt.where(Product.name.ilike(pattern))
            count_stmt = count_stmt.where(Product.name.ilike(pattern))

        sort_mapping = {
            "id": Product.id,
            "name": Product.name,
            "quantity": Product.quantity,
            "price": Product.price,
        }
        sort_column = sort_mapping.get(sort_by, Product.id)
        stmt = stmt.order_by(sort_column.asc() if sort_order == "asc" else sort_column.desc())

        if offset:
            stmt = stmt.offset(offset)
        if limit:
            stmt = stmt.limit(limit)

        rows = self.db.execute(stmt).scalars().all()
        total = self.db.execute(count_stmt).scalar_one()
        return rows, total

    def create(self, product: Product):
        return self.save(product)

    def update(self, product: Product):
        return self.save(product)
