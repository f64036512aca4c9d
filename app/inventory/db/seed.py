from decimal import Decimal

from sqlalchemy import select

from app.inventory.core.config import settings
from app.inventory.core.principal import Role
from app.inventory.core.security import get_password_hash
from app.inventory.db.models import Product, Store, User


SAMPLE_PRODUCTS = [
    ("Sample Product A", 10, Decimal("140.00")),
    ("Sample Product B", 5, Decimal("55.00")),
    ("Sample Product C", 20, Decimal("200.00")),
]


def _get_or_create_store(db):
    store = db.execute(select(Store).where(Store.name == settings.DEFAULT_STORE_NAME)).scalars().first()
    if store:
        return store
    store = Store(name=settings.DEFAULT_STORE_NAME, address=settings.DEFAULT_STORE_ADDRESS)
    db.add(store)
    db.flush()
    return store


def _get_or_create_superadmin(db):
    user = db.execute(select(User).where(User.username == settings.SUPERADMIN_USERNAME)).scalars().first()
    if user:
        return user
    user = User(
        username=settings.SUPERADMIN_USERNAME,
        hashed_password=get_password_hash(settings.SUPERADMIN_PASSWORD),
        role=Role.SYSTEM_ADMIN.value,
        store_id=None,
    )
    db.add(user)
    return user


def _create_sample_products(db, store):
    has_products = db.execute(select(Product.id).limit(1)).first() is not None
    if has_products:
        return
    for name, quantity, price in SAMPLE_PRODUCTS:
        db.add(Product(name=name, quantity=quantity, price=price, store_id=store.id))


def run_seed(db):
    store = _get_or_create_store(db)
    _get_or_create_superadmin(db)
    if settings.SEED_SAMPLE_PRODUCTS:
        _create_sample_products(db, store)
    db.commit()
    return store


if __name__ == "__main__":
    from app.inventory.core.logging import configure_logging
    from app.inventory.db.session import SessionLocal, init_db

    configure_logging()
    init_db()
    session = SessionLocal()
    try:
        run_seed(session)
    finally:
        session.close()
