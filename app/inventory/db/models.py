from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Index, Integer, JSON, Numeric, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from app.inventory.core.lifecycle import LifecycleRecord, LifecycleState, utcnow


class Base(DeclarativeBase):
    pass


class SoftDeleteMixin:
    lifecycle_state: Mapped[str] = mapped_column(
        String(16), default=LifecycleState.ACTIVE.value, nullable=False, index=True
    )
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    deleted_by: Mapped[str | None] = mapped_column(String(128), nullable=True)
    restored_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    restored_by: Mapped[str | None] = mapped_column(String(128), nullable=True)

    @property
    def is_deleted(self) -> bool:
        return self.lifecycle_state == LifecycleState.DELETED.value

    def lifecycle(self) -> LifecycleRecord:
        return LifecycleRecord(
            state=LifecycleState(self.lifecycle_state or LifecycleState.ACTIVE.value),
            deleted_at=self.deleted_at,
            deleted_by=self.deleted_by,
            restored_at=self.restored_at,
            restored_by=self.restored_by,
        )

    def apply_lifecycle(self, record: LifecycleRecord) -> None:
        self.lifecycle_state = record.state.value
        self.deleted_at = record.deleted_at
        self.deleted_by = record.deleted_by
        self.restored_at = record.restored_at
        self.restored_by = record.restored_by


class Store(SoftDeleteMixin, Base):
    __tablename__ = "stores"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    address: Mapped[str | None] = mapped_column(String(256), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    products = relationship("Product", back_populates="store")
    users = relationship("User", back_populates="store")

    __mapper_args__ = {"version_id_col": version}


class Product(SoftDeleteMixin, Base):
    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    store_id: Mapped[int] = mapped_column(Integer, ForeignKey("stores.id"), index=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    store = relationship("Store", back_populates="products")

    __mapper_args__ = {"version_id_col": version}


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(128), nullable=False, unique=True, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(32), default="Staff", nullable=False)
    store_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("stores.id"), index=True, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    store = relationship("Store", back_populates="users")


class AuditEvent(Base):
    __tablename__ = "audit_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    store_id: Mapped[int | None] = mapped_column(Integer, index=True, nullable=True)
    user_id: Mapped[str | None] = mapped_column(String(64), index=True, nullable=True)
    trace_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    actor: Mapped[str] = mapped_column(String(128), nullable=False)
    actor_role: Mapped[str | None] = mapped_column(String(32), nullable=True)
    action: Mapped[str] = mapped_column(String(255), nullable=False)
    entity_type: Mapped[str] = mapped_column(String(64), nullable=False)
    entity_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    before_payload: Mapped[dict | None] = mapped_column("before", JSON, nullable=True)
    after_payload: Mapped[dict | None] = mapped_column("after", JSON, nullable=True)
    result: Mapped[str] = mapped_column(String(32), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)


Index("ix_products_store_state", Product.store_id, Product.lifecycle_state)
Index("ix_audit_events_entity", AuditEvent.entity_type, AuditEvent.entity_id)
