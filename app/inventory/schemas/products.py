from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class ProductCreateRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {"name": "Sample Product A", "quantity": 10, "price": "140.00"},
                {"name": "Sample Product A", "quantity": 10, "price": "140.00", "store_id": 2},
            ]
        }
    }

    name: str = Field(..., min_length=1, max_length=128)
    quantity: int
    price: Decimal = Field(..., max_digits=18, decimal_places=2)
    store_id: int | None = Field(
        default=None,
        description="Target store. Only honoured for SystemAdmin; other roles always write to their own store.",
    )


class ProductUpdateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    quantity: int
    price: Decimal = Field(..., max_digits=18, decimal_places=2)
    store_id: int | None = Field(default=None, description="Only SystemAdmin may move a product between stores.")
    version: int | None = Field(default=None, ge=1, description="Version read by the client; rejected if stale.")


class ProductItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    quantity: int
    price: Decimal
    store_id: int
    lifecycle_state: str
    deleted_at: datetime | None = None
    deleted_by: str | None = None
    restored_at: datetime | None = None
    restored_by: str | None = None
    version: int


class ProductResponse(BaseModel):
    product: ProductItem
    trace_id: str


class ListPaginationMeta(BaseModel):
    total: int
    count: int
    limit: int | None = None
    offset: int


class ProductListResponse(BaseModel):
    products: list[ProductItem]
    pagination: ListPaginationMeta
    trace_id: str
