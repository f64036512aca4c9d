from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.inventory.schemas.products import ListPaginationMeta


def _strip_name(value: str) -> str:
    if not value.strip():
        raise ValueError("Store name is required.")
    return value.strip()


class StoreCreateRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "example": {"name": "Store Centro", "address": "1 Main Street"},
        }
    }

    name: str = Field(..., min_length=1, max_length=128)
    address: str | None = Field(default=None, max_length=256)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        return _strip_name(value)


class StoreUpdateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    address: str | None = Field(default=None, max_length=256)
    version: int | None = Field(default=None, ge=1, description="Version read by the client; rejected if stale.")

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        return _strip_name(value)


class StoreItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    address: str | None = None
    lifecycle_state: str
    deleted_at: datetime | None = None
    deleted_by: str | None = None
    restored_at: datetime | None = None
    restored_by: str | None = None
    version: int
    created_at: datetime


class StoreResponse(BaseModel):
    store: StoreItem
    trace_id: str


class StoreListResponse(BaseModel):
    stores: list[StoreItem]
    pagination: ListPaginationMeta
    trace_id: str
