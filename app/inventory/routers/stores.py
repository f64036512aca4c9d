from typing import Literal

from fastapi import APIRouter, Depends, Query, Request, Response, status

from app.inventory.core.config import settings
from app.inventory.core.deps import get_current_principal
from app.inventory.core.principal import Principal
from app.inventory.db.session import get_db
from app.inventory.schemas.errors import RESOURCE_ERROR_RESPONSES
from app.inventory.schemas.products import ListPaginationMeta
from app.inventory.schemas.stores import (
    StoreCreateRequest,
    StoreItem,
    StoreListResponse,
    StoreResponse,
    StoreUpdateRequest,
)
from app.inventory.services.stores import StoreService

router = APIRouter(responses=RESOURCE_ERROR_RESPONSES)


def _service(request: Request, db) -> StoreService:
    return StoreService(db, trace_id=getattr(request.state, "trace_id", "") or None)


def _store_response(request: Request, store) -> StoreResponse:
    return StoreResponse(store=StoreItem.model_validate(store), trace_id=getattr(request.state, "trace_id", ""))


@router.get("", response_model=StoreListResponse, summary="List stores", description="SystemAdmin only.")
async def list_stores(
    request: Request,
    include_deleted: bool = Query(default=False),
    search: str | None = Query(default=None, max_length=128),
    limit: int | None = Query(default=None, ge=1, le=settings.LIST_MAX_PAGE_SIZE),
    offset: int = Query(default=0, ge=0),
    sort_by: str = Query("name"),
    sort_order: Literal["asc", "desc"] = "asc",
    principal: Principal = Depends(get_current_principal),
    db=Depends(get_db),
):
    rows, total = _service(request, db).list_stores(
        principal,
        include_deleted=include_deleted,
        search=search,
        limit=limit,
        offset=offset,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return StoreListResponse(
        stores=[StoreItem.model_validate(row) for row in rows],
        pagination=ListPaginationMeta(total=total, count=len(rows), limit=limit, offset=offset),
        trace_id=getattr(request.state, "trace_id", ""),
    )


@router.get("/{store_id}", response_model=StoreResponse, summary="Get store")
async def get_store(
    request: Request,
    store_id: int,
    include_deleted: bool = Query(default=False),
    principal: Principal = Depends(get_current_principal),
    db=Depends(get_db),
):
    store = _service(request, db).get_store(principal, store_id, include_deleted=include_deleted)
    return _store_response(request, store)


@router.post(
    "",
    response_model=StoreResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create store",
    description="SystemAdmin only.",
)
async def create_store(
    request: Request,
    payload: StoreCreateRequest,
    principal: Principal = Depends(get_current_principal),
    db=Depends(get_db),
):
    store = _service(request, db).create_store(principal, name=payload.name, address=payload.address)
    return _store_response(request, store)


@router.put("/{store_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response, summary="Update store")
async def update_store(
    request: Request,
    store_id: int,
    payload: StoreUpdateRequest,
    principal: Principal = Depends(get_current_principal),
    db=Depends(get_db),
):
    _service(request, db).update_store(
        principal,
        store_id,
        name=payload.name,
        address=payload.address,
        version=payload.version,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{store_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete store",
    description="Soft delete. Owners may delete their own store, SystemAdmin any store.",
)
async def delete_store(
    request: Request,
    store_id: int,
    principal: Principal = Depends(get_current_principal),
    db=Depends(get_db),
):
    _service(request, db).delete_store(principal, store_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{store_id}/restore", response_model=StoreResponse, summary="Restore store")
async def restore_store(
    request: Request,
    store_id: int,
    principal: Principal = Depends(get_current_principal),
    db=Depends(get_db),
):
    store = _service(request, db).restore_store(principal, store_id)
    return _store_response(request, store)
