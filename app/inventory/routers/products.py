from typing import Literal

from fastapi import APIRouter, Depends, Query, Request, Response, status

from app.inventory.core.config import settings
from app.inventory.core.deps import get_current_principal
from app.inventory.core.principal import Principal
from app.inventory.db.session import get_db
from app.inventory.schemas.errors import RESOURCE_ERROR_RESPONSES
from app.inventory.schemas.products import (
    ListPaginationMeta,
    ProductCreateRequest,
    ProductItem,
    ProductListResponse,
    ProductResponse,
    ProductUpdateRequest,
)
from app.inventory.services.products import ProductService

router = APIRouter(responses=RESOURCE_ERROR_RESPONSES)


def _service(request: Request, db) -> ProductService:
    return ProductService(db, trace_id=getattr(request.state, "trace_id", "") or None)


def _product_response(request: Request, product) -> ProductResponse:
    return ProductResponse(
        product=ProductItem.model_validate(product),
        trace_id=getattr(request.state, "trace_id", ""),
    )


@router.get(
    "",
    response_model=ProductListResponse,
    summary="List products",
    description=(
        "Staff and Owners only ever see their own store. SystemAdmin sees every store unless `tenant_id` "
        "narrows the listing. Deleted products are hidden unless `include_deleted=true` is requested "
        "by a role allowed to restore them."
    ),
)
async def list_products(
    request: Request,
    tenant_id: int | None = Query(default=None, description="Store to list products for."),
    include_deleted: bool = Query(default=False),
    search: str | None = Query(default=None, max_length=128),
    limit: int | None = Query(default=None, ge=1, le=settings.LIST_MAX_PAGE_SIZE),
    offset: int = Query(default=0, ge=0),
    sort_by: str = Query("id"),
    sort_order: Literal["asc", "desc"] = "asc",
    principal: Principal = Depends(get_current_principal),
    db=Depends(get_db),
):
    rows, total = _service(request, db).list_products(
        principal,
        tenant_id=tenant_id,
        include_deleted=include_deleted,
        search=search,
        limit=limit,
        offset=offset,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return ProductListResponse(
        products=[ProductItem.model_validate(row) for row in rows],
        pagination=ListPaginationMeta(total=total, count=len(rows), limit=limit, offset=offset),
        trace_id=getattr(request.state, "trace_id", ""),
    )


@router.get("/{product_id}", response_model=ProductResponse, summary="Get product")
async def get_product(
    request: Request,
    product_id: int,
    include_deleted: bool = Query(default=False),
    principal: Principal = Depends(get_current_principal),
    db=Depends(get_db),
):
    product = _service(request, db).get_product(principal, product_id, include_deleted=include_deleted)
    return _product_response(request, product)


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create product",
    description="`store_id` is honoured for SystemAdmin only. Staff and Owners always create in their own store.",
)
async def create_product(
    request: Request,
    payload: ProductCreateRequest,
    principal: Principal = Depends(get_current_principal),
    db=Depends(get_db),
):
    product = _service(request, db).create_product(
        principal,
        name=payload.name,
        quantity=payload.quantity,
        price=payload.price,
        store_id=payload.store_id,
    )
    return _product_response(request, product)


@router.put(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Update product",
)
async def update_product(
    request: Request,
    product_id: int,
    payload: ProductUpdateRequest,
    principal: Principal = Depends(get_current_principal),
    db=Depends(get_db),
):
    _service(request, db).update_product(
        principal,
        product_id,
        name=payload.name,
        quantity=payload.quantity,
        price=payload.price,
        store_id=payload.store_id,
        version=payload.version,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete product",
    description="Soft delete: the product is marked deleted and can be restored by an Owner or SystemAdmin.",
)
async def delete_product(
    request: Request,
    product_id: int,
    principal: Principal = Depends(get_current_principal),
    db=Depends(get_db),
):
    _service(request, db).delete_product(principal, product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{product_id}/restore", response_model=ProductResponse, summary="Restore product")
async def restore_product(
    request: Request,
    product_id: int,
    principal: Principal = Depends(get_current_principal),
    db=Depends(get_db),
):
    product = _service(request, db).restore_product(principal, product_id)
    return _product_response(request, product)
