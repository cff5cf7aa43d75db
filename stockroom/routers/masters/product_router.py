# stockroom/routers/masters/product_router.py

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.core.db import get_db
from stockroom.schemas.masters.product_schemas import (
    ProductCreate,
    ProductUpdate,
    ProductOut,
    ProductListData,
)
from stockroom.services.masters.product_service import (
    create_product,
    list_products,
    get_product,
    update_product,
    delete_product,
)
from stockroom.utils.check_roles import require_role, WRITE_ROLES
from stockroom.utils.get_user import get_current_user
from stockroom.utils.response import APIResponse, success_response
from stockroom.utils.logger import get_logger

router = APIRouter(prefix="/products", tags=["Products"])
logger = get_logger(__name__)


@router.post("/", response_model=APIResponse[ProductOut], status_code=201)
async def create_product_api(
    payload: ProductCreate,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_role(WRITE_ROLES)),
):
    logger.info("Create product", extra={"code": payload.code})
    product = await create_product(db, payload, user)
    return success_response("Product created successfully", product)


@router.get("/", response_model=APIResponse[ProductListData])
async def list_products_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
    search: str | None = Query(None, description="Search by name or code"),
    category_id: int | None = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    sort_by: str = Query("name"),
    order: str = Query("asc", pattern="^(asc|desc)$"),
):
    data = await list_products(
        db=db,
        search=search,
        category_id=category_id,
        page=page,
        page_size=page_size,
        sort_by=sort_by,
        order=order,
    )
    return success_response("Products fetched successfully", data)


@router.get("/{product_id}", response_model=APIResponse[ProductOut])
async def get_product_api(
    product_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    product = await get_product(db, product_id)
    return success_response("Product fetched successfully", product)


@router.patch("/{product_id}", response_model=APIResponse[ProductOut])
async def update_product_api(
    product_id: int,
    payload: ProductUpdate,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_role(WRITE_ROLES)),
):
    product = await update_product(db, product_id, payload, user)
    return success_response("Product updated successfully", product)


@router.delete("/{product_id}", response_model=APIResponse[None])
async def delete_product_api(
    product_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_role(["admin"])),
):
    await delete_product(db, product_id)
    return success_response("Product deleted")
