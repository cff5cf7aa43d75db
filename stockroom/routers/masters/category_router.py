from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.core.db import get_db
from stockroom.schemas.masters.category_schemas import CategoryCreate, CategoryOut
from stockroom.services.masters.category_service import (
    list_categories,
    create_category,
    delete_category,
)
from stockroom.utils.check_roles import require_role, WRITE_ROLES
from stockroom.utils.get_user import get_current_user
from stockroom.utils.response import APIResponse, success_response

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("/", response_model=APIResponse[list[CategoryOut]])
async def list_categories_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    items = await list_categories(db)
    return success_response("Categories fetched successfully", items)


@router.post("/", response_model=APIResponse[CategoryOut], status_code=201)
async def create_category_api(
    payload: CategoryCreate,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_role(WRITE_ROLES)),
):
    category = await create_category(db, payload)
    return success_response("Category created successfully", category)


@router.delete("/{category_id}", response_model=APIResponse[None])
async def delete_category_api(
    category_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_role(WRITE_ROLES)),
):
    await delete_category(db, category_id)
    return success_response("Category deleted")
