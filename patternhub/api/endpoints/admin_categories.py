"""
Category management (admin only), mounted under ``/admin/categories``.

Every write evicts the cached catalogue pages built from the category.
"""
from fastapi import APIRouter, Depends, Response, status
import logging

from patternhub.core.dependencies import db_dependency, require_admin
from patternhub.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate
from patternhub.services.category_service import CategoryService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/categories",
    tags=["Admin: Categories"],
    dependencies=[Depends(require_admin)],
)


def category_service(conn=Depends(db_dependency)) -> CategoryService:
    return CategoryService(conn)


@router.get("", response_model=list[CategoryResponse], summary="Categories in display order")
def list_categories(service: CategoryService = Depends(category_service)):
    return service.list_categories()


@router.post(
    "",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a category",
)
def create_category(data: CategoryCreate, service: CategoryService = Depends(category_service)):
    """
    Omit **slug** to derive one from the names (``-2``, ``-3`` when taken).
    An explicit slug that already exists is rejected with 409.
    """
    category = service.create_category(data)
    logger.info("Admin created category slug=%s", category.slug)
    return category


@router.get("/{category_id}", response_model=CategoryResponse, summary="One category")
def get_category(category_id: int, service: CategoryService = Depends(category_service)):
    return service.get_category(category_id)


@router.patch("/{category_id}", response_model=CategoryResponse, summary="Edit a category")
def update_category(
    category_id: int,
    data: CategoryUpdate,
    service: CategoryService = Depends(category_service),
):
    """Only the fields sent change. A translation map replaces the stored one."""
    return service.update_category(category_id, data)


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete an empty category",
)
def delete_category(category_id: int, service: CategoryService = Depends(category_service)):
    """409 while the category still owns patterns, published or not."""
    service.delete_category(category_id)
    logger.info("Admin deleted category id=%s", category_id)
