"""
Design pattern management (admin only), mounted under ``/admin/patterns``.

Metadata routes work on the database row; the ``/content/{locale}`` routes
read and replace the Markdown body stored on disk for one locale.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Response, status
import logging

from patternhub.core.dependencies import db_dependency, require_admin
from patternhub.schemas.pattern import (
    ContentResponse,
    ContentUpdate,
    PatternCreate,
    PatternResponse,
    PatternUpdate,
)
from patternhub.services.pattern_service import PatternService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/patterns",
    tags=["Admin: Patterns"],
    dependencies=[Depends(require_admin)],
)

LocalePath = Path(..., min_length=2, max_length=10, description="Content locale, e.g. zh or en")


def pattern_service(conn=Depends(db_dependency)) -> PatternService:
    return PatternService(conn)


@router.get("", response_model=list[PatternResponse], summary="Patterns, drafts included")
def list_patterns(
    category_id: Optional[int] = Query(None, gt=0),
    service: PatternService = Depends(pattern_service),
):
    return service.list_patterns(category_id)


@router.post(
    "",
    response_model=PatternResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a pattern",
)
def create_pattern(data: PatternCreate, service: PatternService = Depends(pattern_service)):
    """
    The category must exist (404 otherwise). **content** may carry an initial
    Markdown body per locale.
    """
    pattern = service.create_pattern(data)
    logger.info("Admin created pattern slug=%s", pattern.slug)
    return pattern


@router.get("/{pattern_id}", response_model=PatternResponse, summary="One pattern")
def get_pattern(pattern_id: int, service: PatternService = Depends(pattern_service)):
    return service.get_pattern(pattern_id)


@router.patch("/{pattern_id}", response_model=PatternResponse, summary="Edit pattern metadata")
def update_pattern(
    pattern_id: int,
    data: PatternUpdate,
    service: PatternService = Depends(pattern_service),
):
    return service.update_pattern(pattern_id, data)


@router.delete(
    "/{pattern_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a pattern and its Markdown files",
)
def delete_pattern(pattern_id: int, service: PatternService = Depends(pattern_service)):
    service.delete_pattern(pattern_id)
    logger.info("Admin deleted pattern id=%s", pattern_id)


@router.get(
    "/{pattern_id}/content/{locale}",
    response_model=ContentResponse,
    summary="Markdown body for one locale",
)
def get_content(
    pattern_id: int,
    locale: str = LocalePath,
    service: PatternService = Depends(pattern_service),
):
    """
    A missing body falls back to the default locale, then to a placeholder;
    ``locale`` and ``is_placeholder`` in the response say which was served.
    """
    return service.get_content(pattern_id, locale)


@router.put(
    "/{pattern_id}/content/{locale}",
    response_model=ContentResponse,
    summary="Replace the Markdown body for one locale",
)
def save_content(
    pattern_id: int,
    data: ContentUpdate,
    locale: str = LocalePath,
    service: PatternService = Depends(pattern_service),
):
    response = service.save_content(pattern_id, locale, data.content)
    logger.info("Admin saved %s body for pattern id=%s", locale, pattern_id)
    return response
