"""
Markdown tooling for editors:
  POST /markdown/preview – Render posted Markdown exactly as articles are rendered
"""
from fastapi import APIRouter, Depends
import logging

from patternhub.core.dependencies import require_admin
from patternhub.models.user import User
from patternhub.schemas.pattern import MarkdownPreviewRequest, MarkdownPreviewResponse
from patternhub.services.markdown_service import MarkdownRenderer, get_renderer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/markdown", tags=["Markdown"])


@router.post("/preview", response_model=MarkdownPreviewResponse, summary="Live preview")
def preview(
    data: MarkdownPreviewRequest,
    renderer: MarkdownRenderer = Depends(get_renderer),
    _: User = Depends(require_admin),
):
    logger.info("Rendering markdown preview (%s chars)", len(data.content))
    return MarkdownPreviewResponse(html=renderer.render(data.content))
