# kriedko/modules/feedback/routers/admin_router.py

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse

from kriedko.core.auth import require_admin
from kriedko.core.deps import get_admin_service
from kriedko.core.exceptions import ValidationError
from kriedko.modules.feedback.models.feedback_models import SentimentLabel
from kriedko.modules.feedback.services.admin_service import AdminService
from kriedko.modules.feedback.services.feedback_service import parse_payload

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/submissions",
    tags=["Feedback Admin"],
    dependencies=[Depends(require_admin)],
)

TRUTHY_FLAGS = {"1", "true"}


@router.get("")
async def list_submissions(
    q: Optional[str] = Query(None, description="Search favourite item, improvements and meal preference"),
    sentiment: Optional[SentimentLabel] = Query(None, description="Filter by sentiment label"),
    admin_service: AdminService = Depends(get_admin_service),
):
    """All submissions, newest first"""

    return await asyncio.to_thread(admin_service.list_submissions, q, sentiment)


@router.delete("")
async def delete_submissions(
    submission_id: Optional[str] = Query(None, alias="id", description="Submission id to delete"),
    clear_all: Optional[str] = Query(None, alias="all", description="'1' or 'true' to delete everything"),
    admin_service: AdminService = Depends(get_admin_service),
):
    """Delete one submission by id, or all of them"""

    if clear_all is not None and clear_all.lower() in TRUTHY_FLAGS:
        await asyncio.to_thread(admin_service.delete_all)
        return {"ok": True, "cleared": True}

    if not submission_id:
        raise ValidationError("Missing id")

    removed = await asyncio.to_thread(admin_service.delete_submission, submission_id)
    return JSONResponse(
        status_code=status.HTTP_200_OK if removed else status.HTTP_404_NOT_FOUND,
        content={"ok": removed},
    )


@router.post("")
async def import_submissions(
    request: Request,
    admin_service: AdminService = Depends(get_admin_service),
):
    """Replace every stored submission with ``{"feedbacks": [...]}``"""

    body = parse_payload(await request.body())
    count = await asyncio.to_thread(admin_service.import_submissions, body)
    return {"ok": True, "count": count}


@router.get("/export")
async def export_submissions(
    admin_service: AdminService = Depends(get_admin_service),
):
    """Download every submission as an import-ready export document"""

    document = await asyncio.to_thread(admin_service.export_document)
    filename = f"feedback-export-{document['exportedAt'][:10]}.json"
    return JSONResponse(
        content=document,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
