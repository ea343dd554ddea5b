# kriedko/modules/feedback/routers/feedback_router.py

import asyncio
import logging
from typing import Any, Dict

from fastapi import APIRouter, BackgroundTasks, Depends, Request, status
from fastapi.responses import StreamingResponse

from kriedko.core.config import Settings, get_settings
from kriedko.core.deps import get_feedback_service, get_forwarder, get_store
from kriedko.modules.feedback.schemas.feedback_schemas import FeedbackAck, StoreStatus
from kriedko.modules.feedback.services.feedback_service import FeedbackService, parse_payload
from kriedko.modules.feedback.services.forwarding_service import RemoteAggregatorForwarder
from kriedko.modules.feedback.services.stream_service import (
    SSE_HEADERS,
    AggregateStream,
    StreamConfig,
)
from kriedko.modules.feedback.storage.base import SubmissionStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Feedback"])


@router.post("/feedback", status_code=status.HTTP_201_CREATED, response_model=FeedbackAck)
async def create_feedback(
    request: Request,
    background_tasks: BackgroundTasks,
    feedback_service: FeedbackService = Depends(get_feedback_service),
    forwarder: RemoteAggregatorForwarder = Depends(get_forwarder),
):
    """Accept a public form submission"""

    payload = parse_payload(await request.body())
    submission = await asyncio.to_thread(feedback_service.submit, payload)

    if forwarder.enabled:
        background_tasks.add_task(forwarder.forward, submission.to_record())

    return FeedbackAck(ok=True, id=submission.id)


@router.get("/aggregates")
async def get_aggregates(
    feedback_service: FeedbackService = Depends(get_feedback_service),
) -> Dict[str, Any]:
    """Current aggregate statistics over every stored submission"""

    aggregate = await asyncio.to_thread(feedback_service.current_aggregates)
    return aggregate.to_payload()


@router.get("/sentiment-stream")
async def sentiment_stream(
    request: Request,
    store: SubmissionStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    """Server-Sent Events stream of aggregate snapshots for the live dashboard"""

    stream = AggregateStream(
        store,
        config=StreamConfig.from_settings(settings),
        is_disconnected=request.is_disconnected,
    )
    return StreamingResponse(
        stream.events(),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


@router.get("/status", response_model=StoreStatus)
async def get_status(store: SubmissionStore = Depends(get_store)):
    """Active backend and record count"""

    count = await asyncio.to_thread(store.count)
    return StoreStatus(backend=store.backend_name, count=count)
