# kriedko/core/deps.py

"""
Common dependencies for the application
"""

from fastapi import Depends, Request

from .config import Settings, get_settings
from kriedko.modules.feedback.services.admin_service import AdminService
from kriedko.modules.feedback.services.feedback_service import FeedbackService
from kriedko.modules.feedback.services.forwarding_service import RemoteAggregatorForwarder
from kriedko.modules.feedback.storage.base import SubmissionStore


def get_store(request: Request) -> SubmissionStore:
    """The store handle created at startup and attached to app state."""
    return request.app.state.store


def get_feedback_service(store: SubmissionStore = Depends(get_store)) -> FeedbackService:
    return FeedbackService(store)


def get_admin_service(store: SubmissionStore = Depends(get_store)) -> AdminService:
    return AdminService(store)


def get_forwarder(settings: Settings = Depends(get_settings)) -> RemoteAggregatorForwarder:
    return RemoteAggregatorForwarder.from_settings(settings)
