"""ORM models for the metadata database."""

from askdoc.boundary.db.models.collection_model import CollectionModel
from askdoc.boundary.db.models.job_model import IngestionJobModel, JobStatus
from askdoc.boundary.db.models.message_model import MessageModel, MessageRole
from askdoc.boundary.db.models.session_model import SessionModel
from askdoc.boundary.db.models.site_model import (
    DEFAULT_RATE_LIMIT,
    DEFAULT_WIDGET_CONFIG,
    SiteModel,
)

__all__ = [
    "CollectionModel",
    "IngestionJobModel",
    "JobStatus",
    "MessageModel",
    "MessageRole",
    "SessionModel",
    "SiteModel",
    "DEFAULT_RATE_LIMIT",
    "DEFAULT_WIDGET_CONFIG",
]
