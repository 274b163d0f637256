"""CRUD singletons for the metadata database."""

from askdoc.boundary.db.CRUD.collection_crud import collection_crud
from askdoc.boundary.db.CRUD.job_crud import job_crud
from askdoc.boundary.db.CRUD.message_crud import message_crud
from askdoc.boundary.db.CRUD.session_crud import session_crud
from askdoc.boundary.db.CRUD.site_crud import site_crud

__all__ = [
    "collection_crud",
    "job_crud",
    "message_crud",
    "session_crud",
    "site_crud",
]
