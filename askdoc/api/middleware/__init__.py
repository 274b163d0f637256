"""HTTP middleware and router-level guards."""

from askdoc.api.middleware.auth import require_api_key
from askdoc.api.middleware.cors import CORSMiddleware

__all__ = ["CORSMiddleware", "require_api_key"]
