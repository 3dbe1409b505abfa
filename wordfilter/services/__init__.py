"""
Service layer utilities for content filtering and settings authorization.
"""

from .authorization import (
    MANAGE_OPTIONS,
    AuthenticatedCommand,
    NonceManager,
    PermissionDeniedError,
    SessionRegistry,
    User,
)
from .content_filter import (
    ContentFilterService,
    RenderedContent,
    build_content_filter,
)
from .sanitize import sanitize_text_field

__all__ = [
    "MANAGE_OPTIONS",
    "AuthenticatedCommand",
    "ContentFilterService",
    "NonceManager",
    "PermissionDeniedError",
    "RenderedContent",
    "SessionRegistry",
    "User",
    "build_content_filter",
    "sanitize_text_field",
]
