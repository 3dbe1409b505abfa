from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from wordfilter.SettingsStore.service import SettingsStoreError
from wordfilter.services import ContentFilterService

LOGGER = logging.getLogger(__name__)


class RenderContentRequest(BaseModel):
    content: str = Field(..., description="Page content, may contain markup.")


class RenderContentResponse(BaseModel):
    content: str = Field(..., description="Content after the word filter ran.")
    filtered: bool = Field(
        ..., description="Whether a word list was configured for this render."
    )


def create_content_router(content_service: ContentFilterService) -> APIRouter:
    router = APIRouter()

    @router.post(
        "/content/render",
        response_model=RenderContentResponse,
        summary="Render content through the configured word filter.",
    )
    def render_content(payload: RenderContentRequest) -> RenderContentResponse:
        try:
            rendered = content_service.render(payload.content)
        except SettingsStoreError as exc:
            LOGGER.exception("Could not load word filter options.")
            raise HTTPException(
                status_code=500, detail="Word filter options are unavailable."
            ) from exc

        return RenderContentResponse(
            content=rendered.content, filtered=rendered.filtered
        )

    return router
