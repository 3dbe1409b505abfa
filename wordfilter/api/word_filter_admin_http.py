from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import APIRouter, Form, HTTPException, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from wordfilter.FilterService.filter import DEFAULT_REPLACEMENT
from wordfilter.SettingsStore.service import (
    FILTER_TERMS_OPTION,
    REPLACEMENT_TEXT_OPTION,
    SettingsStore,
    SettingsStoreError,
)
from wordfilter.services import (
    AuthenticatedCommand,
    PermissionDeniedError,
    SessionRegistry,
    User,
    sanitize_text_field,
)

LOGGER = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"

SESSION_HEADER = "x-session-token"
SESSION_COOKIE = "session_token"

SAVE_WORD_LIST_ACTION = "save-word-filter"
SAVE_OPTIONS_ACTION = "replacement-fields-options"

SAVED_WORDS_MESSAGE = "Your filtered words were saved."
SAVED_OPTIONS_MESSAGE = "Settings saved."
PERMISSION_DENIED_MESSAGE = "Sorry, you do not have permission to perform that action."


def session_token_from(request: Request) -> Optional[str]:
    token = request.headers.get(SESSION_HEADER) or request.cookies.get(SESSION_COOKIE)
    return token.strip() if token else None


def create_word_filter_admin_router(
    store: SettingsStore,
    sessions: SessionRegistry,
    command: AuthenticatedCommand,
) -> APIRouter:
    """
    Register the admin pages that edit the word filter options.

    Paths:
        - `/admin/word-filter`: comma-separated word list (`filterTerms`).
        - `/admin/word-filter/options`: replacement text (`replacementText`).
    Both forms carry a nonce bound to the current session; a POST with a
    missing or stale nonce, or from a user without the capability, renders
    the permission-denied notice with status 403 and stores nothing.
    """

    router = APIRouter()
    templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

    def _current(request: Request):
        token = session_token_from(request)
        return token, sessions.resolve(token)

    def _read_option(name: str, default: Optional[str] = None) -> Optional[str]:
        try:
            return store.get(name, default)
        except SettingsStoreError as exc:
            LOGGER.exception("Could not read option %s.", name)
            raise HTTPException(
                status_code=500, detail="Word filter options are unavailable."
            ) from exc

    def _write_option(name: str, value: str) -> None:
        try:
            store.update(name, value)
        except SettingsStoreError as exc:
            LOGGER.exception("Could not save option %s.", name)
            raise HTTPException(
                status_code=500, detail="Word filter options could not be saved."
            ) from exc

    def _nonce_for(user: Optional[User], token: Optional[str], action: str) -> str:
        if user is None or not token:
            return ""
        return command.nonces.create(action, user.user_id, token)

    def _render(
        request: Request,
        template: str,
        context: Dict[str, Any],
        status_code: int = 200,
    ) -> HTMLResponse:
        return templates.TemplateResponse(
            request, template, context, status_code=status_code
        )

    def _denied(request: Request, template: str, title: str) -> HTMLResponse:
        return _render(
            request,
            template,
            {"title": title, "error": PERMISSION_DENIED_MESSAGE, "show_form": False},
            status_code=403,
        )

    def _word_list_page(
        request: Request,
        user: Optional[User],
        token: Optional[str],
        notice: Optional[str] = None,
    ) -> HTMLResponse:
        return _render(
            request,
            "word_filter.html",
            {
                "title": "Word Filter.",
                "notice": notice,
                "show_form": True,
                "nonce": _nonce_for(user, token, SAVE_WORD_LIST_ACTION),
                "words": _read_option(FILTER_TERMS_OPTION, "") or "",
            },
        )

    def _options_page(
        request: Request,
        user: Optional[User],
        token: Optional[str],
        notice: Optional[str] = None,
    ) -> HTMLResponse:
        replacement = _read_option(REPLACEMENT_TEXT_OPTION, DEFAULT_REPLACEMENT)
        return _render(
            request,
            "word_filter_options.html",
            {
                "title": "Word Filter Options",
                "notice": notice,
                "show_form": True,
                "nonce": _nonce_for(user, token, SAVE_OPTIONS_ACTION),
                "replacement": replacement if replacement is not None else "",
            },
        )

    def _can_view(user: Optional[User]) -> bool:
        return user is not None and user.can(command.capability)

    @router.get("/admin/word-filter", response_class=HTMLResponse)
    def word_filter_page(request: Request) -> HTMLResponse:
        token, user = _current(request)
        if not _can_view(user):
            return _denied(request, "word_filter.html", "Word Filter.")
        return _word_list_page(request, user, token)

    @router.post("/admin/word-filter", response_class=HTMLResponse)
    def save_word_filter(
        request: Request,
        submitted: str = Form("", alias="word-filter-submit"),
        nonce: str = Form("", alias="word-filter-nonce"),
        words: str = Form("", alias="plugin_words_to_filter"),
    ) -> HTMLResponse:
        token, user = _current(request)
        if submitted != "true":
            if not _can_view(user):
                return _denied(request, "word_filter.html", "Word Filter.")
            return _word_list_page(request, user, token)

        try:
            command.run(
                user,
                token,
                nonce,
                SAVE_WORD_LIST_ACTION,
                lambda: _write_option(FILTER_TERMS_OPTION, sanitize_text_field(words)),
            )
        except PermissionDeniedError:
            return _denied(request, "word_filter.html", "Word Filter.")

        LOGGER.info("Word list updated by %s", user.user_id)
        return _word_list_page(request, user, token, notice=SAVED_WORDS_MESSAGE)

    @router.get("/admin/word-filter/options", response_class=HTMLResponse)
    def word_filter_options_page(request: Request) -> HTMLResponse:
        token, user = _current(request)
        if not _can_view(user):
            return _denied(request, "word_filter_options.html", "Word Filter Options")
        return _options_page(request, user, token)

    @router.post("/admin/word-filter/options", response_class=HTMLResponse)
    def save_word_filter_options(
        request: Request,
        nonce: str = Form("", alias="options-nonce"),
        replacement: str = Form("", alias="replacement-text"),
    ) -> HTMLResponse:
        token, user = _current(request)
        try:
            command.run(
                user,
                token,
                nonce,
                SAVE_OPTIONS_ACTION,
                lambda: _write_option(REPLACEMENT_TEXT_OPTION, replacement),
            )
        except PermissionDeniedError:
            return _denied(request, "word_filter_options.html", "Word Filter Options")

        LOGGER.info("Replacement text updated by %s", user.user_id)
        return _options_page(request, user, token, notice=SAVED_OPTIONS_MESSAGE)

    return router
