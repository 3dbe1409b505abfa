from __future__ import annotations

import os

from fastapi import FastAPI
from dotenv import load_dotenv

from wordfilter.SettingsStore.service import (
    InMemorySettingsStore,
    JsonFileSettingsStore,
    SettingsStore,
)
from wordfilter.api.content_http import create_content_router
from wordfilter.api.word_filter_admin_http import create_word_filter_admin_router
from wordfilter.services import (
    MANAGE_OPTIONS,
    AuthenticatedCommand,
    ContentFilterService,
    NonceManager,
    SessionRegistry,
    User,
)
from wordfilter.services.authorization import DEFAULT_NONCE_LIFETIME

load_dotenv()


def _build_settings_store() -> SettingsStore:
    settings_file = os.getenv("WORD_FILTER_SETTINGS_FILE", "").strip()
    if settings_file:
        return JsonFileSettingsStore(settings_file)
    return InMemorySettingsStore()


def _build_command() -> AuthenticatedCommand:
    secret_key = os.getenv("WORD_FILTER_SECRET_KEY")
    if not secret_key:
        raise RuntimeError(
            "WORD_FILTER_SECRET_KEY is not set. Export it before starting the server."
        )

    raw_lifetime = os.getenv("WORD_FILTER_NONCE_LIFETIME", str(DEFAULT_NONCE_LIFETIME))
    try:
        lifetime = int(raw_lifetime)
    except ValueError as exc:
        raise RuntimeError(
            "WORD_FILTER_NONCE_LIFETIME must be an integer number of seconds."
        ) from exc

    return AuthenticatedCommand(NonceManager(secret_key, lifetime=lifetime))


def _build_sessions() -> SessionRegistry:
    sessions = SessionRegistry()
    admin_token = os.getenv("WORD_FILTER_ADMIN_TOKEN", "").strip()
    if admin_token:
        sessions.register(
            admin_token,
            User(
                user_id="admin",
                display_name="Administrator",
                capabilities=frozenset({MANAGE_OPTIONS}),
            ),
        )
    return sessions


def create_app(
    store: SettingsStore | None = None,
    sessions: SessionRegistry | None = None,
    command: AuthenticatedCommand | None = None,
) -> FastAPI:
    app = FastAPI(title="Word Filter Service", version="1.0.0")
    store = store if store is not None else _build_settings_store()
    sessions = sessions if sessions is not None else _build_sessions()
    command = command if command is not None else _build_command()

    app.include_router(create_content_router(ContentFilterService(store)))
    app.include_router(create_word_filter_admin_router(store, sessions, command))
    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:create_app",
        factory=True,
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
    )
