import re

import pytest
from fastapi.testclient import TestClient

import main
from wordfilter.SettingsStore.service import FILTER_TERMS_OPTION, JsonFileSettingsStore


def test_create_app_requires_secret_key(monkeypatch) -> None:
    monkeypatch.delenv("WORD_FILTER_SECRET_KEY", raising=False)
    with pytest.raises(RuntimeError):
        main.create_app()


def test_create_app_rejects_invalid_nonce_lifetime(monkeypatch) -> None:
    monkeypatch.setenv("WORD_FILTER_SECRET_KEY", "secret")
    monkeypatch.setenv("WORD_FILTER_NONCE_LIFETIME", "one day")
    with pytest.raises(RuntimeError):
        main.create_app()


def test_environment_configured_app_saves_and_filters(monkeypatch, tmp_path) -> None:
    settings_file = tmp_path / "settings.json"
    monkeypatch.setenv("WORD_FILTER_SECRET_KEY", "secret")
    monkeypatch.setenv("WORD_FILTER_ADMIN_TOKEN", "admin-token")
    monkeypatch.setenv("WORD_FILTER_SETTINGS_FILE", str(settings_file))
    monkeypatch.delenv("WORD_FILTER_NONCE_LIFETIME", raising=False)

    client = TestClient(main.create_app())
    headers = {"X-Session-Token": "admin-token"}

    before = client.post("/content/render", json={"content": "a bad day"})
    assert before.json() == {"content": "a bad day", "filtered": False}

    page = client.get("/admin/word-filter", headers=headers)
    nonce = re.search(r'name="word-filter-nonce" value="([^"]+)"', page.text).group(1)
    saved = client.post(
        "/admin/word-filter",
        headers=headers,
        data={
            "word-filter-submit": "true",
            "word-filter-nonce": nonce,
            "plugin_words_to_filter": "bad",
        },
    )
    assert saved.status_code == 200

    assert JsonFileSettingsStore(settings_file).get(FILTER_TERMS_OPTION) == "bad"
    after = client.post("/content/render", json={"content": "a bad day"})
    assert after.json() == {"content": "a *** day", "filtered": True}
