from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from wordfilter.FilterService.filter import WordFilter
from wordfilter.SettingsStore.service import (
    FILTER_TERMS_OPTION,
    REPLACEMENT_TEXT_OPTION,
    SettingsStore,
)


ContentFilter = Callable[[str], str]


def build_content_filter(store: SettingsStore) -> Optional[ContentFilter]:
    """
    Return the content filter for the current options, or None when no word
    list is configured (nothing is registered in that case).
    """
    raw_terms = store.get(FILTER_TERMS_OPTION)
    if not raw_terms:
        return None

    word_filter = WordFilter(raw_terms, store.get(REPLACEMENT_TEXT_OPTION))
    return word_filter.apply


@dataclass
class RenderedContent:
    """Content after the render event plus whether a filter ran on it."""

    content: str
    filtered: bool


class ContentFilterService:
    """
    Runs the content-render event.

    Options are looked up on every render, so a word list saved from the admin
    page applies to the very next request without rebuilding the service.
    """

    def __init__(self, store: SettingsStore) -> None:
        self._store = store

    def render(self, content: str) -> RenderedContent:
        content_filter = build_content_filter(self._store)
        if content_filter is None:
            return RenderedContent(content=content, filtered=False)
        return RenderedContent(content=content_filter(content), filtered=True)
