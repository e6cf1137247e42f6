"""Content fingerprint extraction shared by recording and replay."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Iterable

from playwright.async_api import Page

from .models import ContentSnapshot

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_ROOTS = ("#mw-content-text", "main", '[role="main"]')
DEFAULT_MIN_PARAGRAPH_LENGTH = 40
DEFAULT_FALLBACK_LENGTH = 200

_WHITESPACE_RE = re.compile(r"\s+")

# Collects raw text only; candidate selection happens in Python.
COLLECT_CONTENT_SCRIPT = """
(options) => {
    const texts = (nodes) => Array.from(nodes).map(p => p.textContent || '');

    let root = null;
    for (const selector of options.rootSelectors || []) {
        try {
            root = document.querySelector(selector);
        } catch (e) {
            root = null;
        }
        if (root) break;
    }

    const meta = document.querySelector('meta[name="description"]');
    const h1 = document.querySelector('h1');

    return {
        url: location.href,
        title: document.title || '',
        h1: h1 ? (h1.textContent || '') : '',
        metaDescription: meta ? (meta.getAttribute('content') || '') : '',
        scopedParagraphs: root ? texts(root.querySelectorAll('p')) : texts(document.querySelectorAll('p')),
        documentParagraphs: texts(document.querySelectorAll('p')),
        bodyText: document.body ? (document.body.innerText || '') : '',
    };
}
"""


@dataclass
class ExtractionSettings:
    """Tunables for first-paragraph selection."""

    content_roots: list[str] = field(default_factory=lambda: list(DEFAULT_CONTENT_ROOTS))
    min_paragraph_length: int = DEFAULT_MIN_PARAGRAPH_LENGTH
    fallback_length: int = DEFAULT_FALLBACK_LENGTH


def normalize_text(value: str | None) -> str:
    """Collapse whitespace runs to single spaces and trim."""
    return _WHITESPACE_RE.sub(" ", value or "").strip()


def select_first_paragraph(
    candidates: Iterable[str],
    body_text: str,
    *,
    min_length: int = DEFAULT_MIN_PARAGRAPH_LENGTH,
    fallback_length: int = DEFAULT_FALLBACK_LENGTH,
) -> str:
    """Pick the first substantial paragraph, falling back to visible text.

    Candidates are tried in order and the first one longer than
    ``min_length`` after normalization wins. Short boilerplate paragraphs
    are skipped. When nothing qualifies the page's visible text is used,
    truncated to ``fallback_length`` characters.
    """
    for candidate in candidates:
        text = normalize_text(candidate)
        if len(text) > min_length:
            return text
    return normalize_text(body_text)[:fallback_length]


def build_snapshot(raw: dict[str, Any], settings: ExtractionSettings | None = None) -> ContentSnapshot:
    """Turn the raw in-page collection into a ContentSnapshot.

    ``first_p`` is never empty: a content-free page falls back to its
    title and finally to its URL.
    """
    settings = settings or ExtractionSettings()
    raw = raw or {}

    candidates = list(raw.get("scopedParagraphs") or []) + list(raw.get("documentParagraphs") or [])
    first_p = select_first_paragraph(
        candidates,
        raw.get("bodyText") or "",
        min_length=settings.min_paragraph_length,
        fallback_length=settings.fallback_length,
    )
    title = (raw.get("title") or "").strip()
    if not first_p:
        first_p = normalize_text(title) or normalize_text(raw.get("url")) or "about:blank"
        logger.debug("No visible text on page, using %r as first paragraph", first_p)

    return ContentSnapshot(
        title=title,
        h1=(raw.get("h1") or "").strip(),
        first_p=first_p,
        meta_description=(raw.get("metaDescription") or "").strip(),
    )


async def extract_content(page: Page, settings: ExtractionSettings | None = None) -> ContentSnapshot:
    """Extract the content fingerprint of the page once its DOM is ready."""
    settings = settings or ExtractionSettings()
    await page.wait_for_load_state("domcontentloaded")
    raw = await page.evaluate(
        COLLECT_CONTENT_SCRIPT,
        {"rootSelectors": list(settings.content_roots)},
    )
    return build_snapshot(raw, settings)
