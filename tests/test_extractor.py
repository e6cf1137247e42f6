import pytest

from pathwatch.browser.extractor import (
    COLLECT_CONTENT_SCRIPT,
    ExtractionSettings,
    build_snapshot,
    extract_content,
    normalize_text,
    select_first_paragraph,
)

LONG_SCOPED = "The tiger is the largest living cat species and a member of the genus Panthera."
LONG_OTHER = "Site-wide banner paragraph that is long enough to pass the length threshold."


class DummyPage:
    def __init__(self, raw: dict):
        self.raw = raw
        self.load_states: list[str] = []
        self.evaluated: list[tuple] = []

    async def wait_for_load_state(self, state: str = "load"):
        self.load_states.append(state)

    async def evaluate(self, script, arg=None):
        self.evaluated.append((script, arg))
        return self.raw


def test_normalize_text_collapses_whitespace():
    assert normalize_text("  The  tiger\n\tis   big  ") == "The tiger is big"
    assert normalize_text(None) == ""


def test_first_paragraph_skips_short_boilerplate():
    candidates = ["Coordinates: 12N", "For other uses, see Tiger.", LONG_SCOPED]
    assert select_first_paragraph(candidates, "body") == LONG_SCOPED


def test_first_paragraph_threshold_is_strictly_greater_than_40():
    exactly_40 = "x" * 40
    forty_one = "y" * 41
    assert select_first_paragraph([exactly_40, forty_one], "") == forty_one


def test_first_paragraph_is_normalized():
    messy = "  The tiger   is the largest\n living cat species\tand a member of Panthera.  "
    assert select_first_paragraph([messy], "") == (
        "The tiger is the largest living cat species and a member of Panthera."
    )


def test_first_paragraph_falls_back_to_truncated_body_text():
    body = "word " * 100
    result = select_first_paragraph(["short"], body)
    assert len(result) == 200
    assert result == normalize_text(body)[:200]


def test_snapshot_prefers_scoped_paragraphs():
    raw = {
        "title": " Tiger - Wikipedia ",
        "h1": " Tiger ",
        "metaDescription": "",
        "scopedParagraphs": ["", LONG_SCOPED],
        "documentParagraphs": [LONG_OTHER, "", LONG_SCOPED],
        "bodyText": "whatever",
    }
    snapshot = build_snapshot(raw)
    assert snapshot.first_p == LONG_SCOPED
    assert snapshot.title == "Tiger - Wikipedia"
    assert snapshot.h1 == "Tiger"
    assert snapshot.meta_description == ""


def test_snapshot_uses_document_pool_when_scoped_pool_has_nothing_long():
    raw = {
        "scopedParagraphs": ["tiny"],
        "documentParagraphs": ["tiny", LONG_OTHER],
        "bodyText": "ignored",
    }
    assert build_snapshot(raw).first_p == LONG_OTHER


@pytest.mark.parametrize(
    "raw",
    [
        {},
        {"bodyText": "   \n  "},
        {"title": "", "url": "https://example.com/empty"},
        {"scopedParagraphs": ["  "], "documentParagraphs": [], "bodyText": ""},
    ],
)
def test_first_paragraph_is_never_empty(raw):
    assert len(build_snapshot(raw).first_p) > 0


def test_content_free_page_uses_title_then_url():
    assert build_snapshot({"title": "Blank page"}).first_p == "Blank page"
    assert build_snapshot({"url": "https://example.com/x"}).first_p == "https://example.com/x"


def test_custom_settings_change_threshold_and_fallback():
    settings = ExtractionSettings(min_paragraph_length=5, fallback_length=10)
    assert build_snapshot({"scopedParagraphs": ["abcdef"]}, settings).first_p == "abcdef"
    assert build_snapshot({"bodyText": "0123456789abcdef"}, settings).first_p == "0123456789"


@pytest.mark.asyncio
async def test_extract_content_waits_for_dom_ready_and_passes_roots():
    page = DummyPage({"title": "T", "scopedParagraphs": [LONG_SCOPED]})
    settings = ExtractionSettings(content_roots=["#content"])

    snapshot = await extract_content(page, settings)

    assert page.load_states == ["domcontentloaded"]
    script, arg = page.evaluated[0]
    assert script == COLLECT_CONTENT_SCRIPT
    assert arg == {"rootSelectors": ["#content"]}
    assert snapshot.first_p == LONG_SCOPED


@pytest.mark.asyncio
async def test_extract_content_is_deterministic():
    raw = {"title": "T", "documentParagraphs": [LONG_OTHER], "bodyText": "b"}
    first = await extract_content(DummyPage(raw))
    second = await extract_content(DummyPage(raw))
    assert first == second
