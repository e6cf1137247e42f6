import pytest

from pathwatch.browser.clicks import (
    BINDING_NAME,
    CLICK_CAPTURE_SCRIPT,
    click_event_from_payload,
    derive_selector,
    is_recordable_selector,
)
from pathwatch.browser.models import ClickEvent


@pytest.mark.parametrize(
    "anchor_id, raw_href, expected",
    [
        ("x", "/y", "a#x"),
        ("", "/z", 'a[href="/z"]'),
        (None, "https://example.com/page", 'a[href="https://example.com/page"]'),
        ("", "", None),
        (None, None, None),
    ],
)
def test_derive_selector(anchor_id, raw_href, expected):
    assert derive_selector(anchor_id, raw_href) == expected


@pytest.mark.parametrize("selector", ["", "a", "  a  ", None])
def test_bare_selectors_are_not_recordable(selector):
    assert is_recordable_selector(selector) is False


def test_derived_selectors_are_recordable():
    assert is_recordable_selector("a#x")
    assert is_recordable_selector('a[href="/z"]')


def test_click_payload_prefers_id():
    event = click_event_from_payload(
        {"href": "https://en.wikipedia.org/wiki/Panthera", "id": "pt", "rawHref": "/wiki/Panthera"}
    )
    assert event == ClickEvent(href="https://en.wikipedia.org/wiki/Panthera", selector="a#pt")


def test_click_payload_uses_raw_href_without_id():
    event = click_event_from_payload({"href": "https://example.com/z", "id": "", "rawHref": "/z"})
    assert event.selector == 'a[href="/z"]'


@pytest.mark.parametrize(
    "payload",
    [
        None,
        "not a dict",
        {"href": "", "id": "x"},
        {"href": "https://example.com/", "id": "", "rawHref": ""},
    ],
)
def test_unusable_click_payloads_are_dropped(payload):
    assert click_event_from_payload(payload) is None


def test_capture_script_calls_binding_and_installs_once():
    assert f"window.{BINDING_NAME}(" in CLICK_CAPTURE_SCRIPT
    assert "__pathwatchInstalled" in CLICK_CAPTURE_SCRIPT
    assert "preventDefault" in CLICK_CAPTURE_SCRIPT
