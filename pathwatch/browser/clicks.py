"""Anchor click capture for the recorder."""

from __future__ import annotations

from typing import Any, Optional

from .models import ClickEvent

BINDING_NAME = "pathwatchRecordClick"

# Installed on every document in the recording context. Clicks on anchors
# are intercepted in the capture phase and handed to the host, which does
# the navigation itself.
CLICK_CAPTURE_SCRIPT = """
(() => {
    if (window.__pathwatchInstalled) return;
    window.__pathwatchInstalled = true;

    document.addEventListener('click', (event) => {
        const target = event.target;
        const anchor = target && target.closest ? target.closest('a') : null;
        if (!anchor || !anchor.href) return;

        const id = anchor.id || '';
        const rawHref = anchor.getAttribute('href') || '';
        if (!id && !rawHref) return;

        event.preventDefault();
        window.%(binding)s({ href: anchor.href, id: id, rawHref: rawHref });
    }, true);
})();
""" % {"binding": BINDING_NAME}


def derive_selector(anchor_id: Optional[str], raw_href: Optional[str]) -> Optional[str]:
    """Build a selector for a clicked anchor.

    ``a#<id>`` wins when the anchor has an id, otherwise
    ``a[href="<raw href>"]``. Returns None when neither is available.
    """
    if anchor_id:
        return f"a#{anchor_id}"
    if raw_href:
        return f'a[href="{raw_href}"]'
    return None


def is_recordable_selector(selector: Optional[str]) -> bool:
    """Bare ``a`` (or nothing) can't be replayed, so it's never recorded."""
    selector = (selector or "").strip()
    return bool(selector) and selector != "a"


def click_event_from_payload(payload: Any) -> Optional[ClickEvent]:
    """Parse the binding payload sent by CLICK_CAPTURE_SCRIPT."""
    if not isinstance(payload, dict):
        return None
    href = str(payload.get("href") or "").strip()
    if not href:
        return None
    selector = payload.get("selector") or derive_selector(
        payload.get("id"), payload.get("rawHref")
    )
    if not selector:
        return None
    return ClickEvent(href=href, selector=str(selector))
