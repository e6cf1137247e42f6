"""Interactive click-path recorder."""

import asyncio
import logging
from enum import Enum
from typing import Any, Optional
from urllib.parse import urljoin

from playwright.async_api import Page

from ..browser.clicks import (
    BINDING_NAME,
    CLICK_CAPTURE_SCRIPT,
    click_event_from_payload,
    is_recordable_selector,
)
from ..browser.extractor import extract_content
from ..browser.models import ClickEvent, Step, now_ms
from ..browser.session import BrowserSession
from ..config import Config
from ..storage.steps import StepStore

logger = logging.getLogger(__name__)

CLICK_QUEUE_SIZE = 32


class RecorderState(str, Enum):
    """Recorder lifecycle."""

    IDLE = "idle"
    NAVIGATING = "navigating"
    AWAITING_CLICK = "awaiting_click"
    SHUTTING_DOWN = "shutting_down"
    TERMINATED = "terminated"


class Recorder:
    """Records a human-driven click path as a sequence of steps.

    Anchor clicks in the page are intercepted before the browser follows
    them and forwarded to the host through a binding. The host does the
    navigation itself, so every step's final URL and content fingerprint
    are captured from a settled page. Click events are queued and handled
    one at a time; the page can only be in one navigation at once.
    """

    def __init__(
        self,
        config: Config,
        store: StepStore,
        session: Optional[BrowserSession] = None,
        queue_size: int = CLICK_QUEUE_SIZE,
    ):
        self.config = config
        self.store = store
        self.session = session or BrowserSession(headless=False)
        self.steps: list[Step] = []
        self.state = RecorderState.IDLE
        self.page: Optional[Page] = None

        self._clicks: asyncio.Queue[ClickEvent] = asyncio.Queue(maxsize=queue_size)
        self._shutting_down = False
        self._terminated = asyncio.Event()

    @property
    def navigation_timeout_ms(self) -> int:
        return self.config.navigation_timeout * 1000

    async def start(self) -> Step:
        """Open the browser, install click capture and record the start page."""
        self.page = await self.session.start()
        context = self.session.context

        self.page.on("close", self._on_page_close)
        context.on("close", self._on_context_close)
        self.session.browser.on("disconnected", self._on_browser_disconnected)

        await context.expose_binding(BINDING_NAME, self._on_click_binding)
        await context.add_init_script(CLICK_CAPTURE_SCRIPT)

        return await self.record_initial_step()

    async def record_initial_step(self) -> Step:
        """Navigate to the entry URL and record it as the first step."""
        start_url = self.config.start_url
        logger.info(f"Opening: {start_url}")

        self.state = RecorderState.NAVIGATING
        await self.page.goto(
            start_url,
            wait_until="domcontentloaded",
            timeout=self.navigation_timeout_ms,
        )
        await self.page.wait_for_timeout(self.config.record_settle_ms)

        content = await extract_content(self.page, self.config.extraction)
        step = Step(
            selector=None,
            url=start_url,
            target_href=self.page.url,
            content=content,
            timestamp=now_ms(),
            is_initial=True,
        )
        self._append(step)
        self.state = RecorderState.AWAITING_CLICK

        logger.info(f"Initial page recorded: {step.target_href}")
        logger.info("Recorder running. Click links to record steps, close the browser to stop.")
        return step

    async def run(self) -> list[Step]:
        """Handle queued clicks until the recorder shuts down."""
        while not self._terminated.is_set():
            try:
                try:
                    event = await asyncio.wait_for(self._clicks.get(), timeout=1.0)
                except asyncio.TimeoutError:
                    continue

                if self._shutting_down:
                    break
                await self.handle_click(event)

            except Exception as e:
                if self._shutting_down:
                    break
                logger.error(f"Failed to record click: {e}")

        await self._terminated.wait()
        return list(self.steps)

    async def handle_click(self, event: ClickEvent) -> Optional[Step]:
        """Navigate to a clicked link and record the resulting step."""
        if not is_recordable_selector(event.selector):
            logger.debug(f"Ignoring click without usable selector: {event.selector!r}")
            return None

        from_url = self.page.url
        target_url = urljoin(from_url, event.href)

        logger.info(f"CLICK {event.selector}")
        logger.info(f"  From: {from_url}")
        logger.info(f"  To:   {target_url}")

        self.state = RecorderState.NAVIGATING
        try:
            await self.page.goto(
                target_url,
                wait_until="domcontentloaded",
                timeout=self.navigation_timeout_ms,
            )
            final_url = self.page.url
            content = await extract_content(self.page, self.config.extraction)
        finally:
            if not self._shutting_down:
                self.state = RecorderState.AWAITING_CLICK

        step = Step(
            selector=event.selector,
            url=from_url,
            target_href=final_url,
            content=content,
            timestamp=now_ms(),
        )
        self._append(step)
        return step

    async def shutdown(self, reason: str = "shutdown") -> bool:
        """Persist the recorded steps and close the browser, exactly once.

        Page close, context close, browser disconnect and process signals
        can all fire for the same exit; only the first call does anything.
        Returns False for the repeated calls.
        """
        if self._shutting_down:
            return False
        self._shutting_down = True
        self.state = RecorderState.SHUTTING_DOWN
        logger.info(f"Saving steps and exiting ({reason})")

        try:
            if self.steps:
                self.store.save(self.steps)
            else:
                logger.warning("No steps recorded, leaving existing store untouched")
        finally:
            try:
                await self.session.stop()
            except Exception as e:
                logger.warning(f"Error closing browser: {e}")
            self.state = RecorderState.TERMINATED
            self._terminated.set()
        return True

    def _append(self, step: Step):
        self.steps.append(step)
        self.store.save(self.steps)

    def _on_click_binding(self, source: Any, payload: Any):
        """Binding target called from the page's click listener."""
        if self._shutting_down:
            return
        event = click_event_from_payload(payload)
        if event is None:
            return
        try:
            self._clicks.put_nowait(event)
        except asyncio.QueueFull:
            logger.warning(f"Click queue full, dropping click on {event.selector}")

    async def _on_page_close(self, _page: Any):
        await self.shutdown("page closed")

    async def _on_context_close(self, _context: Any):
        await self.shutdown("context closed")

    async def _on_browser_disconnected(self, _browser: Any):
        await self.shutdown("browser disconnected")
