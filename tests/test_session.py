import pytest

from pathwatch.browser import session as session_module
from pathwatch.browser.session import LAUNCH_ARGS, BrowserSession


class DummyBrowser:
    def __init__(self):
        self.closed = 0
        self.context = DummyContext()

    def is_connected(self):
        return self.closed == 0

    async def new_context(self):
        return self.context

    async def close(self):
        self.closed += 1


class DummyContext:
    async def new_page(self):
        return "page"


class DummyChromium:
    def __init__(self, browser):
        self.browser = browser
        self.launch_kwargs = None

    async def launch(self, **kwargs):
        self.launch_kwargs = kwargs
        return self.browser


class DummyPlaywright:
    def __init__(self):
        self.chromium = DummyChromium(DummyBrowser())
        self.stopped = 0

    async def stop(self):
        self.stopped += 1


class DummyManager:
    def __init__(self, playwright):
        self.playwright = playwright

    async def start(self):
        return self.playwright


@pytest.mark.asyncio
async def test_start_and_stop(monkeypatch):
    playwright = DummyPlaywright()
    monkeypatch.setattr(session_module, "async_playwright", lambda: DummyManager(playwright))

    session = BrowserSession(headless=False, slow_mo=50)
    page = await session.start()

    assert page == "page"
    assert playwright.chromium.launch_kwargs == {"headless": False, "slow_mo": 50, "args": LAUNCH_ARGS}

    await session.stop()
    await session.stop()

    assert playwright.chromium.browser.closed == 1
    assert playwright.stopped == 1


@pytest.mark.asyncio
async def test_stop_before_start_is_harmless():
    await BrowserSession().stop()
