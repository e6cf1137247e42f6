"""Recorded path data models."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Optional


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class ContentSnapshot:
    """Normalized fingerprint of a page's primary content."""

    title: str = ""
    h1: str = ""
    first_p: str = ""
    meta_description: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "title": self.title,
            "h1": self.h1,
            "firstP": self.first_p,
            "metaDescription": self.meta_description,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "ContentSnapshot":
        data = data or {}
        return cls(
            title=str(data.get("title") or ""),
            h1=str(data.get("h1") or ""),
            first_p=str(data.get("firstP") or ""),
            meta_description=str(data.get("metaDescription") or ""),
        )


@dataclass(frozen=True)
class Step:
    """One recorded navigation (or the initial page) in a click path."""

    selector: Optional[str]  # None only for the initial page
    url: str  # page before the click
    target_href: str  # final URL after navigation
    content: ContentSnapshot
    timestamp: int
    is_initial: bool = False

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "selector": self.selector,
            "url": self.url,
            "target_href": self.target_href,
            "content": self.content.to_dict(),
            "timestamp": self.timestamp,
        }
        if self.is_initial:
            data["isInitial"] = True
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Step":
        selector = data.get("selector")
        return cls(
            selector=str(selector) if selector is not None else None,
            url=str(data.get("url") or ""),
            target_href=str(data.get("target_href") or ""),
            content=ContentSnapshot.from_dict(data.get("content")),
            timestamp=int(data.get("timestamp") or 0),
            is_initial=bool(data.get("isInitial", False)),
        )


@dataclass
class StepResult:
    """Replay outcome for a single recorded step."""

    step: Step
    live_content: ContentSnapshot
    passed: bool

    @property
    def target_href(self) -> str:
        return self.step.target_href

    @property
    def content(self) -> ContentSnapshot:
        return self.step.content


@dataclass(frozen=True)
class ClickEvent:
    """Anchor click forwarded from the page to the recorder."""

    href: str
    selector: str


@dataclass
class ReplayOutcome:
    """Everything a replay run produced."""

    results: list[StepResult] = field(default_factory=list)
    total_steps: int = 0
    crashed: bool = False
    error: Optional[str] = None
    alert_sent: bool = False
    alert_error: Optional[str] = None
    report_path: Optional[str] = None

    @property
    def passed(self) -> int:
        return sum(1 for r in self.results if r.passed)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.passed)
