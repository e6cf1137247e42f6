"""Browser-side modules for PathWatch."""

from .extractor import ExtractionSettings, extract_content, normalize_text
from .models import ClickEvent, ContentSnapshot, ReplayOutcome, Step, StepResult
from .session import BrowserSession

__all__ = [
    "BrowserSession",
    "ClickEvent",
    "ContentSnapshot",
    "ExtractionSettings",
    "ReplayOutcome",
    "Step",
    "StepResult",
    "extract_content",
    "normalize_text",
]
