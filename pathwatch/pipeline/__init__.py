"""Record and replay pipelines for PathWatch."""

from .recorder import Recorder, RecorderState
from .replayer import Replayer, ReplayState, first_paragraphs_match

__all__ = [
    "Recorder",
    "RecorderState",
    "Replayer",
    "ReplayState",
    "first_paragraphs_match",
]
