"""Step sequence storage for PathWatch."""

import json
import logging
from pathlib import Path
from typing import Sequence

from ..browser.models import Step

logger = logging.getLogger(__name__)


class StoreNotFoundError(FileNotFoundError):
    """Raised when the step store has not been recorded yet."""


class StoreFormatError(ValueError):
    """Raised when the step store exists but can't be parsed."""


class StepStore:
    """Persists the recorded step sequence as a single JSON document.

    Every save rewrites the whole document, so an interrupted recording
    still leaves a loadable store behind.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def save(self, steps: Sequence[Step]) -> Path:
        """Write the full ordered sequence (atomic replace)."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        content = json.dumps([step.to_dict() for step in steps], indent=2, ensure_ascii=False)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(content, encoding="utf-8")
        tmp_path.replace(self.path)
        logger.info(f"Saved {len(steps)} steps -> {self.path}")
        return self.path

    def load(self) -> list[Step]:
        """Read the recorded sequence in replay order."""
        if not self.path.exists():
            raise StoreNotFoundError(f"{self.path} not found. Run the recorder first.")

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise StoreFormatError(f"{self.path} is not valid JSON: {e}") from e

        if not isinstance(data, list):
            raise StoreFormatError(f"{self.path} must contain a list of steps")

        steps: list[Step] = []
        for index, entry in enumerate(data):
            if not isinstance(entry, dict):
                raise StoreFormatError(f"Step {index + 1} in {self.path} is not an object")
            try:
                steps.append(Step.from_dict(entry))
            except (TypeError, ValueError, AttributeError) as e:
                raise StoreFormatError(f"Step {index + 1} in {self.path} is malformed: {e}") from e
        return steps
