"""Storage modules for PathWatch."""

from .steps import StepStore, StoreFormatError, StoreNotFoundError

__all__ = ["StepStore", "StoreFormatError", "StoreNotFoundError"]
