"""Configuration management for PathWatch."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

from .browser.extractor import (
    DEFAULT_CONTENT_ROOTS,
    DEFAULT_FALLBACK_LENGTH,
    DEFAULT_MIN_PARAGRAPH_LENGTH,
    ExtractionSettings,
)

logger = logging.getLogger(__name__)

DEFAULT_START_URL = "https://en.wikipedia.org/wiki/Tiger"
DEFAULT_REPORT_PATH = "./replay-report.html"
BASELINE_DIRNAME = "baseline"
STEPS_FILENAME = "steps.json"


def _env(*names: str, default: str = "") -> str:
    """First non-empty value among several variable names."""
    for name in names:
        value = os.getenv(name)
        if value is not None and value.strip():
            return value.strip()
    return default


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() != "false"


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name, "").strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r, using %s", name, value, default)
        return default


@dataclass
class Config:
    """Application configuration loaded from environment."""

    # SMTP alert transport (all required for replay)
    smtp_host: str = ""
    smtp_port: Optional[int] = None
    smtp_username: str = ""
    smtp_password: str = ""
    alert_to: str = ""
    smtp_from_email: str = ""
    smtp_use_tls: bool = True

    # Browser
    headless: bool = True
    start_url: str = DEFAULT_START_URL
    navigation_timeout: int = 30  # seconds
    replay_slow_mo: int = 50  # ms
    record_settle_ms: int = 1500
    replay_settle_ms: int = 1000
    replay_step_pause_ms: int = 500

    # Paths
    data_dir: Path = field(default_factory=lambda: Path("./data"))
    steps_path: Optional[Path] = None
    report_path: Path = field(default_factory=lambda: Path(DEFAULT_REPORT_PATH))
    config_dir: Path = field(default_factory=lambda: Path("./config"))

    extraction: ExtractionSettings = field(default_factory=ExtractionSettings)

    def __post_init__(self):
        self.data_dir = Path(self.data_dir)
        self.report_path = Path(self.report_path)
        self.config_dir = Path(self.config_dir)
        # Recorder and replayer must agree on one store location.
        if self.steps_path is None:
            self.steps_path = self.data_dir / BASELINE_DIRNAME / STEPS_FILENAME
        self.steps_path = Path(self.steps_path)

    @property
    def sender(self) -> str:
        """Sender identity for alert emails."""
        if self.smtp_from_email:
            return self.smtp_from_email
        return f'"Replay Bot" <{self.smtp_username}>'


def _load_extraction_settings(config_dir: Path) -> ExtractionSettings:
    """Load extractor overrides from config/extraction.yaml (optional)."""
    defaults = ExtractionSettings()
    path = Path(config_dir or ".") / "extraction.yaml"
    if not path.exists():
        return defaults

    try:
        data = yaml.safe_load(path.read_text()) or {}
    except Exception as exc:
        logger.warning("Failed to parse extraction.yaml: %s", exc)
        return defaults

    if not isinstance(data, dict):
        logger.warning("extraction.yaml must be a mapping, ignoring it")
        return defaults

    roots = [str(r).strip() for r in data.get("content_roots") or [] if str(r).strip()]

    def _coerce_int(key: str, default: int) -> int:
        try:
            return int(data.get(key, default))
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid %s in extraction.yaml", key)
            return default

    return ExtractionSettings(
        content_roots=roots or list(DEFAULT_CONTENT_ROOTS),
        min_paragraph_length=_coerce_int("min_paragraph_length", DEFAULT_MIN_PARAGRAPH_LENGTH),
        fallback_length=_coerce_int("fallback_length", DEFAULT_FALLBACK_LENGTH),
    )


def load_config() -> Config:
    """Load configuration from environment variables."""
    load_dotenv()

    port_raw = _env("SMTP_PORT", "EMAIL_PORT")
    smtp_port: Optional[int] = None
    if port_raw:
        try:
            smtp_port = int(port_raw)
        except ValueError:
            logger.warning("Ignoring non-integer SMTP port %r", port_raw)

    data_dir = Path(os.getenv("DATA_DIR", "./data"))
    steps_path = _env("STEPS_PATH")
    config_dir = Path(os.getenv("CONFIG_DIR", "./config"))

    return Config(
        smtp_host=_env("SMTP_HOST", "EMAIL_HOST"),
        smtp_port=smtp_port,
        smtp_username=_env("SMTP_USERNAME", "EMAIL_USER"),
        smtp_password=_env("SMTP_PASSWORD", "EMAIL_PASS"),
        alert_to=_env("ALERT_TO"),
        smtp_from_email=_env("SMTP_FROM_EMAIL"),
        smtp_use_tls=_env_bool("SMTP_USE_TLS", True),
        headless=_env_bool("HEADLESS", True),
        start_url=_env("START_URL", default=DEFAULT_START_URL),
        navigation_timeout=_env_int("NAVIGATION_TIMEOUT", 30),
        replay_slow_mo=_env_int("REPLAY_SLOW_MO", 50),
        data_dir=data_dir,
        steps_path=Path(steps_path) if steps_path else None,
        report_path=Path(_env("REPORT_PATH", default=DEFAULT_REPORT_PATH)),
        config_dir=config_dir,
        extraction=_load_extraction_settings(config_dir),
    )


def validate_config(config: Config) -> list[str]:
    """Validate alert configuration and return list of error messages.

    Replay refuses to start without a working alert path.
    """
    errors: list[str] = []
    if not (config.smtp_host or "").strip():
        errors.append("SMTP_HOST is required")
    if not config.smtp_port:
        errors.append("SMTP_PORT is required")
    if not (config.smtp_username or "").strip():
        errors.append("SMTP_USERNAME is required")
    if not (config.smtp_password or "").strip():
        errors.append("SMTP_PASSWORD is required")
    if not (config.alert_to or "").strip():
        errors.append("ALERT_TO is required")
    return errors
