"""Headless replay and content verification of a recorded path."""

import logging
from enum import Enum
from typing import Optional, Sequence

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from ..browser.extractor import extract_content, normalize_text
from ..browser.models import ContentSnapshot, ReplayOutcome, Step, StepResult
from ..browser.session import BrowserSession
from ..config import Config
from ..reporter.base import BaseAlertReporter
from ..reporter.report_generator import ReplayReportGenerator
from ..reporter.templates import AlertTemplates

logger = logging.getLogger(__name__)


class ReplayState(str, Enum):
    """Replayer lifecycle."""

    LOADING = "loading"
    RUNNING = "running"
    REPORTING = "reporting"
    TERMINATED = "terminated"


def first_paragraphs_match(recorded: str, live: str) -> bool:
    """The only pass/fail signal: normalized first paragraphs are equal."""
    return normalize_text(recorded) == normalize_text(live)


class Replayer:
    """Replays recorded steps and checks each page's first paragraph.

    A mismatch is recorded and the run carries on, so one run reports the
    state of the whole path. At most one alert goes out per run: either for
    the first mismatch, or for a crash if nothing was sent before it.
    """

    def __init__(
        self,
        config: Config,
        alerter: BaseAlertReporter,
        report_generator: Optional[ReplayReportGenerator] = None,
        session: Optional[BrowserSession] = None,
    ):
        self.config = config
        self.alerter = alerter
        self.report_generator = report_generator or ReplayReportGenerator(config.report_path)
        self.session = session or BrowserSession(
            headless=config.headless,
            slow_mo=config.replay_slow_mo,
        )
        self.state = ReplayState.LOADING
        self.results: list[StepResult] = []
        self._alert_attempted = False

    @property
    def navigation_timeout_ms(self) -> int:
        return self.config.navigation_timeout * 1000

    async def run(self, steps: Sequence[Step]) -> ReplayOutcome:
        """Replay every step in order, alert on failure, write the report."""
        outcome = ReplayOutcome(results=self.results, total_steps=len(steps))
        self.state = ReplayState.RUNNING
        current: Optional[int] = None
        finished = False

        try:
            page = await self.session.start()
            for index, step in enumerate(steps, start=1):
                current = index
                result = await self.replay_step(page, index, len(steps), step)
                self.results.append(result)

                if not result.passed and not self._alert_attempted:
                    await self._send_alert(
                        AlertTemplates.step_mismatch(
                            step_number=index,
                            url=step.target_href,
                            recorded_first_p=normalize_text(step.content.first_p),
                            live_first_p=normalize_text(result.live_content.first_p),
                        ),
                        outcome,
                    )

                await page.wait_for_timeout(self.config.replay_step_pause_ms)
            finished = True

        except Exception as e:
            outcome.crashed = True
            outcome.error = str(e) or type(e).__name__
            logger.error(f"Replay crashed at step {current}: {outcome.error}")

            if not self._alert_attempted:
                url = steps[current - 1].target_href if current else "N/A"
                await self._send_alert(
                    AlertTemplates.replay_crashed(outcome.error, step_number=current, url=url),
                    outcome,
                )

        finally:
            # Reached on cancellation (SIGINT) as well.
            if not finished and not outcome.crashed:
                outcome.crashed = True
                outcome.error = "Replay interrupted"
            self._write_report(outcome, len(steps))
            await self._close_session()
            self.state = ReplayState.TERMINATED

        logger.info(
            f"Replay finished: {outcome.passed} passed, {outcome.failed} failed, "
            f"{len(self.results)}/{len(steps)} steps replayed"
        )
        return outcome

    async def replay_step(self, page: Page, index: int, total: int, step: Step) -> StepResult:
        """Open one step's destination and compare its content."""
        logger.info(f"Step {index}/{total}: opening {step.target_href}")

        await page.goto(
            step.target_href,
            wait_until="domcontentloaded",
            timeout=self.navigation_timeout_ms,
        )
        await page.wait_for_timeout(self.config.replay_settle_ms)

        try:
            live = await extract_content(page, self.config.extraction)
        except PlaywrightError as e:
            # Only navigation failures abort the run.
            logger.error(f"Step {index}/{total}: FAIL - could not extract content from {step.target_href}: {e}")
            return StepResult(step=step, live_content=ContentSnapshot(), passed=False)

        passed = first_paragraphs_match(step.content.first_p, live.first_p)

        if passed:
            logger.info(f"Step {index}/{total}: PASS")
        else:
            logger.warning(f"Step {index}/{total}: FAIL - first paragraph changed on {step.target_href}")
        return StepResult(step=step, live_content=live, passed=passed)

    def _write_report(self, outcome: ReplayOutcome, total_steps: int):
        self.state = ReplayState.REPORTING
        try:
            path = self.report_generator.write(
                self.results,
                total_steps=total_steps,
                crashed=outcome.crashed,
                error=outcome.error,
            )
            outcome.report_path = str(path)
        except OSError as e:
            logger.error(f"Failed to write replay report: {e}")

    async def _send_alert(self, message: dict[str, str], outcome: ReplayOutcome):
        """Send the run's single alert. Delivery problems never abort the run."""
        self._alert_attempted = True
        try:
            delivered = await self.alerter.send(message["subject"], message["body"])
        except Exception as e:
            logger.exception(f"Failed to send replay alert: {e}")
            outcome.alert_error = str(e)
            return

        outcome.alert_sent = bool(delivered)
        if not delivered:
            outcome.alert_error = "alert transport reported failure"
            logger.error(f"Replay alert was not delivered: {message['subject']}")

    async def _close_session(self):
        try:
            await self.session.stop()
        except Exception as e:
            logger.warning(f"Error closing browser: {e}")
