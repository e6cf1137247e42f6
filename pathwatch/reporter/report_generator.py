"""
Replay report generator for PathWatch.

Renders one HTML document per replay run with a block for every step that
was replayed, marked PASS or FAIL.
"""

import html
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

from ..browser.models import StepResult

logger = logging.getLogger(__name__)


def _esc(value: Optional[str]) -> str:
    return html.escape("" if value is None else str(value), quote=True)


class ReplayReportGenerator:
    """Generates the HTML report for a replay run."""

    def __init__(self, output_path: Path):
        self.output_path = Path(output_path)

    def write(
        self,
        results: Sequence[StepResult],
        *,
        total_steps: Optional[int] = None,
        crashed: bool = False,
        error: Optional[str] = None,
    ) -> Path:
        """Render the report and write it to the output path."""
        content = self.render(results, total_steps=total_steps, crashed=crashed, error=error)
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self.output_path.write_text(content, encoding="utf-8")
        logger.info(f"Generated HTML report: {self.output_path}")
        return self.output_path

    def render(
        self,
        results: Sequence[StepResult],
        *,
        total_steps: Optional[int] = None,
        crashed: bool = False,
        error: Optional[str] = None,
    ) -> str:
        """Render HTML for a replay run."""
        passed = sum(1 for r in results if r.passed)
        failed = len(results) - passed
        total = total_steps if total_steps is not None else len(results)

        crash_section = ""
        if crashed:
            crash_section = f"""
    <div class="section crash">
        <h2>Replay Aborted</h2>
        <p>The run stopped after {len(results)} of {total} steps.</p>
        <pre>{_esc(error or "Unknown error")}</pre>
    </div>
"""

        steps_html = "\n".join(
            self._render_step(index, result) for index, result in enumerate(results, start=1)
        )

        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>Replay Report</title>
    <style>
        {self._get_report_css()}
    </style>
</head>
<body>
    <header>
        <h1>Web Replay Report</h1>
        <p class="subtitle">Generated {datetime.now().strftime('%Y-%m-%d %H:%M')}</p>
    </header>

    <div class="section summary">
        <table>
            <tr><td><strong>Steps recorded:</strong></td><td>{total}</td></tr>
            <tr><td><strong>Steps replayed:</strong></td><td>{len(results)}</td></tr>
            <tr><td><strong>Passed:</strong></td><td><span class="pass">{passed}</span></td></tr>
            <tr><td><strong>Failed:</strong></td><td><span class="fail">{failed}</span></td></tr>
        </table>
    </div>
{crash_section}
{steps_html}
</body>
</html>
"""

    def _render_step(self, number: int, result: StepResult) -> str:
        status = (
            '<span class="pass">PASS</span>' if result.passed else '<span class="fail">FAIL</span>'
        )
        css_class = "step step-pass" if result.passed else "step step-fail"
        selector = result.step.selector or "(initial page)"
        return f"""
    <div class="{css_class}">
        <h2>Step {number} - {status}</h2>
        <p><strong>Opened URL:</strong> <a href="{_esc(result.target_href)}">{_esc(result.target_href)}</a></p>
        <p><strong>Selector:</strong> <code>{_esc(selector)}</code></p>
        <p><strong>Title:</strong> {_esc(result.content.title)} / {_esc(result.live_content.title)}</p>
        <p><strong>Recorded firstP:</strong></p>
        <pre>{_esc(result.content.first_p)}</pre>
        <p><strong>Replayed firstP:</strong></p>
        <pre>{_esc(result.live_content.first_p)}</pre>
    </div>"""

    def _get_report_css(self) -> str:
        """Get base CSS for reports."""
        return """
        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            line-height: 1.5;
            color: #1a1a2e;
            max-width: 900px;
            margin: 0 auto;
            padding: 20px;
        }
        header {
            margin-bottom: 20px;
            padding-bottom: 10px;
            border-bottom: 2px solid #ccc;
        }
        header .subtitle {
            color: #666;
        }
        .section, .step {
            border: 1px solid #ccc;
            border-radius: 6px;
            margin-bottom: 15px;
            padding: 10px;
        }
        .step-fail {
            border-color: #c0392b;
        }
        .crash {
            background: #fee;
        }
        .pass { color: green; font-weight: bold; }
        .fail { color: red; font-weight: bold; }
        pre { white-space: pre-wrap; }
        code {
            background: #f4f4f4;
            padding: 2px 6px;
            word-break: break-all;
        }
        """
