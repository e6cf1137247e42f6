"""Alert email templates."""

import html
from typing import Optional

EMPTY_PLACEHOLDER = "<empty>"


def _esc(value: Optional[str]) -> str:
    return html.escape("" if value is None else str(value), quote=True)


class AlertTemplates:
    """Generates replay failure alert emails."""

    MISMATCH_SUBJECT = "Web Replay Verification Failed"
    CRASH_SUBJECT = "Web Replay Crashed"

    @staticmethod
    def _body(
        *,
        step: Optional[int],
        url: str,
        recorded_first_p: str,
        live_first_p: str,
        reason: Optional[str] = None,
    ) -> str:
        reason_html = f"<p><strong>Reason:</strong> {_esc(reason)}</p>" if reason else ""
        step_label = str(step) if step is not None else "N/A"
        return f"""
<h2 style="color:red;">Web Replay Failed</h2>

<p><strong>Step:</strong> {_esc(step_label)}</p>
<p><strong>URL:</strong> {_esc(url)}</p>

{reason_html}

<hr/>

<p><strong>Recorded firstP:</strong></p>
<pre>{_esc(recorded_first_p)}</pre>

<p><strong>Replayed firstP:</strong></p>
<pre>{_esc(live_first_p)}</pre>
"""

    @classmethod
    def step_mismatch(
        cls,
        step_number: int,
        url: str,
        recorded_first_p: str,
        live_first_p: str,
    ) -> dict[str, str]:
        """Alert for the first step whose content no longer matches."""
        return {
            "subject": cls.MISMATCH_SUBJECT,
            "body": cls._body(
                step=step_number,
                url=url,
                recorded_first_p=recorded_first_p or EMPTY_PLACEHOLDER,
                live_first_p=live_first_p or EMPTY_PLACEHOLDER,
            ),
        }

    @classmethod
    def replay_crashed(cls, reason: str, step_number: Optional[int] = None, url: str = "N/A") -> dict[str, str]:
        """Alert for a replay run that aborted before finishing."""
        return {
            "subject": cls.CRASH_SUBJECT,
            "body": cls._body(
                step=step_number,
                url=url,
                recorded_first_p="",
                live_first_p="",
                reason=reason or "Unknown error",
            ),
        }
