"""Retry decorator for outbound API calls with a Slack alert on final failure.

Transient failures (network errors, HTTP 429 and 5xx) are retried 3 times
with exponential backoff and jitter.  Client errors fail immediately.  When
retries are exhausted an alert is posted to Slack and the original exception
is re-raised.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import httpx
import structlog
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

logger = structlog.get_logger()

# Module-level notifier for error reporting (avoids circular import with SlackAlerter)
_notifier: Any = None

F = TypeVar("F", bound=Callable[..., Any])


def configure_error_notifier(notifier: Any) -> None:
    """Set the module-level notifier for error reporting.

    Args:
        notifier: An object with a ``post_alert(blocks, fallback_text)``
                  method, typically a ``SlackAlerter``.  ``None`` disables
                  alerts.
    """
    global _notifier
    _notifier = notifier


def is_transient(exc: BaseException) -> bool:
    """True for failures worth retrying: transport errors, 429 and 5xx."""
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return status == 429 or status >= 500
    return False


def _api_name(retry_state: RetryCallState) -> str:
    return getattr(retry_state.fn, "_api_name", "unknown") if retry_state.fn else "unknown"


def notify_slack_on_final_failure(retry_state: RetryCallState) -> Any:
    """Log, alert Slack and re-raise once retries are exhausted.

    Args:
        retry_state: Tenacity retry state with attempt info and exception.

    Raises:
        The exception from the final attempt.
    """
    exception = retry_state.outcome.exception() if retry_state.outcome else None
    api_name = _api_name(retry_state)

    logger.error(
        "api_call_failed_after_retries",
        api_name=api_name,
        attempts=retry_state.attempt_number,
        exception=str(exception),
    )

    if _notifier is not None:
        try:
            _notifier.post_alert(
                blocks=[
                    {
                        "type": "section",
                        "text": {
                            "type": "mrkdwn",
                            "text": (
                                f"*API Error: {api_name}*\n"
                                f"Failed after {retry_state.attempt_number} attempts.\n"
                                f"Error: `{exception}`"
                            ),
                        },
                    }
                ],
                fallback_text=f"API Error: {api_name} failed after retries",
            )
        except Exception:
            logger.exception("slack_alert_failed", api_name=api_name)

    if retry_state.outcome is None:
        return None
    return retry_state.outcome.result()


def _before_sleep_log(retry_state: RetryCallState) -> None:
    logger.warning(
        "api_call_retrying",
        api_name=_api_name(retry_state),
        attempt=retry_state.attempt_number,
        wait=retry_state.next_action.sleep if retry_state.next_action else 0,
    )


def resilient_api_call(api_name: str) -> Callable[[F], F]:
    """Create a retry decorator for an API call.

    Works for both sync and async functions:

    - 3 attempts maximum, transient errors only
    - Exponential backoff with jitter (1s initial, 30s max, 5s jitter)
    - Warning log before each retry
    - Slack alert on final failure, then the original exception is re-raised

    Args:
        api_name: Human-readable name for the API (used in logs and alerts).

    Returns:
        A decorator that wraps the function with retry logic.
    """

    def decorator(func: F) -> F:
        func._api_name = api_name  # type: ignore[attr-defined]

        wrapped = retry(
            retry=retry_if_exception(is_transient),
            stop=stop_after_attempt(3),
            wait=wait_exponential_jitter(initial=1, max=30, jitter=5),
            before_sleep=_before_sleep_log,
            retry_error_callback=notify_slack_on_final_failure,
            reraise=True,
        )(func)

        return wrapped  # type: ignore[no-any-return]

    return decorator
