from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Tuple

import dash

from xls_browser.core.exceptions import (
    Forbidden,
    InsufficientSelection,
    NotFound,
    TransientFetchError,
    XlsBrowserError,
)

logger = logging.getLogger(__name__)

# (children, is_open, color) for the status bar
StatusUpdate = Tuple[str, bool, str]

STATUS_CLOSED: StatusUpdate = ("", False, "info")


def status(message: str, color: str = "info") -> StatusUpdate:
    return message, True, color


def status_for_error(e: Exception) -> StatusUpdate:
    """Translate a failure into something the user can act on."""
    if isinstance(e, TransientFetchError):
        return status(f"{e} Please try again.", "warning")
    if isinstance(e, NotFound):
        return status(f"{e}. It was removed from the list.", "warning")
    if isinstance(e, (Forbidden, InsufficientSelection)):
        return status(str(e), "secondary")
    if isinstance(e, XlsBrowserError):
        return status(str(e), "danger")
    return status("Something went wrong. See the server log for details.", "danger")


def clicked_index() -> Optional[str]:
    """
    Index of the pattern-matching button that fired the callback, or None.

    Re-rendering a list of buttons fires its ALL-callback with n_clicks=None;
    only a real click carries a truthy value.
    """
    triggered = dash.callback_context.triggered
    if not triggered or not triggered[0].get("value"):
        return None
    triggered_id = dash.ctx.triggered_id
    if not isinstance(triggered_id, dict):
        return None
    return triggered_id.get("index")


def run_action(action: Callable[[], Any], failure_message: str, **extra) -> Tuple[Any, Optional[StatusUpdate]]:
    """
    Run a user-triggered mutation for a callback.

    Returns (result, None) on success or (None, status) on failure.
    Domain errors become a status message; anything else is logged with its
    traceback first.
    """
    try:
        return action(), None
    except XlsBrowserError as e:
        return None, status_for_error(e)
    except Exception as e:
        logger.exception(failure_message, extra=extra)
        return None, status_for_error(e)
