"""Helpers for turning exceptions into short, loggable descriptions."""

PLAYWRIGHT_LOG_MARKER = "=========================== logs ==========================="


def describe_error(error: BaseException) -> str:
    """
    One-line description of an exception.

    Playwright appends a multi-line call log to its messages; only the first
    line is kept.
    """
    text = str(error).strip()
    if PLAYWRIGHT_LOG_MARKER in text:
        text = text.split(PLAYWRIGHT_LOG_MARKER, 1)[0].strip()
    if "\n" in text:
        text = text.splitlines()[0]
    return text or type(error).__name__
