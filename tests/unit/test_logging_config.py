"""
Unit tests for the colored log formatter.
"""

import logging

from ui_loadtest.common.logging_config import Colors, ColoredFormatter


def _record(message, level=logging.INFO):
    return logging.LogRecord("ui_loadtest.session", level, __file__, 1, message, (), None)


def test_session_tag_highlighted(monkeypatch):
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.setenv("FORCE_COLOR", "1")
    formatter = ColoredFormatter("%(levelname)s %(message)s")

    text = formatter.format(_record("[Session 3] Modal opened in 120ms"))

    assert f"{Colors.BRIGHT_MAGENTA}[Session 3]{Colors.RESET}" in text
    assert f"{Colors.GREEN}INFO{Colors.RESET}" in text


def test_no_color_disables_colors(monkeypatch):
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.setenv("FORCE_COLOR", "1")
    formatter = ColoredFormatter("%(levelname)s %(message)s")

    assert formatter.format(_record("[Session 0] Failed", logging.WARNING)) == "WARNING [Session 0] Failed"


def test_levelname_restored_after_format(monkeypatch):
    monkeypatch.setenv("FORCE_COLOR", "1")
    monkeypatch.delenv("NO_COLOR", raising=False)
    record = _record("hello", logging.ERROR)

    ColoredFormatter("%(levelname)s %(message)s").format(record)

    assert record.levelname == "ERROR"
