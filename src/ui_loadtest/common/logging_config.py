"""
Colored console logging for the load-test harness.

Per-session log lines carry a ``[Session N]`` tag; the formatter highlights
that tag so interleaved output from concurrent sessions stays readable.
"""

import logging
import os
import re
import sys
from typing import Optional


class Colors:
    """ANSI color codes for terminal output."""
    RESET = '\033[0m'
    BOLD = '\033[1m'

    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    CYAN = '\033[36m'
    BRIGHT_MAGENTA = '\033[95m'


class ColoredFormatter(logging.Formatter):
    """
    Formatter that colors level names and session tags.

    Color scheme:
    - DEBUG: Cyan
    - INFO: Green
    - WARNING: Yellow
    - ERROR: Red
    - CRITICAL: Bold Red
    - ``[Session N]`` tags in the message: Bright Magenta
    """

    LEVEL_COLORS = {
        logging.DEBUG: Colors.CYAN,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    SESSION_TAG = re.compile(r"\[Session \d+\]")

    def __init__(self, fmt: Optional[str] = None, datefmt: Optional[str] = None, use_colors: bool = True):
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors and self._supports_color()

    @staticmethod
    def _supports_color() -> bool:
        """
        Check if the terminal supports color output.

        ``NO_COLOR`` wins over everything, ``FORCE_COLOR`` wins over TTY detection.
        """
        if os.environ.get('NO_COLOR'):
            return False
        if os.environ.get('FORCE_COLOR'):
            return True
        if not hasattr(sys.stdout, 'isatty') or not sys.stdout.isatty():
            return False
        if sys.platform == 'win32':
            return bool(os.environ.get('ANSICON') or os.environ.get('WT_SESSION'))
        return True

    def format(self, record: logging.LogRecord) -> str:
        if not self.use_colors:
            return super().format(record)

        levelname_orig = record.levelname
        record.levelname = f"{self.LEVEL_COLORS.get(record.levelno, '')}{record.levelname}{Colors.RESET}"
        try:
            result = super().format(record)
        finally:
            record.levelname = levelname_orig

        return self.SESSION_TAG.sub(
            lambda m: f"{Colors.BRIGHT_MAGENTA}{m.group(0)}{Colors.RESET}", result
        )


def setup_colored_logging(
    level: int = logging.INFO,
    format_string: Optional[str] = None,
    date_format: Optional[str] = None,
    use_colors: bool = True
) -> None:
    """
    Configure colored logging on the root logger.

    Should be called once, early, by the CLI. Existing root handlers are
    removed so repeated calls do not duplicate output.

    Args:
        level: The logging level (default: INFO)
        format_string: Custom format string
        date_format: Custom date format string
        use_colors: Whether to use colors (auto-detects TTY support)
    """
    if format_string is None:
        format_string = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    if date_format is None:
        date_format = '%Y-%m-%d %H:%M:%S'

    formatter = ColoredFormatter(
        fmt=format_string,
        datefmt=date_format,
        use_colors=use_colors
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Many concurrent sessions make asyncio's slow-callback warnings noisy.
    logging.getLogger("asyncio").setLevel(max(level, logging.WARNING))
