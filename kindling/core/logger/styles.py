"""
Logging style constants for consistent visual hierarchy.

Provides the status symbols and separators shared by every bootstrap stage,
so progress reads the same whether it comes from the installer, the
identity provisioner or the supervisor bridge.
"""

from __future__ import annotations

import logging


class LogStyle:
    """Unified logging style constants for consistent visual hierarchy."""

    # Header centering width (matches separator length)
    HEADER_WIDTH = 72

    # Level 1: Session headers
    HEAVY = "━" * HEADER_WIDTH

    # Level 2: Major sections
    DOUBLE = "═" * HEADER_WIDTH

    # Level 3: Subsections / Separators
    LIGHT = "─" * HEADER_WIDTH

    # Symbols
    ARROW = "»"
    STEP = "==>"
    BULLET = "•"
    WARNING = "⚠"
    SUCCESS = "✓"
    FAILURE = "✗"

    # Indentation
    INDENT = "  "
    DOUBLE_INDENT = "    "

    # ANSI Colors (applied by ColorFormatter to console output only)
    RESET = "\033[0m"
    DIM = "\033[2m"
    BOLD = "\033[1m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    RED = "\033[31m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"

    @staticmethod
    def log_phase_header(
        log: logging.Logger,
        title: str,
        style: str | None = None,
    ) -> None:
        """
        Log a centered phase header with separator lines.

        Args:
            log: Logger instance to write to.
            title: Header text (will be uppercased and centered).
            style: Separator string (defaults to ``LogStyle.LIGHT``).
        """
        sep = style if style is not None else LogStyle.LIGHT
        log.info("")
        log.info(sep)
        log.info(f"{title.upper():^{LogStyle.HEADER_WIDTH}}")
        log.info(sep)

    @staticmethod
    def step(log: logging.Logger, message: str) -> None:
        """Log an in-progress status line (``==> message``)."""
        log.info(f"{LogStyle.STEP} {message}")

    @staticmethod
    def done(log: logging.Logger, message: str) -> None:
        """Log a completed status line (``  ✓ message``)."""
        log.info(f"{LogStyle.INDENT}{LogStyle.SUCCESS} {message}")

    @staticmethod
    def warn(log: logging.Logger, message: str) -> None:
        """Log a non-fatal warning line (``  ⚠ message``)."""
        log.warning(f"{LogStyle.INDENT}{LogStyle.WARNING} {message}")
