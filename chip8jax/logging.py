"""Console logging utilities for the emulator.

A small levelled logger with optional colours and elapsed-time stamps, used
by the command line, the frame driver, the frontend and the trace sink.
"""

import time
import sys
from typing import Dict, Optional, TextIO

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_ANSI_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
_ANSI_RESET = "\033[0m"


class ConsoleLogger:
    """Levelled console logger.

    Lines look like ``[   12.34s][    INFO][chip8jax] message``. Colours are
    only used when the output stream is a terminal.

    Args:
        name: Shown in every line
        log_level: Minimum level printed, one of ``LEVELS`` (case insensitive)
        use_colors: Colour the level tag on terminals
        show_timestamps: Prefix seconds elapsed since the logger was created
        stream: Output stream, standard output by default
    """

    def __init__(
        self,
        name: str = "chip8jax",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
        stream: Optional[TextIO] = None,
    ):
        self.name = name
        self.log_level = log_level.upper()
        if self.log_level not in LEVELS:
            raise ValueError(f"Unknown log level '{log_level}'. Available: {list(LEVELS)}")
        self.stream = stream if stream is not None else sys.stdout
        self.use_colors = use_colors and getattr(self.stream, "isatty", lambda: False)()
        self.show_timestamps = show_timestamps
        self.start_time = time.time()
        self.threshold = LEVELS.index(self.log_level)

    def is_enabled(self, level: str) -> bool:
        return LEVELS.index(level.upper()) >= self.threshold

    def _format_message(self, level: str, message: str) -> str:
        elapsed = f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        tag = f"[{level:>8s}]"
        if self.use_colors:
            tag = f"{_ANSI_COLORS[level]}{tag}{_ANSI_RESET}"
        return f"{elapsed}{tag}[{self.name}] {message}"

    def log(self, level: str, message: str):
        """Print ``message`` if ``level`` passes the threshold."""
        level = level.upper()
        if self.is_enabled(level):
            print(self._format_message(level, message), file=self.stream, flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)

    def critical(self, message: str):
        self.log("CRITICAL", message)

    def log_config(self, config: Dict):
        """Log a configuration block, one key per line."""
        self.info("=" * 60)
        self.info("Starting emulator with configuration:")
        for key, value in config.items():
            self.info(f"  {key}: {value}")
        self.info("=" * 60)
