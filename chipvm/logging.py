"""Console logging utilities for the CHIP-8 machine and its hosts.

A small named console logger with level filtering, optional colors when stdout
is a terminal and elapsed-time stamps. Package modules share loggers through
`get_logger`, so a host can raise or lower verbosity in one place.
"""

import sys
import time
from typing import Dict, Optional


LEVEL_ORDER = {
    "DEBUG": 0,
    "INFO": 1,
    "WARNING": 2,
    "ERROR": 3,
    "CRITICAL": 4,
}

DEFAULT_LEVEL = "WARNING"


class ConsoleLogger:
    """Flexible console logger with level filtering and formatting."""

    def __init__(
        self,
        name: str = "chipvm",
        log_level: str = DEFAULT_LEVEL,
        use_colors: bool = True,
        show_timestamps: bool = True,
    ):
        self.name = name
        self.log_level = log_level.upper()
        self.use_colors = (
            use_colors and hasattr(sys.stdout, "isatty") and sys.stdout.isatty()
        )
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

        self.colors = (
            {
                "DEBUG": "\033[36m",
                "INFO": "\033[32m",
                "WARNING": "\033[33m",
                "ERROR": "\033[31m",
                "CRITICAL": "\033[35m",
                "RESET": "\033[0m"
            }
            if self.use_colors
            else {k: "" for k in [*LEVEL_ORDER, "RESET"]}
        )

    def set_level(self, log_level: str):
        """Change the minimum level that gets printed."""
        if log_level.upper() not in LEVEL_ORDER:
            raise ValueError(
                f"Unknown log level '{log_level}'. Available: {list(LEVEL_ORDER.keys())}"
            )
        self.log_level = log_level.upper()

    def _should_log(self, level: str) -> bool:
        """Check if message should be logged based on current log level."""
        return LEVEL_ORDER.get(level.upper(), 1) >= LEVEL_ORDER.get(
            self.log_level, 1
        )

    def _format_message(self, level: str, message: str) -> str:
        """Format log message with timestamp, level, and colors."""
        timestamp = (
            f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        )
        level_str = f"[{level:>8s}]"
        name_str = f"[{self.name}]"

        if self.use_colors:
            color = self.colors.get(level.upper(), "")
            reset = self.colors["RESET"]
            level_str = f"{color}{level_str}{reset}"

        return f"{timestamp}{level_str}{name_str} {message}"

    def log(self, level: str, message: str):
        """Log a message at the specified level."""
        if self._should_log(level):
            formatted = self._format_message(level, message)
            print(formatted, flush=True)

    def debug(self, message: str):
        """Log debug message."""
        self.log("DEBUG", message)

    def info(self, message: str):
        """Log info message."""
        self.log("INFO", message)

    def warning(self, message: str):
        """Log warning message."""
        self.log("WARNING", message)

    def error(self, message: str):
        """Log error message."""
        self.log("ERROR", message)

    def critical(self, message: str):
        """Log critical message."""
        self.log("CRITICAL", message)


_loggers: Dict[str, ConsoleLogger] = {}
_level = DEFAULT_LEVEL


def get_logger(name: str = "chipvm") -> ConsoleLogger:
    """Return the shared logger registered under `name`."""
    if name not in _loggers:
        _loggers[name] = ConsoleLogger(name, log_level=_level)
    return _loggers[name]


def set_log_level(log_level: str, name: Optional[str] = None):
    """Set the level of one logger, or of every logger when `name` is None."""
    global _level

    if name is not None:
        get_logger(name).set_level(log_level)
        return

    get_logger().set_level(log_level)
    _level = log_level.upper()
    for logger in _loggers.values():
        logger.set_level(_level)
