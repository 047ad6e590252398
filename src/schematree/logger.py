"""Logging for schematree with CLI output helpers."""

import json
import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape


class SchemaTreeLogger(logging.Logger):
    """
    Logger that adds a few console output helpers on top of standard logging.

    Library modules only use the standard levels. The CLI also uses the
    display helpers (success, hint, key_value, print_dict) to render results.
    """

    def __init__(self, name: str, level: int = logging.INFO) -> None:
        """
        Initialize the logger with a Rich console handler.

        Args:
            name: Logger name
            level: Initial log level
        """
        super().__init__(name, level)
        self.console = Console()

        handler = RichHandler(
            console=self.console,
            rich_tracebacks=True,
            show_time=True,
            show_path=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        self.addHandler(handler)

    def print(self, message: str) -> None:
        """Print a plain message (with Rich markup support)."""
        self.console.print(message)

    def success(self, message: str) -> None:
        self.print(f"[green]✓[/green] {message}")

    def hint(self, message: str) -> None:
        self.print(f"[dim]{message}[/dim]")

    def print_dict(self, data: dict[str, Any]) -> None:
        """
        Print dictionary data as highlighted JSON.

        Values that are not JSON serializable (GraphQL types, NaN) are
        rendered through ``str``.

        Args:
            data: Dictionary to display
        """
        self.console.print_json(json.dumps(data, indent=2, default=str))

    def key_value(self, key: str, value: Any, key_style: str = "dim") -> None:
        """
        Print a formatted key-value pair, e.g. ``filter.date: DateTime!``.

        Args:
            key: The key/label to display
            value: The value to display
            key_style: Style for the key (default: "dim")
        """
        self.print(f"[{key_style}]{escape(key)}:[/{key_style}] {escape(str(value))}")


def get_logger(name: str = "schematree") -> SchemaTreeLogger:
    """
    Get or create a schematree logger instance.

    Args:
        name: Logger name (default: "schematree")

    Returns:
        SchemaTreeLogger instance
    """
    logging.setLoggerClass(SchemaTreeLogger)
    logger = logging.getLogger(name)
    logging.setLoggerClass(logging.Logger)
    return logger  # type: ignore[return-value]
