"""Rich consoles and timestamped status lines."""

from datetime import datetime

from rich.console import Console
from rich.text import Text


console = Console(highlight=False)
stderr_console = Console(stderr=True, highlight=False)


def log_message(style: str, message: str, target: Console = stderr_console) -> None:
    """Print ``[YYYY-mm-dd HH:MM:SS] message`` in the given style."""
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    target.print(Text(f"[{timestamp}] {message}", style=style))
