"""Log handlers for TableStat logging system.

Classes:
    ConsoleHandler: Stream handler bound to stderr
"""

import logging
import os
import sys
from typing import IO, Optional


class ConsoleHandler(logging.StreamHandler):
    """Console handler that never writes to stdout.

    Standard output carries the plugin protocol read by the monitoring
    agent, so every log record goes to stderr.
    """

    def __init__(self, stream: Optional[IO[str]] = None) -> None:
        """Initialize console handler.

        Args:
            stream: Stream override, defaults to sys.stderr
        """
        super().__init__(stream or sys.stderr)

    def supports_color(self) -> bool:
        """Check if the handler's stream supports color output.

        Returns:
            True if colors are supported
        """
        if not (hasattr(self.stream, "isatty") and self.stream.isatty()):
            return False

        if os.environ.get("NO_COLOR"):
            return False

        if os.environ.get("FORCE_COLOR"):
            return True

        term = os.environ.get("TERM", "")
        return "color" in term or term in ["xterm", "xterm-256color", "screen"]
