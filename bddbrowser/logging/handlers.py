"""Logging handler rendering network responses in color."""

import logging

from rich.console import Console
from rich.text import Text

RESPONSE_LOGGER_NAME = "bddbrowser.responses"


def status_style(status: int | None) -> str:
    """Pick a color for an HTTP status class.

    Parameters
    ----------
    status : int | None
        HTTP status code

    Returns
    -------
    str
        cyan for 2xx, yellow for 3xx, red for everything else
    """
    text = str(status) if status is not None else ""

    if text.startswith("2"):
        return "cyan"
    if text.startswith("3"):
        return "yellow"
    return "red"


class ResponseConsoleHandler(logging.Handler):
    """Logging handler printing response URLs colored by their status.

    Parameters
    ----------
    console : Console | None
        Rich console to print to, stderr by default
    """

    def __init__(self, console: Console | None = None) -> None:
        super().__init__()
        self.console = console or Console(stderr=True)

    def emit(self, record: logging.LogRecord) -> None:
        """Print a record with the style of its ``status`` extra.

        Parameters
        ----------
        record : logging.LogRecord
            Log record to emit
        """
        try:
            msg = self.format(record)
            style = status_style(getattr(record, "status", None))
            self.console.print(Text(msg, style=style), soft_wrap=True)
        except Exception:
            self.handleError(record)
