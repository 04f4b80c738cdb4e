"""Logging formatters and filters for stream routing."""

import logging


class StreamFormatter(logging.Formatter):
    """Logging formatter that prepends stream tags based on extra parameter."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with stream prefix if present.

        Parameters
        ----------
        record : logging.LogRecord
            Log record to format

        Returns
        -------
        str
            Formatted log message with optional stream prefix
        """
        msg = super().format(record)
        stream = getattr(record, "stream", None)

        if stream == "stdout":
            return f"[stdout] {msg}"
        elif stream == "stderr":
            return f"[stderr] {msg}"

        return msg


class StreamRoutingFilter(logging.Filter):
    """Route records to stdout or stderr.

    Records carrying an explicit ``stream`` extra go to that stream. Others
    go to stdout below WARNING and to stderr from WARNING up.

    Parameters
    ----------
    stream : str
        Stream this filter admits records for ("stdout" or "stderr")
    """

    def __init__(self, stream: str) -> None:
        super().__init__()
        self.stream = stream

    def filter(self, record: logging.LogRecord) -> bool:
        explicit = getattr(record, "stream", None)

        if explicit is not None:
            return explicit == self.stream

        if record.levelno >= logging.WARNING:
            return self.stream == "stderr"

        return self.stream == "stdout"
