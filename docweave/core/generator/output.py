"""Progress output sinks.

A generator reports two events through an optional output object exposing
``comment(message)`` (work starting on a class) and ``info(message)``
(document written). Any object with those two methods works.
"""

import logging
import sys
from typing import Optional, Protocol, TextIO

logger = logging.getLogger(__name__)


class OutputSink(Protocol):
    def comment(self, message: str) -> None:
        ...

    def info(self, message: str) -> None:
        ...


class LoggingOutput:
    """Forwards progress messages to the logging system."""

    def __init__(self, log: logging.Logger = logger):
        self._log = log

    def comment(self, message: str) -> None:
        self._log.debug(message)

    def info(self, message: str) -> None:
        self._log.info(message)


class ConsoleOutput:
    """Prints progress messages, used by the command line."""

    def __init__(self, stream: Optional[TextIO] = None, verbose: bool = False):
        self._stream = stream or sys.stdout
        self._verbose = verbose

    def comment(self, message: str) -> None:
        if self._verbose:
            print(message, file=self._stream)

    def info(self, message: str) -> None:
        print(message, file=self._stream)
