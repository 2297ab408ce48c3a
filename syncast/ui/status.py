import logging
from collections import deque
from typing import Deque, Optional


class StatusLineHandler(logging.Handler):
    """Logging handler that keeps recent records for the TUI status line.

    While curses owns the terminal a stream handler would scribble over the
    screen, so warnings are routed here instead.
    """

    def __init__(self, level: int = logging.WARNING, maxlen: int = 50):
        super().__init__(level)
        self.messages: Deque[str] = deque(maxlen=maxlen)
        self.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.messages.append(self.format(record))
        except Exception:
            self.handleError(record)

    def push(self, message: str) -> None:
        self.messages.append(message)

    @property
    def latest(self) -> Optional[str]:
        return self.messages[-1] if self.messages else None
