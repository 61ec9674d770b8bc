"""Terminal abstraction for raw-mode stdin/stdout interaction.

Provides a ``Terminal`` protocol and a concrete ``ProcessTerminal``
implementation that manages raw mode and bracketed paste, performs blocking
reads of complete input sequences, and writes output batches to stdout.

All screen output goes through :meth:`Terminal.write`; the frame buffer calls
it once per frame so a partially drawn frame is never visible.
"""

from __future__ import annotations

import contextlib
import logging
import os
import select
import sys
import termios
import tty
from collections import deque
from typing import Iterator, Protocol

from glint.tui.stdin_buffer import StdinBuffer

logger = logging.getLogger(__name__)

_BRACKETED_PASTE_ENABLE = "\x1b[?2004h"
_BRACKETED_PASTE_DISABLE = "\x1b[?2004l"


class Terminal(Protocol):
    """Interface for terminal I/O operations."""

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def read(self) -> str:
        """Block until one complete input sequence is available and return it."""
        ...

    def write(self, data: str) -> None: ...

    def suspend(self) -> contextlib.AbstractContextManager[None]:
        """Hand the terminal to a child process for the duration of the block."""
        ...

    @property
    def columns(self) -> int: ...

    @property
    def rows(self) -> int: ...


class ProcessTerminal:
    """Concrete terminal implementation backed by ``sys.stdin``/``sys.stdout``.

    Raw mode is set with :mod:`tty` and undone with the :mod:`termios` state
    saved in :meth:`start`.  In raw mode Ctrl-C is delivered as the ``\\x03``
    byte instead of raising ``KeyboardInterrupt``.
    """

    def __init__(self) -> None:
        self._original_termios: list | None = None
        self._stdin_buffer = StdinBuffer(timeout=0.01)
        self._pending: deque[str] = deque()
        self._write_log_path: str = os.environ.get("GLINT_TUI_WRITE_LOG", "")

    @property
    def columns(self) -> int:
        try:
            return os.get_terminal_size(sys.stdout.fileno()).columns
        except (ValueError, OSError):
            return 80

    @property
    def rows(self) -> int:
        try:
            return os.get_terminal_size(sys.stdout.fileno()).lines
        except (ValueError, OSError):
            return 24

    # -- start / stop -------------------------------------------------------

    def start(self) -> None:
        """Enable raw mode and bracketed paste."""
        fd = sys.stdin.fileno()
        self._original_termios = termios.tcgetattr(fd)
        tty.setraw(fd)
        self.write(_BRACKETED_PASTE_ENABLE)
        logger.debug("terminal started (%dx%d)", self.columns, self.rows)

    def stop(self) -> None:
        """Restore the terminal state saved by :meth:`start`."""
        if self._original_termios is None:
            return
        try:
            self.write(_BRACKETED_PASTE_DISABLE)
        finally:
            termios.tcsetattr(
                sys.stdin.fileno(), termios.TCSADRAIN, self._original_termios
            )
            self._original_termios = None
            self._stdin_buffer.clear()
            self._pending.clear()
            logger.debug("terminal stopped")

    @contextlib.contextmanager
    def suspend(self) -> Iterator[None]:
        """Restore cooked mode while a child process owns the terminal."""
        saved = self._original_termios
        if saved is None:
            yield
            return

        fd = sys.stdin.fileno()
        self.write(_BRACKETED_PASTE_DISABLE)
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)
        try:
            yield
        finally:
            tty.setraw(fd)
            self.write(_BRACKETED_PASTE_ENABLE)
            # Keys typed into the child must not leak into the prompt
            self._stdin_buffer.clear()
            self._pending.clear()

    # -- input --------------------------------------------------------------

    def read(self) -> str:
        """Block until a complete key sequence is available."""
        fd = sys.stdin.fileno()
        while not self._pending:
            raw = os.read(fd, 4096)
            if not raw:
                raise EOFError("stdin closed")
            self._pending.extend(
                self._stdin_buffer.process(raw.decode("utf-8", errors="replace"))
            )

            # A lone ESC is either the Escape key or the start of a sequence
            # whose remainder has not arrived yet.
            while self._stdin_buffer.has_pending():
                ready, _, _ = select.select([fd], [], [], self._stdin_buffer.timeout)
                if not ready:
                    self._pending.extend(self._stdin_buffer.flush())
                    break
                more = os.read(fd, 4096)
                if not more:
                    self._pending.extend(self._stdin_buffer.flush())
                    break
                self._pending.extend(
                    self._stdin_buffer.process(more.decode("utf-8", errors="replace"))
                )

        return self._pending.popleft()

    # -- output -------------------------------------------------------------

    def write(self, data: str) -> None:
        """Write *data* to stdout in one call and flush it.

        Write errors propagate: a frame that cannot be shown is fatal.
        """
        sys.stdout.write(data)
        sys.stdout.flush()

        if self._write_log_path:
            try:
                with open(self._write_log_path, "a") as f:
                    f.write(data)
            except OSError:
                logger.debug("cannot append to write log %s", self._write_log_path)
