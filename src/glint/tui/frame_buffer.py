"""Differential frame buffer.

The buffer remembers the last frame it flushed to the terminal and, for
the next frame, emits only the line operations needed to turn one into the
other.  Lines that did not change are never rewritten, which is what keeps
the checklist from flickering while the user moves around it.

A frame is drawn inline, starting at the row the cursor was on when the
first frame was flushed.  Row numbers used here are relative to that row.

Usage, once per frame::

    buffer.begin()
    buffer.append_line("...")
    buffer.set_cursor_target(row, column)
    buffer.render()
    buffer.flush()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from glint.tui.terminal import Terminal

__all__ = ["FrameBuffer", "FrameOp", "FrameOpKind"]

logger = logging.getLogger(__name__)

FrameOpKind = Literal["overwrite", "append", "clear"]

_CLEAR_LINE = "\x1b[2K"
_CLEAR_TO_EOL = "\x1b[K"


@dataclass(frozen=True)
class FrameOp:
    """One line-level change between the previous and the pending frame."""

    kind: FrameOpKind
    row: int
    text: str = ""


class FrameBuffer:
    """Line-diffing renderer on top of a :class:`~glint.tui.terminal.Terminal`."""

    def __init__(self, terminal: Terminal) -> None:
        self.terminal = terminal

        # Last frame actually flushed, and the one being assembled
        self._previous_lines: list[str] = []
        self._pending_lines: list[str] = []

        self._cursor_target: tuple[int, int] | None = None
        self._ops: list[FrameOp] | None = None

        # Where the terminal cursor currently sits, relative to the frame top
        self._cursor_row: int = 0

        # Physical rows claimed so far; cleared rows stay claimed (blank)
        self._rows_drawn: int = 0

        # Set when the screen may no longer show previous_lines
        self._stale: bool = False

    @property
    def previous_lines(self) -> list[str]:
        """The frame currently visible on the terminal."""
        return list(self._previous_lines)

    # ------------------------------------------------------------------
    # Frame assembly
    # ------------------------------------------------------------------

    def begin(self) -> None:
        """Discard any partially built frame and start an empty one."""
        self._pending_lines = []
        self._cursor_target = None
        self._ops = None

    def append_line(self, text: str) -> None:
        """Add *text* as the next line of the pending frame."""
        self._pending_lines.append(text)

    def pending_line_count(self) -> int:
        return len(self._pending_lines)

    def set_cursor_target(self, row: int, column: int) -> None:
        """Record where the cursor should rest after the next flush."""
        self._cursor_target = (row, column)

    def invalidate(self) -> None:
        """Forget the visible content so the next flush rewrites every row.

        Used after another program has drawn on the terminal.  The frame's
        position is kept; only its content is treated as unknown.
        """
        self._stale = True

    # ------------------------------------------------------------------
    # Diff
    # ------------------------------------------------------------------

    def render(self) -> list[FrameOp]:
        """Compute the line operations turning the previous frame into the pending one.

        * present in both and different -> ``overwrite``
        * present in both and identical -> nothing
        * only in the pending frame     -> ``append``
        * only in the previous frame    -> ``clear`` (row stays, blank)

        After :meth:`invalidate` every row present in both is overwritten.
        """
        previous = self._previous_lines
        pending = self._pending_lines
        ops: list[FrameOp] = []

        for row in range(max(len(previous), len(pending))):
            if row >= len(pending):
                ops.append(FrameOp("clear", row))
            elif row >= len(previous):
                ops.append(FrameOp("append", row, pending[row]))
            elif self._stale or pending[row] != previous[row]:
                ops.append(FrameOp("overwrite", row, pending[row]))

        self._ops = ops
        return ops

    # ------------------------------------------------------------------
    # Flush
    # ------------------------------------------------------------------

    def flush(self) -> None:
        """Write the rendered operations and the cursor move in a single batch.

        Afterwards the pending frame becomes the previous one and a new,
        empty pending frame is started.
        """
        ops = self._ops if self._ops is not None else self.render()

        out: list[str] = []
        row = self._cursor_row

        for op in ops:
            self._move_to_row(out, row, op.row)
            row = op.row
            out.append("\r")
            if op.kind == "overwrite":
                out.append(_CLEAR_LINE)
                out.append(op.text)
            elif op.kind == "append":
                out.append(op.text)
                out.append(_CLEAR_TO_EOL)
                self._rows_drawn = max(self._rows_drawn, op.row + 1)
            else:
                out.append(_CLEAR_LINE)

        target_row, target_col = self._resolve_cursor_target()
        self._move_to_row(out, row, target_row)
        out.append("\r")
        if target_col > 0:
            out.append(f"\x1b[{target_col}C")

        self.terminal.write("".join(out))

        logger.debug(
            "flushed frame: %d lines, %d ops, cursor at (%d, %d)",
            len(self._pending_lines),
            len(ops),
            target_row,
            target_col,
        )

        self._cursor_row = target_row
        self._previous_lines = self._pending_lines
        self._pending_lines = []
        self._stale = False
        self._cursor_target = None
        self._ops = None

    def finish(self) -> None:
        """Move the cursor below everything drawn so later output starts clean."""
        out: list[str] = []
        last_row = max(self._rows_drawn - 1, 0)
        self._move_to_row(out, self._cursor_row, last_row)
        out.append("\r\n")
        self.terminal.write("".join(out))
        self._cursor_row = 0
        self._rows_drawn = 0
        self._previous_lines = []

    # ------------------------------------------------------------------
    # Cursor helpers
    # ------------------------------------------------------------------

    def _resolve_cursor_target(self) -> tuple[int, int]:
        last_row = max(len(self._pending_lines) - 1, 0)
        if self._cursor_target is None:
            return last_row, 0
        row, col = self._cursor_target
        return min(max(row, 0), last_row), max(col, 0)

    def _move_to_row(self, out: list[str], from_row: int, to_row: int) -> None:
        """Append the sequences that move the cursor between frame rows.

        Rows already on screen are reached with cursor up/down; rows below
        them are created with line feeds, which scroll at the screen bottom.
        """
        if to_row < from_row:
            out.append(f"\x1b[{from_row - to_row}A")
            return
        if to_row == from_row:
            return

        existing_last = max(self._rows_drawn - 1, from_row)
        within = min(to_row, existing_last) - from_row
        if within > 0:
            out.append(f"\x1b[{within}B")
        beyond = to_row - max(existing_last, from_row)
        if beyond > 0:
            out.append("\n" * beyond)
