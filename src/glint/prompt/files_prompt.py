"""Interactive checklist for choosing which changed files to commit.

The prompt is a small state machine driven by one key per iteration:
it reads a key from the terminal, applies the bound action to the
selection state, and redraws the checklist through a
:class:`~glint.tui.frame_buffer.FrameBuffer`.  Keys without a binding are
ignored outright and do not cause a redraw.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from typing import Callable, Protocol, Sequence, Union

from glint.git import GitError, GitStatusItem, GitStatusType
from glint.tui import style
from glint.tui.frame_buffer import FrameBuffer
from glint.tui.keybindings import (
    ChecklistAction,
    ChecklistKeybindingsConfig,
    ChecklistKeybindingsManager,
)
from glint.tui.style import RESET, Style
from glint.tui.terminal import Terminal
from glint.tui.utils import truncate_to_width, visible_width

logger = logging.getLogger(__name__)

BANNER_TEXT = "<glint>"
INSTRUCTIONS = "Toggle files to commit (with <space>, or tap 'd' for diff):"
SELECT_ALL_LABEL = "<all>"
DEFAULT_MAX_ROWS = 15

CHECKED = "☑"
UNCHECKED = "□"

DiffViewer = Callable[[list[str]], None]


class Banner(Protocol):
    """Produces a fixed-height block of text for a label."""

    def render(self, text: str, style: Style | None = None) -> list[str]: ...


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Terminated:
    """The user pressed the abort combination."""


@dataclass(frozen=True)
class Escaped:
    """The user cancelled the prompt."""


@dataclass(frozen=True)
class Submitted:
    """The user confirmed; *files* are the checked names in status order."""

    files: list[str]


FilesPromptResult = Union[Terminated, Escaped, Submitted]


# ---------------------------------------------------------------------------
# Rows and selection
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SelectAllRow:
    """The virtual first row that toggles every file."""


@dataclass(frozen=True)
class FileRow:
    """A real row; *index* points into the file list."""

    index: int


Row = Union[SelectAllRow, FileRow]


@dataclass
class SelectionState:
    checked: list[bool]
    focused: int = 0

    @classmethod
    def empty(cls, count: int) -> SelectionState:
        return cls(checked=[False] * count)

    @property
    def row_count(self) -> int:
        """Number of real rows."""
        return len(self.checked)

    def focused_row(self) -> Row:
        return row_at(self.focused)

    def all_checked(self) -> bool:
        return all(self.checked)

    def is_checked(self, row: Row) -> bool:
        if isinstance(row, SelectAllRow):
            return self.all_checked()
        return self.checked[row.index]

    def toggle(self) -> None:
        """Toggle the focused row.

        On the select-all row, everything becomes checked unless everything
        already is, in which case everything is cleared.
        """
        row = self.focused_row()
        if isinstance(row, SelectAllRow):
            set_to = not self.all_checked()
            self.checked = [set_to] * len(self.checked)
        else:
            self.checked[row.index] = not self.checked[row.index]

    def focus_up(self) -> None:
        self.focused = max(self.focused - 1, 0)

    def focus_down(self) -> None:
        self.focused = min(self.focused + 1, self.row_count)

    def selected(self, names: Sequence[str]) -> list[str]:
        return [name for name, checked in zip(names, self.checked) if checked]


def row_at(position: int) -> Row:
    """Map a display position (0 = select-all) to a row."""
    if position == 0:
        return SelectAllRow()
    return FileRow(position - 1)


def visible_file_rows(total: int, max_rows: int) -> int:
    """How many real rows fit under *max_rows*.

    Over the cap three rows are given up, which leaves room for the
    select-all row and the "and K more" summary.
    """
    return max_rows - 3 if total > max_rows else total


# ---------------------------------------------------------------------------
# Theme
# ---------------------------------------------------------------------------


@dataclass
class FilesPromptTheme:
    focused: Style = style.BLUE
    default: Style = style.WHITE
    header: Style = style.MAGENTA
    status_styles: dict[GitStatusType, tuple[str, Style]] = field(
        default_factory=lambda: {
            GitStatusType.UNTRACKED: ("+", style.rgb(96, 218, 177)),
            GitStatusType.MODIFIED: ("•", style.rgb(96, 112, 218)),
            GitStatusType.DELETED: ("-", style.rgb(218, 96, 118)),
        }
    )

    def status_glyph(self, status: GitStatusType) -> str:
        entry = self.status_styles.get(status)
        if entry is None:
            return self.default(" ")
        glyph, glyph_style = entry
        return glyph_style(glyph)


# ---------------------------------------------------------------------------
# Prompt
# ---------------------------------------------------------------------------


class FilesPrompt:
    """Checklist over the files reported by ``git status``."""

    def __init__(
        self,
        items: Sequence[GitStatusItem],
        *,
        terminal: Terminal,
        banner: Banner,
        diff_viewer: DiffViewer,
        theme: FilesPromptTheme | None = None,
        max_rows: int = DEFAULT_MAX_ROWS,
        keybindings: ChecklistKeybindingsConfig | None = None,
    ) -> None:
        self._items = list(items)
        self._terminal = terminal
        self._banner = banner
        self._diff_viewer = diff_viewer
        self._theme = theme or FilesPromptTheme()
        self._max_rows = max_rows
        self._keybindings = ChecklistKeybindingsManager(keybindings)
        self.state = SelectionState.empty(len(self._items))
        self._buffer: FrameBuffer | None = None

    @property
    def file_names(self) -> list[str]:
        return [item.file_name for item in self._items]

    def run(self) -> FilesPromptResult:
        """Show the checklist and loop until the user submits or leaves."""
        buffer = FrameBuffer(self._terminal)
        self._buffer = buffer
        self._terminal.start()
        try:
            self.draw(buffer)
            while True:
                data = self._terminal.read()
                action = self._keybindings.action_for(data)
                if action is None:
                    continue
                outcome = self.handle_action(action)
                if outcome is not None:
                    logger.debug("checklist finished: %r", outcome)
                    return outcome
                self.draw(buffer)
        finally:
            try:
                buffer.finish()
            finally:
                self._terminal.stop()

    def handle_action(self, action: ChecklistAction) -> FilesPromptResult | None:
        """Apply *action* to the state; return a result if the prompt is done."""
        if action == "terminate":
            return Terminated()
        if action == "cancel":
            return Escaped()
        if action == "submit":
            return Submitted(self.state.selected(self.file_names))
        if action == "toggle":
            self.state.toggle()
        elif action == "focusUp":
            self.state.focus_up()
        elif action == "focusDown":
            self.state.focus_down()
        elif action == "diff":
            self._show_diff()
        return None

    def _show_diff(self) -> None:
        row = self.state.focused_row()
        files = [] if isinstance(row, SelectAllRow) else [self._items[row.index].file_name]
        try:
            with self._terminal.suspend():
                self._diff_viewer(files)
        except (OSError, GitError, subprocess.SubprocessError):
            logger.debug("diff viewer failed for %s", files or "<all>", exc_info=True)
        finally:
            # The viewer may have drawn over the checklist
            if self._buffer is not None:
                self._buffer.invalidate()

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def draw(self, buffer: FrameBuffer) -> None:
        """Rebuild the whole checklist and flush the differences."""
        width = self._terminal.columns
        theme = self._theme

        def push(line: str) -> None:
            buffer.append_line(truncate_to_width(line, width, "") + RESET)

        buffer.begin()

        for line in self._banner.render(BANNER_TEXT, theme.header):
            push(line)
        push("")

        push(INSTRUCTIONS)
        push("-" * visible_width(INSTRUCTIONS))

        y_offset = buffer.pending_line_count() + self.state.focused

        total = len(self._items)
        shown = visible_file_rows(total, self._max_rows)
        for position in range(shown + 1):
            push(self._format_row(row_at(position), position == self.state.focused))

        if shown < total:
            push(f"and {total - shown} more")

        buffer.set_cursor_target(y_offset, 0)
        buffer.render()
        buffer.flush()

    def _format_row(self, row: Row, focused: bool) -> str:
        theme = self._theme
        line_style = theme.focused if focused else theme.default
        checkbox = line_style(CHECKED if self.state.is_checked(row) else UNCHECKED)

        if isinstance(row, SelectAllRow):
            name = SELECT_ALL_LABEL
            status = GitStatusType.NONE
        else:
            item = self._items[row.index]
            name = item.file_name
            status = item.status

        return f"{checkbox} {theme.status_glyph(status)} {line_style(name)}"
