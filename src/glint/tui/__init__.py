"""glint.tui: raw-mode terminal input and differential inline rendering."""

# Frame buffer
from glint.tui.frame_buffer import FrameBuffer, FrameOp, FrameOpKind

# Keybindings
from glint.tui.keybindings import (
    CHECKLIST_ACTIONS,
    DEFAULT_CHECKLIST_KEYBINDINGS,
    ChecklistAction,
    ChecklistKeybindingsConfig,
    ChecklistKeybindingsManager,
)

# Keyboard input handling
from glint.tui.keys import KeyId, matches_key, normalize_key_id, parse_key

# Input buffering
from glint.tui.stdin_buffer import StdinBuffer

# Styles
from glint.tui.style import RESET, Style

# Terminal interface and implementation
from glint.tui.terminal import ProcessTerminal, Terminal

# Utilities
from glint.tui.utils import truncate_to_width, visible_width

__all__ = [
    # Frame buffer
    "FrameBuffer",
    "FrameOp",
    "FrameOpKind",
    # Keybindings
    "CHECKLIST_ACTIONS",
    "DEFAULT_CHECKLIST_KEYBINDINGS",
    "ChecklistAction",
    "ChecklistKeybindingsConfig",
    "ChecklistKeybindingsManager",
    # Keys
    "KeyId",
    "matches_key",
    "normalize_key_id",
    "parse_key",
    # Stdin buffer
    "StdinBuffer",
    # Styles
    "RESET",
    "Style",
    # Terminal
    "ProcessTerminal",
    "Terminal",
    # Utilities
    "truncate_to_width",
    "visible_width",
]
