"""Interactive prompts built on glint.tui."""

from glint.prompt.files_prompt import (
    Escaped,
    FileRow,
    FilesPrompt,
    FilesPromptResult,
    FilesPromptTheme,
    SelectAllRow,
    SelectionState,
    Submitted,
    Terminated,
)

__all__ = [
    "Escaped",
    "FileRow",
    "FilesPrompt",
    "FilesPromptResult",
    "FilesPromptTheme",
    "SelectAllRow",
    "SelectionState",
    "Submitted",
    "Terminated",
]
