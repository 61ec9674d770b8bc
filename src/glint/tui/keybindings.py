"""Checklist keybindings manager."""

from __future__ import annotations

from typing import Literal, get_args

from glint.tui.keys import KeyId, matches_key

ChecklistAction = Literal[
    "terminate",
    "toggle",
    "diff",
    "submit",
    "cancel",
    "focusUp",
    "focusDown",
]

CHECKLIST_ACTIONS: tuple[ChecklistAction, ...] = get_args(ChecklistAction)

ChecklistKeybindingsConfig = dict[ChecklistAction, KeyId | list[KeyId]]

# Order matters: the first action whose keys match wins.
DEFAULT_CHECKLIST_KEYBINDINGS: dict[ChecklistAction, KeyId | list[KeyId]] = {
    "terminate": "ctrl+c",
    "toggle": "space",
    "diff": "d",
    "submit": "enter",
    "cancel": "escape",
    "focusUp": "up",
    "focusDown": "down",
}


class ChecklistKeybindingsManager:
    """Maps raw terminal input to checklist actions."""

    def __init__(
        self, config: ChecklistKeybindingsConfig | None = None
    ) -> None:
        self._action_to_keys: dict[ChecklistAction, list[KeyId]] = {}
        self._build_maps(config or {})

    def _build_maps(self, config: ChecklistKeybindingsConfig) -> None:
        self._action_to_keys.clear()

        for action, keys in DEFAULT_CHECKLIST_KEYBINDINGS.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

        for action, keys in config.items():
            if action not in self._action_to_keys:
                raise ValueError(f"Unknown checklist action: {action!r}")
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

    def matches(self, data: str, action: ChecklistAction) -> bool:
        """Check if input matches a specific action."""
        return any(matches_key(data, key) for key in self._action_to_keys.get(action, []))

    def action_for(self, data: str) -> ChecklistAction | None:
        """Return the action bound to *data*, or ``None`` for unbound input."""
        for action in self._action_to_keys:
            if self.matches(data, action):
                return action
        return None
