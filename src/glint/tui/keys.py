"""Keyboard input parsing for raw-mode terminals.

Turns one complete input sequence (as produced by
:class:`glint.tui.stdin_buffer.StdinBuffer`) into a key identifier such as
``"up"``, ``"ctrl+c"``, ``"space"`` or ``"d"``.  Identifiers use the same
``modifier+key`` format that :mod:`glint.tui.keybindings` is configured with.
"""

from __future__ import annotations

KeyId = str


MODIFIERS: dict[str, int] = {
    "shift": 1,
    "alt": 2,
    "ctrl": 4,
}

# Unmodified escape sequences (CSI and SS3 forms) -> key names
LEGACY_KEY_SEQUENCES: dict[str, str] = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1b[H": "home",
    "\x1b[F": "end",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\x1bOH": "home",
    "\x1bOF": "end",
    "\x1b[1~": "home",
    "\x1b[3~": "delete",
    "\x1b[4~": "end",
    "\x1b[5~": "pageUp",
    "\x1b[6~": "pageDown",
}

# xterm "CSI 1;<mod> X" arrows; <mod> is 1 + modifier bitmask
_MODIFIED_ARROW_FINALS: dict[str, str] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
}


def _modifier_prefix(bits: int) -> str:
    prefix = ""
    if bits & MODIFIERS["ctrl"]:
        prefix += "ctrl+"
    if bits & MODIFIERS["shift"]:
        prefix += "shift+"
    if bits & MODIFIERS["alt"]:
        prefix += "alt+"
    return prefix


def normalize_key_id(key_id: str) -> KeyId:
    """Canonicalise a key id: lowercase modifiers in ctrl, shift, alt order."""
    parts = key_id.split("+")
    bits = 0
    key_parts: list[str] = []
    for part in parts:
        lower = part.lower()
        if lower in MODIFIERS and len(parts) > 1:
            bits |= MODIFIERS[lower]
        else:
            key_parts.append(part)
    key = "+".join(key_parts)
    if key.lower() in ("esc", "return"):
        key = "escape" if key.lower() == "esc" else "enter"
    elif len(key) > 1 and key not in ("pageUp", "pageDown"):
        key = key.lower()
    return _modifier_prefix(bits) + key


def parse_key(data: str) -> KeyId | None:
    """Parse one raw input sequence and return its key identifier, or ``None``."""
    if not data:
        return None

    if data in LEGACY_KEY_SEQUENCES:
        return LEGACY_KEY_SEQUENCES[data]

    if data.startswith("\x1b[1;") and len(data) == 6 and data[-1] in _MODIFIED_ARROW_FINALS:
        mod = data[4]
        if mod.isdigit() and int(mod) > 1:
            return _modifier_prefix(int(mod) - 1) + _MODIFIED_ARROW_FINALS[data[-1]]
        return None

    if data == "\x1b":
        return "escape"
    if data in ("\r", "\n"):
        return "enter"
    if data == "\t":
        return "tab"
    if data == " ":
        return "space"
    if data in ("\x7f", "\x08"):
        return "backspace"
    if data == "\x1b[Z":
        return "shift+tab"

    if len(data) == 1 and 1 <= ord(data) <= 26:
        return "ctrl+" + chr(ord(data) + ord("a") - 1)

    # Alt is sent as an ESC prefix
    if len(data) == 2 and data[0] == "\x1b":
        inner = parse_key(data[1])
        if inner is None or inner.startswith("alt+"):
            return None
        if inner.startswith("ctrl+"):
            return "ctrl+alt+" + inner[len("ctrl+") :]
        return "alt+" + inner

    if len(data) == 1 and data.isprintable():
        return data

    return None


def matches_key(data: str, key_id: KeyId) -> bool:
    """Return ``True`` if raw input *data* is the key named by *key_id*."""
    parsed = parse_key(data)
    return parsed is not None and parsed == normalize_key_id(key_id)
