"""Configuration for glint.

Looked up, first match wins, in ``<repo_root>/glint.json`` and then
``$GLINT_CONFIG_DIR/config.json`` (``~/.glint/config.json`` by default).
Keys are camelCase on disk::

    {
      "figletFile": "fonts/big.flf",
      "maxRows": 15,
      "pager": ["less", "-R"],
      "keybindings": {"focusUp": ["up", "k"], "focusDown": ["down", "j"]}
    }
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from glint.figlet import Font, default_font
from glint.git import DEFAULT_PAGER
from glint.tui.keybindings import CHECKLIST_ACTIONS, ChecklistKeybindingsConfig

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "glint.json"
DEFAULT_MAX_ROWS = 15


@dataclass
class Config:
    figlet_file: str | None = None
    max_rows: int = DEFAULT_MAX_ROWS
    pager: list[str] = field(default_factory=lambda: list(DEFAULT_PAGER))
    keybindings: ChecklistKeybindingsConfig = field(default_factory=dict)
    # Directory relative font paths are resolved against
    base_dir: Path | None = None

    def load_font(self) -> Font:
        """Return the configured banner font, or the built-in one.

        Raises ``OSError`` or :class:`glint.figlet.FontError` when the
        configured file is missing or invalid.
        """
        if self.figlet_file is None:
            return default_font()
        path = Path(self.figlet_file).expanduser()
        if not path.is_absolute() and self.base_dir is not None:
            path = self.base_dir / path
        return Font.from_file(path)


def config_from_dict(data: dict, base_dir: Path | None = None) -> Config:
    """Deserialize a Config from a JSON-compatible dict."""
    config = Config(base_dir=base_dir)

    figlet_file = data.get("figletFile")
    if figlet_file is not None:
        config.figlet_file = str(figlet_file)

    max_rows = data.get("maxRows")
    if max_rows is not None:
        # The overflow summary needs room for at least one file row
        if not isinstance(max_rows, int) or max_rows < 4:
            raise ValueError(f"maxRows must be an integer >= 4, got {max_rows!r}")
        config.max_rows = max_rows

    pager = data.get("pager")
    if pager is not None:
        config.pager = _parse_pager(pager)

    keybindings = data.get("keybindings") or {}
    if not isinstance(keybindings, dict):
        raise ValueError("keybindings must be an object")
    for action, keys in keybindings.items():
        if action not in CHECKLIST_ACTIONS:
            raise ValueError(f"unknown keybinding action {action!r}")
        if not _is_key_list(keys):
            raise ValueError(
                f"keybinding {action!r} must be a key or a list of keys, got {keys!r}"
            )
    config.keybindings = dict(keybindings)

    return config


def _parse_pager(value) -> list[str]:
    if isinstance(value, str):
        command = value.split()
    elif isinstance(value, list) and all(isinstance(arg, str) and arg for arg in value):
        command = list(value)
    else:
        raise ValueError(f"pager must be a command string or list of strings, got {value!r}")
    if not command:
        raise ValueError("pager must not be empty")
    return command


def _is_key_list(keys) -> bool:
    if isinstance(keys, str):
        return bool(keys)
    return isinstance(keys, list) and all(isinstance(k, str) and k for k in keys)


def config_to_dict(config: Config) -> dict:
    """Serialize a Config to a JSON-compatible dict."""
    return {
        "figletFile": config.figlet_file,
        "maxRows": config.max_rows,
        "pager": list(config.pager),
        "keybindings": dict(config.keybindings),
    }


def _get_config_dir() -> Path:
    return Path(os.environ.get("GLINT_CONFIG_DIR", Path.home() / ".glint"))


def config_paths(repo_root: Path | None = None) -> list[Path]:
    """Candidate config files in lookup order."""
    paths: list[Path] = []
    if repo_root is not None:
        paths.append(repo_root / CONFIG_FILE_NAME)
    paths.append(_get_config_dir() / "config.json")
    return paths


def load_config(repo_root: Path | None = None, path: Path | None = None) -> Config:
    """Load the first existing config file, falling back to defaults.

    An explicit *path* skips the lookup.  Unreadable or invalid files are
    reported with a warning and ignored.
    """
    candidates = [path] if path is not None else config_paths(repo_root)
    for candidate in candidates:
        if not candidate.exists():
            continue
        try:
            data = json.loads(candidate.read_text())
            if not isinstance(data, dict):
                raise ValueError("top-level value must be an object")
            config = config_from_dict(data, base_dir=candidate.parent)
        except (OSError, ValueError) as e:
            logger.warning("Error reading config %s: %s", candidate, e)
            return Config()
        logger.info("Loaded config from %s", candidate)
        return config
    return Config()
