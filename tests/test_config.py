"""Tests for glint.config -- JSON config loading."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from glint.config import (
    DEFAULT_MAX_ROWS,
    Config,
    config_from_dict,
    config_paths,
    config_to_dict,
    load_config,
)
from glint.figlet import FontError

from .test_figlet import font_lines


@pytest.fixture(autouse=True)
def config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    directory = tmp_path / "home-config"
    monkeypatch.setenv("GLINT_CONFIG_DIR", str(directory))
    return directory


def write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data))
    return path


# ---------------------------------------------------------------------------
# config_from_dict / config_to_dict
# ---------------------------------------------------------------------------


class TestConfigFromDict:
    def test_defaults(self) -> None:
        config = config_from_dict({})
        assert config.figlet_file is None
        assert config.max_rows == DEFAULT_MAX_ROWS
        assert config.pager == ["less", "-R"]
        assert config.keybindings == {}

    def test_all_fields(self) -> None:
        config = config_from_dict(
            {
                "figletFile": "big.flf",
                "maxRows": 10,
                "pager": ["more"],
                "keybindings": {"focusDown": ["down", "j"]},
            }
        )
        assert config.figlet_file == "big.flf"
        assert config.max_rows == 10
        assert config.pager == ["more"]
        assert config.keybindings == {"focusDown": ["down", "j"]}

    def test_pager_string_is_split(self) -> None:
        assert config_from_dict({"pager": "less -RS"}).pager == ["less", "-RS"]

    @pytest.mark.parametrize("value", [3, 0, "15", 2.5])
    def test_invalid_max_rows(self, value) -> None:
        with pytest.raises(ValueError, match="maxRows"):
            config_from_dict({"maxRows": value})

    @pytest.mark.parametrize("value", [5, [], "", [""], "   ", ["less", 5], {"cmd": "less"}])
    def test_invalid_pager(self, value) -> None:
        with pytest.raises(ValueError, match="pager"):
            config_from_dict({"pager": value})

    @pytest.mark.parametrize("keys", [5, None, "", ["up", 5], {"key": "up"}])
    def test_invalid_keybinding_value(self, keys) -> None:
        with pytest.raises(ValueError, match="keybinding 'toggle'"):
            config_from_dict({"keybindings": {"toggle": keys}})

    def test_keybindings_must_be_object(self) -> None:
        with pytest.raises(ValueError, match="keybindings"):
            config_from_dict({"keybindings": ["up"]})

    def test_unknown_keybinding_action(self) -> None:
        with pytest.raises(ValueError, match="unknown keybinding action"):
            config_from_dict({"keybindings": {"jump": "j"}})

    def test_to_dict_uses_camel_case(self) -> None:
        data = config_to_dict(Config(max_rows=8, pager=["more"]))
        assert data == {"figletFile": None, "maxRows": 8, "pager": ["more"], "keybindings": {}}
        assert config_from_dict(data).max_rows == 8


# ---------------------------------------------------------------------------
# load_config
# ---------------------------------------------------------------------------


class TestLoadConfig:
    def test_no_files_gives_defaults(self, tmp_path: Path) -> None:
        assert load_config(tmp_path) == Config()

    def test_lookup_order(self, tmp_path: Path, config_dir: Path) -> None:
        assert config_paths(tmp_path) == [tmp_path / "glint.json", config_dir / "config.json"]
        assert config_paths() == [config_dir / "config.json"]

    def test_repo_file_wins(self, tmp_path: Path, config_dir: Path) -> None:
        write_json(tmp_path / "glint.json", {"maxRows": 7})
        write_json(config_dir / "config.json", {"maxRows": 9})
        assert load_config(tmp_path).max_rows == 7

    def test_user_file_used_without_repo_file(self, tmp_path: Path, config_dir: Path) -> None:
        write_json(config_dir / "config.json", {"maxRows": 9})
        config = load_config(tmp_path)
        assert config.max_rows == 9
        assert config.base_dir == config_dir

    def test_explicit_path(self, tmp_path: Path) -> None:
        path = write_json(tmp_path / "custom.json", {"pager": "more"})
        write_json(tmp_path / "glint.json", {"pager": "less"})
        assert load_config(tmp_path, path).pager == ["more"]

    def test_invalid_json_warns_and_uses_defaults(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        (tmp_path / "glint.json").write_text("{not json")
        with caplog.at_level(logging.WARNING, logger="glint.config"):
            config = load_config(tmp_path)
        assert config == Config()
        assert "Error reading config" in caplog.text

    def test_invalid_values_warn_and_use_defaults(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        write_json(tmp_path / "glint.json", {"maxRows": 1})
        with caplog.at_level(logging.WARNING, logger="glint.config"):
            assert load_config(tmp_path) == Config()
        assert "maxRows" in caplog.text

    @pytest.mark.parametrize(
        "data", [{"pager": 5}, {"pager": []}, {"keybindings": {"toggle": 5}}]
    )
    def test_bad_value_types_warn_and_use_defaults(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture, data
    ) -> None:
        write_json(tmp_path / "glint.json", data)
        with caplog.at_level(logging.WARNING, logger="glint.config"):
            assert load_config(tmp_path) == Config()
        assert "Error reading config" in caplog.text

    def test_non_object_top_level(self, tmp_path: Path) -> None:
        write_json(tmp_path / "glint.json", [1, 2])
        assert load_config(tmp_path) == Config()


# ---------------------------------------------------------------------------
# Font loading
# ---------------------------------------------------------------------------


class TestLoadFont:
    def test_builtin_font_by_default(self) -> None:
        assert Config().load_font().height == 3

    def test_relative_to_config_file(self, tmp_path: Path) -> None:
        (tmp_path / "fonts").mkdir()
        (tmp_path / "fonts" / "two.flf").write_text("\n".join(font_lines()))
        write_json(tmp_path / "glint.json", {"figletFile": "fonts/two.flf"})
        font = load_config(tmp_path).load_font()
        assert font.height == 2

    def test_missing_font_file(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            Config(figlet_file="nope.flf", base_dir=tmp_path).load_font()

    def test_invalid_font_file(self, tmp_path: Path) -> None:
        (tmp_path / "bad.flf").write_text("not a font\n")
        with pytest.raises(FontError):
            Config(figlet_file=str(tmp_path / "bad.flf")).load_font()
