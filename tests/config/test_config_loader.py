# tests/config/test_config_loader.py
"""
retro_chip8.config.loader / modelsモジュールの単体テスト。
"""
import pytest
import yaml

from retro_chip8.config.loader import ConfigLoader
from retro_chip8.config.models import MachineConfig, DEFAULT_KEYMAP
from retro_chip8.common.errors import ConfigError

# @intent:test_suite YAML構成の読み込みと値の検証を確認します。

def test_defaults():
    config = MachineConfig().validate()
    assert config.clock_hz == 60
    assert config.timer_hz == 60
    assert config.stack_depth == 16
    assert config.memory.size == 0x1000
    assert config.memory.program_start == 0x200
    assert config.display.backend == "qt"
    assert config.keypad.quit_key == "0"
    assert config.keypad.keymap == DEFAULT_KEYMAP

def test_default_keymap_is_not_shared():
    first = MachineConfig()
    first.keypad.keymap["p"] = 0x1
    assert "p" not in MachineConfig().keypad.keymap

def test_load_from_file(tmp_path):
    path = tmp_path / "machine.yaml"
    path.write_text(
        """
clock_hz: 500
seed: 42
memory:
  size: 0x1000
  program_start: "0x200"
display:
  backend: text
  scale: 4
keypad:
  quit_key: p
  keymap:
    x: 0
    w: 5
"""
    )
    config = ConfigLoader().load_from_file(str(path))
    assert config.clock_hz == 500
    assert config.seed == 42
    assert config.memory.program_start == 0x200
    assert config.display.backend == "text"
    assert config.display.scale == 4
    assert config.keypad.quit_key == "p"
    assert config.keypad.keymap == {"x": 0x0, "w": 0x5}

def test_empty_file_uses_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    config = ConfigLoader().load_from_file(str(path))
    assert config.clock_hz == 60

def test_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="could not read config"):
        ConfigLoader().load_from_file(str(tmp_path / "missing.yaml"))

def test_invalid_yaml(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("clock_hz: [60\n")
    with pytest.raises(ConfigError, match="invalid YAML"):
        ConfigLoader().load_from_file(str(path))

@pytest.mark.parametrize("data, message", [
    ({"clock_hz": 0}, "clock_hz must be positive"),
    ({"timer_hz": -1}, "timer_hz must be positive"),
    ({"stack_depth": 0}, "stack_depth must be positive"),
    ({"memory": {"program_start": 0x1000}}, "must lie inside memory"),
    ({"display": {"backend": "sdl"}}, "unknown display backend"),
    ({"display": {"scale": 0}}, "scale must be positive"),
    ({"keypad": {"keymap": {"q": 0x10}}}, "outside of 0x0-0xF"),
    ({"keypad": {"quit_key": "q"}}, "also mapped"),
    ({"clock_hz": "fast"}, "invalid integer format"),
    ({"clock_hz": True}, "invalid integer format"),
])
def test_invalid_values(data, message):
    with pytest.raises(ConfigError, match=message):
        ConfigLoader().parse(data)

def test_root_must_be_mapping():
    with pytest.raises(ConfigError):
        ConfigLoader().parse(yaml.safe_load("- 1\n- 2\n"))

def test_bundled_default_config_matches_defaults():
    from pathlib import Path
    path = Path(__file__).resolve().parents[2] / "configs" / "default.yaml"
    config = ConfigLoader().load_from_file(str(path))
    assert config == MachineConfig()
