import yaml
from typing import Any, Dict

from retro_chip8.common.errors import ConfigError
from .models import MachineConfig, MemoryConfig, DisplayConfig, KeypadConfig, DEFAULT_KEYMAP

# @intent:responsibility YAML形式の構成ファイルを読み込み、検証済みのMachineConfigに変換します。
class ConfigLoader:
    def load_from_file(self, path: str) -> MachineConfig:
        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"chip8: could not read config {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"chip8: invalid YAML in config {path}: {e}") from e
        return self.parse(data or {})

    def parse(self, data: Dict[str, Any]) -> MachineConfig:
        if not isinstance(data, dict):
            raise ConfigError("chip8: config root must be a mapping")

        memory_data = data.get("memory", {})
        memory = MemoryConfig(
            size=self._parse_int(memory_data.get("size", 0x1000)),
            program_start=self._parse_int(memory_data.get("program_start", 0x200)),
        )

        display_data = data.get("display", {})
        display = DisplayConfig(
            backend=str(display_data.get("backend", "qt")),
            scale=self._parse_int(display_data.get("scale", 10)),
        )

        keypad_data = data.get("keypad", {})
        keymap = dict(DEFAULT_KEYMAP)
        if "keymap" in keypad_data:
            keymap = {str(name): self._parse_int(key) for name, key in keypad_data["keymap"].items()}
        keypad = KeypadConfig(
            quit_key=str(keypad_data.get("quit_key", "0")),
            keymap=keymap,
        )

        seed = data.get("seed")
        config = MachineConfig(
            clock_hz=self._parse_int(data.get("clock_hz", 60)),
            timer_hz=self._parse_int(data.get("timer_hz", 60)),
            stack_depth=self._parse_int(data.get("stack_depth", 16)),
            seed=self._parse_int(seed) if seed is not None else None,
            memory=memory,
            display=display,
            keypad=keypad,
        )
        return config.validate()

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ConfigError(f"chip8: invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            try:
                if value.lower().startswith("0x"):
                    return int(value, 16)
                return int(value)
            except ValueError:
                pass
        raise ConfigError(f"chip8: invalid integer format: {value}")
