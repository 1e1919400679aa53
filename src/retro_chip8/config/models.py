from dataclasses import dataclass, field
from typing import Dict, Optional

from retro_chip8.common.errors import ConfigError

DISPLAY_BACKENDS = ("qt", "text", "null")

# @intent:constant 標準的なQWERTYキーボードの4x4ブロックを16進キーパッドに対応付けます。
#
#   1 2 3 4        1 2 3 C
#   Q W E R   ->   4 5 6 D
#   A S D F        7 8 9 E
#   Z X C V        A 0 B F
DEFAULT_KEYMAP = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "q": 0x4, "w": 0x5, "e": 0x6, "r": 0xD,
    "a": 0x7, "s": 0x8, "d": 0x9, "f": 0xE,
    "z": 0xA, "x": 0x0, "c": 0xB, "v": 0xF,
}

@dataclass
class MemoryConfig:
    size: int = 0x1000
    program_start: int = 0x200

@dataclass
class DisplayConfig:
    backend: str = "qt"  # "qt", "text", "null"
    scale: int = 10

@dataclass
class KeypadConfig:
    quit_key: str = "0"
    keymap: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_KEYMAP))

@dataclass
class MachineConfig:
    clock_hz: int = 60
    timer_hz: int = 60
    stack_depth: int = 16
    seed: Optional[int] = None
    memory: MemoryConfig = field(default_factory=MemoryConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    keypad: KeypadConfig = field(default_factory=KeypadConfig)

    # @intent:responsibility 構成値の整合性を検証します。不正な値は実行前にConfigErrorとして拒否されます。
    def validate(self) -> "MachineConfig":
        if self.clock_hz <= 0:
            raise ConfigError(f"chip8: clock_hz must be positive, got {self.clock_hz}")
        if self.timer_hz <= 0:
            raise ConfigError(f"chip8: timer_hz must be positive, got {self.timer_hz}")
        if self.stack_depth <= 0:
            raise ConfigError(f"chip8: stack_depth must be positive, got {self.stack_depth}")
        if not 0 < self.memory.program_start < self.memory.size:
            raise ConfigError(
                f"chip8: program_start 0x{self.memory.program_start:X} must lie inside memory of size 0x{self.memory.size:X}"
            )
        if self.display.backend not in DISPLAY_BACKENDS:
            raise ConfigError(f"chip8: unknown display backend '{self.display.backend}'")
        if self.display.scale <= 0:
            raise ConfigError(f"chip8: display scale must be positive, got {self.display.scale}")
        for name, key in self.keypad.keymap.items():
            if not 0 <= key <= 0xF:
                raise ConfigError(f"chip8: key '{name}' is mapped to 0x{key:X}, outside of 0x0-0xF")
        if self.keypad.quit_key in self.keypad.keymap:
            raise ConfigError(f"chip8: quit key '{self.keypad.quit_key}' is also mapped to a keypad key")
        return self
