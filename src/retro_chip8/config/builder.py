import logging
import random
from dataclasses import dataclass
from functools import partial
from typing import Callable, Optional

from retro_chip8.transport.bus import Bus, RAM
from retro_chip8.core.clock import Clock
from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.debugger.executor import Executor
from retro_chip8.devices.display import Display, NullDisplay, TextDisplay
from retro_chip8.devices.keypad import Keypad, NullKeypad, StreamKeypad
from .models import MachineConfig

logger = logging.getLogger(__name__)

# @intent:responsibility 構築済みの仮想マシン一式（バス、CPU、クロック、実行ループ）を保持します。
@dataclass
class Machine:
    bus: Bus
    cpu: Chip8Cpu
    clock: Clock
    executor: Executor

# @intent:responsibility システム構成（Config）に基づいて、Bus、RAM、CPU、周辺デバイスを生成・接続します。
# @intent:rationale プロセス全体で共有されるデフォルト値は持たず、呼び出しごとに新しいインスタンス一式を生成します。
class MachineBuilder:
    def build(
        self,
        config: MachineConfig,
        display: Optional[Display] = None,
        keypad: Optional[Keypad] = None,
        random_byte: Optional[Callable[[], int]] = None,
    ) -> Machine:
        config.validate()

        bus = Bus(address_space=config.memory.size)
        bus.register_device(0x000, config.memory.size - 1, RAM(config.memory.size))

        if display is None:
            display = self.create_display(config)
        if keypad is None:
            keypad = self.create_keypad(config)
        if random_byte is None:
            random_byte = self.create_random_source(config.seed)

        cpu = Chip8Cpu(
            bus,
            display=display,
            keypad=keypad,
            random_byte=random_byte,
            program_start=config.memory.program_start,
            stack_depth=config.stack_depth,
        )
        clock = Clock(config.clock_hz)
        executor = Executor(cpu, clock, timer_hz=config.timer_hz)
        logger.info(
            "built machine: %d bytes of memory, clock %d Hz, display '%s'",
            config.memory.size, config.clock_hz, config.display.backend,
        )
        return Machine(bus=bus, cpu=cpu, clock=clock, executor=executor)

    # @intent:responsibility 構成で指定されたディスプレイバックエンドを生成します。
    def create_display(self, config: MachineConfig) -> Display:
        backend = config.display.backend
        if backend == "null":
            return NullDisplay()
        if backend == "text":
            return TextDisplay()
        if backend == "qt":
            from retro_chip8.ui.display_view import QtDisplay
            return QtDisplay()
        raise ValueError(f"Unsupported display backend: {backend}")

    # @intent:responsibility 構成に応じたキーパッドを生成します。textは標準入力、nullは物理キーを持ちません。
    def create_keypad(self, config: MachineConfig) -> Keypad:
        if config.display.backend == "qt":
            from retro_chip8.ui.keypad import QtKeypad
            return QtKeypad(config.keypad.keymap, config.keypad.quit_key)
        if config.display.backend == "text":
            return StreamKeypad(config.keypad.keymap, config.keypad.quit_key)
        return NullKeypad()

    # @intent:responsibility RND命令用の乱数源を生成します。シードはプロセス開始時に一度だけ与えられます。
    def create_random_source(self, seed: Optional[int]) -> Callable[[], int]:
        rng = random.Random(seed)
        return partial(rng.getrandbits, 8)
