# src/retro_chip8/arch/chip8/cpu.py
"""
CHIP-8 CPUエミュレーションの中心モジュール。
"""
import random
from functools import partial
from typing import Callable, Dict, List, Optional, Tuple

from retro_chip8.core.snapshot import Operation
from retro_chip8.core.state import RegisterLayoutInfo, RegisterInfo
from retro_chip8.core.cpu import AbstractCpu
from retro_chip8.transport.bus import Bus
from retro_chip8.devices.graphics import Graphics
from retro_chip8.devices.display import Display, NullDisplay
from retro_chip8.devices.keypad import Keypad, NullKeypad
from retro_chip8.loader.loader import ProgramLoader
from retro_chip8.arch.chip8.state import Chip8CpuState, PROGRAM_START, STACK_DEPTH, REGISTER_COUNT
from retro_chip8.arch.chip8.font import FONT_ADDRESS, FONT_SET
from retro_chip8.arch.chip8.instructions import decode_opcode, execute_instruction, Peripherals
from retro_chip8.arch.chip8 import disassembler

# @intent:responsibility CHIP-8 CPUの具体的なエミュレーションロジック（フェッチ、デコード、実行）を提供します。
class Chip8Cpu(AbstractCpu):
    """
    CHIP-8 CPUをエミュレートするクラス。

    ディスプレイ、キーパッド、乱数源は構築時に注入されます。省略した場合は
    インスタンスごとにヘッドレス用の実装（NullDisplay, NullKeypad）と、
    一度だけシードされた乱数生成器が使用されます。
    """
    # @intent:pre-condition busはフォント領域とプログラム領域をカバーするRAMを持つ必要があります。
    def __init__(
        self,
        bus: Bus,
        graphics: Optional[Graphics] = None,
        display: Optional[Display] = None,
        keypad: Optional[Keypad] = None,
        random_byte: Optional[Callable[[], int]] = None,
        program_start: int = PROGRAM_START,
        stack_depth: int = STACK_DEPTH,
    ):
        self._program_start = program_start
        self._stack_depth = stack_depth
        super().__init__(bus)

        if random_byte is None:
            rng = random.Random()
            random_byte = partial(rng.getrandbits, 8)

        self._peripherals = Peripherals(
            graphics=graphics if graphics is not None else Graphics(),
            display=display if display is not None else NullDisplay(),
            keypad=keypad if keypad is not None else NullKeypad(),
            random_byte=random_byte,
        )
        self._load_font()

    # @intent:responsibility CHIP-8の初期状態を生成します。PCはプログラム開始アドレスを指します。
    def _create_initial_state(self) -> Chip8CpuState:
        return Chip8CpuState(pc=self._program_start, stack=[0] * self._stack_depth)

    # @intent:responsibility フォントセットをアドレス0へコピーします。CPUの生存期間中に一度だけ呼ばれます。
    def _load_font(self) -> None:
        self._bus.load_block(FONT_ADDRESS, FONT_SET)

    @property
    def graphics(self) -> Graphics:
        return self._peripherals.graphics

    @property
    def display(self) -> Display:
        return self._peripherals.display

    @property
    def keypad(self) -> Keypad:
        return self._peripherals.keypad

    @property
    def program_start(self) -> int:
        return self._program_start

    # @intent:responsibility プログラムのバイト列をプログラム開始アドレスからロードします。
    # @intent:post-condition 収まらない場合はOutOfMemoryErrorとなり、メモリは変更されません。
    def load(self, data: bytes) -> int:
        return ProgramLoader().load_bytes(self._bus, data, self._program_start)

    # @intent:responsibility CPUの状態とフレームバッファをリセットします。メモリ（プログラム・フォント）は保持されます。
    def reset(self) -> None:
        super().reset()
        self._peripherals.graphics.clear()

    # @intent:responsibility PCから2バイトを読み、ビッグエンディアンの16bitオペコードを組み立てます。
    def _fetch(self) -> int:
        pc = self._state.pc
        return (self._bus.read(pc) << 8) | self._bus.read(pc + 1)

    def _decode(self, opcode: int) -> Operation:
        return decode_opcode(opcode)

    def _execute(self, operation: Operation) -> None:
        execute_instruction(operation, self._state, self._bus, self._peripherals)

    # @intent:responsibility 遅延タイマーとサウンドタイマーを1カウント減らします。実行ループが60Hzで呼び出します。
    def tick_timers(self) -> None:
        s = self._state
        if s.delay_timer > 0:
            s.delay_timer -= 1
        if s.sound_timer > 0:
            s.sound_timer -= 1

    # @intent:responsibility UI・トレース表示用に、現在のレジスタ値を辞書形式で提供します。
    def get_register_map(self) -> Dict[str, int]:
        s = self._state
        registers = {f"V{index:X}": s.v[index] for index in range(REGISTER_COUNT)}
        registers.update({
            "I": s.i, "PC": s.pc, "SP": s.sp, "DT": s.delay_timer, "ST": s.sound_timer
        })
        return registers

    # @intent:responsibility UIのレジスタ表示レイアウト（グループ化）を定義します。
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [
            RegisterLayoutInfo("General", [RegisterInfo(f"V{index:X}", 8) for index in range(REGISTER_COUNT)]),
            RegisterLayoutInfo("Pointers", [
                RegisterInfo("I", 16), RegisterInfo("PC", 16), RegisterInfo("SP", 8)
            ]),
            RegisterLayoutInfo("Timers", [
                RegisterInfo("DT", 8), RegisterInfo("ST", 8)
            ]),
        ]

    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        return disassembler.disassemble(self._bus, start_addr, length)

    def __str__(self) -> str:
        s = self._state
        v = " ".join(f"{value:02X}" for value in s.v)
        stack = " ".join(f"{value:03X}" for value in s.stack[:s.sp])
        return f"I=0x{s.i:04X} PC=0x{s.pc:04X} V=[{v}] SP=0x{s.sp:02X} stack=[{stack}]"
