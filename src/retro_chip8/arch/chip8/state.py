# src/retro_chip8/arch/chip8/state.py
"""
CHIP-8 CPU固有の状態定義。
"""
from dataclasses import dataclass, field
from typing import List

from retro_chip8.core.state import CpuState
from retro_chip8.common.errors import StackOverflowError, StackUnderflowError

# @intent:constant CHIP-8のレジスタファイルとスタックの寸法を定義します。
REGISTER_COUNT = 16
FLAG_REGISTER = 0xF
STACK_DEPTH = 16
PROGRAM_START = 0x200

# @intent:responsibility CHIP-8の全てのレジスタ（V0-VF, I, PC, SP）、コールスタック、タイマーを保持します。
@dataclass
class Chip8CpuState(CpuState):
    """
    CHIP-8 CPUのレジスタ状態を保持するデータクラス。
    `sp` はスタック上の次の空きスロットのインデックスです。
    """
    pc: int = PROGRAM_START
    v: List[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)  # V0-VF
    i: int = 0x0000  # Address Register
    stack: List[int] = field(default_factory=lambda: [0] * STACK_DEPTH)
    delay_timer: int = 0x00
    sound_timer: int = 0x00

    # @intent:accessor キャリー/ボロー/衝突フラグを兼ねるVFレジスタへのアクセスを提供します。
    @property
    def vf(self) -> int:
        return self.v[FLAG_REGISTER]

    @vf.setter
    def vf(self, value: int) -> None:
        self.v[FLAG_REGISTER] = value & 0xFF

    @property
    def stack_depth(self) -> int:
        return len(self.stack)

    # @intent:responsibility 現在のスロットにアドレスを格納してからSPをインクリメントします。
    # @intent:pre-condition SPがスタック容量未満である必要があります。超過はStackOverflowErrorです。
    def push(self, address: int) -> None:
        if self.sp >= len(self.stack):
            raise StackOverflowError(len(self.stack))
        self.stack[self.sp] = address & 0xFFFF
        self.sp += 1

    # @intent:responsibility 最上位の使用中スロットを読み出してからSPをデクリメントします。
    def pop(self) -> int:
        if self.sp <= 0:
            raise StackUnderflowError()
        address = self.stack[self.sp - 1]
        self.sp -= 1
        return address
