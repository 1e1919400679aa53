# retro_chip8/core/state.py
"""
CPU状態と、その表示レイアウトの記述子。

アーキテクチャ固有の状態（CHIP-8ではV0-VF, I, タイマー）は CpuState を継承して追加します。
"""
from dataclasses import dataclass
from typing import List, NamedTuple

# @intent:responsibility 全アーキテクチャに共通するPCとSPを保持します。
@dataclass
class CpuState:
    pc: int = 0x0000  # 次に実行する命令のアドレス
    sp: int = 0x0000  # コールスタックの使用中スロット数

    # @intent:responsibility PCを指定バイト数だけ進めます。PCは16bitで折り返されます。
    def advance(self, length: int) -> None:
        self.pc = (self.pc + length) & 0xFFFF

# @intent:data_structure 単一のレジスタの表示定義。表示桁数は (width + 3) // 4 です。
class RegisterInfo(NamedTuple):
    name: str
    width: int

# @intent:data_structure 関連するレジスタ（例: "General", "Timers"）をまとめた表示グループ。
class RegisterLayoutInfo(NamedTuple):
    group_name: str
    registers: List[RegisterInfo]
