# retro_chip8/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、1命令実行後のCPUとバスの状態を記録した不変のデータ構造を定義します。
トレースログや実行ループの呼び出し元への情報提供に用いる責務を負います。
"""
from dataclasses import dataclass, field
from typing import List, Optional

from retro_chip8.core.state import CpuState
from retro_chip8.transport.bus import BusAccess


# @intent:responsibility 実行された命令の詳細を記録します。
@dataclass(frozen=True)
class Operation:
    """
    実行された命令の詳細（HEX、ニーモニック、オペランド）を記録するデータクラス。
    """
    opcode_hex: str # 例: "A2F0"
    mnemonic: str # 例: "LD"
    operands: List[str] = field(default_factory=list) # 例: ["I", "$2F0"]
    operand_bytes: List[int] = field(default_factory=list) # 生のオペランド値
    cycle_count: int = 1 # CHIP-8では1命令=1ティック
    length: int = 2 # 命令のバイト長

    # @intent:accessor HEX文字列から数値のオペコードを復元します。
    @property
    def opcode(self) -> int:
        return int(self.opcode_hex, 16)

    # @intent:responsibility ニーモニックとオペランドを1行のアセンブリ表記に整形します。
    def to_assembly(self) -> str:
        if self.operands:
            return f"{self.mnemonic} " + ", ".join(self.operands)
        return self.mnemonic


# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True)
class Metadata:
    cycle_count: int # 累計実行命令数
    address: int = 0 # 実行した命令のアドレス
    disassembly: Optional[str] = None # 例: "CALL $300"


# @intent:responsibility ある一時点におけるCPUとバスの状態を不変に記録します。
@dataclass(frozen=True)
class Snapshot:
    """
    1命令実行直後のCPUとバスの状態を記録した不変のデータ構造。
    `state` は実行時点のコピーであり、その後のCPUの変化の影響を受けません。
    """
    state: CpuState
    operation: Operation
    metadata: Metadata
    bus_activity: List[BusAccess] = field(default_factory=list)

    @property
    def opcode(self) -> int:
        return self.operation.opcode
