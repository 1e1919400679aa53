# retro_chip8/core/cpu.py
"""
Core Layer (抽象CPU)

命令サイクル（フェッチ → デコード → PC更新 → 実行 → スナップショット）の骨格を定義します。
個々の命令の意味はアーキテクチャ側（arch/chip8）が実装します。
"""
import copy
from abc import ABC, abstractmethod
from typing import Dict, List, Tuple

from retro_chip8.common.errors import QuitRequested
from retro_chip8.transport.bus import Bus
from retro_chip8.core.snapshot import Snapshot, Operation, Metadata
from retro_chip8.core.state import CpuState, RegisterLayoutInfo

# @intent:responsibility 命令サイクルの共通手順と、UI/トレース向けの問い合わせインターフェースを定義します。
class AbstractCpu(ABC):
    """
    バスに接続されたCPUの基底クラス。

    状態の変更は step() を駆動する単一のスレッドのみが行います。
    `get_state()` は実体を返すため、テストやUIから直接レジスタを書き換えられます。
    """
    def __init__(self, bus: Bus):
        self._bus = bus
        self._state: CpuState = self._create_initial_state()
        self._cycle_count: int = 0

    @property
    def bus(self) -> Bus:
        return self._bus

    @property
    def cycle_count(self) -> int:
        return self._cycle_count

    @abstractmethod
    def _create_initial_state(self) -> CpuState:
        pass

    # @intent:responsibility レジスタと実行命令数を初期状態に戻します。メモリには触れません。
    def reset(self) -> None:
        self._state = self._create_initial_state()
        self._cycle_count = 0

    def get_state(self) -> CpuState:
        return self._state

    # @intent:responsibility 保存しておいた状態のコピーでCPUの状態を置き換えます。
    def restore_state(self, state: CpuState) -> None:
        self._state = copy.deepcopy(state)

    # @intent:responsibility 現在のPCから命令語を読み出します。PCはここでは変更しません。
    @abstractmethod
    def _fetch(self) -> int:
        pass

    @abstractmethod
    def _decode(self, opcode: int) -> Operation:
        pass

    @abstractmethod
    def _execute(self, operation: Operation) -> None:
        pass

    # @intent:responsibility 1命令を実行し、実行直後の状態を記録したSnapshotを返します。
    # @intent:post-condition 命令の実行で発生した例外は捕捉せず、そのまま呼び出し元へ伝播します。
    # @intent:post-condition QuitRequestedの場合のみ、PCを命令の先頭アドレスに戻してから伝播します。
    def step(self) -> Snapshot:
        """
        命令サイクルを1回進めます。

        PCは実行の前に命令長だけ進められるため、ジャンプやスキップの実装は
        「次の命令のアドレス」を基準にPCを上書き・加算します。
        """
        self._bus.get_and_clear_activity_log()
        address = self._state.pc

        opcode = self._fetch()
        operation = self._decode(opcode)
        self._update_pc(operation)
        try:
            self._execute(operation)
        except QuitRequested:
            # キャンセルされた命令は未実行として扱い、再開時に同じ命令から実行する
            self._state.pc = address
            raise

        return self._create_snapshot(address, operation)

    def _update_pc(self, operation: Operation) -> None:
        self._state.advance(operation.length)

    # @intent:responsibility 状態のコピーとこのサイクルのバスアクセスからSnapshotを組み立てます。
    def _create_snapshot(self, address: int, operation: Operation) -> Snapshot:
        self._cycle_count += operation.cycle_count
        return Snapshot(
            state=copy.deepcopy(self._state),
            operation=operation,
            metadata=Metadata(
                cycle_count=self._cycle_count,
                address=address,
                disassembly=operation.to_assembly(),
            ),
            bus_activity=self._bus.get_and_clear_activity_log(),
        )

    # @intent:responsibility レジスタ名から現在値への辞書を返します。
    @abstractmethod
    def get_register_map(self) -> Dict[str, int]:
        pass

    # @intent:responsibility UIがレジスタをどうグループ化して並べるかを返します。
    @abstractmethod
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        pass

    @abstractmethod
    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        """
        指定範囲を逆アセンブルし、(アドレス, 命令語HEX, ニーモニック) のリストを返します。
        """
        pass
