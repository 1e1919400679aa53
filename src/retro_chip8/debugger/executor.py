# retro_chip8/debugger/executor.py
"""
実行ループモジュール。

クロックに合わせて命令ディスパッチを律速し、CPUを終了条件（エラー、キャンセル、
停止要求、ブレークポイント）まで駆動する責務を負います。
"""
import logging
import time
from enum import Enum
from typing import Callable, List, Optional

from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.common.errors import ConfigError, QuitRequested
from retro_chip8.core.clock import Clock
from retro_chip8.core.snapshot import Snapshot

logger = logging.getLogger(__name__)

DEFAULT_TIMER_HZ = 60

# @intent:responsibility run()が正常に終了した理由を表します。エラーによる終了は例外として伝播します。
class StopReason(Enum):
    STOPPED = "STOPPED"         # 外部からの停止要求
    QUIT = "QUIT"               # キーパッドからのキャンセル
    BREAKPOINT = "BREAKPOINT"   # PCがブレークポイントに一致

# @intent:responsibility CPUの実行制御（ステップ実行、連続実行、協調的停止）とタイマーの減算を行います。
class Executor:
    """
    CPUをクロックの周期で1命令ずつ実行する実行ループ。

    CPUの状態を変更するのは実行ループを駆動する単一のスレッドのみです。
    別スレッドから呼び出してよいのは stop() だけで、停止は次のティック境界で有効になり、
    命令の途中で中断されることはありません。
    """
    # @intent:pre-condition timer_hzは正の数である必要があります。
    def __init__(
        self,
        cpu: Chip8Cpu,
        clock: Clock,
        timer_hz: float = DEFAULT_TIMER_HZ,
        time_source: Callable[[], float] = time.monotonic,
    ):
        if isinstance(timer_hz, bool) or not isinstance(timer_hz, (int, float)) or timer_hz <= 0:
            raise ConfigError(f"chip8: timer frequency must be a positive number of hertz, got {timer_hz!r}")
        self._cpu = cpu
        self._clock = clock
        self._timer_period = 1.0 / timer_hz
        self._time = time_source
        self._last_timer_tick: Optional[float] = None
        self._breakpoints: List[int] = []
        self._last_snapshot: Optional[Snapshot] = None

    @property
    def cpu(self) -> Chip8Cpu:
        return self._cpu

    @property
    def clock(self) -> Clock:
        return self._clock

    def add_breakpoint(self, address: int) -> None:
        if address not in self._breakpoints:
            self._breakpoints.append(address)

    def remove_breakpoint(self, address: int) -> None:
        if address in self._breakpoints:
            self._breakpoints.remove(address)

    def get_breakpoints(self) -> List[int]:
        return list(self._breakpoints)

    def get_last_snapshot(self) -> Optional[Snapshot]:
        return self._last_snapshot

    # @intent:responsibility 次のティックまで待機してから1命令を実行します。
    # @intent:return 実行した命令のSnapshot。待機中に停止要求を観測した場合はNone。
    def step(self) -> Optional[Snapshot]:
        if not self._clock.wait_for_tick():
            return None
        return self.step_instruction()

    # @intent:responsibility クロックを待たずに1命令を実行し、トレースログを出力します。
    def step_instruction(self) -> Snapshot:
        self._update_timers()
        snapshot = self._cpu.step()
        self._last_snapshot = snapshot
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("op=0x%04X %-16s %s", snapshot.opcode, snapshot.metadata.disassembly, self._cpu)
        return snapshot

    # @intent:responsibility 停止要求、ブレークポイント、キャンセルのいずれかまでCPUを連続実行します。
    # @intent:post-condition 命令レベルの障害（UnknownOpcodeErrorなど）は回復せず、そのまま呼び出し元へ伝播します。
    def run(self) -> StopReason:
        """
        CPUの実行を継続し、終了理由を返します。
        開始時のPCにあるブレークポイントは無視し、その命令から実行を再開します。
        """
        logger.info("execution started at PC=0x%03X", self._cpu.get_state().pc)
        first = True
        try:
            while True:
                current_pc = self._cpu.get_state().pc
                if not first and current_pc in self._breakpoints:
                    logger.info("breakpoint hit at PC=0x%03X", current_pc)
                    return StopReason.BREAKPOINT
                first = False

                if self.step() is None:
                    logger.info("execution stopped at PC=0x%03X", self._cpu.get_state().pc)
                    return StopReason.STOPPED
        except QuitRequested:
            logger.info("quit requested by keypad")
            return StopReason.QUIT

    # @intent:responsibility 協調的な停止を要求します。任意のスレッドから呼び出せます。
    # @intent:rationale キー入力待ち（Fx0A）でブロック中の場合、キーパッド側のキャンセルで解除する必要があります。
    def stop(self) -> None:
        self._clock.request_stop()

    # @intent:responsibility 停止要求を解除し、再びrun()できる状態に戻します。
    def reset(self) -> None:
        self._clock.reset()
        self._last_timer_tick = None

    # @intent:responsibility 前回からの経過時間に応じてタイマーを減算します。CPUクロックとは独立した60Hzです。
    def _update_timers(self) -> None:
        now = self._time()
        if self._last_timer_tick is None:
            self._last_timer_tick = now
            return
        ticks = int((now - self._last_timer_tick) / self._timer_period)
        if ticks <= 0:
            return
        # タイマーは8bitのため、256回以上の減算は意味を持たない
        for _ in range(min(ticks, 0x100)):
            self._cpu.tick_timers()
        self._last_timer_tick += ticks * self._timer_period
