# retro_chip8/core/clock.py
"""
クロック（ティックスケジューラ）

命令ディスパッチを一定周波数で律速し、別スレッドからの停止要求を
ティック境界で観測可能にする責務を負います。
"""
import threading
import time
from typing import Callable

from retro_chip8.common.errors import ConfigError

# @intent:responsibility 単調増加タイマーとキャンセルトークンで構成されるティックスケジューラです。
# @intent:rationale 停止要求はthreading.Eventで待機中のティックを即座に起こすため、負荷下でも1ティック以内に観測されます。
class Clock:
    """
    `frequency` Hz のティックを生成するスケジューラ。

    `wait_for_tick()` は次のティックまでブロックし、停止要求があれば False を返します。
    `request_stop()` は任意のスレッドから安全に呼び出せます。
    """
    # @intent:pre-condition frequencyは正の数である必要があります。ゼロ以下は構成エラーです。
    def __init__(self, frequency: float, time_source: Callable[[], float] = time.monotonic):
        if isinstance(frequency, bool) or not isinstance(frequency, (int, float)) or frequency <= 0:
            raise ConfigError(f"chip8: clock frequency must be a positive number of hertz, got {frequency!r}")
        self._frequency = frequency
        self._period = 1.0 / frequency
        self._time = time_source
        self._stop_event = threading.Event()
        self._next_tick = None

    @property
    def frequency(self) -> float:
        return self._frequency

    @property
    def period(self) -> float:
        return self._period

    @property
    def stop_requested(self) -> bool:
        return self._stop_event.is_set()

    # @intent:responsibility 次のティックまでブロックします。
    # @intent:return ティックに到達した場合True、停止要求を観測した場合False。
    def wait_for_tick(self) -> bool:
        if self._stop_event.is_set():
            return False

        now = self._time()
        if self._next_tick is None:
            self._next_tick = now + self._period

        delay = self._next_tick - now
        if delay > 0 and self._stop_event.wait(delay):
            return False
        if self._stop_event.is_set():
            return False

        # 処理が1周期以上遅れた場合はバーストさせずに再同期する
        self._next_tick += self._period
        now = self._time()
        if self._next_tick < now:
            self._next_tick = now + self._period
        return True

    # @intent:responsibility 協調的な停止を要求します。次のティック境界で有効になります。
    def request_stop(self) -> None:
        self._stop_event.set()

    # @intent:responsibility 停止要求とティックの位相をリセットし、再度実行可能な状態に戻します。
    def reset(self) -> None:
        self._stop_event.clear()
        self._next_tick = None
