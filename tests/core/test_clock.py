# tests/core/test_clock.py
"""
retro_chip8.core.clockモジュールの単体テスト。
"""
import threading
import time

import pytest

from retro_chip8.core.clock import Clock
from retro_chip8.common.errors import ConfigError

# @intent:test_suite ティックの律速と停止要求の観測を検証します。

@pytest.mark.parametrize("frequency", [0, -60, True, "60"])
def test_invalid_frequency(frequency):
    with pytest.raises(ConfigError):
        Clock(frequency)

def test_period():
    clock = Clock(500)
    assert clock.frequency == 500
    assert clock.period == pytest.approx(0.002)

def test_ticks_are_paced():
    clock = Clock(200)
    start = time.monotonic()
    for _ in range(10):
        assert clock.wait_for_tick() is True
    assert time.monotonic() - start >= 10 * clock.period * 0.9

def test_stop_before_wait():
    clock = Clock(1000)
    clock.request_stop()
    assert clock.stop_requested
    assert clock.wait_for_tick() is False

# @intent:test_case 停止要求が待機中のティックを即座に起こすことを検証します。
def test_stop_wakes_waiting_tick():
    clock = Clock(0.1) # 10秒周期
    results = []
    waiter = threading.Thread(target=lambda: results.append(clock.wait_for_tick()))
    waiter.start()
    time.sleep(0.05)
    start = time.monotonic()
    clock.request_stop()
    waiter.join(timeout=2)
    assert not waiter.is_alive()
    assert results == [False]
    assert time.monotonic() - start < 1

def test_reset_clears_stop():
    clock = Clock(1000)
    clock.request_stop()
    clock.reset()
    assert not clock.stop_requested
    assert clock.wait_for_tick() is True

def test_resync_when_behind():
    now = [100.0]
    clock = Clock(10, time_source=lambda: now[0])
    # 初回は1周期待つ必要があるため、時刻を先に進めておく
    clock._next_tick = 99.0
    now[0] = 105.0
    assert clock.wait_for_tick() is True
    # 大きく遅れた場合は過去のティックをまとめて消化せず、現在時刻から再同期する
    assert clock._next_tick == pytest.approx(105.1)
