# tests/debugger/test_executor.py
"""
retro_chip8.debugger.executorモジュールの単体テスト。
実行ループの終了条件（停止要求、ブレークポイント、キャンセル、エラー）とタイマーを検証します。
"""
import logging
import threading
import time

import pytest

from retro_chip8.transport.bus import Bus, RAM
from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.core.clock import Clock
from retro_chip8.debugger.executor import Executor, StopReason
from retro_chip8.devices.keypad import FunctionKeypad
from retro_chip8.common.errors import ConfigError, QuitRequested, UnknownOpcodeError

# @intent:test_suite 実行ループの制御とタイマーの減算を検証します。

def _quit():
    raise QuitRequested()

class TestExecutor:
    @pytest.fixture
    def setup_executor(self):
        bus = Bus(address_space=0x1000)
        bus.register_device(0x000, 0xFFF, RAM(0x1000))
        cpu = Chip8Cpu(bus, keypad=FunctionKeypad(_quit, lambda key: False))
        clock = Clock(5000)
        executor = Executor(cpu, clock)
        return executor, cpu, bus

    def test_invalid_timer_frequency(self, setup_executor):
        _, cpu, _ = setup_executor
        with pytest.raises(ConfigError):
            Executor(cpu, Clock(60), timer_hz=0)

    def test_breakpoints(self, setup_executor):
        executor, _, _ = setup_executor
        executor.add_breakpoint(0x204)
        executor.add_breakpoint(0x204)
        assert executor.get_breakpoints() == [0x204]
        executor.remove_breakpoint(0x204)
        executor.remove_breakpoint(0x300) # 存在しないブレークポイントの削除はエラーにならない
        assert executor.get_breakpoints() == []

    # @intent:test_case_breakpoint run()がブレークポイントのアドレスの命令を実行する前に停止することを検証します。
    def test_run_until_breakpoint(self, setup_executor):
        executor, cpu, _ = setup_executor
        cpu.load(bytes([0x70, 0x01, 0x70, 0x01, 0x70, 0x01, 0x12, 0x00]))
        executor.add_breakpoint(0x204)
        assert executor.run() == StopReason.BREAKPOINT
        assert cpu.get_state().pc == 0x204
        assert cpu.get_state().v[0] == 2
        assert executor.get_last_snapshot().metadata.address == 0x202

        # 開始位置のブレークポイントは無視して再開する
        executor.add_breakpoint(0x200)
        assert executor.run() == StopReason.BREAKPOINT
        assert cpu.get_state().pc == 0x200
        assert cpu.get_state().v[0] == 3

    # @intent:test_case_stop 別スレッドからの停止要求でrun()が正常に戻ることを検証します。
    def test_stop_from_another_thread(self, setup_executor):
        executor, cpu, _ = setup_executor
        cpu.load(bytes([0x12, 0x00])) # JP $200 (無限ループ)
        timer = threading.Timer(0.05, executor.stop)
        timer.start()
        start = time.monotonic()
        assert executor.run() == StopReason.STOPPED
        assert time.monotonic() - start < 2
        timer.join()

    def test_stop_is_sticky_until_reset(self, setup_executor):
        executor, cpu, _ = setup_executor
        cpu.load(bytes([0x12, 0x00]))
        executor.stop()
        assert executor.step() is None
        assert executor.run() == StopReason.STOPPED
        executor.reset()
        assert executor.step() is not None

    def test_quit_from_keypad_is_clean(self, setup_executor):
        executor, cpu, _ = setup_executor
        cpu.load(bytes([0x60, 0x01, 0xF1, 0x0A]))
        assert executor.run() == StopReason.QUIT
        assert cpu.get_state().v[0] == 1

    # @intent:test_case_resume キャンセルされたキー待ちが、再開後に最初からやり直されることを検証します。
    def test_resume_after_cancelled_key_wait(self, setup_executor):
        _, _, bus = setup_executor
        keys = [None, 0x7]

        def get_key():
            key = keys.pop(0)
            if key is None:
                raise QuitRequested()
            return key

        cpu = Chip8Cpu(bus, keypad=FunctionKeypad(get_key))
        executor = Executor(cpu, Clock(5000))
        cpu.load(bytes([0xF3, 0x0A, 0x12, 0x02]))
        assert executor.run() == StopReason.QUIT
        assert cpu.get_state().pc == 0x200
        assert cpu.get_state().v[3] == 0

        executor.reset()
        snapshot = executor.step()
        assert snapshot.metadata.address == 0x200
        assert cpu.get_state().v[3] == 0x7
        assert cpu.get_state().pc == 0x202
        assert keys == []

    def test_errors_propagate(self, setup_executor):
        executor, cpu, _ = setup_executor
        cpu.load(bytes([0x00, 0x00]))
        with pytest.raises(UnknownOpcodeError):
            executor.run()

    def test_step_returns_snapshot(self, setup_executor):
        executor, cpu, _ = setup_executor
        cpu.load(bytes([0x6A, 0x42]))
        snapshot = executor.step()
        assert snapshot.opcode == 0x6A42
        assert executor.get_last_snapshot() is snapshot

    def test_trace_logging(self, setup_executor, caplog):
        executor, cpu, _ = setup_executor
        cpu.load(bytes([0x6A, 0x42]))
        with caplog.at_level(logging.DEBUG, logger="retro_chip8.debugger.executor"):
            executor.step_instruction()
        assert "op=0x6A42 LD VA, #$42" in caplog.text
        assert "PC=0x0202" in caplog.text

    # @intent:test_case_timers タイマーがCPUクロックとは独立に60Hzで減算されることを検証します。
    def test_timers_count_down_at_timer_rate(self, setup_executor):
        _, cpu, _ = setup_executor
        now = [0.0]
        executor = Executor(cpu, Clock(1000), timer_hz=60, time_source=lambda: now[0])
        cpu.load(bytes([0x12, 0x00]))
        state = cpu.get_state()
        state.delay_timer = 10
        state.sound_timer = 3

        executor.step_instruction() # 基準時刻の記録のみ
        assert state.delay_timer == 10

        now[0] = 1 / 60 * 0.5
        executor.step_instruction()
        assert state.delay_timer == 10

        now[0] = 1 / 60 * 4.5
        executor.step_instruction()
        assert state.delay_timer == 6
        assert state.sound_timer == 0

        now[0] = 100.0
        executor.step_instruction()
        assert state.delay_timer == 0
