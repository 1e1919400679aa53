# tests/test_cli.py
"""
retro_chip8.cliモジュールの単体テスト。
"""
import io
import logging
import sys

import pytest

from retro_chip8 import cli

_configure_logging = cli.configure_logging

# @intent:test_suite コマンドラインからの起動、構成の上書き、終了コードを検証します。

@pytest.fixture(autouse=True)
def reset_logging(monkeypatch):
    # basicConfigがテスト間で設定を持ち越さないようにする
    monkeypatch.setattr(cli, "configure_logging", lambda log_file, verbose: None)

def _program(tmp_path, data):
    path = tmp_path / "program.ch8"
    path.write_bytes(bytes(data))
    return str(path)

def test_parser_defaults():
    args = cli.build_parser().parse_args(["run"])
    assert args.program == "-"
    assert args.clock is None
    assert args.verbose is False

def test_overrides_applied_to_config(tmp_path):
    config_file = tmp_path / "machine.yaml"
    config_file.write_text("clock_hz: 100\ndisplay:\n  backend: text\n")
    args = cli.build_parser().parse_args([
        "run", "--config", str(config_file), "--clock", "700", "--display", "null", "--seed", "7",
    ])
    config = cli.load_config(args)
    assert config.clock_hz == 700
    assert config.display.backend == "null"
    assert config.seed == 7

def test_unknown_opcode_exits_with_error(tmp_path, capsys):
    program = _program(tmp_path, [0x60, 0x01, 0x01, 0x23])
    assert cli.main(["run", program, "--display", "null", "--clock", "1000"]) == 1
    assert "chip8: unknown opcode: 0x0123" in capsys.readouterr().err

def test_missing_program(tmp_path, capsys):
    assert cli.main(["run", str(tmp_path / "missing.ch8"), "--display", "null"]) == 1
    assert "could not read program" in capsys.readouterr().err

def test_invalid_clock(tmp_path):
    program = _program(tmp_path, [0x12, 0x00])
    assert cli.main(["run", program, "--display", "null", "--clock", "0"]) == 1

def test_program_from_stdin_with_text_display(monkeypatch, capsys):
    # CLS後に未定義命令で停止するプログラム
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(bytes([0x00, 0xE0, 0x00, 0x00]))))
    assert cli.main(["run", "--display", "text", "--clock", "1000"]) == 1
    out = capsys.readouterr().out
    assert out.startswith("\x1b[H")
    assert out.count("\n") == 32

def test_keypad_quit_exits_cleanly(tmp_path, monkeypatch):
    from retro_chip8.common.errors import QuitRequested
    from retro_chip8.config.builder import MachineBuilder
    from retro_chip8.devices.keypad import FunctionKeypad

    def quit_key():
        raise QuitRequested()

    monkeypatch.setattr(MachineBuilder, "create_keypad", lambda self, config: FunctionKeypad(quit_key))
    program = _program(tmp_path, [0xF0, 0x0A])
    assert cli.main(["run", program, "--display", "null", "--clock", "1000"]) == 0

def test_text_display_reads_keys_from_stdin(tmp_path, monkeypatch, capsys):
    # 1回目のキー待ちは "q" を受け取り、2回目は終了キー "0" で正常終了する
    program = _program(tmp_path, [0xF3, 0x0A, 0xF4, 0x0A])
    monkeypatch.setattr(sys, "stdin", io.StringIO("q\n0\n"))
    assert cli.main(["run", program, "--display", "text", "--clock", "1000"]) == 0
    assert capsys.readouterr().err == ""

# --verboseはルートロガーのDEBUGで、--logは実行ループのロガー自身のDEBUGでトレースを有効にする
@pytest.mark.parametrize("log_file, verbose, level, trace_level", [
    (None, False, logging.WARNING, logging.NOTSET),
    (None, True, logging.DEBUG, logging.NOTSET),
    ("trace.log", False, logging.INFO, logging.DEBUG),
])
def test_configure_logging_levels(monkeypatch, log_file, verbose, level, trace_level):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
    trace_logger = logging.getLogger(cli.TRACE_LOGGER)
    previous = trace_logger.level
    try:
        trace_logger.setLevel(logging.NOTSET)
        _configure_logging(log_file, verbose)
        assert calls[0]["filename"] == log_file
        assert calls[0]["level"] == level
        assert trace_logger.level == trace_level
    finally:
        trace_logger.setLevel(previous)
