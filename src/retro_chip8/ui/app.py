# src/retro_chip8/ui/app.py
"""
Qtアプリケーションのエントリポイント。
構築済みの仮想マシンをメインウィンドウに載せて実行します。
"""
import signal
import sys
from typing import Optional

from PySide6.QtWidgets import QApplication
from PySide6.QtCore import QTimer

from retro_chip8.config.builder import Machine
from .display_view import QtDisplay
from .keypad import QtKeypad
from .main_window import MainWindow

# @intent:responsibility メインウィンドウを表示して実行を開始し、イベントループ終了後に終了コードを返します。
def run_gui(machine: Machine, display: QtDisplay, keypad: Optional[QtKeypad] = None, scale: int = 10) -> int:
    app = QApplication.instance() or QApplication(sys.argv)
    window = MainWindow(machine, display, keypad, scale=scale)

    # SIGINT/SIGTERMはウィンドウを閉じる操作として扱う
    for signum in (signal.SIGINT, signal.SIGTERM):
        signal.signal(signum, lambda *_: window.close())
    # Qtのイベントループ中もPythonのシグナルハンドラが実行されるよう、定期的に制御を戻す
    heartbeat = QTimer()
    heartbeat.timeout.connect(lambda: None)
    heartbeat.start(200)

    window.show()
    window.start()
    app.exec()
    heartbeat.stop()
    return window.exit_code
