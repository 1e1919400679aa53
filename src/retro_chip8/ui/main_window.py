# src/retro_chip8/ui/main_window.py
"""
メインウィンドウの実装。
フレームバッファ表示とレジスタ表示を配置し、実行ループをバックグラウンドスレッドで駆動します。
"""
import logging
from typing import Optional

from PySide6.QtWidgets import QMainWindow, QDockWidget, QToolBar, QLabel, QMessageBox
from PySide6.QtGui import QPalette, QColor, QAction, QCloseEvent
from PySide6.QtCore import Qt, QThread, Signal, Slot

from retro_chip8.common.errors import Chip8Error, QuitRequested
from retro_chip8.config.builder import Machine
from retro_chip8.debugger.executor import StopReason
from .display_view import FramebufferView, QtDisplay
from .keypad import QtKeypad
from .register_view import RegisterView

logger = logging.getLogger(__name__)

# @intent:responsibility 実行ループをバックグラウンドで駆動し、終了理由・ステップ結果・エラーを通知します。
# @intent:rationale キー待ち（Fx0A）はGUIスレッドのキーイベントでしか解除できないため、単一ステップもこのスレッドで実行します。
class ExecutorThread(QThread):
    stepped = Signal(int, str)
    stopped = Signal(str)
    failed = Signal(str)

    def __init__(self, machine: Machine):
        super().__init__()
        self.machine = machine
        self.single_step = False

    def run(self):
        try:
            if self.single_step:
                snapshot = self.machine.executor.step_instruction()
                self.stepped.emit(snapshot.metadata.address, snapshot.metadata.disassembly)
                return
            reason = self.machine.executor.run()
        except QuitRequested:
            # run()はキャンセルを自身で処理するため、ここに来るのは単一ステップ中のキャンセルのみ
            self.stopped.emit(StopReason.QUIT.value)
            return
        except Chip8Error as e:
            logger.error("execution failed: %s", e)
            self.failed.emit(str(e))
            return
        self.stopped.emit(reason.value)


# @intent:responsibility アプリケーションのメインウィンドウを定義し、UIコンポーネントと実行制御を組み立てます。
class MainWindow(QMainWindow):
    """
    CHIP-8仮想マシンのメインウィンドウ。

    ウィンドウを閉じると実行ループへ停止を要求し、キー待ちを解除してから
    スレッドの終了を待ちます。
    """
    def __init__(self, machine: Machine, display: QtDisplay, keypad: Optional[QtKeypad] = None,
                 scale: int = 10, parent=None):
        super(MainWindow, self).__init__(parent)
        self.setWindowTitle("Retro CHIP-8")
        self.machine = machine
        self.display = display
        self.keypad = keypad
        self.exit_code = 0
        self._closing = False
        self._stop_requested = False

        self._set_dark_theme()
        self.framebuffer_view = FramebufferView(scale=scale)
        self.framebuffer_view.setFocusPolicy(Qt.StrongFocus)
        self.setCentralWidget(self.framebuffer_view)
        self.display.attach(self.framebuffer_view)
        if self.keypad is not None:
            self.framebuffer_view.installEventFilter(self.keypad.event_filter)

        self._create_toolbar()
        self._create_register_dock()
        self.status_label = QLabel("Ready")
        self.statusBar().addWidget(self.status_label)

        self.executor_thread = ExecutorThread(machine)
        self.executor_thread.stepped.connect(self._on_stepped)
        self.executor_thread.stopped.connect(self._on_stopped)
        self.executor_thread.failed.connect(self._on_failed)

        self._update_ui_state(False)

    def _set_dark_theme(self):
        palette = QPalette()
        palette.setColor(QPalette.Window, QColor(0x12, 0x12, 0x12))
        palette.setColor(QPalette.WindowText, QColor(0xBB, 0xBB, 0xBB))
        palette.setColor(QPalette.Base, QColor(0x10, 0x10, 0x10))
        palette.setColor(QPalette.Text, QColor(0xBB, 0xBB, 0xBB))
        palette.setColor(QPalette.Button, QColor(0x22, 0x22, 0x22))
        palette.setColor(QPalette.ButtonText, QColor(0xBB, 0xBB, 0xBB))
        self.setPalette(palette)

    def _create_toolbar(self):
        toolbar = QToolBar("Main Toolbar")
        self.addToolBar(toolbar)

        self.run_action = QAction("Run", self)
        self.run_action.triggered.connect(self.start)
        toolbar.addAction(self.run_action)

        self.stop_action = QAction("Stop", self)
        self.stop_action.triggered.connect(self.stop)
        toolbar.addAction(self.stop_action)

        self.step_action = QAction("Step", self)
        self.step_action.triggered.connect(self.step)
        toolbar.addAction(self.step_action)

    def _create_register_dock(self):
        self.register_view = RegisterView()
        self.register_view.set_cpu(self.machine.cpu)
        dock = QDockWidget("Registers", self)
        dock.setWidget(self.register_view)
        dock.setAllowedAreas(Qt.LeftDockWidgetArea | Qt.RightDockWidgetArea)
        self.addDockWidget(Qt.RightDockWidgetArea, dock)

    # @intent:responsibility 実行状態に応じてツールバーの有効/無効を切り替えます。
    def _update_ui_state(self, is_running: bool):
        self.run_action.setEnabled(not is_running)
        self.step_action.setEnabled(not is_running)
        self.stop_action.setEnabled(is_running)

    # @intent:responsibility 実行ループの連続実行を開始します。
    @Slot()
    def start(self):
        self._launch(single_step=False, status="Running...")

    def _launch(self, single_step: bool, status: str):
        if self.executor_thread.isRunning():
            return
        self._stop_requested = False
        self.machine.executor.reset()
        if self.keypad is not None:
            self.keypad.reset()
        self._update_ui_state(True)
        self.status_label.setText(status)
        self.framebuffer_view.setFocus()
        self.executor_thread.single_step = single_step
        self.executor_thread.start()

    # @intent:responsibility 実行ループへ停止を要求し、キー待ちでブロックしていれば解除します。
    @Slot()
    def stop(self):
        self.status_label.setText("Stopping...")
        self._stop_requested = True
        self.machine.executor.stop()
        if self.keypad is not None:
            self.keypad.cancel()

    # @intent:responsibility クロックを待たずに1命令だけ実行します。
    # @intent:post-condition キー待ち命令の場合はキー入力かStopまで実行中の状態が続きます。
    @Slot()
    def step(self):
        self._launch(single_step=True, status="Stepping...")

    @Slot(int, str)
    def _on_stepped(self, address: int, disassembly: str):
        self._update_ui_state(False)
        self.register_view.update_registers()
        self.status_label.setText(f"0x{address:03X}  {disassembly}")

    @Slot(str)
    def _on_stopped(self, reason: str):
        self._update_ui_state(False)
        self.register_view.update_registers()
        self.status_label.setText(f"Stopped ({reason})")
        # キーパッドからの終了要求はウィンドウを閉じる。Stopボタンによるキー待ち解除は除く
        if reason == StopReason.QUIT.value and not self._stop_requested and not self._closing:
            self.close()

    @Slot(str)
    def _on_failed(self, message: str):
        self.exit_code = 1
        self._update_ui_state(False)
        self.register_view.update_registers()
        self.status_label.setText(f"Error: {message}")
        if not self._closing:
            QMessageBox.critical(self, "Error", message)

    def closeEvent(self, event: QCloseEvent):
        self._closing = True
        if self.executor_thread.isRunning():
            self.stop()
            self.executor_thread.wait()
        event.accept()
