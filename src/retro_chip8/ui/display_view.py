# src/retro_chip8/ui/display_view.py
"""
フレームバッファ表示ウィジェットと、Qtによるディスプレイアダプタ。

CPUは実行スレッドでレンダリングを要求しますが、ウィジェットの描画はGUIスレッドで
行う必要があるため、QtDisplayはフレームのコピーをシグナルで受け渡します。
"""

from PySide6.QtWidgets import QWidget
from PySide6.QtGui import QPainter, QColor, QPaintEvent
from PySide6.QtCore import QObject, QSize, Signal, Slot

from retro_chip8.devices.display import Display
from retro_chip8.devices.graphics import Graphics, WIDTH, HEIGHT

PIXEL_ON = QColor(0xE0, 0xE0, 0xE0)
PIXEL_OFF = QColor(0x10, 0x10, 0x10)

# @intent:responsibility 64x32のフレームバッファを拡大して描画するウィジェットです。
class FramebufferView(QWidget):
    def __init__(self, scale: int = 10, width: int = WIDTH, height: int = HEIGHT, parent=None):
        super().__init__(parent)
        self._scale = scale
        self._fb_width = width
        self._fb_height = height
        self._frame = bytes(width * height)
        self.setMinimumSize(width * scale, height * scale)

    @property
    def frame(self) -> bytes:
        return self._frame

    def sizeHint(self) -> QSize:
        return QSize(self._fb_width * self._scale, self._fb_height * self._scale)

    # @intent:responsibility 新しいフレームを受け取り、再描画を予約します。GUIスレッドで呼ばれます。
    @Slot(bytes)
    def set_frame(self, frame: bytes) -> None:
        if len(frame) != self._fb_width * self._fb_height:
            return
        self._frame = frame
        self.update()

    def paintEvent(self, event: QPaintEvent):
        painter = QPainter(self)
        painter.fillRect(self.rect(), PIXEL_OFF)
        # ウィンドウサイズに合わせて整数倍率で拡大する
        scale = max(1, min(self.width() // self._fb_width, self.height() // self._fb_height))
        for y in range(self._fb_height):
            row = y * self._fb_width
            for x in range(self._fb_width):
                if self._frame[row + x]:
                    painter.fillRect(x * scale, y * scale, scale, scale, PIXEL_ON)
        painter.end()

# @intent:responsibility 実行スレッドからGUIスレッドへフレームを運ぶシグナルの送出元です。
class _FrameSignaller(QObject):
    frame_ready = Signal(bytes)

# @intent:responsibility Display能力のQt実装です。render()はフレームのコピーをシグナルで送出するだけでブロックしません。
class QtDisplay(Display):
    def __init__(self):
        self._signaller = _FrameSignaller()
        self.frames = 0

    @property
    def frame_ready(self):
        return self._signaller.frame_ready

    # @intent:responsibility フレームバッファを表示ウィジェットへ接続します。
    def attach(self, view: FramebufferView) -> None:
        self._signaller.frame_ready.connect(view.set_frame)

    def render(self, graphics: Graphics) -> None:
        self.frames += 1
        self._signaller.frame_ready.emit(graphics.snapshot())
