# retro_chip8/devices/display.py
"""
ディスプレイ能力（Display capability）

描画命令の直後にフレームバッファを受け取り、画面へ描画する外部協調者の
インターフェースと、ヘッドレス/テキスト用の具象アダプタを定義します。
PySide6によるウィンドウ表示は retro_chip8.ui.display_view を参照してください。
"""
import sys
from abc import ABC, abstractmethod
from typing import Optional, TextIO

from retro_chip8.devices.graphics import Graphics

# @intent:responsibility 現在のフレームバッファを描画する単一操作のインターフェースを定義します。
class Display(ABC):
    # @intent:post-condition 描画に失敗した場合は例外を送出します。CPU側でRenderErrorに変換されます。
    @abstractmethod
    def render(self, graphics: Graphics) -> None:
        """
        フレームバッファの現在の内容を描画します。
        `graphics` は読み取り専用として扱い、変更してはいけません。
        """
        pass

# @intent:responsibility 何も描画しないヘッドレス用ディスプレイです。描画回数のみ記録します。
class NullDisplay(Display):
    def __init__(self):
        self.frames = 0
        self.last_frame: Optional[bytes] = None

    def render(self, graphics: Graphics) -> None:
        self.frames += 1
        self.last_frame = graphics.snapshot()

# @intent:responsibility フレームバッファを文字としてテキストストリームへ書き出すディスプレイです。
class TextDisplay(Display):
    """
    端末向けのテキストディスプレイ。`home=True` の場合、描画の前にカーソルを
    左上へ戻すエスケープシーケンスを出力し、同じ位置に上書きします。
    """
    HOME = "\x1b[H"

    def __init__(self, stream: Optional[TextIO] = None, on: str = "#", off: str = " ", home: bool = True):
        self._stream = stream if stream is not None else sys.stdout
        self._on = on
        self._off = off
        self._home = home

    def render(self, graphics: Graphics) -> None:
        lines = []
        for row in graphics.rows():
            lines.append("".join(self._on if cell else self._off for cell in row))
        frame = "\n".join(lines) + "\n"
        if self._home:
            frame = self.HOME + frame
        self._stream.write(frame)
        self._stream.flush()
