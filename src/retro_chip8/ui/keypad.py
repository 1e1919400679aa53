# src/retro_chip8/ui/keypad.py
"""
Qtのキーイベントを入力とするキーパッドアダプタ。
"""
import queue
import threading
from typing import Dict, Set

from PySide6.QtCore import QObject, QEvent

from retro_chip8.common.errors import QuitRequested
from retro_chip8.devices.keypad import Keypad

_QUIT = object()

# @intent:responsibility インストールされたウィジェットのキー押下/解放イベントをQtKeypadへ転送します。
class _KeyEventFilter(QObject):
    def __init__(self, keypad: "QtKeypad"):
        super().__init__()
        self._keypad = keypad

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:
        if event.type() == QEvent.KeyPress and not event.isAutoRepeat():
            return self._keypad.handle_key_press(event.text())
        if event.type() == QEvent.KeyRelease and not event.isAutoRepeat():
            return self._keypad.handle_key_release(event.text())
        return False

# @intent:responsibility GUIスレッドのキーイベントを実行スレッドのキー待ちへ受け渡すキーパッドです。
# @intent:rationale キー待ちはqueue.Queueで、押下状態はロック付きの集合で保持し、スレッド間で安全に共有します。
class QtKeypad(Keypad):
    """
    キーボードの文字を16進キーに対応付けるキーパッド。

    `quit_key` が押されるか `cancel()` が呼ばれると、ブロック中の `get_key()` は
    QuitRequested を送出して実行ループを正常終了させます。
    """
    def __init__(self, keymap: Dict[str, int], quit_key: str = "0"):
        self._keymap = {name.lower(): key for name, key in keymap.items()}
        self._quit_key = quit_key.lower()
        self._events: "queue.Queue" = queue.Queue()
        self._held: Set[int] = set()
        self._lock = threading.Lock()
        self.event_filter = _KeyEventFilter(self)

    # @intent:responsibility キー押下を処理します。対応するキーであればTrue（イベント消費）を返します。
    def handle_key_press(self, text: str) -> bool:
        text = text.lower()
        if text and text == self._quit_key:
            self.cancel()
            return True
        key = self._keymap.get(text)
        if key is None:
            return False
        with self._lock:
            self._held.add(key)
        self._events.put(key)
        return True

    def handle_key_release(self, text: str) -> bool:
        key = self._keymap.get(text.lower())
        if key is None:
            return False
        with self._lock:
            self._held.discard(key)
        return True

    # @intent:responsibility ブロック中または次回のキー待ちを終了要求で解除します。
    def cancel(self) -> None:
        self._events.put(_QUIT)

    # @intent:responsibility 未処理のキーイベントと終了要求を破棄し、再実行可能な状態に戻します。
    def reset(self) -> None:
        while True:
            try:
                self._events.get_nowait()
            except queue.Empty:
                break
        with self._lock:
            self._held.clear()

    def get_key(self) -> int:
        item = self._events.get()
        if item is _QUIT:
            raise QuitRequested()
        return item

    def is_pressed(self, key: int) -> bool:
        with self._lock:
            return key in self._held
