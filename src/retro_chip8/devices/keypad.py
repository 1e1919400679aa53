# retro_chip8/devices/keypad.py
"""
キーパッド能力（Keypad capability）

16キーの16進キーパッドを表す外部協調者のインターフェースです。
ブロッキングの「次のキー取得」と、ノンブロッキングの「キー押下状態の問い合わせ」の
2つの操作を要求します。
"""
import sys
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional, TextIO

from retro_chip8.common.errors import KeypadError, QuitRequested

KEY_COUNT = 16

# @intent:responsibility キーパッドの抽象インターフェースを定義します。
class Keypad(ABC):
    # @intent:responsibility キーが押されるまでブロックし、4bitのキーコードを返します。
    # @intent:post-condition 終了キーが押された場合はQuitRequestedを送出します。
    @abstractmethod
    def get_key(self) -> int:
        pass

    # @intent:responsibility 指定されたキーが現在押されているかをブロックせずに返します。
    @abstractmethod
    def is_pressed(self, key: int) -> bool:
        pass

# @intent:responsibility 物理キーを持たないヘッドレス用キーパッドです。
# @intent:rationale キーが存在しないため押下状態は常にFalseですが、キー待ちには応えられないためエラーとします。
class NullKeypad(Keypad):
    def get_key(self) -> int:
        raise KeypadError("chip8: null keypad not usable")

    def is_pressed(self, key: int) -> bool:
        return False

# @intent:responsibility 任意の関数をキーパッドとして扱うアダプタです。
class FunctionKeypad(Keypad):
    """
    `get_key` に相当する関数と、省略可能な `is_pressed` に相当する関数をラップします。
    押下状態の関数が与えられない場合、押下状態の問い合わせはKeypadErrorになります。
    """
    def __init__(self, get_key: Callable[[], int], is_pressed: Optional[Callable[[int], bool]] = None):
        self._get_key = get_key
        self._is_pressed = is_pressed

    def get_key(self) -> int:
        return self._get_key()

    def is_pressed(self, key: int) -> bool:
        if self._is_pressed is None:
            raise KeypadError("chip8: keypad does not support key state queries")
        return self._is_pressed(key)

# @intent:responsibility テキストストリーム（既定は標準入力）から1文字ずつ読み取るキーパッドです。
class StreamKeypad(Keypad):
    """
    端末向けのキーパッド。`keymap` で文字を16進キーに対応付け、空白と改行は読み飛ばします。

    `quit_key` を読み取るか入力が終端に達すると QuitRequested を送出します。
    対応付けのない文字はKeypadErrorになります。
    ストリームには押下状態が無いため、`is_pressed()` は常にFalseを返します。
    """
    def __init__(self, keymap: Dict[str, int], quit_key: str = "0", stream: Optional[TextIO] = None):
        self._keymap = {name.lower(): key for name, key in keymap.items()}
        self._quit_key = quit_key.lower()
        self._stream = stream if stream is not None else sys.stdin

    def get_key(self) -> int:
        while True:
            char = self._stream.read(1)
            if not char:
                raise QuitRequested()
            if char.isspace():
                continue
            char = char.lower()
            if char == self._quit_key:
                raise QuitRequested()
            key = self._keymap.get(char)
            if key is None:
                raise KeypadError(f"chip8: unknown key: {char!r}")
            return key

    def is_pressed(self, key: int) -> bool:
        return False
