# retro_chip8/common/errors.py
"""
エラー定義モジュール。

仮想マシンの実行中・ロード中に発生し得る全ての異常を例外階層として定義します。
命令レベルの障害はその場で回復せず、実行ループの呼び出し元まで伝播させます。
"""
from typing import Optional


# @intent:responsibility CHIP-8仮想マシンの全ての致命的エラーの基底クラスです。
class Chip8Error(Exception):
    """CHIP-8仮想マシンの致命的エラーの基底クラス。"""


# @intent:responsibility 対応する命令ハンドラを持たないオペコードを報告します。
class UnknownOpcodeError(Chip8Error):
    """
    デコードされた命令に定義済みのハンドラが存在しないことを示します。
    診断用に生のオペコード値と、判明していればそのアドレスを保持します。
    """
    def __init__(self, opcode: int, address: Optional[int] = None):
        self.opcode = opcode
        self.address = address
        message = f"chip8: unknown opcode: 0x{opcode:04X}"
        if address is not None:
            message += f" at 0x{address:03X}"
        super().__init__(message)


# @intent:responsibility プログラムの読み込み失敗を表します。実行開始前に致命的となります。
class LoadError(Chip8Error):
    pass


# @intent:responsibility プログラムがメモリの空き領域に収まらないことを表します。
# @intent:rationale 黙って切り詰めると実行時に不正な命令列を生むため、明示的に失敗させます。
class OutOfMemoryError(LoadError):
    def __init__(self, size: int, capacity: int):
        self.size = size
        self.capacity = capacity
        super().__init__(
            f"chip8: program of {size} bytes does not fit in {capacity} bytes of program memory"
        )


# @intent:responsibility キーパッドがキャンセル以外のエラーを返したことを表します。
class KeypadError(Chip8Error):
    pass


# @intent:responsibility 描画命令の後にディスプレイが描画に失敗したことを表します。
class RenderError(Chip8Error):
    pass


class StackError(Chip8Error):
    """コールスタックの容量違反の基底クラス。"""


class StackOverflowError(StackError):
    def __init__(self, depth: int):
        self.depth = depth
        super().__init__(f"chip8: stack overflow: call depth exceeds {depth}")


class StackUnderflowError(StackError):
    def __init__(self):
        super().__init__("chip8: stack underflow: return with empty call stack")


# @intent:responsibility 不正な構成値（クロック周波数など）を構築時に拒否します。
class ConfigError(Chip8Error):
    pass


# @intent:responsibility キーパッドからの終了要求（キャンセル）を表します。
# @intent:rationale エラーではなく正常終了の合図であるため、Chip8Errorを継承しません。
class QuitRequested(Exception):
    """キーパッド側の終了キー、または外部からの終了要求を表すシグナル。"""
