# src/retro_chip8/arch/chip8/instructions/base.py
"""
CHIP-8命令実装用の共通ユーティリティ。

オペコードのビットフィールド抽出と、命令ハンドラが利用する周辺デバイス群を定義します。
"""
from dataclasses import dataclass
from typing import Callable

from retro_chip8.common.errors import KeypadError, QuitRequested, RenderError
from retro_chip8.devices.display import Display
from retro_chip8.devices.graphics import Graphics
from retro_chip8.devices.keypad import KEY_COUNT, Keypad

# @intent:utility_function オペコードの各フィールドを取り出します。フィールドはディスパッチ毎に再計算されます。
#
# nnn - 下位12bitのアドレス
# n   - 下位4bit
# x   - 上位バイトの下位4bit（レジスタ番号）
# y   - 下位バイトの上位4bit（レジスタ番号）
# kk  - 下位8bitの即値
def field_nnn(opcode: int) -> int:
    return opcode & 0x0FFF

def field_n(opcode: int) -> int:
    return opcode & 0x000F

def field_x(opcode: int) -> int:
    return (opcode & 0x0F00) >> 8

def field_y(opcode: int) -> int:
    return (opcode & 0x00F0) >> 4

def field_kk(opcode: int) -> int:
    return opcode & 0x00FF

# @intent:utility_function オペコードから命令表の検索キーを計算します。
# @intent:rationale 上位ニブルで命令ファミリを識別し、0x0/0x5/0x8/0x9/0xE/0xFでは下位の判別子も含めます。
def opcode_key(opcode: int) -> int:
    family = opcode & 0xF000
    if family == 0x0000:
        return opcode
    if family in (0x5000, 0x8000, 0x9000):
        return opcode & 0xF00F
    if family in (0xE000, 0xF000):
        return opcode & 0xF0FF
    return family

# @intent:utility_function 表示用のオペランド文字列を生成します。
def reg(index: int) -> str:
    return f"V{index:X}"

def imm(value: int) -> str:
    return f"#${value:02X}"

def addr(value: int) -> str:
    return f"${value:03X}"

# @intent:responsibility 命令ハンドラが利用するレジスタファイル以外の協調者を束ねます。
class Peripherals:
    """
    フレームバッファ、ディスプレイ、キーパッド、乱数源をまとめたコンテキスト。
    外部協調者の失敗はここでドメインのエラー（RenderError/KeypadError）に変換されます。
    """
    def __init__(self, graphics: Graphics, display: Display, keypad: Keypad, random_byte: Callable[[], int]):
        self.graphics = graphics
        self.display = display
        self.keypad = keypad
        self.random_byte = random_byte

    # @intent:responsibility フレームバッファをディスプレイへ引き渡します。
    # @intent:post-condition 描画の失敗はRenderErrorとして伝播します。
    def render(self) -> None:
        try:
            self.display.render(self.graphics)
        except RenderError:
            raise
        except Exception as e:
            raise RenderError(f"chip8: unable to render display: {e}") from e

    # @intent:responsibility キーが押されるまで実行スレッドをブロックします。
    # @intent:post-condition キャンセル（QuitRequested）はそのまま伝播し、その他の失敗はKeypadErrorになります。
    def wait_for_key(self) -> int:
        try:
            key = self.keypad.get_key()
        except (QuitRequested, KeypadError):
            raise
        except Exception as e:
            raise KeypadError(f"chip8: unable to get key from keypad: {e}") from e
        return self._validate_key(key)

    # @intent:responsibility キーが現在押されているかをブロックせずに問い合わせます。
    def key_pressed(self, key: int) -> bool:
        try:
            return bool(self.keypad.is_pressed(key & 0x0F))
        except KeypadError:
            raise
        except Exception as e:
            raise KeypadError(f"chip8: unable to query keypad: {e}") from e

    def next_random_byte(self) -> int:
        return self.random_byte() & 0xFF

    @staticmethod
    def _validate_key(key: int) -> int:
        if isinstance(key, bool) or not isinstance(key, int) or not 0 <= key < KEY_COUNT:
            raise KeypadError(f"chip8: keypad returned invalid key {key!r}")
        return key
