# src/retro_chip8/arch/chip8/font.py
"""
組み込みフォントセット。

16進数字 0-F のスプライト（1文字あたり5バイト、幅4ピクセル）を定義します。
CPU構築時にメモリのアドレス0へ一度だけコピーされ、以後変更されません。
"""

FONT_ADDRESS = 0x000
GLYPH_SIZE = 5

# @intent:constant 16進数字のスプライトビットマップ。各バイトの上位4bitが1行分のピクセルです。
FONT_SET = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])


def glyph_address(digit: int) -> int:
    """16進数字 `digit` のスプライトが置かれたアドレスを返します。"""
    return FONT_ADDRESS + (digit & 0x0F) * GLYPH_SIZE
