# retro_chip8/devices/graphics.py
"""
グラフィックスバッファ（フレームバッファ）

1ピクセル1バイトの64x32ビットマップを保持し、スプライトのXOR合成と
衝突検出、トーラス状（折り返し）のアドレッシングを提供します。
"""
from typing import List, Sequence

WIDTH = 64  # Pixels
HEIGHT = 32  # Pixels

SPRITE_WIDTH = 8

# @intent:responsibility CHIP-8のフレームバッファとスプライト合成エンジンを提供します。
# @intent:rationale 全ての書き込みはXORであり、同じスプライトを2回描くと元の状態に完全に戻ります。
class Graphics:
    """
    行優先で線形化された `width * height` バイトのフレームバッファ。
    各セルは 0（消灯）または 1（点灯）を保持します。
    """
    def __init__(self, width: int = WIDTH, height: int = HEIGHT):
        if width <= 0 or height <= 0:
            raise ValueError("Graphics dimensions must be positive.")
        self._width = width
        self._height = height
        self._pixels = bytearray(width * height)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    # @intent:responsibility 全てのピクセルを消灯します。レジスタには影響しません。
    def clear(self) -> None:
        for index in range(len(self._pixels)):
            self._pixels[index] = 0

    # @intent:responsibility 座標のピクセル値を返します。座標は画面サイズで折り返されます。
    def pixel(self, x: int, y: int) -> int:
        return self._pixels[(y % self._height) * self._width + (x % self._width)]

    # @intent:responsibility スプライトを(x, y)にXOR合成し、衝突の有無を返します。
    # @intent:pre-condition spriteの各要素は8bitの行ビットマップ（MSBが左端）です。
    # @intent:post-condition 点灯していたピクセルが1つでも消灯した場合にTrueを返します。
    def write_sprite(self, sprite: Sequence[int], x: int, y: int) -> bool:
        collision = False
        for row, bits in enumerate(sprite):
            dest_y = (y + row) % self._height
            for column in range(SPRITE_WIDTH):
                if not (bits >> (SPRITE_WIDTH - 1 - column)) & 0x01:
                    continue
                dest_x = (x + column) % self._width
                index = dest_y * self._width + dest_x
                if self._pixels[index]:
                    collision = True
                self._pixels[index] ^= 0x01
        return collision

    # @intent:responsibility ディスプレイ向けに読み取り専用のコピーを返します。
    def snapshot(self) -> bytes:
        return bytes(self._pixels)

    def rows(self) -> List[bytes]:
        """フレームバッファを行ごとのバイト列のリストとして返します。"""
        return [
            bytes(self._pixels[row * self._width:(row + 1) * self._width])
            for row in range(self._height)
        ]

    def lit_count(self) -> int:
        return sum(self._pixels)
