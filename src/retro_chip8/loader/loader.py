# retro_chip8/loader/loader.py
"""
プログラムローダーモジュール。

ヘッダを持たない生のバイナリ（ビッグエンディアン16bit命令の列）を読み込み、
プログラム開始アドレス（通常0x200）からバスへ書き込みます。
"""
import logging
from pathlib import Path
from typing import BinaryIO, Union

from retro_chip8.transport.bus import Bus
from retro_chip8.common.errors import LoadError, OutOfMemoryError

logger = logging.getLogger(__name__)

DEFAULT_LOAD_ADDRESS = 0x200

class ProgramLoader:
    """
    生のCHIP-8プログラムをバスにロードするローダー。
    プログラムが空き領域に収まらない場合は切り詰めずにOutOfMemoryErrorを送出します。
    """
    # @intent:responsibility バイト列を開始アドレスから書き込み、書き込んだバイト数を返します。
    # @intent:pre-condition busはアドレス空間のサイズ（address_space）を持つ必要があります。
    # @intent:post-condition 失敗した場合、メモリは一切変更されません。
    def load_bytes(self, bus: Bus, data: bytes, start: int = DEFAULT_LOAD_ADDRESS) -> int:
        memory_size = bus.address_space
        if memory_size is None:
            raise LoadError("chip8: cannot load a program onto a bus without a bounded address space")
        if not 0 <= start < memory_size:
            raise LoadError(f"chip8: load address 0x{start:03X} is outside of memory")

        capacity = memory_size - start
        if len(data) > capacity:
            raise OutOfMemoryError(len(data), capacity)

        count = bus.load_block(start, data)
        logger.info("loaded %d bytes at 0x%03X", count, start)
        return count

    # @intent:responsibility ファイルからプログラムを読み込みます。I/Oエラーは LoadError に変換されます。
    def load_file(self, bus: Bus, path: Union[str, Path], start: int = DEFAULT_LOAD_ADDRESS) -> int:
        try:
            data = Path(path).read_bytes()
        except OSError as e:
            raise LoadError(f"chip8: could not read program {path}: {e}") from e
        return self.load_bytes(bus, data, start)

    # @intent:responsibility バイナリストリーム（標準入力など）からプログラムを読み込みます。
    def load_stream(self, bus: Bus, stream: BinaryIO, start: int = DEFAULT_LOAD_ADDRESS) -> int:
        try:
            data = stream.read()
        except OSError as e:
            raise LoadError(f"chip8: could not read program from stream: {e}") from e
        return self.load_bytes(bus, data, start)
