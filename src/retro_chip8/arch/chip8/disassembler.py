# src/retro_chip8/arch/chip8/disassembler.py
"""
CHIP-8 Disassembler

メモリ上のバイナリデータを解析し、CHIP-8のアセンブリ言語（ニーモニック）に変換します。
Instruction Layerのデコードロジックを再利用し、バスアクセスログを汚さないようにpeekで読み込みます。
"""
from typing import List, Tuple

from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.instructions import decode_opcode

# @intent:responsibility 指定されたメモリ範囲を逆アセンブルし、表示用データを生成します。
def disassemble(bus: Bus, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
    """
    `start_addr` から `length` バイトの範囲を2バイト単位で逆アセンブルします。

    Returns:
        List of (address, hex_word, mnemonic) tuples.
    """
    result = []
    current_addr = start_addr
    end_addr = start_addr + length

    while current_addr + 1 < end_addr:
        opcode = (bus.peek(current_addr) << 8) | bus.peek(current_addr + 1)
        operation = decode_opcode(opcode)
        result.append((current_addr, operation.opcode_hex, operation.to_assembly()))
        current_addr += operation.length

    return result
