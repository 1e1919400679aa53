# src/retro_chip8/arch/chip8/instructions/__init__.py
"""
CHIP-8命令セット実装パッケージ。
"""
from retro_chip8.transport.bus import Bus
from retro_chip8.core.snapshot import Operation
from retro_chip8.common.errors import UnknownOpcodeError
from retro_chip8.arch.chip8.state import Chip8CpuState
from .base import Peripherals, opcode_key
from .maps import DECODE_MAP, EXECUTE_MAP

# @intent:responsibility CHIP-8のオペコードをデコードします。
def decode_opcode(opcode: int) -> Operation:
    """
    16bitのオペコードをデコードし、Operationオブジェクトを返します。
    未定義の命令はニーモニック "UNKNOWN" のOperationになります（逆アセンブラ用）。
    """
    decoder = DECODE_MAP.get(opcode_key(opcode))
    if decoder:
        return decoder(opcode)
    return Operation(opcode_hex=f"{opcode:04X}", mnemonic="UNKNOWN", operands=[f"${opcode:04X}"])

# @intent:responsibility デコードされたCHIP-8命令を実行します。
# @intent:post-condition 対応する実行関数が無い場合はUnknownOpcodeErrorを送出し、黙って無視することはありません。
def execute_instruction(operation: Operation, state: Chip8CpuState, bus: Bus, devices: Peripherals) -> None:
    opcode = operation.opcode
    executor = EXECUTE_MAP.get(opcode_key(opcode))
    if executor is None:
        raise UnknownOpcodeError(opcode, (state.pc - operation.length) & 0xFFFF)
    executor(state, bus, operation, devices)
