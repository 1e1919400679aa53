# src/retro_chip8/arch/chip8/instructions/alu.py
"""
算術論理演算命令の実装。

全ての演算は8bitで行われ、結果は256を法として折り返されます。
フラグ（VF）は結果の書き込み後に設定されるため、x == F の場合もVFはフラグ値になります。
"""
from retro_chip8.core.snapshot import Operation
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState
from .base import Peripherals, field_x, field_y, field_kk, reg, imm

# @intent:utility_function 2レジスタ形式（8xyN）のOperationを生成します。
def _reg_pair_operation(opcode: int, mnemonic: str) -> Operation:
    vx, vy = field_x(opcode), field_y(opcode)
    return Operation(f"{opcode:04X}", mnemonic, [reg(vx), reg(vy)], [vx, vy])

# --- ADD Vx, byte ---
# @intent:responsibility ADD Vx, byte (7xkk) 命令をデコードします。
def decode_add_imm(opcode: int) -> Operation:
    vx, value = field_x(opcode), field_kk(opcode)
    return Operation(f"{opcode:04X}", "ADD", [reg(vx), imm(value)], [vx, value])

# @intent:responsibility Vxにkkを加算します。キャリーフラグは変化しません。
def execute_add_imm(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    vx = field_x(op.opcode)
    state.v[vx] = (state.v[vx] + field_kk(op.opcode)) & 0xFF

# --- OR / AND / XOR ---
def decode_or(opcode: int) -> Operation:
    return _reg_pair_operation(opcode, "OR")

def execute_or(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    vx = field_x(op.opcode)
    state.v[vx] = state.v[vx] | state.v[field_y(op.opcode)]

def decode_and(opcode: int) -> Operation:
    return _reg_pair_operation(opcode, "AND")

def execute_and(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    vx = field_x(op.opcode)
    state.v[vx] = state.v[vx] & state.v[field_y(op.opcode)]

def decode_xor(opcode: int) -> Operation:
    return _reg_pair_operation(opcode, "XOR")

def execute_xor(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    vx = field_x(op.opcode)
    state.v[vx] = state.v[vx] ^ state.v[field_y(op.opcode)]

# --- ADD Vx, Vy ---
def decode_add_reg(opcode: int) -> Operation:
    return _reg_pair_operation(opcode, "ADD")

# @intent:responsibility Vx = Vx + Vy を計算し、9bitの和が0xFFを超えた場合VF=1とします。
def execute_add_reg(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    vx = field_x(op.opcode)
    res = state.v[vx] + state.v[field_y(op.opcode)]
    state.v[vx] = res & 0xFF
    state.vf = 1 if res > 0xFF else 0

# --- SUB Vx, Vy ---
def decode_sub(opcode: int) -> Operation:
    return _reg_pair_operation(opcode, "SUB")

# @intent:responsibility Vx = Vx - Vy を計算し、Vx > Vy（厳密に大きい）の場合VF=1（ボローなし）とします。
def execute_sub(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    vx = field_x(op.opcode)
    v1, v2 = state.v[vx], state.v[field_y(op.opcode)]
    state.v[vx] = (v1 - v2) & 0xFF
    state.vf = 1 if v1 > v2 else 0

# --- SHR Vx ---
def decode_shr(opcode: int) -> Operation:
    return _reg_pair_operation(opcode, "SHR")

# @intent:responsibility Vxを1bit右シフトし、押し出された最下位bitをVFに格納します。Vyは使用しません。
def execute_shr(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    vx = field_x(op.opcode)
    v1 = state.v[vx]
    state.v[vx] = v1 >> 1
    state.vf = v1 & 0x01

# --- SUBN Vx, Vy ---
def decode_subn(opcode: int) -> Operation:
    return _reg_pair_operation(opcode, "SUBN")

# @intent:responsibility Vx = Vy - Vx を計算し、Vy > Vx の場合VF=1とします。
def execute_subn(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    vx = field_x(op.opcode)
    v1, v2 = state.v[vx], state.v[field_y(op.opcode)]
    state.v[vx] = (v2 - v1) & 0xFF
    state.vf = 1 if v2 > v1 else 0

# --- SHL Vx ---
def decode_shl(opcode: int) -> Operation:
    return _reg_pair_operation(opcode, "SHL")

# @intent:responsibility Vxを1bit左シフトし、押し出された最上位bitをVFに格納します。
def execute_shl(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    vx = field_x(op.opcode)
    v1 = state.v[vx]
    state.v[vx] = (v1 << 1) & 0xFF
    state.vf = (v1 >> 7) & 0x01

# --- RND Vx, byte ---
# @intent:responsibility RND Vx, byte (Cxkk) 命令をデコードします。
def decode_rnd(opcode: int) -> Operation:
    vx, mask = field_x(opcode), field_kk(opcode)
    return Operation(f"{opcode:04X}", "RND", [reg(vx), imm(mask)], [vx, mask])

# @intent:responsibility 注入された乱数源から1バイト取得し、kkとのANDをVxに格納します。
def execute_rnd(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    state.v[field_x(op.opcode)] = devices.next_random_byte() & field_kk(op.opcode)

# --- ADD I, Vx ---
def decode_add_i(opcode: int) -> Operation:
    vx = field_x(opcode)
    return Operation(f"{opcode:04X}", "ADD", ["I", reg(vx)], [vx])

# @intent:responsibility I = I + Vx を計算します。Iは16bitで折り返され、VFは変化しません。
def execute_add_i(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    state.i = (state.i + state.v[field_x(op.opcode)]) & 0xFFFF
