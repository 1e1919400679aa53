# src/retro_chip8/arch/chip8/instructions/control.py
"""
制御命令（ジャンプ、サブルーチン、条件スキップ）の実装。

実行時点でPCは既に次の命令（命令アドレス+2）を指しています。
スキップ命令は条件成立時にさらに2を加算します。
"""
from retro_chip8.core.snapshot import Operation
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState
from .base import Peripherals, field_nnn, field_x, field_y, field_kk, reg, imm, addr

# --- RET ---
# @intent:responsibility RET (00EE) 命令をデコードします。
def decode_ret(opcode: int) -> Operation:
    return Operation(f"{opcode:04X}", "RET")

# @intent:responsibility RET命令を実行し、スタック最上位のCALL命令の次のアドレスへ戻ります。
def execute_ret(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    # スタックにはCALL命令自身のアドレスが積まれている
    call_site = state.pop()
    state.pc = (call_site + op.length) & 0xFFFF

# --- JP ---
# @intent:responsibility JP addr (1nnn) 命令をデコードします。
def decode_jp(opcode: int) -> Operation:
    target = field_nnn(opcode)
    return Operation(f"{opcode:04X}", "JP", [addr(target)], [target])

def execute_jp(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    state.pc = field_nnn(op.opcode)

# --- CALL ---
# @intent:responsibility CALL addr (2nnn) 命令をデコードします。
def decode_call(opcode: int) -> Operation:
    target = field_nnn(opcode)
    return Operation(f"{opcode:04X}", "CALL", [addr(target)], [target])

# @intent:responsibility CALL命令を実行し、命令自身のアドレスをスタックに積んでからジャンプします。
def execute_call(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    call_site = (state.pc - op.length) & 0xFFFF
    state.push(call_site)
    state.pc = field_nnn(op.opcode)

# --- SE Vx, byte ---
def decode_se_imm(opcode: int) -> Operation:
    vx, value = field_x(opcode), field_kk(opcode)
    return Operation(f"{opcode:04X}", "SE", [reg(vx), imm(value)], [vx, value])

# @intent:responsibility Vx == kk の場合に次の命令をスキップします。
def execute_se_imm(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    if state.v[field_x(op.opcode)] == field_kk(op.opcode):
        state.advance(2)

# --- SNE Vx, byte ---
def decode_sne_imm(opcode: int) -> Operation:
    vx, value = field_x(opcode), field_kk(opcode)
    return Operation(f"{opcode:04X}", "SNE", [reg(vx), imm(value)], [vx, value])

# @intent:responsibility Vx != kk の場合に次の命令をスキップします。
def execute_sne_imm(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    if state.v[field_x(op.opcode)] != field_kk(op.opcode):
        state.advance(2)

# --- SE Vx, Vy ---
def decode_se_reg(opcode: int) -> Operation:
    vx, vy = field_x(opcode), field_y(opcode)
    return Operation(f"{opcode:04X}", "SE", [reg(vx), reg(vy)], [vx, vy])

def execute_se_reg(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    if state.v[field_x(op.opcode)] == state.v[field_y(op.opcode)]:
        state.advance(2)

# --- SNE Vx, Vy ---
def decode_sne_reg(opcode: int) -> Operation:
    vx, vy = field_x(opcode), field_y(opcode)
    return Operation(f"{opcode:04X}", "SNE", [reg(vx), reg(vy)], [vx, vy])

def execute_sne_reg(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    if state.v[field_x(op.opcode)] != state.v[field_y(op.opcode)]:
        state.advance(2)

# --- JP V0, addr ---
# @intent:responsibility JP V0, addr (Bnnn) 命令をデコードします。
def decode_jp_v0(opcode: int) -> Operation:
    target = field_nnn(opcode)
    return Operation(f"{opcode:04X}", "JP", [reg(0), addr(target)], [target])

# @intent:responsibility nnn + V0 のアドレスへジャンプします。
def execute_jp_v0(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    state.pc = (field_nnn(op.opcode) + state.v[0]) & 0xFFFF

# --- SKP Vx ---
# @intent:responsibility SKP Vx (Ex9E) 命令をデコードします。
def decode_skp(opcode: int) -> Operation:
    vx = field_x(opcode)
    return Operation(f"{opcode:04X}", "SKP", [reg(vx)], [vx])

# @intent:responsibility Vxの値のキーが押されている場合に次の命令をスキップします。
def execute_skp(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    if devices.key_pressed(state.v[field_x(op.opcode)]):
        state.advance(2)

# --- SKNP Vx ---
def decode_sknp(opcode: int) -> Operation:
    vx = field_x(opcode)
    return Operation(f"{opcode:04X}", "SKNP", [reg(vx)], [vx])

# @intent:responsibility Vxの値のキーが押されていない場合に次の命令をスキップします。
def execute_sknp(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    if not devices.key_pressed(state.v[field_x(op.opcode)]):
        state.advance(2)
