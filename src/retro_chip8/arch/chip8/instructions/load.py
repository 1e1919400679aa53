# src/retro_chip8/arch/chip8/instructions/load.py
"""
ロード/ストア命令（レジスタ、アドレスレジスタ、タイマー、メモリ転送）の実装。
"""
from retro_chip8.core.snapshot import Operation
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState
from retro_chip8.arch.chip8.font import glyph_address
from .base import Peripherals, field_nnn, field_x, field_y, field_kk, reg, imm, addr

# --- LD Vx, byte ---
# @intent:responsibility LD Vx, byte (6xkk) 命令をデコードします。
def decode_ld_imm(opcode: int) -> Operation:
    vx, value = field_x(opcode), field_kk(opcode)
    return Operation(f"{opcode:04X}", "LD", [reg(vx), imm(value)], [vx, value])

def execute_ld_imm(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    state.v[field_x(op.opcode)] = field_kk(op.opcode)

# --- LD Vx, Vy ---
def decode_ld_reg(opcode: int) -> Operation:
    vx, vy = field_x(opcode), field_y(opcode)
    return Operation(f"{opcode:04X}", "LD", [reg(vx), reg(vy)], [vx, vy])

def execute_ld_reg(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    state.v[field_x(op.opcode)] = state.v[field_y(op.opcode)]

# --- LD I, addr ---
# @intent:responsibility LD I, addr (Annn) 命令をデコードします。
def decode_ld_i(opcode: int) -> Operation:
    value = field_nnn(opcode)
    return Operation(f"{opcode:04X}", "LD", ["I", addr(value)], [value])

def execute_ld_i(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    state.i = field_nnn(op.opcode)

# --- LD Vx, DT ---
def decode_ld_vx_dt(opcode: int) -> Operation:
    vx = field_x(opcode)
    return Operation(f"{opcode:04X}", "LD", [reg(vx), "DT"], [vx])

def execute_ld_vx_dt(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    state.v[field_x(op.opcode)] = state.delay_timer & 0xFF

# --- LD Vx, K ---
# @intent:responsibility LD Vx, K (Fx0A) 命令をデコードします。
def decode_ld_key(opcode: int) -> Operation:
    vx = field_x(opcode)
    return Operation(f"{opcode:04X}", "LD", [reg(vx), "K"], [vx])

# @intent:responsibility キーが押されるまで実行をブロックし、そのキーコードをVxに格納します。
# @intent:post-condition キャンセル時はQuitRequestedが伝播し、Vxは変更されません。PCはAbstractCpu.stepが戻します。
def execute_ld_key(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    key = devices.wait_for_key()
    state.v[field_x(op.opcode)] = key

# --- LD DT, Vx ---
def decode_ld_dt(opcode: int) -> Operation:
    vx = field_x(opcode)
    return Operation(f"{opcode:04X}", "LD", ["DT", reg(vx)], [vx])

def execute_ld_dt(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    state.delay_timer = state.v[field_x(op.opcode)]

# --- LD ST, Vx ---
def decode_ld_st(opcode: int) -> Operation:
    vx = field_x(opcode)
    return Operation(f"{opcode:04X}", "LD", ["ST", reg(vx)], [vx])

def execute_ld_st(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    state.sound_timer = state.v[field_x(op.opcode)]

# --- LD F, Vx ---
# @intent:responsibility LD F, Vx (Fx29) 命令をデコードします。
def decode_ld_font(opcode: int) -> Operation:
    vx = field_x(opcode)
    return Operation(f"{opcode:04X}", "LD", ["F", reg(vx)], [vx])

# @intent:responsibility Vxの下位4bitが示す16進数字のフォントスプライトのアドレスをIに設定します。
def execute_ld_font(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    state.i = glyph_address(state.v[field_x(op.opcode)])

# --- LD B, Vx ---
# @intent:responsibility LD B, Vx (Fx33) 命令をデコードします。
def decode_ld_bcd(opcode: int) -> Operation:
    vx = field_x(opcode)
    return Operation(f"{opcode:04X}", "LD", ["B", reg(vx)], [vx])

# @intent:responsibility Vxの10進表現の百・十・一の位を I, I+1, I+2 に格納します。
def execute_ld_bcd(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    value = state.v[field_x(op.opcode)]
    bus.write(state.i, value // 100)
    bus.write(state.i + 1, (value // 10) % 10)
    bus.write(state.i + 2, value % 10)

# --- LD [I], Vx ---
# @intent:responsibility LD [I], Vx (Fx55) 命令をデコードします。
def decode_ld_store(opcode: int) -> Operation:
    vx = field_x(opcode)
    return Operation(f"{opcode:04X}", "LD", ["[I]", reg(vx)], [vx])

# @intent:responsibility V0からVx（両端を含む）をIから始まるメモリへ格納します。Iは変化しません。
def execute_ld_store(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    for index in range(field_x(op.opcode) + 1):
        bus.write(state.i + index, state.v[index])

# --- LD Vx, [I] ---
def decode_ld_restore(opcode: int) -> Operation:
    vx = field_x(opcode)
    return Operation(f"{opcode:04X}", "LD", [reg(vx), "[I]"], [vx])

# @intent:responsibility Iから始まるメモリをV0からVx（両端を含む）へ読み込みます。Iは変化しません。
def execute_ld_restore(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    for index in range(field_x(op.opcode) + 1):
        state.v[index] = bus.read(state.i + index)
