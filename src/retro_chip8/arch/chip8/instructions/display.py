# src/retro_chip8/arch/chip8/instructions/display.py
"""
画面命令（画面消去、スプライト描画）の実装。
"""
from retro_chip8.core.snapshot import Operation
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState
from .base import Peripherals, field_n, field_x, field_y, reg

# --- CLS ---
# @intent:responsibility CLS (00E0) 命令をデコードします。
def decode_cls(opcode: int) -> Operation:
    return Operation(f"{opcode:04X}", "CLS")

# @intent:responsibility フレームバッファを消去し、ディスプレイへ引き渡します。レジスタは変化しません。
def execute_cls(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    devices.graphics.clear()
    devices.render()

# --- DRW Vx, Vy, nibble ---
# @intent:responsibility DRW Vx, Vy, nibble (Dxyn) 命令をデコードします。
def decode_drw(opcode: int) -> Operation:
    vx, vy, height = field_x(opcode), field_y(opcode), field_n(opcode)
    return Operation(f"{opcode:04X}", "DRW", [reg(vx), reg(vy), f"{height}"], [vx, vy, height])

# @intent:responsibility Iから読んだn行のスプライトを(Vx, Vy)にXOR合成し、衝突の有無をVFに格納します。
# @intent:post-condition 合成後のフレームバッファがディスプレイへ引き渡されます。描画失敗はRenderErrorです。
def execute_drw(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    opcode = op.opcode
    sprite = [bus.read(state.i + row) for row in range(field_n(opcode))]
    collision = devices.graphics.write_sprite(sprite, state.v[field_x(opcode)], state.v[field_y(opcode)])
    state.vf = 1 if collision else 0
    devices.render()
