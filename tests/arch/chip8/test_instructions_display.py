# tests/arch/chip8/test_instructions_display.py
"""
retro_chip8.arch.chip8.instructions.displayモジュールの単体テスト。
"""
import unittest
from retro_chip8.transport.bus import Bus, RAM
from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.common.errors import RenderError
from retro_chip8.devices.display import Display, NullDisplay

class BrokenDisplay(Display):
    def render(self, graphics):
        raise IOError("terminal closed")

# @intent:test_suite 画面消去とスプライト描画、描画後のディスプレイ呼び出しを検証します。
class TestChip8DisplayInstructions(unittest.TestCase):
    def setUp(self):
        self.bus = Bus(address_space=0x1000)
        self.bus.register_device(0x000, 0xFFF, RAM(0x1000))
        self.display = NullDisplay()
        self.cpu = Chip8Cpu(self.bus, display=self.display)
        self.state = self.cpu.get_state()

    def _execute(self, opcode):
        pc = self.state.pc
        self.bus.write(pc, opcode >> 8)
        self.bus.write(pc + 1, opcode & 0xFF)
        return self.cpu.step()

    def test_drw_font_glyph(self):
        # フォント"0"を(0, 0)に描画
        self.state.i = 0x000
        self._execute(0xD015)
        self.assertEqual(self.state.vf, 0)
        self.assertEqual(self.display.frames, 1)
        graphics = self.cpu.graphics
        self.assertEqual([graphics.pixel(x, 0) for x in range(5)], [1, 1, 1, 1, 0])
        self.assertEqual([graphics.pixel(x, 1) for x in range(5)], [1, 0, 0, 1, 0])
        self.assertEqual(graphics.lit_count(), 14)

    def test_drw_twice_restores_and_collides(self):
        self.state.i = 0x000
        self.state.v[0] = 10
        self.state.v[1] = 7
        self._execute(0xD015)
        self._execute(0xD015)
        self.assertEqual(self.state.vf, 1)
        self.assertEqual(self.cpu.graphics.lit_count(), 0)

    def test_drw_wraps_around(self):
        self.bus.load_block(0x300, [0xFF])
        self.state.i = 0x300
        self.state.v[0] = 60
        self.state.v[1] = 31
        self._execute(0xD011)
        graphics = self.cpu.graphics
        for x in (60, 61, 62, 63, 0, 1, 2, 3):
            self.assertEqual(graphics.pixel(x, 31), 1)
        self.assertEqual(graphics.lit_count(), 8)

    def test_drw_zero_rows(self):
        self.state.vf = 1
        self._execute(0xD010)
        self.assertEqual(self.state.vf, 0)
        self.assertEqual(self.cpu.graphics.lit_count(), 0)

    def test_cls(self):
        self.state.i = 0x000
        self._execute(0xD015)
        self.state.v[3] = 0x33
        self._execute(0x00E0)
        self.assertEqual(self.cpu.graphics.lit_count(), 0)
        self.assertEqual(self.state.v[3], 0x33)
        self.assertEqual(self.display.frames, 2)
        self.assertEqual(self.display.last_frame, bytes(64 * 32))

    def test_render_failure(self):
        cpu = Chip8Cpu(self.bus, display=BrokenDisplay())
        self.bus.load_block(0x200, [0x00, 0xE0])
        with self.assertRaisesRegex(RenderError, "terminal closed"):
            cpu.step()
