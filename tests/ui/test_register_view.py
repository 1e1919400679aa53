# tests/ui/test_register_view.py
"""
retro_chip8.ui.register_viewモジュールの単体テスト。
"""
import sys
import unittest

from PySide6.QtWidgets import QApplication

from retro_chip8.ui.register_view import RegisterView
from retro_chip8.transport.bus import Bus, RAM
from retro_chip8.arch.chip8.cpu import Chip8Cpu

class TestRegisterView(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.app = QApplication.instance() or QApplication(sys.argv)

    def setUp(self):
        bus = Bus(address_space=0x1000)
        bus.register_device(0x000, 0xFFF, RAM(0x1000))
        self.cpu = Chip8Cpu(bus)
        self.view = RegisterView()
        self.view.set_cpu(self.cpu)

    def test_initial_values(self):
        self.assertEqual(self.view.register_text("PC"), "0x0200")
        self.assertEqual(self.view.register_text("V0"), "0x00")

    def test_update_registers(self):
        state = self.cpu.get_state()
        state.v[0xF] = 1
        state.i = 0xABC
        state.delay_timer = 0x3C
        self.view.update_registers()
        self.assertEqual(self.view.register_text("VF"), "0x01")
        self.assertEqual(self.view.register_text("I"), "0x0ABC")
        self.assertEqual(self.view.register_text("DT"), "0x3C")
