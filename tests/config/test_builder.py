# tests/config/test_builder.py
"""
retro_chip8.config.builderモジュールの単体テスト。
"""
import unittest

from retro_chip8.config.builder import MachineBuilder
from retro_chip8.config.loader import ConfigLoader
from retro_chip8.config.models import MachineConfig
from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.devices.display import NullDisplay, TextDisplay
from retro_chip8.devices.keypad import NullKeypad, StreamKeypad
from retro_chip8.common.errors import ConfigError

# @intent:test_suite 構成に基づいて仮想マシン一式が組み立てられることを検証します。
class TestMachineBuilder(unittest.TestCase):
    def _config(self, **display):
        config = MachineConfig()
        config.display.backend = display.get("backend", "null")
        return config

    def test_build_headless_machine(self):
        machine = MachineBuilder().build(self._config())
        self.assertIsInstance(machine.cpu, Chip8Cpu)
        self.assertIsInstance(machine.cpu.display, NullDisplay)
        self.assertIsInstance(machine.cpu.keypad, NullKeypad)
        self.assertEqual(machine.bus.address_space, 0x1000)
        self.assertEqual(machine.clock.frequency, 60)
        self.assertIs(machine.executor.cpu, machine.cpu)
        self.assertIs(machine.executor.clock, machine.clock)

    def test_text_backend(self):
        machine = MachineBuilder().build(self._config(backend="text"))
        self.assertIsInstance(machine.cpu.display, TextDisplay)
        self.assertIsInstance(machine.cpu.keypad, StreamKeypad)

    def test_builds_are_independent(self):
        builder = MachineBuilder()
        first = builder.build(self._config())
        second = builder.build(self._config())
        first.bus.write(0x300, 0x42)
        self.assertEqual(second.bus.peek(0x300), 0x00)
        self.assertIsNot(first.cpu.display, second.cpu.display)

    def test_seeded_random_source_is_reproducible(self):
        config = ConfigLoader().parse({"seed": 1234, "display": {"backend": "null"}})
        builder = MachineBuilder()
        first = builder.create_random_source(config.seed)
        second = builder.create_random_source(config.seed)
        self.assertEqual([first() for _ in range(8)], [second() for _ in range(8)])

    def test_memory_layout_from_config(self):
        config = ConfigLoader().parse({
            "memory": {"size": 0x2000, "program_start": 0x600},
            "stack_depth": 4,
            "display": {"backend": "null"},
        })
        machine = MachineBuilder().build(config)
        self.assertEqual(machine.cpu.get_state().pc, 0x600)
        self.assertEqual(machine.cpu.get_state().stack_depth, 4)
        machine.cpu.load(bytes(0x2000 - 0x600))

    def test_invalid_config_is_rejected(self):
        config = self._config()
        config.clock_hz = 0
        with self.assertRaises(ConfigError):
            MachineBuilder().build(config)
