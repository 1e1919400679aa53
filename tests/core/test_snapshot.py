# tests/core/test_snapshot.py
"""
retro_chip8.core.snapshotモジュールの単体テスト。
"""
import pytest
from retro_chip8.core.state import CpuState
from retro_chip8.core.snapshot import Operation, Metadata, Snapshot
from retro_chip8.transport.bus import BusAccess, BusAccessType

# @intent:test_suite 1命令実行後の状態を記録する不変データ構造を検証します。

class TestOperation:
    def test_defaults(self):
        op = Operation(opcode_hex="00E0", mnemonic="CLS")
        assert op.operands == []
        assert op.length == 2
        assert op.cycle_count == 1
        assert op.opcode == 0x00E0

    def test_to_assembly(self):
        assert Operation("00E0", "CLS").to_assembly() == "CLS"
        assert Operation("8124", "ADD", ["V1", "V2"]).to_assembly() == "ADD V1, V2"

    # @intent:test_case_immutability Operationが不変であることを検証します。
    def test_immutability(self):
        op = Operation(opcode_hex="1200", mnemonic="JP")
        with pytest.raises(AttributeError):
            op.mnemonic = "CALL"

class TestSnapshot:
    def test_snapshot(self):
        access = BusAccess(address=0x200, data=0x12, access_type=BusAccessType.READ)
        snapshot = Snapshot(
            state=CpuState(pc=0x202),
            operation=Operation("1200", "JP", ["$200"]),
            metadata=Metadata(cycle_count=5, address=0x200, disassembly="JP $200"),
            bus_activity=[access],
        )
        assert snapshot.opcode == 0x1200
        assert snapshot.metadata.address == 0x200
        assert snapshot.bus_activity == [access]
        with pytest.raises(AttributeError):
            snapshot.state = CpuState()

    def test_default_bus_activity(self):
        snapshot = Snapshot(CpuState(), Operation("00E0", "CLS"), Metadata(cycle_count=0))
        assert snapshot.bus_activity == []
        assert snapshot.metadata.disassembly is None
