# src/retro_chip8/ui/register_view.py
"""
CPUのレジスタを表示するウィジェット。
AbstractCpuのレイアウト情報を利用して動的にUIを構築します。
"""
from typing import Dict, Optional
from PySide6.QtWidgets import QWidget, QVBoxLayout, QFormLayout, QLabel, QGroupBox
from PySide6.QtGui import QFontDatabase
from PySide6.QtCore import Qt

from retro_chip8.core.cpu import AbstractCpu

GROUP_STYLE = """
    QGroupBox {
        font-weight: bold;
        border: 1px solid #222;
        border-radius: 4px;
        margin-top: 20px;
        color: #EEE;
        background-color: #121212;
    }
    QGroupBox::title {
        subcontrol-origin: margin;
        subcontrol-position: top left;
        padding: 0 5px;
        left: 10px;
        color: #00AAAA;
    }
"""

# @intent:responsibility CPUのレジスタ値をグループごとに表示します。
class RegisterView(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setStyleSheet("background-color: #121212; color: #BBBBBB;")

        self._layout = QVBoxLayout(self)
        self._layout.setContentsMargins(5, 5, 5, 5)

        self._font_family = QFontDatabase.systemFont(QFontDatabase.FixedFont).family()
        self._labels: Dict[str, QLabel] = {}
        self._widths: Dict[str, int] = {}
        self._cpu: Optional[AbstractCpu] = None

    # @intent:responsibility 表示対象のCPUを設定し、レイアウトを再構築します。
    def set_cpu(self, cpu: AbstractCpu) -> None:
        self._cpu = cpu
        self._build()

    def register_text(self, name: str) -> str:
        return self._labels[name].text()

    def _build(self) -> None:
        while self._layout.count():
            item = self._layout.takeAt(0)
            if item.widget():
                item.widget().deleteLater()
        self._labels.clear()
        self._widths.clear()

        for group in self._cpu.get_register_layout():
            group_box = QGroupBox(group.group_name)
            group_box.setStyleSheet(GROUP_STYLE)
            form = QFormLayout(group_box)
            form.setLabelAlignment(Qt.AlignLeft)
            form.setContentsMargins(10, 15, 10, 10)
            form.setSpacing(4)

            for reg in group.registers:
                width = (reg.width + 3) // 4
                self._widths[reg.name] = width

                name_label = QLabel(f"{reg.name}:")
                name_label.setStyleSheet("font-weight: bold; color: #BBBBBB;")
                value_label = QLabel(f"0x{'0' * width}")
                value_label.setStyleSheet(f"font-family: '{self._font_family}', monospace; color: #FFD700;")
                value_label.setAlignment(Qt.AlignRight)

                form.addRow(name_label, value_label)
                self._labels[reg.name] = value_label

            self._layout.addWidget(group_box)

        self._layout.addStretch()
        self.update_registers()

    # @intent:responsibility 現在のCPU状態からレジスタの表示値を更新します。
    def update_registers(self) -> None:
        if not self._cpu:
            return
        for name, value in self._cpu.get_register_map().items():
            label = self._labels.get(name)
            if label is not None:
                label.setText(f"0x{value:0{self._widths[name]}X}")
