# retro_chip8/transport/bus.py
"""
Transport Layer (メモリバス)

仮想マシンのアドレス空間を表し、読み書きを登録済みのデバイス（RAM）へ振り分けます。
命令による全てのアクセスはアクセスログに記録され、Snapshotに添付されます。
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple

class BusAccessType(Enum):
    READ = "READ"
    WRITE = "WRITE"

# @intent:responsibility バス上の1回の読み書きを記録します。
@dataclass(frozen=True)
class BusAccess:
    address: int
    data: int  # 8bit
    access_type: BusAccessType

# @intent:responsibility バスに接続できるデバイスのインターフェースです。アドレスはデバイス内のオフセットです。
class Device(ABC):
    @abstractmethod
    def read(self, address: int) -> int:
        pass

    @abstractmethod
    def write(self, address: int, data: int) -> None:
        pass

# @intent:responsibility ゼロで初期化されたフラットなバイト配列メモリです。
class RAM(Device):
    def __init__(self, size: int):
        if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
            raise ValueError("RAM size must be a positive integer.")
        self._memory = bytearray(size)

    def _check(self, address: int) -> None:
        if not 0 <= address < len(self._memory):
            raise IndexError(f"Address {address} out of bounds for RAM of size {len(self._memory)}.")

    def read(self, address: int) -> int:
        self._check(address)
        return self._memory[address]

    # @intent:pre-condition dataは8bit値である必要があります。
    def write(self, address: int, data: int) -> None:
        self._check(address)
        if not 0 <= data <= 0xFF:
            raise ValueError(f"Data {data} is not an 8-bit value.")
        self._memory[address] = data

    def get_size(self) -> int:
        return len(self._memory)

# @intent:responsibility アドレスを折り返した上でデバイスへアクセスを振り分け、アクセスログを保持します。
class Bus:
    """
    CHIP-8のメモリバス。

    `address_space` を与えると、全てのアドレスはその値を法として折り返されます
    （4KBのCHIP-8では 0x1000 番地は 0x000 番地と同じです）。
    `peek()` と `load_block()` はログに残らないため、逆アセンブラやローダーから使います。
    """
    def __init__(self, address_space: Optional[int] = None):
        if address_space is not None and address_space <= 0:
            raise ValueError("Address space must be a positive integer.")
        self._address_space = address_space
        self._devices: List[Tuple[int, int, Device]] = []
        self._activity: List[BusAccess] = []

    @property
    def address_space(self) -> Optional[int]:
        return self._address_space

    # @intent:responsibility デバイスを [start_address, end_address] の範囲に接続します。
    # @intent:rationale 範囲の重複は検査しません。先に登録したデバイスが優先されます。
    def register_device(self, start_address: int, end_address: int, device: Device) -> None:
        if not 0 <= start_address <= end_address:
            raise ValueError("Invalid address range: start_address must be <= end_address and non-negative.")
        if not isinstance(device, Device):
            raise TypeError("Device must be an instance of a class derived from Device.")
        span = end_address - start_address + 1
        if isinstance(device, RAM) and device.get_size() != span:
            raise ValueError(
                f"Registered RAM device size ({device.get_size()} bytes) does not match "
                f"the specified address range size ({span} bytes)."
            )
        self._devices.append((start_address, end_address, device))

    def _resolve(self, address: int) -> Tuple[int, Device, int]:
        if self._address_space is not None:
            address %= self._address_space
        for start, end, device in self._devices:
            if start <= address <= end:
                return address, device, address - start
        raise IndexError(f"Address {address:#06x} not mapped to any device.")

    def read(self, address: int) -> int:
        address, device, offset = self._resolve(address)
        data = device.read(offset)
        self._activity.append(BusAccess(address, data, BusAccessType.READ))
        return data

    def write(self, address: int, data: int) -> None:
        address, device, offset = self._resolve(address)
        device.write(offset, data)
        self._activity.append(BusAccess(address, data, BusAccessType.WRITE))

    # @intent:responsibility アクセスログに残さずに1バイト読み出します。
    def peek(self, address: int) -> int:
        _, device, offset = self._resolve(address)
        return device.read(offset)

    # @intent:responsibility フォントやプログラムの初期配置用に、ログに残さずバイト列を書き込みます。
    # @intent:return 書き込んだバイト数。
    def load_block(self, address: int, data: Iterable[int]) -> int:
        count = 0
        for value in data:
            _, device, offset = self._resolve(address + count)
            device.write(offset, value)
            count += 1
        return count

    # @intent:responsibility 前回の呼び出し以降のアクセスログを返し、ログを空にします。
    def get_and_clear_activity_log(self) -> List[BusAccess]:
        activity, self._activity = self._activity, []
        return activity
